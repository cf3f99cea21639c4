from datetime import date

import pytest

from tracker.domain import Budget, Category, Classification, Expense
from tracker.services import ReportService, default_report_service, duplicate_budgets, invalid_expenses


def make_sample():
    expenses = (
        Expense("e1", date(2026, 1, 5), Category.FOOD, 150.0),
        Expense("e2", date(2026, 2, 3), Category.FOOD, 100.0),
        Expense("e3", date(2026, 2, 4), Category.SHOPPING, 40.0),
    )
    budgets = (
        Budget("b1", Category.FOOD, 200.0),
        Budget("b2", Category.SHOPPING, 50.0),
    )
    return expenses, budgets


def test_reportservice_runs_validators_and_calculators_in_order():
    def no_problems(expenses, budgets):
        return []

    def count(expenses, budgets, acc):
        return {"count": len(expenses)}

    def doubled(expenses, budgets, acc):
        return {"doubled": acc["count"] * 2}

    svc = ReportService(validators=[no_problems], calculators=[count, doubled])
    rpt = svc.build(*make_sample())

    assert rpt["validation"] == [{"validator": "no_problems", "messages": []}]
    assert [s["calculator"] for s in rpt["steps"]] == ["count", "doubled"]
    assert rpt["result"] == {"count": 3, "doubled": 6}


def test_reportservice_captures_validator_errors():
    def broken(expenses, budgets):
        raise RuntimeError("oops")

    svc = ReportService(validators=[broken], calculators=[lambda e, b, acc: {"x": 1}])
    rpt = svc.build((), ())

    assert rpt["validation"][0]["messages"] == ["validator_error: oops"]
    assert rpt["result"]["x"] == 1


def test_invalid_expenses_validator():
    expenses = (
        Expense("ok", date(2026, 1, 1), Category.FOOD, 1.0),
        Expense("zero", date(2026, 1, 1), Category.FOOD, 0.0),
    )
    assert invalid_expenses(expenses, ()) == ["zero: invalid_amount"]


def test_duplicate_budgets_validator():
    budgets = (
        Budget("b1", Category.FOOD, 10.0, project_id="p1"),
        Budget("b2", Category.FOOD, 20.0, project_id="p1"),
        Budget("b3", Category.FOOD, 30.0, project_id="p2"),
    )
    assert duplicate_budgets((), budgets) == ["food: 2 budgets in one project"]


def test_default_report_in_base_currency():
    expenses, budgets = make_sample()
    rpt = default_report_service(today=date(2026, 2, 15)).build(expenses, budgets)
    result = rpt["result"]

    assert all(v["messages"] == [] for v in rpt["validation"])
    assert result["currency"] == "USD"
    assert result["summary"].total_amount == 290.0
    assert result["top_categories"][0] == (Category.FOOD, 250.0)
    assert len(result["monthly_trend"]) == 6
    assert result["monthly_trend"][-1].amount == 140.0
    assert [s.classification for s in result["budgets"]] == [
        Classification.EXCEEDED,
        Classification.APPROACHING,
    ]
    assert [a.category for a in result["alerts"]] == [Category.FOOD]


def test_default_report_converts_to_display_currency():
    expenses, budgets = make_sample()
    rpt = default_report_service(display_currency="EUR", today=date(2026, 2, 15)).build(expenses, budgets)
    result = rpt["result"]

    assert result["currency"] == "EUR"
    assert result["summary"].total_amount == pytest.approx(290.0 * 0.92)
    food = result["budgets"][0]
    assert food.limit == pytest.approx(200.0 * 0.92)
    assert food.percentage_used == pytest.approx(125.0)
    # stored records stay in the base currency
    assert expenses[0].amount == 150.0
