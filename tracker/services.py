from collections import Counter
from dataclasses import replace
from datetime import date
from typing import Any, Callable, Dict, Optional, Sequence

from tracker import aggregate
from tracker.budget import budget_alerts, evaluate_all
from tracker.currency import DEFAULT_RATES, ExchangeRates, convert_expenses
from tracker.domain import Budget, Expense
from tracker.functional import validate_expense
from tracker.log import get_logger

logger = get_logger("tracker.services")

Validator = Callable[[Sequence[Expense], Sequence[Budget]], Sequence[str]]
Calculator = Callable[[Sequence[Expense], Sequence[Budget], Dict[str, Any]], Dict[str, Any]]


class ReportService:
    """Facade that runs injected validators and calculators over a snapshot.

    validators: functions taking (expenses, budgets) -> Sequence[str]
    calculators: functions taking (expenses, budgets, acc) -> dict of partial
        results; acc holds everything earlier calculators produced.
    """

    def __init__(self, validators: Sequence[Validator], calculators: Sequence[Calculator]):
        self.validators = validators
        self.calculators = calculators

    def build(self, expenses: Sequence[Expense], budgets: Sequence[Budget]) -> Dict[str, Any]:
        """Run validators and calculators and return the report with intermediate steps."""
        report: Dict[str, Any] = {"validation": [], "steps": [], "result": {}}

        # a broken validator is reported, it does not stop the report
        for v in self.validators:
            name = getattr(v, "__name__", str(v))
            try:
                msgs = list(v(expenses, budgets))
            except Exception as e:
                logger.exception("Validator %s failed", name)
                msgs = [f"validator_error: {e}"]
            report["validation"].append({"validator": name, "messages": msgs})

        acc: Dict[str, Any] = {}
        for calc in self.calculators:
            name = getattr(calc, "__name__", str(calc))
            out = calc(expenses, budgets, acc)
            logger.debug("Calculator %s produced %s", name, sorted(out))
            report["steps"].append({"calculator": name, "output": out})
            acc.update(out)

        report["result"] = acc
        return report


def invalid_expenses(expenses: Sequence[Expense], budgets: Sequence[Budget]) -> Sequence[str]:
    messages = []
    for e in expenses:
        checked = validate_expense(e)
        if checked.is_left():
            messages.append(f"{e.id}: {checked.get_error()['error']}")
    return messages


def duplicate_budgets(expenses: Sequence[Expense], budgets: Sequence[Budget]) -> Sequence[str]:
    counts = Counter((b.project_id, b.category) for b in budgets)
    return [
        f"{category.value}: {n} budgets in one project"
        for (_, category), n in counts.items()
        if n > 1
    ]


def default_report_service(
    rates: ExchangeRates = DEFAULT_RATES,
    base_currency: str = "USD",
    display_currency: str = "USD",
    week_window: int = 8,
    trend_months: int = 6,
    today: Optional[date] = None,
) -> ReportService:
    """Dashboard report: everything is converted to ``display_currency`` first."""

    def converted(expenses, budgets, acc):
        return {
            "currency": display_currency,
            "expenses": convert_expenses(expenses, base_currency, display_currency, rates),
        }

    def summary(expenses, budgets, acc):
        shown = acc["expenses"]
        return {
            "summary": aggregate.summarize(shown),
            "top_categories": list(aggregate.top_categories(shown)),
        }

    def trends(expenses, budgets, acc):
        shown = acc["expenses"]
        return {
            "monthly_trend": aggregate.monthly_trend(shown, trend_months, today),
            "weekly": aggregate.by_week(shown, week_window),
        }

    def budget_statuses(expenses, budgets, acc):
        limits = [
            replace(b, limit_amount=rates.convert(b.limit_amount, base_currency, display_currency))
            for b in budgets
        ]
        statuses = evaluate_all(limits, acc["summary"].amount_by_category)
        return {"budgets": statuses, "alerts": budget_alerts(statuses)}

    return ReportService(
        validators=[invalid_expenses, duplicate_budgets],
        calculators=[converted, summary, trends, budget_statuses],
    )
