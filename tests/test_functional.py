from datetime import date

from tracker.domain import Budget, Category, Expense
from tracker.functional import (
    Either,
    Left,
    Maybe,
    Nothing,
    Right,
    Some,
    find_budget,
    validate_budget_limit,
    validate_expense,
    validate_project_name,
)


def test_maybe_map_and_bind():
    assert Some(5).map(lambda x: x * 2).get_or_else(0) == 10
    assert Nothing().map(lambda x: x * 2).get_or_else(0) == 0

    def half(x: int) -> Maybe[int]:
        return Some(x // 2) if x % 2 == 0 else Nothing()

    assert Some(4).bind(half) == Some(2)
    assert Some(3).bind(half).is_none()
    assert Nothing().bind(half) == Nothing()


def test_either_map_and_bind():
    assert Right(5).map(lambda x: x * 2) == Right(10)

    left = Left("error")
    assert left.map(lambda x: x * 2).is_left()
    assert left.get_or_else(0) == 0
    assert left.get_error() == "error"

    def safe_divide(x: int) -> Either[str, int]:
        return Left("Division by zero") if x == 0 else Right(10 // x)

    assert Right(2).bind(safe_divide).get_or_else(0) == 5
    assert Right(0).bind(safe_divide).get_error() == "Division by zero"
    assert Left("original").bind(safe_divide).get_error() == "original"


def test_find_budget():
    budgets = (Budget("b1", Category.FOOD, 200.0), Budget("b2", Category.SHOPPING, 80.0))

    found = find_budget(budgets, "food")
    assert found.is_some()
    assert found.get_or_else(None).id == "b1"

    assert find_budget(budgets, Category.HEALTHCARE).is_none()


def test_validate_expense_success():
    e = Expense("e1", date(2025, 1, 1), Category.FOOD, 12.5)
    assert validate_expense(e) == Right(e)


def test_validate_expense_rejects_bad_amounts():
    for amount in (0, -3, float("nan"), float("inf")):
        result = validate_expense(Expense("e1", date(2025, 1, 1), Category.FOOD, amount))
        assert result.is_left()
        assert result.get_error()["error"] == "invalid_amount"


def test_validate_expense_rejects_missing_date():
    result = validate_expense(Expense("e1", None, Category.FOOD, 10.0))
    assert result.get_error()["error"] == "missing_date"


def test_validate_expense_rejects_unknown_category():
    result = validate_expense(Expense("e1", date(2025, 1, 1), "rent", 10.0))
    error = result.get_error()
    assert error["error"] == "unknown_category"
    assert "rent" in error["message"]


def test_validate_budget_limit():
    assert validate_budget_limit(250) == Right(250.0)
    assert validate_budget_limit(0).get_error()["error"] == "invalid_limit"
    assert validate_budget_limit("abc").is_left()


def test_validate_project_name():
    assert validate_project_name("  Trip  ") == Right("Trip")
    assert validate_project_name("   ").is_left()
    assert validate_project_name(None).is_left()
