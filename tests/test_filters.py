from datetime import date

from tracker.domain import Category, Expense
from tracker.filters import apply_filters, by_amount_range, by_category, by_date_range, by_month


def make_sample():
    return (
        Expense("t1", date(2024, 5, 1), Category.FOOD, 1000, "groceries"),
        Expense("t2", date(2024, 5, 2), Category.TRANSPORTATION, 500, "bus"),
        Expense("t3", date(2023, 5, 1), Category.FOOD, 8000, "old feast"),
    )


def test_by_category():
    result = list(filter(by_category("food"), make_sample()))
    assert [e.id for e in result] == ["t1", "t3"]


def test_by_date_range():
    result = list(filter(by_date_range(date(2024, 1, 1), date(2024, 12, 31)), make_sample()))
    assert [e.id for e in result] == ["t1", "t2"]


def test_by_amount_range():
    result = list(filter(by_amount_range(100, 5000), make_sample()))
    assert [e.id for e in result] == ["t1", "t2"]


def test_by_month():
    result = list(filter(by_month(2023, 5), make_sample()))
    assert [e.id for e in result] == ["t3"]


def test_apply_filters_combines_predicates():
    result = apply_filters(
        make_sample(),
        by_category(Category.FOOD),
        by_date_range(date(2024, 1, 1), date(2024, 12, 31)),
    )
    assert [e.id for e in result] == ["t1"]
    assert apply_filters(make_sample()) == make_sample()
