from datetime import date
from typing import Callable, Iterable, Tuple, Union

from tracker.domain import Category, Expense

Predicate = Callable[[Expense], bool]


def by_category(category: Union[Category, str]):
    wanted = Category(category)

    def _filter(e: Expense) -> bool:
        return e.category == wanted

    return _filter


def by_date_range(start: date, end: date):
    def _filter(e: Expense) -> bool:
        return start <= e.date <= end

    return _filter


def by_amount_range(min: float, max: float):
    def _filter(e: Expense) -> bool:
        return min <= e.amount <= max

    return _filter


def by_month(year: int, month: int):
    def _filter(e: Expense) -> bool:
        return e.date.year == year and e.date.month == month

    return _filter


def apply_filters(expenses: Iterable[Expense], *predicates: Predicate) -> Tuple[Expense, ...]:
    return tuple(e for e in expenses if all(p(e) for p in predicates))
