"""Derived totals over an expense snapshot.

Every function here assumes all amounts share one currency; callers holding
records in another currency run them through ``convert_expenses`` first.
Nothing is cached: each call re-derives its result from the full input.
"""

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from tracker.domain import AggregateSummary, Bucket, Category, Expense


def total(expenses: Iterable[Expense]) -> float:
    return sum((e.amount for e in expenses), 0.0)


def by_category(expenses: Iterable[Expense]) -> Dict[Category, float]:
    # plain dict keeps first-encounter order, which top_categories relies on
    totals: Dict[Category, float] = {}
    for e in expenses:
        totals[e.category] = totals.get(e.category, 0.0) + e.amount
    return totals


def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def by_month(expenses: Iterable[Expense]) -> Dict[str, float]:
    totals: Dict[str, float] = defaultdict(float)
    for e in expenses:
        totals[month_key(e.date)] += e.amount
    return dict(totals)


def week_key(d: date) -> Tuple[int, int]:
    iso_year, iso_week, _ = d.isocalendar()
    return iso_year, iso_week


def week_label(key: Tuple[int, int]) -> str:
    iso_year, iso_week = key
    return f"W{iso_week:02d} {iso_year}"


def _week_totals(expenses: Iterable[Expense]) -> Dict[Tuple[int, int], float]:
    totals: Dict[Tuple[int, int], float] = defaultdict(float)
    for e in expenses:
        totals[week_key(e.date)] += e.amount
    return totals


def by_week(expenses: Iterable[Expense], window_size: int = 8) -> List[Bucket]:
    """Most recent ``window_size`` ISO weeks that have spending, oldest first."""
    totals = _week_totals(expenses)
    keys = sorted(totals)[-window_size:] if window_size > 0 else []
    return [Bucket(week_label(k), totals[k]) for k in keys]


def _shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def monthly_trend(
    expenses: Iterable[Expense],
    month_count: int = 6,
    today: Optional[date] = None,
) -> List[Bucket]:
    """Trailing calendar months ending at ``today``'s month, zero-filled."""
    today = today or date.today()
    totals = by_month(expenses)
    points = []
    for offset in range(month_count - 1, -1, -1):
        year, month = _shift_month(today.year, today.month, -offset)
        first = date(year, month, 1)
        points.append(Bucket(first.strftime("%b %Y"), totals.get(month_key(first), 0.0)))
    return points


def top_categories(
    expenses: Iterable[Expense], k: Optional[int] = None
) -> Iterator[Tuple[Category, float]]:
    # sorted() is stable, so equal sums keep encounter order
    ordered = sorted(by_category(expenses).items(), key=lambda item: item[1], reverse=True)
    if k is not None:
        ordered = ordered[: max(0, k)]
    for category, amount in ordered:
        yield category, amount


def category_shares(expenses: Iterable[Expense]) -> Dict[Category, float]:
    expenses = tuple(expenses)
    overall = total(expenses)
    if overall == 0:
        return {}
    return {category: amount / overall for category, amount in by_category(expenses).items()}


def summarize(expenses: Iterable[Expense]) -> AggregateSummary:
    expenses = tuple(expenses)
    weeks = _week_totals(expenses)
    return AggregateSummary(
        total_amount=total(expenses),
        transaction_count=len(expenses),
        amount_by_category=by_category(expenses),
        amount_by_month=by_month(expenses),
        amount_by_week={week_label(k): weeks[k] for k in sorted(weeks)},
    )
