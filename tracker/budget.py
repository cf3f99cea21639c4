from typing import Iterable, List, Mapping, Optional

from tracker.domain import Budget, BudgetStatus, Category, Classification

APPROACHING_THRESHOLD = 80.0
EXCEEDED_THRESHOLD = 100.0
# share of the limit below which the remaining amount is flagged as low
LOW_REMAINING_RATIO = 0.2


class InvalidBudgetLimitError(ValueError):
    pass


def classify(percentage_used: float) -> Classification:
    if percentage_used >= EXCEEDED_THRESHOLD:
        return Classification.EXCEEDED
    if percentage_used >= APPROACHING_THRESHOLD:
        return Classification.APPROACHING
    return Classification.OK


def evaluate(spent: float, limit: float, category: Optional[Category] = None) -> BudgetStatus:
    if not limit > 0:
        raise InvalidBudgetLimitError(f"Budget limit must be positive, got {limit}")

    percentage_used = spent / limit * 100
    return BudgetStatus(
        category=category,
        spent=spent,
        limit=limit,
        percentage_used=percentage_used,
        remaining=limit - spent,
        classification=classify(percentage_used),
    )


def evaluate_all(
    budgets: Iterable[Budget], amount_by_category: Mapping[Category, float]
) -> List[BudgetStatus]:
    """Evaluate every budget on its own against the per-category spend."""
    return [
        evaluate(amount_by_category.get(b.category, 0.0), b.limit_amount, b.category)
        for b in budgets
    ]


def budget_alerts(statuses: Iterable[BudgetStatus]) -> List[BudgetStatus]:
    return [s for s in statuses if s.classification is Classification.EXCEEDED]


def progress_percentage(status: BudgetStatus) -> float:
    return min(status.percentage_used, 100.0)


def is_running_low(status: BudgetStatus) -> bool:
    return 0 < status.remaining < status.limit * LOW_REMAINING_RATIO
