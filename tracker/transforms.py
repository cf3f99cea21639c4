import json
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Optional, Tuple, TypeVar, Union
from uuid import uuid4

from tracker.currency import currency_info
from tracker.domain import Budget, Category, Expense, Project, UserPreferences
from tracker.log import get_logger

logger = get_logger("tracker.transforms")

R = TypeVar("R", Expense, Budget)

# fields an edit is never allowed to touch
FROZEN_EXPENSE_FIELDS = frozenset({"id", "created_at"})
PROJECT_EDITABLE_FIELDS = frozenset({"name", "description", "icon"})


class SeedError(ValueError):
    pass


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_expense(raw: dict) -> Expense:
    return Expense(
        id=raw["id"],
        date=date.fromisoformat(raw["date"]),
        category=Category(raw["category"]),
        amount=float(raw["amount"]),
        description=raw.get("description") or "",
        created_at=raw.get("created_at", ""),
        project_id=raw.get("project_id"),
    )


def _parse_budget(raw: dict) -> Budget:
    limit_amount = float(raw["limit_amount"])
    if not limit_amount > 0:
        raise ValueError(f"budget {raw['id']} has non-positive limit {limit_amount}")
    return Budget(
        id=raw["id"],
        category=Category(raw["category"]),
        limit_amount=limit_amount,
        created_at=raw.get("created_at", ""),
        updated_at=raw.get("updated_at", ""),
        project_id=raw.get("project_id"),
    )


def _parse_preferences(raw: dict) -> UserPreferences:
    last = raw.get("last_expense_date")
    return UserPreferences(
        preferred_currency=raw.get("preferred_currency"),
        daily_reminder_enabled=bool(raw.get("daily_reminder_enabled", False)),
        daily_reminder_time=raw.get("daily_reminder_time", "20:00:00"),
        last_expense_date=date.fromisoformat(last) if last else None,
    )


def load_seed(
    path: str,
) -> Tuple[
    Tuple[Project, ...],
    Tuple[Expense, ...],
    Tuple[Budget, ...],
    UserPreferences,
]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise SeedError(f"{path} must hold a JSON object, got {type(data).__name__}")

    try:
        projects = tuple(Project(**p) for p in data.get("projects", []))
        expenses = tuple(_parse_expense(e) for e in data.get("expenses", []))
        budgets = tuple(_parse_budget(b) for b in data.get("budgets", []))
        preferences = _parse_preferences(data.get("preferences", {}))
    except (KeyError, TypeError, ValueError) as e:
        raise SeedError(f"Malformed record in {path}: {e}") from e

    logger.info(
        "Loaded %d projects, %d expenses, %d budgets from %s",
        len(projects), len(expenses), len(budgets), path,
    )
    return projects, expenses, budgets, preferences


def new_expense(
    date: date,
    category: Union[Category, str],
    amount: float,
    description: str = "",
    project_id: Optional[str] = None,
) -> Expense:
    return Expense(
        id=str(uuid4()),
        date=date,
        category=Category(category),
        amount=amount,
        description=description.strip(),
        created_at=_now(),
        project_id=project_id,
    )


def add_expense(expenses: Tuple[Expense, ...], e: Expense) -> Tuple[Expense, ...]:
    # newest first, like the list view shows them
    logger.info("Added expense %s (%s %.2f)", e.id, e.category.value, e.amount)
    return (e,) + expenses


def update_expense(expenses: Tuple[Expense, ...], expense_id: str, **changes) -> Tuple[Expense, ...]:
    forbidden = FROZEN_EXPENSE_FIELDS & changes.keys()
    if forbidden:
        raise ValueError(f"Cannot change {', '.join(sorted(forbidden))} of an expense")
    if "category" in changes:
        changes["category"] = Category(changes["category"])
    logger.info("Updated expense %s: %s", expense_id, sorted(changes))
    return tuple(replace(e, **changes) if e.id == expense_id else e for e in expenses)


def delete_expense(expenses: Tuple[Expense, ...], expense_id: str) -> Tuple[Expense, ...]:
    logger.info("Deleted expense %s", expense_id)
    return tuple(e for e in expenses if e.id != expense_id)


def set_budget(
    budgets: Tuple[Budget, ...],
    category: Union[Category, str],
    limit_amount: float,
    project_id: Optional[str] = None,
) -> Tuple[Budget, ...]:
    """Create or replace the one budget a project may hold for a category."""
    category = Category(category)
    now = _now()
    existing = next(
        (b for b in budgets if b.category == category and b.project_id == project_id), None
    )
    if existing is None:
        logger.info("Created %s budget of %.2f", category.value, limit_amount)
        return budgets + (
            Budget(
                id=str(uuid4()),
                category=category,
                limit_amount=limit_amount,
                created_at=now,
                updated_at=now,
                project_id=project_id,
            ),
        )

    logger.info("Changed %s budget to %.2f", category.value, limit_amount)
    return tuple(
        replace(b, limit_amount=limit_amount, updated_at=now) if b is existing else b
        for b in budgets
    )


def delete_budget(
    budgets: Tuple[Budget, ...],
    category: Union[Category, str],
    project_id: Optional[str] = None,
) -> Tuple[Budget, ...]:
    category = Category(category)
    logger.info("Removed %s budget", category.value)
    return tuple(
        b for b in budgets if not (b.category == category and b.project_id == project_id)
    )


def new_project(name: str, description: Optional[str] = None, icon: str = "📊") -> Project:
    now = _now()
    return Project(
        id=str(uuid4()),
        name=name.strip(),
        description=(description or "").strip() or None,
        icon=icon or "📊",
        created_at=now,
        updated_at=now,
    )


def add_project(projects: Tuple[Project, ...], p: Project) -> Tuple[Project, ...]:
    logger.info("Created project %s (%s)", p.id, p.name)
    return (p,) + projects


def update_project(projects: Tuple[Project, ...], project_id: str, **changes) -> Tuple[Project, ...]:
    """Rename or re-describe a project. Only name, description and icon may change."""
    unknown = changes.keys() - PROJECT_EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot change {', '.join(sorted(unknown))} of a project")
    logger.info("Updated project %s: %s", project_id, sorted(changes))
    return tuple(
        replace(p, updated_at=_now(), **changes) if p.id == project_id else p
        for p in projects
    )


def delete_project(
    projects: Tuple[Project, ...],
    expenses: Tuple[Expense, ...],
    budgets: Tuple[Budget, ...],
    project_id: str,
) -> Tuple[Tuple[Project, ...], Tuple[Expense, ...], Tuple[Budget, ...]]:
    """Remove a project together with every expense and budget filed under it."""
    kept_expenses = tuple(e for e in expenses if e.project_id != project_id)
    kept_budgets = tuple(b for b in budgets if b.project_id != project_id)
    logger.info(
        "Deleted project %s with %d expenses and %d budgets",
        project_id,
        len(expenses) - len(kept_expenses),
        len(budgets) - len(kept_budgets),
    )
    return (
        tuple(p for p in projects if p.id != project_id),
        kept_expenses,
        kept_budgets,
    )


def for_project(records: Tuple[R, ...], project_id: Optional[str]) -> Tuple[R, ...]:
    if project_id is None:
        return records
    return tuple(r for r in records if r.project_id == project_id)


def display_currency(preferences: UserPreferences, default: str) -> str:
    return preferences.preferred_currency or default


def set_preferred_currency(preferences: UserPreferences, code: str) -> UserPreferences:
    currency_info(code)
    logger.info("Preferred currency set to %s", code)
    return replace(preferences, preferred_currency=code)
