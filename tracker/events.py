from datetime import date, datetime
from typing import Callable, Dict, List, NamedTuple, Optional

from tracker.budget import evaluate
from tracker.domain import Category, Classification, UserPreferences, category_info
from tracker.log import get_logger

__all__ = [
    'EXPENSE_ADDED', 'BUDGET_ALERT', 'Event', 'EventBus', 'make_event_bus',
    'check_budget_handler', 'last_expense_handler', 'needs_daily_reminder',
]

logger = get_logger("tracker.events")

EXPENSE_ADDED = "EXPENSE_ADDED"
BUDGET_ALERT = "BUDGET_ALERT"

Handler = Callable[['Event', dict], dict]


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def unsubscribe(self, name: str, handler: Handler) -> None:
        handlers = self._subscribers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        handlers = self._subscribers.get(name)
        if not handlers:
            return []

        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        return [handler(event, payload) for handler in list(handlers)]


def check_budget_handler(event: Event, payload: dict) -> dict:
    """Re-evaluate the category budget with the new expense included.

    payload: category, amount, spent_before, limit (None when the category
    has no budget). Returns an alert once spend is approaching or over.
    """
    limit = payload.get("limit")
    if limit is None:
        return {}

    category = Category(payload["category"])
    spent = payload.get("spent_before", 0.0) + payload.get("amount", 0.0)
    status = evaluate(spent, limit, category)
    if status.classification is Classification.OK:
        return {"spent": spent}

    label = category_info(category).label
    if status.classification is Classification.EXCEEDED:
        message = f"Budget exceeded for {label}: {status.percentage_used:.0f}% used"
    else:
        message = f"Approaching budget for {label}: {status.percentage_used:.0f}% used"
    logger.warning(message)
    return {
        "alert": message,
        "category": category,
        "classification": status.classification,
        "spent": spent,
        "limit": limit,
    }


def last_expense_handler(event: Event, payload: dict) -> dict:
    return {"last_expense_date": payload.get("date")}


def make_event_bus() -> EventBus:
    bus = EventBus()
    bus.subscribe(EXPENSE_ADDED, check_budget_handler)
    bus.subscribe(EXPENSE_ADDED, last_expense_handler)
    return bus


def needs_daily_reminder(preferences: UserPreferences, today: Optional[date] = None) -> bool:
    today = today or date.today()
    return preferences.daily_reminder_enabled and preferences.last_expense_date != today
