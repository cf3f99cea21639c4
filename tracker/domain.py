from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, NamedTuple, Optional, Union


class Category(str, Enum):
    FOOD = "food"
    TRANSPORTATION = "transportation"
    ENTERTAINMENT = "entertainment"
    UTILITIES = "utilities"
    SHOPPING = "shopping"
    HEALTHCARE = "healthcare"
    EDUCATION = "education"
    OTHER = "other"


class CategoryInfo(NamedTuple):
    label: str
    emoji: str
    color: str


# display metadata for each category, in menu order
CATEGORY_INFO: Dict[Category, CategoryInfo] = {
    Category.FOOD: CategoryInfo("Food & Dining", "🍔", "hsl(25, 95%, 53%)"),
    Category.TRANSPORTATION: CategoryInfo("Transportation", "🚗", "hsl(210, 100%, 50%)"),
    Category.ENTERTAINMENT: CategoryInfo("Entertainment", "🎬", "hsl(280, 70%, 50%)"),
    Category.UTILITIES: CategoryInfo("Utilities", "💡", "hsl(45, 100%, 50%)"),
    Category.SHOPPING: CategoryInfo("Shopping", "🛍️", "hsl(340, 80%, 55%)"),
    Category.HEALTHCARE: CategoryInfo("Healthcare", "💊", "hsl(0, 70%, 50%)"),
    Category.EDUCATION: CategoryInfo("Education", "📚", "hsl(200, 80%, 45%)"),
    Category.OTHER: CategoryInfo("Other", "📌", "hsl(220, 10%, 50%)"),
}


def category_info(value: Union[Category, str]) -> CategoryInfo:
    """Display metadata for a category; unknown values fall back to Other."""
    try:
        return CATEGORY_INFO[Category(value)]
    except ValueError:
        return CATEGORY_INFO[Category.OTHER]


@dataclass(frozen=True)
class Expense:
    id: str
    date: date              # calendar day the money was spent
    category: Category
    amount: float           # in the snapshot's single storage currency
    description: str = ""
    created_at: str = ""    # ISO timestamp, set once
    project_id: Optional[str] = None


# A spending limit for one category inside one project
@dataclass(frozen=True)
class Budget:
    id: str
    category: Category
    limit_amount: float
    created_at: str = ""
    updated_at: str = ""
    project_id: Optional[str] = None


@dataclass(frozen=True)
class Project:
    id: str
    name: str
    description: Optional[str] = None
    icon: str = "📊"
    created_at: str = ""
    updated_at: str = ""


@dataclass(frozen=True)
class UserPreferences:
    preferred_currency: Optional[str] = None     # falls back to Settings.display_currency
    daily_reminder_enabled: bool = False
    daily_reminder_time: str = "20:00:00"
    last_expense_date: Optional[date] = None


@dataclass(frozen=True)
class CurrencyInfo:
    code: str
    symbol: str
    name: str
    locale: str     # BCP-47 tag, e.g. "de-DE"


class Bucket(NamedTuple):
    label: str
    amount: float


@dataclass(frozen=True)
class AggregateSummary:
    total_amount: float = 0.0
    transaction_count: int = 0
    amount_by_category: Dict[Category, float] = field(default_factory=dict)
    amount_by_month: Dict[str, float] = field(default_factory=dict)
    amount_by_week: Dict[str, float] = field(default_factory=dict)


class Classification(str, Enum):
    OK = "ok"
    APPROACHING = "approaching"
    EXCEEDED = "exceeded"


@dataclass(frozen=True)
class BudgetStatus:
    category: Optional[Category]
    spent: float
    limit: float
    percentage_used: float
    remaining: float        # negative when over budget
    classification: Classification
