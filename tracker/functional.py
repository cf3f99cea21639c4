import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, TypeVar, Union

from tracker.domain import Budget, Category, Expense

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    def is_some(self) -> bool:
        return isinstance(self, Some)

    def is_none(self) -> bool:
        return not self.is_some()


@dataclass(frozen=True)
class Some(Maybe[T]):
    value: T

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self.value))

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return f(self.value)

    def get_or_else(self, default: T) -> T:
        return self.value


@dataclass(frozen=True)
class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default


class Either(Generic[E, T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    def is_right(self) -> bool:
        return isinstance(self, Right)

    def is_left(self) -> bool:
        return not self.is_right()


@dataclass(frozen=True)
class Right(Either[E, T]):
    value: T

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self.value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self.value)

    def get_or_else(self, default: T) -> T:
        return self.value

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")


@dataclass(frozen=True)
class Left(Either[E, T]):
    error: E

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return self

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def get_error(self) -> E:
        return self.error


def find_budget(budgets: Iterable[Budget], category: Union[Category, str]) -> Maybe[Budget]:
    for b in budgets:
        if b.category == category:
            return Some(b)
    return Nothing()


def _valid_amount(amount: Any) -> bool:
    return isinstance(amount, (int, float)) and math.isfinite(amount) and amount > 0


def validate_expense(e: Expense) -> Either[dict, Expense]:
    if not _valid_amount(e.amount):
        return Left({
            "error": "invalid_amount",
            "message": "Please enter an amount greater than zero",
            "amount": e.amount,
        })

    if e.date is None:
        return Left({
            "error": "missing_date",
            "message": "Please pick the date of the expense",
        })

    try:
        Category(e.category)
    except ValueError:
        return Left({
            "error": "unknown_category",
            "message": f"Category {e.category} does not exist",
            "category": e.category,
        })

    return Right(e)


def validate_budget_limit(limit: Any) -> Either[dict, float]:
    if not _valid_amount(limit):
        return Left({
            "error": "invalid_limit",
            "message": "Please enter a valid budget amount",
            "limit": limit,
        })
    return Right(float(limit))


def validate_project_name(name: str) -> Either[dict, str]:
    cleaned = (name or "").strip()
    if not cleaned:
        return Left({
            "error": "missing_name",
            "message": "Please enter a project name",
        })
    return Right(cleaned)
