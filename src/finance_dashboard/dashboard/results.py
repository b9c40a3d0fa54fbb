"""
Outcome of one dashboard fetch cycle.

A fetch either succeeds with both datasets or fails with exactly one typed
error; callers branch on the result type instead of catching exceptions.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Union

from finance_dashboard.domain.models import Category, Transaction

class QuerySource(Enum):
    """Which of the two dashboard queries failed"""
    TRANSACTIONS = "transactions"
    CATEGORIES = "categories"

@dataclass(frozen=True)
class AuthMissing:
    """No user is signed in"""
    message: str = "Not authenticated"

@dataclass(frozen=True)
class QueryFailed:
    """The store rejected one of the queries"""
    source: QuerySource
    message: str

FetchError = Union[AuthMissing, QueryFailed]

@dataclass(frozen=True)
class FetchSuccess:
    transactions: List[Transaction] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return True

@dataclass(frozen=True)
class FetchFailure:
    error: FetchError

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return self.error.message

FetchResult = Union[FetchSuccess, FetchFailure]
