"""
Dashboard state container.

The dashboard moves through idle -> loading -> ready | error, and back to
loading whenever it refetches. Adding a transaction moves any state to
loading. `reduce` is the only way to produce a new state; it never mutates
the one passed in.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Union

from finance_dashboard.dashboard.results import FetchError
from finance_dashboard.domain.models import Category, Transaction

class DashboardStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error" # ready, but the last fetch failed

class InvalidTransitionError(Exception):
    """Raised when an event is not allowed in the current status."""
    pass

@dataclass(frozen=True)
class DashboardState:
    status: DashboardStatus = DashboardStatus.IDLE
    transactions: List[Transaction] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)
    error: Optional[FetchError] = None

    @property
    def is_loading(self) -> bool:
        return self.status == DashboardStatus.LOADING

@dataclass(frozen=True)
class FetchStarted:
    pass

@dataclass(frozen=True)
class FetchSucceeded:
    transactions: List[Transaction]
    categories: List[Category]

@dataclass(frozen=True)
class FetchFailed:
    error: FetchError

@dataclass(frozen=True)
class FetchCancelled:
    pass

@dataclass(frozen=True)
class TransactionAdded:
    transaction: Transaction

DashboardEvent = Union[FetchStarted, FetchSucceeded, FetchFailed, FetchCancelled, TransactionAdded]

def reduce(state: DashboardState, event: DashboardEvent) -> DashboardState:
    """
    Apply an event to the dashboard state.

    Args:
        state: Current state
        event: What happened

    Returns:
        The next state

    Raises:
        InvalidTransitionError: If the event can't happen in state.status
    """
    if isinstance(event, FetchStarted):
        if state.status == DashboardStatus.LOADING:
            raise InvalidTransitionError("A fetch is already in progress")
        return replace(state, status=DashboardStatus.LOADING)

    if isinstance(event, FetchSucceeded):
        _require(state, event, DashboardStatus.LOADING)
        return DashboardState(
            status=DashboardStatus.READY,
            transactions=list(event.transactions),
            categories=list(event.categories),
        )

    if isinstance(event, FetchFailed):
        _require(state, event, DashboardStatus.LOADING)
        # Keep whatever was loaded before; nothing from the failed cycle is shown
        return replace(state, status=DashboardStatus.ERROR, error=event.error)

    if isinstance(event, FetchCancelled):
        _require(state, event, DashboardStatus.LOADING)
        return replace(state, status=DashboardStatus.IDLE)

    if isinstance(event, TransactionAdded):
        # A mutation always leads to a full refetch, whatever the dashboard was doing
        return replace(state, status=DashboardStatus.LOADING, error=None)

    raise InvalidTransitionError(f"Unknown event: {event!r}")

def _require(state: DashboardState, event: DashboardEvent, *allowed: DashboardStatus) -> None:
    if state.status not in allowed:
        raise InvalidTransitionError(
            f"{type(event).__name__} not allowed while {state.status.value}"
        )
