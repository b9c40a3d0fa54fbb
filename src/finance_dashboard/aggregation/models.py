"""
Aggregator result models.

These are display-ready values derived from transactions, not domain entities.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List
from finance_dashboard.domain.models import SpendingSlice

class TrendPolicy(Enum):
    """What the trend shows when there is no income to divide by"""
    DIVISOR_FALLBACK = "divisor_fallback" # divide by 1 instead
    NOT_AVAILABLE = "not_available" # show "N/A"

@dataclass(frozen=True)
class Totals:
    """Income, expense and balance over a set of transactions"""
    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")

@dataclass(frozen=True)
class Trend:
    """Signed percentage of balance relative to income"""
    value: str
    is_positive: bool

@dataclass(frozen=True)
class DashboardSummary:
    totals: Totals
    trend: Trend
    spending: List[SpendingSlice] = field(default_factory=list)

    @property
    def total_spending(self) -> Decimal:
        """Sum of all chart slices"""
        return sum((s.value for s in self.spending), Decimal("0"))

    def __str__(self) -> str:
        """Human-readable summary"""
        lines = [
            f"💰 Income:   ${self.totals.total_income:,.2f}",
            f"💸 Expenses: ${self.totals.total_expenses:,.2f}",
            f"{'📈' if self.trend.is_positive else '📉'} Balance:  ${self.totals.balance:,.2f} ({self.trend.value})",
        ]
        for spending_slice in self.spending:
            lines.append(f"  • {spending_slice.name}: ${spending_slice.value:,.2f}")
        return "\n".join(lines)
