"""
Derived dashboard figures.

Pure functions that turn fetched transactions and categories into the
totals, trend and spending breakdown shown on the dashboard.

Quick Start:
    >>> from finance_dashboard.aggregation import summarize
    >>>
    >>> summary = summarize(transactions, categories)
    >>> print(summary.totals.balance, summary.trend.value)
"""
from finance_dashboard.aggregation.aggregator import (
    DEFAULT_FALLBACK_COLOR,
    compute_totals,
    compute_trend,
    compute_spending_by_category,
    summarize,
)
from finance_dashboard.aggregation.models import (
    Totals,
    Trend,
    TrendPolicy,
    DashboardSummary,
)

__all__ = [
    "DEFAULT_FALLBACK_COLOR",
    "compute_totals",
    "compute_trend",
    "compute_spending_by_category",
    "summarize",
    "Totals",
    "Trend",
    "TrendPolicy",
    "DashboardSummary",
]
