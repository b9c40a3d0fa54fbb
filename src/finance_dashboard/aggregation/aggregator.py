from decimal import Context, Decimal, ROUND_HALF_UP, localcontext
from typing import Any, Iterable, List, Optional, Sequence

from finance_dashboard.aggregation.models import Totals, Trend, TrendPolicy, DashboardSummary
from finance_dashboard.domain.enums import TransactionType
from finance_dashboard.domain.models import Category, SpendingSlice, Transaction

DEFAULT_FALLBACK_COLOR = "#8b5cf6"
NOT_AVAILABLE = "N/A"

# No traps: overflow gives Infinity and invalid operations give NaN instead of raising
ARITHMETIC = Context(prec=28, rounding=ROUND_HALF_UP, traps=[])

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")

def _as_decimal(value: Any) -> Decimal:
    """Coerce an upstream amount to Decimal without validating it"""
    if isinstance(value, Decimal):
        return value
    return ARITHMETIC.create_decimal(str(value))

def _sum_amounts(transactions: Iterable[Transaction]) -> Decimal:
    """Sum finite amounts; Infinity and NaN rows contribute nothing"""
    amounts = (_as_decimal(t.amount) for t in transactions)
    return sum((a for a in amounts if a.is_finite()), _ZERO)

def compute_totals(transactions: Iterable[Transaction]) -> Totals:
    """
    Total the income and expenses of a set of transactions.

    Args:
        transactions: Transactions in any order

    Returns:
        Totals with income, expenses and balance (income - expenses).
        All three are zero for an empty input.
    """
    transactions = list(transactions)
    with localcontext(ARITHMETIC):
        total_income = _sum_amounts(t for t in transactions if t.type == TransactionType.INCOME)
        total_expenses = _sum_amounts(t for t in transactions if t.type == TransactionType.EXPENSE)

        return Totals(
            total_income=total_income,
            total_expenses=total_expenses,
            balance=total_income - total_expenses,
        )

def compute_trend(
    balance: Decimal,
    total_income: Decimal,
    policy: TrendPolicy = TrendPolicy.DIVISOR_FALLBACK,
) -> Trend:
    """
    Express the balance as a signed percentage of income.

    With no income the divisor falls back to 1, so the figure is the balance
    itself scaled by 100 rather than a true percentage. Pass
    TrendPolicy.NOT_AVAILABLE to get "N/A" instead. Totals too large to
    represent also read "N/A".

    Args:
        balance: Income minus expenses
        total_income: Sum of income amounts
        policy: Handling of zero income

    Returns:
        Trend such as Trend("+12.5%", True)

    Example:
        compute_trend(Decimal("0"), Decimal("0"))  # Trend("+0.0%", True)
    """
    with localcontext(ARITHMETIC):
        balance = _as_decimal(balance)
        total_income = _as_decimal(total_income)
        is_positive = balance >= 0

        if total_income == 0 and policy == TrendPolicy.NOT_AVAILABLE:
            return Trend(value=NOT_AVAILABLE, is_positive=is_positive)

        divisor = total_income if total_income != 0 else Decimal("1")
        percentage = balance / divisor * _HUNDRED
        if not percentage.is_finite():
            return Trend(value=NOT_AVAILABLE, is_positive=is_positive)

        # Fixed-point formatting rounds half-up to one place at any magnitude
        sign = "+" if is_positive else ""
        return Trend(value=f"{sign}{percentage:.1f}%", is_positive=is_positive)

def compute_spending_by_category(
    transactions: Sequence[Transaction],
    categories: Iterable[Category],
    fallback_color: Optional[str] = None,
) -> List[SpendingSlice]:
    """
    Aggregate expense transactions into one slice per expense category.

    Matching is by exact, case-sensitive category name. Categories with no
    spending are left out and the category order is kept.

    Args:
        transactions: Transactions with their joined category
        categories: All known categories
        fallback_color: Color for categories without one

    Returns:
        List of SpendingSlice with a positive, finite value
    """
    fallback_color = fallback_color or DEFAULT_FALLBACK_COLOR
    expenses = [t for t in transactions if t.type == TransactionType.EXPENSE]

    slices = []
    with localcontext(ARITHMETIC):
        for category in categories:
            if category.type != TransactionType.EXPENSE:
                continue

            total = _sum_amounts(t for t in expenses if t.category_name == category.name)
            if not total.is_finite() or total <= 0:
                continue

            slices.append(SpendingSlice(
                name=category.name,
                value=total,
                color=category.color or fallback_color,
            ))

    return slices

def summarize(
    transactions: Sequence[Transaction],
    categories: Sequence[Category],
    fallback_color: Optional[str] = None,
    trend_policy: TrendPolicy = TrendPolicy.DIVISOR_FALLBACK,
) -> DashboardSummary:
    """Compute every figure the dashboard shows in one pass"""
    totals = compute_totals(transactions)
    return DashboardSummary(
        totals=totals,
        trend=compute_trend(totals.balance, totals.total_income, policy=trend_policy),
        spending=compute_spending_by_category(transactions, categories, fallback_color),
    )
