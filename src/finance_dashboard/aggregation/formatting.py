from datetime import datetime
from decimal import Decimal, localcontext

from finance_dashboard.aggregation.aggregator import ARITHMETIC
from finance_dashboard.domain.enums import TransactionType
from finance_dashboard.domain.models import Transaction

def format_currency(amount: Decimal) -> str:
    """Format an amount as dollars with two decimals, e.g. $1234.50 or $-20.00"""
    with localcontext(ARITHMETIC):
        if not isinstance(amount, Decimal):
            amount = ARITHMETIC.create_decimal(str(amount))
        return f"${amount:.2f}"

def format_signed_amount(transaction: Transaction) -> str:
    """+$10.00 for income, -$10.00 for expenses"""
    sign = "+" if transaction.type == TransactionType.INCOME else "-"
    with localcontext(ARITHMETIC):
        return f"{sign}{format_currency(abs(transaction.amount))}"

def format_date(value: datetime) -> str:
    return value.strftime("%b %d, %Y")
