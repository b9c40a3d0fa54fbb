from dataclasses import dataclass
from decimal import Decimal
from datetime import datetime
from typing import Optional
from finance_dashboard.domain.enums import TransactionType

@dataclass(frozen=True)
class CategoryRef:
    """Category fields joined onto a transaction row"""
    name: str
    icon: Optional[str] = None
    color: Optional[str] = None

@dataclass(frozen=True)
class Transaction:
    """Core domain model representing a single recorded transaction"""
    id: str
    amount: Decimal
    description: str
    type: TransactionType
    transaction_date: datetime
    category: Optional[CategoryRef] = None

    @property
    def category_name(self) -> Optional[str]:
        return self.category.name if self.category else None

    def __repr__(self):
        sign = "+" if self.type == TransactionType.INCOME else "-"
        return f"Transaction({self.transaction_date:%Y-%m-%d}, {self.description[:30]}, {sign}${self.amount})"

@dataclass(frozen=True)
class Category:
    """A named grouping of transactions with display metadata"""
    id: str
    name: str
    type: TransactionType
    icon: Optional[str] = None
    color: Optional[str] = None

@dataclass(frozen=True)
class SpendingSlice:
    """One category's aggregated expense total, ready for a chart segment"""
    name: str
    value: Decimal
    color: str

@dataclass(frozen=True)
class User:
    id: str
    email: str

@dataclass
class NewTransaction:
    """Payload for inserting a transaction"""
    amount: Decimal
    description: str
    type: TransactionType
    transaction_date: datetime
    category_id: Optional[str] = None

    def validate(self) -> None:
        """
        Check the payload before it is sent to the store.

        Raises:
            ValueError: If the amount is not a positive finite number or the
                description is blank
        """
        if not Decimal(self.amount).is_finite():
            raise ValueError(f"Amount must be a finite number, got {self.amount}")
        if self.amount <= 0:
            raise ValueError(f"Amount must be greater than zero, got {self.amount}")
        if not self.description or not self.description.strip():
            raise ValueError("Description is required")
