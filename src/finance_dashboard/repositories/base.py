from abc import ABC, abstractmethod
from typing import List, Optional

from finance_dashboard.domain.models import Category, NewTransaction, Transaction, User

class StoreError(Exception):
    """Raised when the transaction store cannot complete a query."""
    pass

class CategoryNotFoundError(StoreError):
    """Raised when a transaction references a category that doesn't exist."""
    pass

class TransactionStore(ABC):
    """
    Abstract access to the backend holding transactions and categories.

    The dashboard only reads and appends; nothing is updated in place.
    Methods are coroutines so the two dashboard queries can run concurrently.
    """

    @abstractmethod
    async def recent_transactions(self, user_id: str, limit: int = 20) -> List[Transaction]:
        """
        Retrieve a user's latest transactions joined with their category.

        Args:
            user_id: Owner of the transactions
            limit: Maximum number of rows

        Returns:
            Transactions ordered by transaction_date, newest first

        Raises:
            StoreError: If the query fails
        """
        pass

    @abstractmethod
    async def list_categories(self) -> List[Category]:
        """
        Retrieve every category, unfiltered.

        Raises:
            StoreError: If the query fails
        """
        pass

    @abstractmethod
    async def add_transaction(self, user_id: str, new: NewTransaction) -> Transaction:
        """
        Insert a transaction row.

        Args:
            user_id: Owner of the transaction
            new: Validated insert payload

        Returns:
            The stored transaction with its ID and joined category

        Raises:
            CategoryNotFoundError: If new.category_id is unknown
            StoreError: If the insert fails
        """
        pass

    @abstractmethod
    def get_or_create_user(self, email: str) -> User:
        """Look up a user by email, creating the row when missing"""
        pass

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]:
        pass
