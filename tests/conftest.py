import io
import pytest
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from rich.console import Console

from finance_dashboard.database.connection import DatabaseConfig, DatabaseManager, execute_schema
from finance_dashboard.domain.enums import TransactionType
from finance_dashboard.domain.models import Category, CategoryRef, Transaction
from finance_dashboard.presentation.notifications import Notifier
from finance_dashboard.repositories.sqlite_store import SQLiteTransactionStore

@pytest.fixture
def make_transaction() -> Callable[..., Transaction]:
    """Build transactions with sensible defaults"""
    counter = iter(range(1, 10_000))

    def _make(
        amount: str | int,
        type: TransactionType = TransactionType.EXPENSE,
        category: Optional[str] = None,
        description: str = "Test transaction",
        when: datetime = datetime(2025, 1, 15, 12, 0),
    ) -> Transaction:
        return Transaction(
            id=f"txn-{next(counter)}",
            amount=Decimal(str(amount)),
            description=description,
            type=type,
            transaction_date=when,
            category=CategoryRef(name=category) if category else None,
        )

    return _make

@pytest.fixture
def expense_categories() -> list[Category]:
    return [
        Category(id="cat-food", name="Food", type=TransactionType.EXPENSE, icon="🍔", color="#ff0000"),
        Category(id="cat-rent", name="Rent", type=TransactionType.EXPENSE, icon="🏠", color="#00ff00"),
        Category(id="cat-fun", name="Entertainment", type=TransactionType.EXPENSE),
    ]

@pytest.fixture
def notifier() -> Notifier:
    """Notifier writing to an in-memory console"""
    return Notifier(Console(file=io.StringIO(), width=120))

@pytest.fixture
def test_db(tmp_path):
    """
    Create a real test database.

    Use pytest's tmp_path fixture to create a temporary directory.
    """
    config = DatabaseConfig(tmp_path / "test.db")
    db_manager = DatabaseManager(config)
    execute_schema(db_manager.get_connection())

    yield db_manager

    db_manager.close()

@pytest.fixture
def store(test_db) -> SQLiteTransactionStore:
    """Create a store with a test database."""
    return SQLiteTransactionStore(test_db)
