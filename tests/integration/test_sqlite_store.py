import asyncio
import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from finance_dashboard.domain.enums import TransactionType
from finance_dashboard.domain.models import NewTransaction
from finance_dashboard.repositories.base import CategoryNotFoundError, StoreError
from finance_dashboard.repositories.sqlite_store import SQLiteTransactionStore

CATEGORIES = [
    {"name": "Salary", "icon": "💼", "type": "income", "color": "#10b981"},
    {"name": "Food", "icon": "🍔", "type": "expense", "color": "#f97316"},
    {"name": "Other", "type": "expense"},
]

@pytest.fixture
def seeded_store(store: SQLiteTransactionStore) -> SQLiteTransactionStore:
    store.seed_categories(CATEGORIES)
    return store

@pytest.fixture
def user(seeded_store):
    return seeded_store.get_or_create_user("me@example.com")

def _category_id(store, name):
    categories = asyncio.run(store.list_categories())
    return next(c.id for c in categories if c.name == name)

def _new(amount, description="Test", type=TransactionType.EXPENSE, when=None, category_id=None):
    return NewTransaction(
        amount=Decimal(str(amount)),
        description=description,
        type=type,
        transaction_date=when or datetime(2025, 1, 15, 9, 30),
        category_id=category_id,
    )

@pytest.mark.integration
class TestSQLiteTransactionStore:
    """Test suite for the SQLite store. Uses a real temp db."""

    def test_seed_categories(self, store):
        assert store.seed_categories(CATEGORIES) == 3
        # seeding again is a no-op
        assert store.seed_categories(CATEGORIES) == 0

    def test_list_categories_keeps_insertion_order(self, seeded_store):
        categories = asyncio.run(seeded_store.list_categories())

        assert [c.name for c in categories] == ["Salary", "Food", "Other"]
        assert categories[0].type == TransactionType.INCOME
        assert categories[1].icon == "🍔"
        assert categories[2].color is None

    def test_add_transaction_returns_joined_category(self, seeded_store, user):
        food_id = _category_id(seeded_store, "Food")

        saved = asyncio.run(seeded_store.add_transaction(user.id, _new("12.34", "Lunch", category_id=food_id)))

        assert saved.id
        assert saved.amount == Decimal("12.34")
        assert saved.description == "Lunch"
        assert saved.type == TransactionType.EXPENSE
        assert saved.transaction_date == datetime(2025, 1, 15, 9, 30)
        assert saved.category.name == "Food"
        assert saved.category.color == "#f97316"

    def test_add_transaction_without_category(self, seeded_store, user):
        saved = asyncio.run(seeded_store.add_transaction(user.id, _new(5)))

        assert saved.category is None

    def test_decimal_precision_preserved(self, seeded_store, user):
        for amount in ["99.99", "0.01", "1234567.89", "0.33"]:
            asyncio.run(seeded_store.add_transaction(user.id, _new(amount, description=amount)))

        transactions = asyncio.run(seeded_store.recent_transactions(user.id))

        assert {t.amount for t in transactions} == {
            Decimal("99.99"), Decimal("0.01"), Decimal("1234567.89"), Decimal("0.33"),
        }
        assert all(isinstance(t.amount, Decimal) for t in transactions)

    def test_unknown_category_raises(self, seeded_store, user):
        with pytest.raises(CategoryNotFoundError):
            asyncio.run(seeded_store.add_transaction(user.id, _new(5, category_id="missing")))

        assert asyncio.run(seeded_store.recent_transactions(user.id)) == []

    def test_recent_transactions_newest_first_and_limited(self, seeded_store, user):
        start = datetime(2025, 1, 1)
        for day in range(25):
            asyncio.run(seeded_store.add_transaction(
                user.id, _new(day + 1, description=f"day {day}", when=start + timedelta(days=day))
            ))

        transactions = asyncio.run(seeded_store.recent_transactions(user.id, limit=20))

        assert len(transactions) == 20
        assert transactions[0].description == "day 24"
        assert transactions[-1].description == "day 5"
        dates = [t.transaction_date for t in transactions]
        assert dates == sorted(dates, reverse=True)

    def test_recent_transactions_filtered_by_user(self, seeded_store, user):
        other = seeded_store.get_or_create_user("other@example.com")
        asyncio.run(seeded_store.add_transaction(user.id, _new(1, "mine")))
        asyncio.run(seeded_store.add_transaction(other.id, _new(2, "theirs")))

        mine = asyncio.run(seeded_store.recent_transactions(user.id))

        assert [t.description for t in mine] == ["mine"]

    def test_get_or_create_user_is_idempotent(self, store):
        first = store.get_or_create_user("me@example.com")
        second = store.get_or_create_user("me@example.com")

        assert first == second
        assert store.get_user(first.id) == first
        assert store.get_user("missing") is None

    def test_query_errors_become_store_errors(self, store, test_db):
        with test_db.transaction() as conn:
            conn.execute("DROP TABLE transactions")

        with pytest.raises(StoreError, match="no such table"):
            asyncio.run(store.recent_transactions("user-1"))
