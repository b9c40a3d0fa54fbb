import asyncio
import sqlite3
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from loguru import logger

from finance_dashboard.database.connection import DatabaseManager
from finance_dashboard.domain.enums import TransactionType
from finance_dashboard.domain.models import Category, CategoryRef, NewTransaction, Transaction, User
from finance_dashboard.repositories.base import CategoryNotFoundError, StoreError, TransactionStore

_TRANSACTION_COLUMNS = """
    t.id, t.amount, t.description, t.type, t.transaction_date,
    c.name AS category_name, c.icon AS category_icon, c.color AS category_color
"""

class SQLiteTransactionStore(TransactionStore):
    """
    SQLite implementation of the TransactionStore.

    Queries are plain SQL executed on a worker thread so they don't block
    the event loop.
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    async def recent_transactions(self, user_id: str, limit: int = 20) -> List[Transaction]:
        return await asyncio.to_thread(self._recent_transactions, user_id, limit)

    async def list_categories(self) -> List[Category]:
        return await asyncio.to_thread(self._list_categories)

    async def add_transaction(self, user_id: str, new: NewTransaction) -> Transaction:
        return await asyncio.to_thread(self._add_transaction, user_id, new)

    def _recent_transactions(self, user_id: str, limit: int) -> List[Transaction]:
        try:
            with self.db.reading() as conn:
                rows = conn.execute(
                    f"""
                    SELECT {_TRANSACTION_COLUMNS}
                    FROM transactions t
                    LEFT JOIN categories c ON c.id = t.category_id
                    WHERE t.user_id = ?
                    ORDER BY t.transaction_date DESC
                    LIMIT ?
                    """,
                    (user_id, limit),
                ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e

        return [self._row_to_transaction(row) for row in rows]

    def _list_categories(self) -> List[Category]:
        try:
            with self.db.reading() as conn:
                rows = conn.execute("SELECT * FROM categories ORDER BY rowid").fetchall()
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e

        return [self._row_to_category(row) for row in rows]

    def _add_transaction(self, user_id: str, new: NewTransaction) -> Transaction:
        transaction_id = str(uuid.uuid4())

        try:
            with self.db.transaction() as conn:
                if new.category_id is not None:
                    found = conn.execute(
                        "SELECT 1 FROM categories WHERE id = ?",
                        (new.category_id,),
                    ).fetchone()
                    if found is None:
                        raise CategoryNotFoundError(
                            f"Category with ID {new.category_id} not found"
                        )

                conn.execute(
                    """
                    INSERT INTO transactions (
                        id, user_id, category_id, amount, description,
                        type, transaction_date
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        transaction_id,
                        user_id,
                        new.category_id,
                        str(new.amount), # Store as string for precision
                        new.description,
                        new.type.value,
                        new.transaction_date.isoformat(),
                    ),
                )

                row = conn.execute(
                    f"""
                    SELECT {_TRANSACTION_COLUMNS}
                    FROM transactions t
                    LEFT JOIN categories c ON c.id = t.category_id
                    WHERE t.id = ?
                    """,
                    (transaction_id,),
                ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e

        logger.debug("Inserted transaction {} for user {}", transaction_id, user_id)
        return self._row_to_transaction(row)

    def seed_categories(self, categories: List[Dict[str, Any]]) -> int:
        """
        Insert categories that don't exist yet, matched by name.

        Args:
            categories: Dicts with name, type and optional icon/color

        Returns:
            Number of categories inserted
        """
        inserted = 0
        with self.db.transaction() as conn:
            for category in categories:
                cursor = conn.execute(
                    """
                    INSERT OR IGNORE INTO categories (id, name, icon, type, color)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        str(uuid.uuid4()),
                        category["name"],
                        category.get("icon"),
                        TransactionType(category["type"]).value,
                        category.get("color"),
                    ),
                )
                inserted += cursor.rowcount
        return inserted

    def get_or_create_user(self, email: str) -> User:
        with self.db.transaction() as conn:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
            if row is None:
                user_id = str(uuid.uuid4())
                conn.execute("INSERT INTO users (id, email) VALUES (?, ?)", (user_id, email))
                logger.info("Created user {}", email)
                return User(id=user_id, email=email)
        return User(id=row["id"], email=row["email"])

    def get_user(self, user_id: str) -> Optional[User]:
        with self.db.reading() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        if row is None:
            return None
        return User(id=row["id"], email=row["email"])

    def _row_to_transaction(self, row: sqlite3.Row) -> Transaction:
        """Convert a joined database row to a Transaction."""
        category = None
        if row["category_name"] is not None:
            category = CategoryRef(
                name=row["category_name"],
                icon=row["category_icon"],
                color=row["category_color"],
            )

        return Transaction(
            id=row["id"],
            amount=Decimal(row["amount"]),
            description=row["description"],
            type=TransactionType(row["type"]),
            transaction_date=datetime.fromisoformat(row["transaction_date"]),
            category=category,
        )

    def _row_to_category(self, row: sqlite3.Row) -> Category:
        return Category(
            id=row["id"],
            name=row["name"],
            icon=row["icon"],
            type=TransactionType(row["type"]),
            color=row["color"],
        )
