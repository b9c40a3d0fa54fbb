#!/usr/bin/env python3
"""
Initialize the finance dashboard database.

Run this script to create the database schema and seed the default categories.
"""
from finance_dashboard.config.settings import ConfigLoader
from finance_dashboard.database.connection import DatabaseConfig, DatabaseManager, SCHEMA_PATH, execute_schema
from finance_dashboard.repositories.sqlite_store import SQLiteTransactionStore

def main():
    """initialize the database."""
    settings = ConfigLoader.load_settings()

    # Create database
    config = DatabaseConfig(settings.db_path)
    print(f"Initializing database at: {config.db_path}")

    with DatabaseManager(config) as db:
        conn = db.get_connection()

        print(f"Executing schema from: {SCHEMA_PATH}")
        execute_schema(conn)

        inserted = SQLiteTransactionStore(db).seed_categories(
            ConfigLoader.load_default_categories()
        )

        row = conn.execute(
            "SELECT version, description FROM schema_version ORDER BY version DESC LIMIT 1"
        ).fetchone()

        if row:
            print(f"✓ Database initialized successfully!")
            print(f"  Schema version: {row['version']}")
            print(f"  Description: {row['description']}")
            print(f"  Categories seeded: {inserted}")
        else:
            print("✗ Database initialization may have failed")

if __name__ == "__main__":
    main()
