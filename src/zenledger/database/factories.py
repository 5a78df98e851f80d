"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from zenledger.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks ZENLEDGER_DB_PATH
            environment variable, then defaults to ~/.zenledger/zenledger.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("ZENLEDGER_DB_PATH")

    if database_path is None:
        db_dir = Path.home() / ".zenledger"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "zenledger.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)


def create_memory_database() -> SQLAlchemyDatabase:
    """Create an in-memory SQLite database, useful for scratch ledgers and tests."""
    return SQLAlchemyDatabase("sqlite://")
