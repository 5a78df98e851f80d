"""Database layer for zenledger application."""

from zenledger.database.base import Database
from zenledger.database.factories import create_sqlite_database, create_memory_database

__all__ = ["Database", "create_sqlite_database", "create_memory_database"]
