"""Database layer for storeledger application."""

from storeledger.database.base import Database
from storeledger.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
