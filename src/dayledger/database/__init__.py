"""Database layer for dayledger application."""

from dayledger.database.base import Database
from dayledger.database.factories import create_sqlite_database, create_local_cache
from dayledger.database.local_cache import LocalCache, MemoryCache, JsonFileCache

__all__ = [
    "Database",
    "create_sqlite_database",
    "create_local_cache",
    "LocalCache",
    "MemoryCache",
    "JsonFileCache",
]
