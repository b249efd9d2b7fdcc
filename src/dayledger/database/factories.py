"""Factory functions for the remote store and the local cache."""

from typing import Optional

from dayledger.config import Settings
from dayledger.database.local_cache import JsonFileCache
from dayledger.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks
            DAYLEDGER_DB_PATH, then defaults to ~/.dayledger/dayledger.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    settings = Settings.from_env().with_overrides(database_path=database_path)
    return SQLAlchemyDatabase(f"sqlite:///{settings.resolve_database_path()}")


def create_local_cache(cache_dir: Optional[str] = None) -> JsonFileCache:
    """Create the JSON file cache.

    Args:
        cache_dir: Cache directory. If None, checks DAYLEDGER_CACHE_DIR,
            then defaults to ~/.dayledger/cache
    """
    settings = Settings.from_env().with_overrides(cache_dir=cache_dir)
    return JsonFileCache(settings.resolve_cache_dir())
