"""Shared pytest fixtures for dayledger tests."""

import tempfile
import os
import pytest

from dayledger.database.factories import create_sqlite_database
from dayledger.database.local_cache import MemoryCache
from dayledger.domain.aggregation import DailyAggregator
from dayledger.domain.category import CategoryRegistry, CategoryService
from dayledger.domain.entities import CategoryEntry, MainCategory


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def sample_entries():
    """A small category table covering every classification row."""
    return [
        CategoryEntry(item_name="Chicken", main_category=MainCategory.PURCHASES, sub_category="Meat", display_order=1),
        CategoryEntry(item_name="Vegetables", main_category=MainCategory.PURCHASES, display_order=2),
        CategoryEntry(item_name="Spoiled food", main_category=MainCategory.EXPENSES, sub_category="Damage", display_order=10),
        CategoryEntry(item_name="Guest meals", main_category=MainCategory.EXPENSES, sub_category="Hospitality", display_order=11),
        CategoryEntry(item_name="Driver salary", main_category=MainCategory.EXPENSES, sub_category="Payroll", display_order=12),
        CategoryEntry(item_name="Staff meals", main_category=MainCategory.EXPENSES, sub_category="Payroll", display_order=13),
        CategoryEntry(item_name="Freezer", main_category=MainCategory.EXPENSES, sub_category="Assets/Tools", display_order=14),
        CategoryEntry(item_name="Electricity", main_category=MainCategory.EXPENSES, sub_category="Utilities", display_order=15),
    ]


@pytest.fixture
def registry(sample_entries):
    """Registry loaded with the sample categories."""
    return CategoryRegistry(sample_entries)


@pytest.fixture
def aggregator(registry):
    """Aggregator over the sample registry."""
    return DailyAggregator(registry)


@pytest.fixture
def sample_categories(category_service, sample_entries):
    """Store the sample categories in the temporary database."""
    for entry in sample_entries:
        category_service.create_category(
            item_name=entry.item_name,
            main_category=entry.main_category,
            sub_category=entry.sub_category,
            display_order=entry.display_order,
        )
    return category_service.list_categories()


@pytest.fixture
def memory_cache():
    """Empty in-memory local cache."""
    return MemoryCache()


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
