"""Abstract remote record store interface."""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Optional

from dayledger.domain.entities import CategoryEntry, DailyInventoryRecord, MainCategory


class Database(ABC):
    """Abstract database interface for dayledger.

    Daily record operations raise ``RemoteSyncFailure`` when the store
    cannot be reached or rejects the call.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        item_name: str,
        main_category: MainCategory,
        sub_category: Optional[str] = None,
        display_order: int = 0,
        is_meals_line: Optional[bool] = None,
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category_by_item(self, item_name: str) -> Optional[CategoryEntry]:
        """Get the active category for an item name."""
        pass

    @abstractmethod
    def fetch_categories(self, include_inactive: bool = False) -> list[CategoryEntry]:
        """List categories ordered by display order, then item name."""
        pass

    @abstractmethod
    def update_category(
        self,
        category_id: int,
        main_category: Optional[MainCategory] = None,
        sub_category: Optional[str] = None,
        display_order: Optional[int] = None,
        is_meals_line: Optional[bool] = None,
        update_meals_flag: bool = False,
    ) -> None:
        """Update the given fields of a category. None leaves a field unchanged.

        Args:
            update_meals_flag: If True, update is_meals_line even if it's None (to clear it)
        """
        pass

    @abstractmethod
    def deactivate_category(self, category_id: int) -> None:
        """Soft-delete a category."""
        pass

    # Daily record operations
    @abstractmethod
    def upsert_daily_record(self, record: DailyInventoryRecord) -> datetime:
        """Insert or replace the record for ``record.inventory_date``.

        Last write wins. Returns the server-side ``updated_at`` timestamp.
        """
        pass

    @abstractmethod
    def get_daily_record(self, inventory_date: date) -> Optional[DailyInventoryRecord]:
        """Get the record for a date, or None."""
        pass

    @abstractmethod
    def list_daily_records(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
        newest_first: bool = False,
    ) -> list[DailyInventoryRecord]:
        """List records in an inclusive date range.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter
            limit: Optional maximum number of records
            newest_first: Order by date descending instead of ascending
        """
        pass

    @abstractmethod
    def delete_daily_record(self, inventory_date: date) -> bool:
        """Delete the record for a date. Returns True if a row was removed."""
        pass
