"""Category registry and category domain service."""

import logging
from typing import Iterable, Optional

from dayledger.database.base import Database
from dayledger.domain.entities import CategoryEntry, MainCategory
from dayledger.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_not_found,
    duplicate_category,
    invalid_main_category,
)

logger = logging.getLogger(__name__)


class CategoryRegistry:
    """In-memory snapshot of the active item → category mapping.

    Loaded once per session and replaced wholesale on explicit refresh.
    """

    def __init__(self, entries: Iterable[CategoryEntry] = ()):
        self._entries: dict[str, CategoryEntry] = {}
        self._reported_unknown: set[str] = set()
        self.reload(entries)

    @classmethod
    def load(cls, db: Database) -> "CategoryRegistry":
        """Build a registry from the category table."""
        return cls(db.fetch_categories())

    def reload(self, entries: Iterable[CategoryEntry]) -> None:
        """Replace the snapshot with ``entries``.

        Inactive entries are skipped. If an item name appears twice the
        first one (in display order) is kept.
        """
        loaded: dict[str, CategoryEntry] = {}
        for entry in sorted(entries, key=lambda e: (e.display_order, e.item_name)):
            if not entry.is_active:
                continue
            if entry.item_name in loaded:
                logger.warning(
                    "Duplicate active category for item %r, keeping the first one",
                    entry.item_name,
                )
                continue
            loaded[entry.item_name] = entry
        self._entries = loaded
        self._reported_unknown.clear()
        logger.info("Loaded %d categories", len(loaded))

    def lookup(self, item_name: str) -> Optional[CategoryEntry]:
        """Return the category for ``item_name`` or None if unknown."""
        return self._entries.get(item_name)

    def report_unknown(self, item_name: str) -> None:
        """Log an unclassified item once per snapshot."""
        if item_name in self._reported_unknown:
            return
        self._reported_unknown.add(item_name)
        logger.warning(
            "Item %r has no category, counting it as a purchase", item_name
        )

    def entries(self) -> list[CategoryEntry]:
        """Return active entries in display order."""
        return list(self._entries.values())

    def group_by_category(self) -> dict[str, dict[Optional[str], list[CategoryEntry]]]:
        """Group entries main category → sub category, in display order."""
        grouped: dict[str, dict[Optional[str], list[CategoryEntry]]] = {}
        for entry in self._entries.values():
            by_sub = grouped.setdefault(entry.main_category.value, {})
            by_sub.setdefault(entry.sub_category, []).append(entry)
        return grouped

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, item_name: object) -> bool:
        return item_name in self._entries


def parse_main_category(value: str | MainCategory) -> MainCategory:
    """Parse a main category name, case-insensitively.

    Raises:
        ValidationError: If the value is not a known main category
    """
    if isinstance(value, MainCategory):
        return value
    for candidate in MainCategory:
        if candidate.value.lower() == value.strip().lower():
            return candidate
    raise ValidationError(invalid_main_category(value))


class CategoryService:
    """Service for managing the category table."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self,
        item_name: str,
        main_category: str | MainCategory,
        sub_category: Optional[str] = None,
        display_order: int = 0,
        is_meals_line: Optional[bool] = None,
    ) -> int:
        """Create a category.

        Args:
            item_name: Item name shown on the daily form
            main_category: "Purchases" or "Expenses"
            sub_category: Optional sub category (e.g., "Damage", "Payroll")
            display_order: Position on the form
            is_meals_line: Explicit staff-meals flag for payroll items

        Returns:
            Category ID

        Raises:
            ValidationError: If the item name is blank or the main category unknown
            ConflictError: If an active category with this item name exists
        """
        item_name = item_name.strip()
        if not item_name:
            raise ValidationError("Item name cannot be empty")
        main = parse_main_category(main_category)

        if self.db.get_category_by_item(item_name) is not None:
            raise ConflictError(duplicate_category(item_name))

        return self.db.create_category(
            item_name=item_name,
            main_category=main,
            sub_category=sub_category or None,
            display_order=display_order,
            is_meals_line=is_meals_line,
        )

    def get_category(self, item_name: str) -> Optional[CategoryEntry]:
        """Get the active category for an item name."""
        return self.db.get_category_by_item(item_name)

    def list_categories(self, include_inactive: bool = False) -> list[CategoryEntry]:
        """List categories in display order."""
        return self.db.fetch_categories(include_inactive=include_inactive)

    def reclassify(
        self,
        item_name: str,
        main_category: Optional[str | MainCategory] = None,
        sub_category: Optional[str] = None,
        display_order: Optional[int] = None,
        is_meals_line: Optional[bool] = None,
        clear_meals_flag: bool = False,
    ) -> CategoryEntry:
        """Change how an item is classified.

        Reports built afterwards use the new classification for every
        stored day, including days saved before the change.

        With ``clear_meals_flag`` the explicit staff-meals flag is removed
        and the item name decides again.

        Raises:
            NotFoundError: If no active category exists for the item
        """
        existing = self.db.get_category_by_item(item_name)
        if existing is None:
            raise NotFoundError(category_not_found(item_name))

        main = parse_main_category(main_category) if main_category is not None else None
        self.db.update_category(
            existing.id,
            main_category=main,
            sub_category=sub_category,
            display_order=display_order,
            is_meals_line=None if clear_meals_flag else is_meals_line,
            update_meals_flag=clear_meals_flag,
        )
        return self.db.get_category_by_item(item_name)

    def deactivate(self, item_name: str) -> None:
        """Soft-delete a category so it no longer appears on the form.

        Raises:
            NotFoundError: If no active category exists for the item
        """
        existing = self.db.get_category_by_item(item_name)
        if existing is None:
            raise NotFoundError(category_not_found(item_name))
        self.db.deactivate_category(existing.id)
