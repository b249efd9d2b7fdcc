"""Conversion between domain entities, SQLAlchemy models and wire rows.

A wire row is the flat dict stored remotely and in the local cache, using
the column names of the ``daily_inventory`` table. The local cache adds
``savedAt``, ``synced`` and ``syncedAt`` to it.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from dayledger.domain import entities as domain
from dayledger.database.models import (
    DailyInventory as ORMDailyInventory,
    ExpenseCategory as ORMExpenseCategory,
)
from dayledger.utils.amount_parser import coerce_amount

TOTAL_COLUMNS = {
    "total_purchases": "purchases",
    "total_damage": "damage",
    "total_salaries": "salaries",
    "total_hospitality": "hospitality",
    "total_employee_meals": "employee_meals",
    "total_assets": "assets",
    "total_expenses": "expenses",
}


def category_to_domain(orm_category: ORMExpenseCategory) -> domain.CategoryEntry:
    """Convert SQLAlchemy ExpenseCategory model to domain CategoryEntry."""
    return domain.CategoryEntry(
        id=orm_category.id,
        item_name=orm_category.item_name,
        main_category=domain.MainCategory(orm_category.main_category),
        sub_category=orm_category.sub_category,
        display_order=orm_category.display_order,
        is_meals_line=orm_category.is_meals_line,
        is_active=orm_category.is_active,
        created_at=orm_category.created_at,
    )


def _totals_from(total_sales: Decimal, values: dict[str, Any]) -> domain.DailyTotals:
    purchases = coerce_amount(values.get("total_purchases"))
    expenses = coerce_amount(values.get("total_expenses"))
    net_cash = total_sales - purchases
    return domain.DailyTotals(
        **{attr: coerce_amount(values.get(column)) for column, attr in TOTAL_COLUMNS.items()},
        net_cash=net_cash,
        net_profit=net_cash - expenses,
    )


def _items_from(raw: Optional[dict[str, Any]]) -> dict[str, Decimal]:
    return {name: coerce_amount(amount) for name, amount in (raw or {}).items()}


def daily_inventory_to_domain(orm_record: ORMDailyInventory) -> domain.DailyInventoryRecord:
    """Convert SQLAlchemy DailyInventory model to a synced domain record."""
    total_sales = coerce_amount(orm_record.total_sales)
    values = {column: getattr(orm_record, column) for column in TOTAL_COLUMNS}
    return domain.DailyInventoryRecord(
        inventory_date=orm_record.inventory_date,
        total_sales=total_sales,
        line_entries=_items_from(orm_record.purchase_items),
        totals=_totals_from(total_sales, values),
        notes=orm_record.notes or "",
        created_by=orm_record.created_by or "",
        sync_state=domain.SyncState.SYNCED,
        updated_at=orm_record.updated_at,
    )


def apply_record_to_orm(record: domain.DailyInventoryRecord, orm_record: ORMDailyInventory) -> None:
    """Copy every persisted field of a domain record onto an ORM row."""
    orm_record.inventory_date = record.inventory_date
    orm_record.total_sales = record.total_sales
    orm_record.purchase_items = {name: float(amount) for name, amount in record.line_entries.items()}
    for column, attr in TOTAL_COLUMNS.items():
        setattr(orm_record, column, getattr(record.totals, attr))
    orm_record.notes = record.notes
    orm_record.created_by = record.created_by


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def record_to_row(record: domain.DailyInventoryRecord) -> dict[str, Any]:
    """Convert a domain record to a JSON-serializable cache row."""
    row: dict[str, Any] = {
        "inventory_date": record.inventory_date.isoformat(),
        "total_sales": float(record.total_sales),
        "purchase_items": {name: float(amount) for name, amount in record.line_entries.items()},
        "notes": record.notes,
        "created_by": record.created_by,
        "updated_at": _iso(record.updated_at),
    }
    for column, attr in TOTAL_COLUMNS.items():
        row[column] = float(getattr(record.totals, attr))
    row["savedAt"] = _iso(record.saved_at)
    row["synced"] = record.sync_state == domain.SyncState.SYNCED
    row["syncedAt"] = _iso(record.synced_at)
    return row


def row_to_record(row: dict[str, Any]) -> domain.DailyInventoryRecord:
    """Convert a cache row back into a domain record.

    Raises:
        ValueError: If the row has no valid ``inventory_date``
    """
    raw_date = row.get("inventory_date")
    if not raw_date:
        raise ValueError("Cache row has no inventory_date")
    inventory_date = date.fromisoformat(raw_date)
    total_sales = coerce_amount(row.get("total_sales"))
    return domain.DailyInventoryRecord(
        inventory_date=inventory_date,
        total_sales=total_sales,
        line_entries=_items_from(row.get("purchase_items")),
        totals=_totals_from(total_sales, row),
        notes=row.get("notes") or "",
        created_by=row.get("created_by") or "",
        sync_state=domain.SyncState.SYNCED if row.get("synced") else domain.SyncState.PENDING,
        saved_at=_parse_datetime(row.get("savedAt")),
        synced_at=_parse_datetime(row.get("syncedAt")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )
