"""Domain model entities for dayledger.

These are pure data classes representing business concepts, independent of
the database schema and of the local cache format. Amounts are always
``Decimal``; conversion from user input happens before they get here.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

ZERO = Decimal("0")


class MainCategory(str, Enum):
    """Top-level category of an item on the daily form."""

    PURCHASES = "Purchases"
    EXPENSES = "Expenses"


class Bucket(str, Enum):
    """Financial accumulator a line entry can contribute to."""

    PURCHASES = "purchases"
    DAMAGE = "damage"
    SALARIES = "salaries"
    HOSPITALITY = "hospitality"
    EMPLOYEE_MEALS = "employee_meals"
    ASSETS = "assets"


class SyncState(str, Enum):
    """Where a daily record stands relative to the remote store."""

    UNSAVED = "unsaved"
    PENDING = "pending"
    SYNCING = "syncing"
    SYNCED = "synced"


class SaveStatus(str, Enum):
    """Save indicator shown next to the daily form."""

    SAVING = "saving"
    SAVED = "saved"
    OFFLINE = "offline"
    ERROR = "error"


@dataclass(frozen=True)
class CategoryEntry:
    """Classification of one item name on the daily form.

    ``is_meals_line`` marks payroll lines that are staff meals rather than
    wages. ``None`` means the flag was never set and the item name decides.
    """

    item_name: str
    main_category: MainCategory
    sub_category: Optional[str] = None
    display_order: int = 0
    is_meals_line: Optional[bool] = None
    is_active: bool = True
    id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class LineEntry:
    """One amount typed against one item for a given day.

    ``amount`` is whatever the form produced; the aggregator coerces it.
    """

    item_name: str
    amount: Any


@dataclass(frozen=True)
class BucketAssignment:
    """Result of classifying one line entry.

    The same amount may appear under two buckets (salaries and assets also
    roll up into purchases).
    """

    item_name: str
    allocations: tuple[tuple[Bucket, Decimal], ...]
    fallback: bool = False

    @property
    def buckets(self) -> frozenset[Bucket]:
        return frozenset(bucket for bucket, _ in self.allocations)

    def amount_for(self, bucket: Bucket) -> Decimal:
        """Return the amount assigned to ``bucket`` (zero if untouched)."""
        return sum((amount for b, amount in self.allocations if b == bucket), ZERO)


@dataclass(frozen=True)
class DailyTotals:
    """Derived totals for a single day."""

    purchases: Decimal = ZERO
    damage: Decimal = ZERO
    salaries: Decimal = ZERO
    hospitality: Decimal = ZERO
    employee_meals: Decimal = ZERO
    assets: Decimal = ZERO
    expenses: Decimal = ZERO
    net_cash: Decimal = ZERO
    net_profit: Decimal = ZERO


@dataclass(frozen=True)
class PeriodSummary:
    """Totals summed over a range of daily records."""

    total_sales: Decimal = ZERO
    purchases: Decimal = ZERO
    damage: Decimal = ZERO
    salaries: Decimal = ZERO
    hospitality: Decimal = ZERO
    employee_meals: Decimal = ZERO
    assets: Decimal = ZERO
    expenses: Decimal = ZERO
    net_cash: Decimal = ZERO
    net_profit: Decimal = ZERO
    day_count: int = 0


@dataclass(frozen=True)
class DailyInventoryRecord:
    """Persisted daily inventory record, keyed by ``inventory_date``."""

    inventory_date: date
    total_sales: Decimal
    line_entries: dict[str, Decimal] = field(default_factory=dict)
    totals: DailyTotals = field(default_factory=DailyTotals)
    notes: str = ""
    created_by: str = "admin"
    sync_state: SyncState = SyncState.PENDING
    saved_at: Optional[datetime] = None
    synced_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def with_sync_state(
        self, sync_state: SyncState, synced_at: Optional[datetime] = None
    ) -> "DailyInventoryRecord":
        """Return a copy with a new sync state."""
        return replace(self, sync_state=sync_state, synced_at=synced_at)


@dataclass(frozen=True)
class DailyPoint:
    """One day of a chart series."""

    inventory_date: date
    sales: Decimal
    purchases: Decimal
    net_profit: Decimal


@dataclass(frozen=True)
class AverageSales:
    """Mean daily sales over recorded days."""

    average: Decimal
    day_count: int
    latest_date: Optional[date]


@dataclass(frozen=True)
class MonthlyDayRow:
    """Per-day row of the monthly report. Days without a record are zero."""

    day: int
    sales: Decimal = ZERO
    purchases: Decimal = ZERO
    expenses: Decimal = ZERO
    assets: Decimal = ZERO
    salaries: Decimal = ZERO
    net_cash: Decimal = ZERO
    net_profit: Decimal = ZERO
    item_amounts: dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class MonthlyReport:
    """Monthly inventory report: day grid, item totals and summary."""

    year: int
    month: int
    days: tuple[MonthlyDayRow, ...]
    item_totals: dict[str, Decimal]
    summary: PeriodSummary

    @property
    def item_names(self) -> list[str]:
        return sorted(self.item_totals)
