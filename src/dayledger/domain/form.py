"""State of the daily inventory form, independent of any UI toolkit."""

from datetime import date
from typing import Any, Optional

from dayledger.config import Settings
from dayledger.domain.autosave import AutoSaver
from dayledger.domain.entities import DailyInventoryRecord, DailyTotals, LineEntry
from dayledger.domain.persistence import InventoryCoordinator


class DailyForm:
    """Holds what the user typed for one day and keeps it saved.

    Edits go through the ``set_*`` methods, which schedule a debounced
    save. :meth:`live_totals` is what the on-screen totals show.
    """

    def __init__(
        self,
        coordinator: InventoryCoordinator,
        inventory_date: date,
        settings: Optional[Settings] = None,
        created_by: Optional[str] = None,
    ):
        self.coordinator = coordinator
        self.settings = settings or coordinator.settings
        self.inventory_date = inventory_date
        self.created_by = created_by or self.settings.default_user
        self.sales: Any = ""
        self.amounts: dict[str, Any] = {}
        self.notes = ""
        self.autosaver = AutoSaver(
            self.save,
            delay=self.settings.autosave_delay,
            grace=self.settings.autosave_grace,
        )

    def entries(self) -> list[LineEntry]:
        return [LineEntry(item_name=name, amount=value) for name, value in self.amounts.items()]

    def live_totals(self) -> DailyTotals:
        """Totals for what is currently on the form."""
        return self.coordinator.aggregator.aggregate(self.sales, self.entries())

    def set_sales(self, value: Any) -> None:
        self.sales = value
        self.autosaver.trigger()

    def set_amount(self, item_name: str, value: Any) -> None:
        self.amounts[item_name] = value
        self.autosaver.trigger()

    def set_notes(self, notes: str) -> None:
        self.notes = notes
        self.autosaver.trigger()

    async def save(self) -> DailyInventoryRecord:
        """Save the form now.

        Raises:
            LocalWriteFailure: If the local cache rejected the write; the
                form keeps its values
        """
        return await self.coordinator.save_entries(
            self.inventory_date,
            self.sales,
            self.entries(),
            notes=self.notes,
            created_by=self.created_by,
        )

    def populate(self, record: Optional[DailyInventoryRecord]) -> None:
        """Fill the form from a record, or blank it for None.

        Does not schedule a save; callers suspend autosave around it.
        """
        if record is None:
            self.sales = ""
            self.amounts = {}
            self.notes = ""
            return
        self.sales = record.total_sales if record.total_sales > 0 else ""
        self.amounts = dict(record.line_entries)
        self.notes = record.notes

    def clear(self) -> None:
        """Blank the form and drop any scheduled save."""
        self.autosaver.cancel()
        self.populate(None)

    async def switch_date(self, inventory_date: date) -> Optional[DailyInventoryRecord]:
        """Show another day.

        Pending edits for the current day are saved first. Autosave is
        suspended while the form is repopulated and comes back after the
        grace period.
        """
        await self.autosaver.flush()
        self.autosaver.suspend()
        try:
            self.inventory_date = inventory_date
            record = await self.coordinator.load(inventory_date)
            self.populate(record)
        finally:
            self.autosaver.resume()
        return record

    async def delete(self) -> bool:
        """Delete the displayed day and blank the form.

        Raises:
            RemoteSyncFailure: If offline or the remote delete failed
        """
        self.autosaver.suspend()
        try:
            removed = await self.coordinator.delete(self.inventory_date)
            self.clear()
        finally:
            self.autosaver.resume()
        return removed
