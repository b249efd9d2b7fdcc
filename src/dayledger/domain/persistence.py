"""Offline-first persistence of daily inventory records.

Every save lands in the local cache first and is marked pending. When the
connectivity flag is up the record is pushed to the remote store with an
upsert keyed by date; failures leave it pending for the periodic retry.

Per-date states: UNSAVED -> PENDING -> SYNCING -> SYNCED. A failed upload
goes back to PENDING, and any local edit puts a SYNCED record back to
PENDING.
"""

import asyncio
import contextlib
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import date, datetime, UTC
from typing import Any, Callable, Iterable, Optional

from dayledger.config import Settings
from dayledger.database.base import Database
from dayledger.database.local_cache import KEY_PREFIX, LocalCache, cache_key
from dayledger.database.mappers import record_to_row, row_to_record
from dayledger.domain.aggregation import DailyAggregator, collect_line_items
from dayledger.domain.entities import (
    DailyInventoryRecord,
    DailyTotals,
    LineEntry,
    SaveStatus,
    SyncState,
)
from dayledger.domain.errors import (
    LocalWriteFailure,
    RemoteSyncFailure,
    ValidationError,
    local_write_failed,
)
from dayledger.utils.amount_parser import coerce_amount

logger = logging.getLogger(__name__)

# Errors that mean "remote store unavailable right now"
REMOTE_ERRORS = (RemoteSyncFailure, TimeoutError, OSError)


class Connectivity:
    """Online flag fed by the runtime's network events."""

    def __init__(self, online: bool = True):
        self._online = online
        self._listeners: list[Callable[[bool], None]] = []

    @property
    def online(self) -> bool:
        return self._online

    def set_online(self, online: bool) -> None:
        """Update the flag and notify listeners if it changed."""
        if online == self._online:
            return
        self._online = online
        logger.info("Connectivity changed: %s", "online" if online else "offline")
        for listener in list(self._listeners):
            listener(online)

    def subscribe(self, listener: Callable[[bool], None]) -> None:
        self._listeners.append(listener)


class InventoryCoordinator:
    """Saves, loads, syncs and deletes daily records.

    Remote calls run one at a time on a dedicated worker thread and are
    bounded by ``settings.remote_timeout``. Must be used from a running
    asyncio event loop.
    """

    def __init__(
        self,
        db: Database,
        cache: LocalCache,
        aggregator: DailyAggregator,
        connectivity: Optional[Connectivity] = None,
        settings: Optional[Settings] = None,
        on_status: Optional[Callable[[SaveStatus], None]] = None,
    ):
        self.db = db
        self.cache = cache
        self.aggregator = aggregator
        self.connectivity = connectivity or Connectivity()
        self.settings = settings or Settings()
        self.on_status = on_status
        self.status: Optional[SaveStatus] = None

        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="dayledger-remote")
        self._in_flight: set[date] = set()
        self._resync_requested: set[date] = set()
        self._tasks: set[asyncio.Task] = set()
        self._background: Optional[asyncio.Task] = None

        self.connectivity.subscribe(self._on_connectivity_change)

    def _set_status(self, status: SaveStatus) -> None:
        self.status = status
        if self.on_status is not None:
            self.on_status(status)

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _remote(self, func: Callable[..., Any], *args: Any) -> Any:
        loop = asyncio.get_running_loop()
        call = loop.run_in_executor(self._executor, functools.partial(func, *args))
        try:
            return await asyncio.wait_for(call, timeout=self.settings.remote_timeout)
        except asyncio.TimeoutError:
            raise RemoteSyncFailure(
                f"Remote store did not answer within {self.settings.remote_timeout}s"
            )

    def _on_connectivity_change(self, online: bool) -> None:
        if not online:
            return
        try:
            self._spawn(self.sync_pending())
        except RuntimeError:
            logger.debug("No running event loop, pending records sync on next scan")

    # Local cache
    def cached_record(self, inventory_date: date) -> Optional[DailyInventoryRecord]:
        """Return the locally cached record for a date, if readable."""
        try:
            row = self.cache.get(cache_key(inventory_date))
            return row_to_record(row) if row is not None else None
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable cache entry for %s: %s", inventory_date, e)
            return None

    def _write_local(self, record: DailyInventoryRecord) -> None:
        try:
            self.cache.set(cache_key(record.inventory_date), record_to_row(record))
        except LocalWriteFailure as e:
            logger.error("Local save failed for %s", record.inventory_date, exc_info=True)
            self._set_status(SaveStatus.ERROR)
            raise LocalWriteFailure(local_write_failed(record.inventory_date, e)) from e

    def sync_state(self, inventory_date: date) -> SyncState:
        """Return the current sync state of a date."""
        if inventory_date in self._in_flight:
            return SyncState.SYNCING
        record = self.cached_record(inventory_date)
        if record is None:
            return SyncState.UNSAVED
        return record.sync_state

    # Saving
    def build_record(
        self,
        inventory_date: date,
        total_sales: Any,
        totals: DailyTotals,
        raw_entries: Iterable[LineEntry],
        notes: str = "",
        created_by: Optional[str] = None,
    ) -> DailyInventoryRecord:
        """Assemble a pending record; blank and zero entries are dropped.

        Raises:
            ValidationError: If the totals were not computed from these sales
        """
        sales = coerce_amount(total_sales)
        if totals.net_cash != sales - totals.purchases:
            raise ValidationError(
                f"Totals for {inventory_date} do not match sales {sales}: "
                f"net cash {totals.net_cash} with purchases {totals.purchases}"
            )
        return DailyInventoryRecord(
            inventory_date=inventory_date,
            total_sales=sales,
            line_entries=collect_line_items(raw_entries),
            totals=totals,
            notes=(notes or "").strip(),
            created_by=created_by or self.settings.default_user,
            sync_state=SyncState.PENDING,
            saved_at=datetime.now(UTC),
        )

    async def save(
        self,
        inventory_date: date,
        total_sales: Any,
        totals: DailyTotals,
        raw_entries: Iterable[LineEntry],
        *,
        notes: str = "",
        created_by: Optional[str] = None,
    ) -> DailyInventoryRecord:
        """Save a day locally, then try to push it to the remote store.

        The local write happens before any network call. A remote failure
        is logged and leaves the record pending; it is never raised.

        Returns:
            The record as it stands after the attempt (PENDING or SYNCED)

        Raises:
            ValidationError: If the totals were not computed from these sales
            LocalWriteFailure: If the local cache rejected the write
        """
        record = self.build_record(
            inventory_date,
            total_sales,
            totals,
            raw_entries,
            notes=notes,
            created_by=created_by,
        )
        self._set_status(SaveStatus.SAVING)
        self._write_local(record)
        logger.info("Saved %s locally", inventory_date)

        if not self.connectivity.online:
            self._set_status(SaveStatus.OFFLINE)
            return record

        if await self.sync(inventory_date):
            return self.cached_record(inventory_date) or record
        return record

    async def save_entries(
        self,
        inventory_date: date,
        sales: Any,
        entries: Iterable[LineEntry],
        notes: str = "",
        created_by: Optional[str] = None,
    ) -> DailyInventoryRecord:
        """Compute totals with the shared aggregator and save the day."""
        entries = list(entries)
        totals = self.aggregator.aggregate(sales, entries)
        return await self.save(
            inventory_date,
            sales,
            totals,
            entries,
            notes=notes,
            created_by=created_by,
        )

    # Syncing
    async def sync(self, inventory_date: date) -> bool:
        """Push one pending record to the remote store.

        At most one upload per date runs at a time; a request arriving
        while one is running is folded into a single follow-up upload.

        Returns:
            True if the record is now synced
        """
        if not self.connectivity.online:
            return False
        if inventory_date in self._in_flight:
            self._resync_requested.add(inventory_date)
            return False

        record = self.cached_record(inventory_date)
        if record is None:
            return False
        if record.sync_state == SyncState.SYNCED:
            return True

        self._in_flight.add(inventory_date)
        try:
            updated_at = await self._remote(self.db.upsert_daily_record, record)
        except REMOTE_ERRORS as e:
            logger.warning("Sync of %s failed, will retry: %s", inventory_date, e)
            self._resync_requested.discard(inventory_date)
            self._set_status(SaveStatus.OFFLINE)
            return False
        finally:
            self._in_flight.discard(inventory_date)

        synced = self._mark_synced(record, updated_at)
        if inventory_date in self._resync_requested:
            self._resync_requested.discard(inventory_date)
            return await self.sync(inventory_date)
        return synced

    def _mark_synced(self, uploaded: DailyInventoryRecord, updated_at: datetime) -> bool:
        current = self.cached_record(uploaded.inventory_date)
        if current is None or current.saved_at != uploaded.saved_at:
            # deleted or re-saved while the upload was running
            return False
        synced = replace(
            current,
            sync_state=SyncState.SYNCED,
            synced_at=datetime.now(UTC),
            updated_at=updated_at,
        )
        try:
            self.cache.set(cache_key(current.inventory_date), record_to_row(synced))
        except LocalWriteFailure as e:
            logger.warning("Synced %s but could not update local flag: %s", current.inventory_date, e)
            return False
        logger.info("Synced %s with remote store", current.inventory_date)
        self._set_status(SaveStatus.SAVED)
        return True

    def pending_dates(self) -> list[date]:
        """Return dates whose cached record is still pending."""
        dates = []
        for key in self.cache.keys():
            if not key.startswith(KEY_PREFIX):
                continue
            try:
                inventory_date = date.fromisoformat(key[len(KEY_PREFIX):])
            except ValueError:
                continue
            record = self.cached_record(inventory_date)
            if record is not None and record.sync_state == SyncState.PENDING:
                dates.append(inventory_date)
        return sorted(dates)

    async def sync_pending(self) -> int:
        """Retry every pending record. Returns how many got synced."""
        if not self.connectivity.online:
            return 0
        synced = 0
        for inventory_date in self.pending_dates():
            if await self.sync(inventory_date):
                synced += 1
        if synced:
            logger.info("Synced %d pending record(s)", synced)
        return synced

    def start_background_sync(self) -> None:
        """Start the periodic pending-record scan."""
        if self._background is not None and not self._background.done():
            return
        self._background = asyncio.get_running_loop().create_task(self._sync_loop())

    async def _sync_loop(self) -> None:
        while True:
            await asyncio.sleep(self.settings.sync_interval)
            if self.connectivity.online:
                await self.sync_pending()

    async def stop_background_sync(self) -> None:
        """Stop the periodic scan."""
        if self._background is None:
            return
        self._background.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._background
        self._background = None

    # Loading and deleting
    async def load(self, inventory_date: date) -> Optional[DailyInventoryRecord]:
        """Load a day for display.

        A pending local copy wins over the remote one, since it holds
        edits the remote store has not seen. Otherwise the remote record
        refreshes the cache. When the remote store cannot be reached the
        cached copy (if any) is returned.
        """
        local = self.cached_record(inventory_date)
        if local is not None and local.sync_state == SyncState.PENDING:
            if self.connectivity.online:
                self._spawn(self.sync(inventory_date))
            return local

        if not self.connectivity.online:
            return local

        try:
            remote = await self._remote(self.db.get_daily_record, inventory_date)
        except REMOTE_ERRORS as e:
            logger.warning("Could not load %s from remote store: %s", inventory_date, e)
            return local
        if remote is None:
            return local

        now = datetime.now(UTC)
        record = replace(remote, sync_state=SyncState.SYNCED, saved_at=now, synced_at=now)
        try:
            self.cache.set(cache_key(inventory_date), record_to_row(record))
        except LocalWriteFailure as e:
            logger.warning("Could not cache %s locally: %s", inventory_date, e)
        return record

    async def delete(self, inventory_date: date) -> bool:
        """Delete a day from the remote store and the local cache.

        The local copy is only removed once the remote delete succeeded.

        Returns:
            True if a remote row was removed

        Raises:
            RemoteSyncFailure: If offline or the remote delete failed
        """
        if not self.connectivity.online:
            raise RemoteSyncFailure(f"Cannot delete {inventory_date} while offline")
        removed = await self._remote(self.db.delete_daily_record, inventory_date)
        self.cache.remove(cache_key(inventory_date))
        self._resync_requested.discard(inventory_date)
        logger.info("Deleted %s", inventory_date)
        return removed

    async def history(self, limit: int = 30) -> list[DailyInventoryRecord]:
        """Latest remote records, newest first.

        Raises:
            RemoteSyncFailure: If the remote store cannot be reached
        """
        return await self._remote(self.db.list_daily_records, None, None, limit, True)

    async def close(self) -> None:
        """Stop background work and release the worker thread."""
        await self.stop_background_sync()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._executor.shutdown(wait=True)
