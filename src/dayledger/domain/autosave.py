"""Debounced autosave."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from dayledger.domain.errors import DomainError

logger = logging.getLogger(__name__)


class AutoSaver:
    """Runs a save callback once edits have been quiet for ``delay`` seconds.

    Every :meth:`trigger` cancels the pending timer before scheduling a new
    one, so a burst of keystrokes produces a single save. While suspended,
    triggers are ignored; use this around programmatic form repopulation.
    Must be used from a running asyncio event loop.
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[Any]],
        delay: float = 2.0,
        grace: float = 0.5,
    ):
        self.callback = callback
        self.delay = delay
        self.grace = grace
        self._enabled = True
        self._timer: Optional[asyncio.TimerHandle] = None
        self._resume_timer: Optional[asyncio.TimerHandle] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def pending(self) -> bool:
        """True while a save is scheduled but has not started."""
        return self._timer is not None

    def trigger(self) -> None:
        """Note an edit and (re)schedule the save."""
        if not self._enabled:
            logger.debug("Autosave suspended, ignoring edit")
            return
        self.cancel()
        self._timer = asyncio.get_running_loop().call_later(self.delay, self._fire)

    def cancel(self) -> None:
        """Drop the scheduled save, if any."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        self._timer = None
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        try:
            await self.callback()
        except DomainError as e:
            # the coordinator has already flagged the error status
            logger.error("Autosave failed: %s", e)

    async def flush(self) -> None:
        """Run a scheduled save now and wait for any save in progress."""
        if self._timer is not None:
            self.cancel()
            await self._run()
        elif self._task is not None and not self._task.done():
            await self._task

    def suspend(self) -> None:
        """Stop reacting to edits and drop any scheduled save."""
        if self._resume_timer is not None:
            self._resume_timer.cancel()
            self._resume_timer = None
        self._enabled = False
        self.cancel()

    def resume(self, grace: Optional[float] = None) -> None:
        """Re-enable autosave after ``grace`` seconds (default ``self.grace``)."""
        grace = self.grace if grace is None else grace
        if self._resume_timer is not None:
            self._resume_timer.cancel()
            self._resume_timer = None
        if grace <= 0:
            self._enabled = True
            return
        self._resume_timer = asyncio.get_running_loop().call_later(grace, self._enable)

    def _enable(self) -> None:
        self._resume_timer = None
        self._enabled = True
        logger.debug("Autosave re-enabled")
