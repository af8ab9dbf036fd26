"""Asyncio scheduler implementation.

Runs callbacks on the running event loop's clock. Repetition is built from
successive ``call_later`` handles, so cancelling a repeating call between two
ticks leaves nothing scheduled.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Optional

from tripwire.core.logging import logger

scheduler_logger = logger.with_prefix("AsyncioScheduler: ").with_context(
    component="asyncio_scheduler"
)


class _RepeatingCall:
    """Re-arms itself after each tick until cancelled."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval_seconds: float,
        callback: Callable[[], None],
    ) -> None:
        self._loop = loop
        self._interval = interval_seconds
        self._callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._cancelled = False
        self._arm()

    def _arm(self) -> None:
        self._handle = self._loop.call_later(self._interval, self._tick)

    def _tick(self) -> None:
        if self._cancelled:
            return
        # Re-arm first so a callback that cancels us is not undone afterwards.
        self._arm()
        try:
            self._callback()
        except Exception as e:
            scheduler_logger.error(f"Repeating callback failed: {e}", exc_info=e)

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class AsyncioScheduler:
    """Scheduler on the asyncio event loop.

    Implements the Scheduler protocol. The loop is looked up when a call is
    scheduled, so one instance can be created before the loop starts.

    Usage:
        scheduler = AsyncioScheduler()
        handle = scheduler.call_every(0.5, tick)
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """Initialize the scheduler.

        Args:
            loop: Loop to schedule on. Defaults to the running loop at call time.
        """
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        """Run ``callback`` once after ``delay_seconds``."""
        return self._get_loop().call_later(delay_seconds, callback)

    def call_every(self, interval_seconds: float, callback: Callable[[], None]) -> _RepeatingCall:
        """Run ``callback`` every ``interval_seconds`` until cancelled."""
        if interval_seconds <= 0:
            raise ValueError(f"Interval must be positive, got {interval_seconds}")
        return _RepeatingCall(self._get_loop(), interval_seconds, callback)
