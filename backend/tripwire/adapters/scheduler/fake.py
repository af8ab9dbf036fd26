"""Fake scheduler for testing.

Manual clock: nothing runs until the test advances time, then due callbacks
run in (due time, scheduling order) order.
"""

import heapq
import itertools
from typing import Callable, Optional


class FakeScheduledCall:
    """Handle returned by FakeScheduler."""

    def __init__(
        self,
        scheduler: "FakeScheduler",
        callback: Callable[[], None],
        interval_seconds: Optional[float] = None,
    ) -> None:
        self._scheduler = scheduler
        self.callback = callback
        self.interval_seconds = interval_seconds
        self.cancelled = False

    @property
    def repeating(self) -> bool:
        """True for calls created by ``call_every``."""
        return self.interval_seconds is not None

    def cancel(self) -> None:
        """Prevent any further invocation."""
        self.cancelled = True


class FakeScheduler:
    """Test implementation of Scheduler.

    Usage:
        scheduler = FakeScheduler()
        scheduler.call_every(1.0, tick)
        scheduler.advance(3.0)  # tick ran three times
        assert scheduler.now == 3.0
    """

    def __init__(self) -> None:
        """Initialize the clock at zero with nothing scheduled."""
        self.now = 0.0
        self._queue: list[tuple[float, int, FakeScheduledCall]] = []
        self._sequence = itertools.count()

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> FakeScheduledCall:
        """Schedule a one-shot call."""
        call = FakeScheduledCall(self, callback)
        self._push(self.now + delay_seconds, call)
        return call

    def call_every(
        self, interval_seconds: float, callback: Callable[[], None]
    ) -> FakeScheduledCall:
        """Schedule a repeating call."""
        if interval_seconds <= 0:
            raise ValueError(f"Interval must be positive, got {interval_seconds}")
        call = FakeScheduledCall(self, callback, interval_seconds)
        self._push(self.now + interval_seconds, call)
        return call

    def _push(self, due: float, call: FakeScheduledCall) -> None:
        heapq.heappush(self._queue, (due, next(self._sequence), call))

    # Test helpers

    def advance(self, seconds: float) -> None:
        """Move the clock forward, running every callback that becomes due."""
        deadline = self.now + seconds
        while self._queue and self._queue[0][0] <= deadline:
            due, _, call = heapq.heappop(self._queue)
            if call.cancelled:
                continue
            self.now = due
            if call.repeating:
                self._push(due + call.interval_seconds, call)
            call.callback()
        self.now = deadline

    @property
    def pending(self) -> list[FakeScheduledCall]:
        """Calls that are still scheduled and not cancelled."""
        return [call for _, _, call in sorted(self._queue) if not call.cancelled]
