"""Scheduler protocol for host-clock callbacks.

Trackers never touch the event loop's timers directly. The root hands them a
Scheduler so timers, buffering windows and max-length caps run on whatever
clock the host provides (the asyncio loop in production, a manual clock in
tests).

Usage:
    handle = scheduler.call_every(1.0, tick)
    ...
    handle.cancel()
"""

from typing import Callable, Protocol, runtime_checkable


@runtime_checkable
class ScheduledCall(Protocol):
    """Handle to a pending one-shot or repeating callback."""

    def cancel(self) -> None:
        """Prevent any further invocation. Idempotent."""
        ...


@runtime_checkable
class Scheduler(Protocol):
    """Protocol for delayed and periodic callbacks on the host clock."""

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledCall:
        """Run ``callback`` once after ``delay_seconds``.

        Args:
            delay_seconds: Delay before the call.
            callback: Zero-argument callable.

        Returns:
            Handle that cancels the call.
        """
        ...

    def call_every(self, interval_seconds: float, callback: Callable[[], None]) -> ScheduledCall:
        """Run ``callback`` every ``interval_seconds`` until cancelled.

        The first call happens one interval from now.

        Args:
            interval_seconds: Period between calls.
            callback: Zero-argument callable.

        Returns:
            Handle that stops the repetition.
        """
        ...
