"""Helpers for chaining callbacks onto asyncio awaitables.

Trackers deliver to plain synchronous listeners, so resolution of an element
lookup or readiness signal is observed with done-callbacks rather than by
awaiting inside a task per listener.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

# Use standard logging to avoid circular import with tripwire.core.logging
logger = logging.getLogger(__name__)

T = TypeVar("T")


def resolved(value: Any = None) -> "asyncio.Future[Any]":
    """Return a future that is already resolved with ``value``."""
    future = asyncio.get_running_loop().create_future()
    future.set_result(value)
    return future


def when_resolved(
    awaitable: Awaitable[T],
    callback: Callable[[T], None],
    *,
    is_active: Optional[Callable[[], bool]] = None,
) -> "asyncio.Future[T]":
    """Call ``callback(result)`` once ``awaitable`` resolves successfully.

    Cancellation and failure are terminal: the callback is never called. A
    failure is logged at debug level, since a selector that matches nothing or
    an element that went away is expected input, not a crash.

    Args:
        awaitable: Future, task or coroutine to observe.
        callback: Receives the resolved value.
        is_active: Checked right before ``callback``; returning False turns the
            resolution into a no-op (used by unsubscribe before resolution).

    Returns:
        The future being observed, so callers can chain further.
    """
    future = asyncio.ensure_future(awaitable)

    def _on_done(done: "asyncio.Future[T]") -> None:
        if done.cancelled():
            return
        error = done.exception()
        if error is not None:
            logger.debug(f"Resolution failed, nothing will fire: {error!r}")
            return
        if is_active is not None and not is_active():
            return
        callback(done.result())

    future.add_done_callback(_on_done)
    return future


def first_completed(first: Awaitable[Any], second: Awaitable[Any]) -> "asyncio.Future[Any]":
    """Race two awaitables; the first to settle decides the outcome.

    The loser is neither awaited nor cancelled. Its eventual outcome is
    consumed so an exception on it is never reported as unretrieved.
    """
    loop = asyncio.get_running_loop()
    winner: asyncio.Future[Any] = loop.create_future()

    def _settle(done: "asyncio.Future[Any]") -> None:
        if done.cancelled():
            if not winner.done():
                winner.cancel()
            return
        error = done.exception()
        if winner.done():
            return
        if error is not None:
            winner.set_exception(error)
        else:
            winner.set_result(done.result())

    for contender in (first, second):
        asyncio.ensure_future(contender).add_done_callback(_settle)
    return winner
