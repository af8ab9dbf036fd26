"""In-process fan-out notifier.

Synchronous counterpart of an event bus: a value passed to ``fire`` is
delivered to every current subscriber, in registration order, before ``fire``
returns.
"""

import logging
from typing import Callable, Generic, TypeVar

# Use standard logging to avoid circular import with tripwire.core.logging
logger = logging.getLogger(__name__)

T = TypeVar("T")

Unlisten = Callable[[], None]


class _Subscription(Generic[T]):
    """Identity wrapper so the same handler can be subscribed more than once."""

    __slots__ = ("handler",)

    def __init__(self, handler: Callable[[T], None]) -> None:
        self.handler = handler


class Notifier(Generic[T]):
    """Ordered multi-subscriber broadcast.

    Re-entrant safe: a subscriber added while ``fire`` runs is not called by
    that ``fire``; a subscriber removed while ``fire`` runs is not called
    afterwards by it. A failing subscriber is logged and does not stop delivery
    to the others.

    Usage:
        clicks = Notifier()
        unlisten = clicks.subscribe(on_click)
        clicks.fire(event)
        unlisten()
    """

    def __init__(self) -> None:
        """Initialize with no subscribers."""
        self._subscriptions: list[_Subscription[T]] = []

    def __len__(self) -> int:
        """Number of current subscribers."""
        return len(self._subscriptions)

    def subscribe(self, handler: Callable[[T], None]) -> Unlisten:
        """Register a handler.

        Args:
            handler: Called with each fired value.

        Returns:
            Idempotent callable removing exactly this registration.
        """
        subscription = _Subscription(handler)
        self._subscriptions.append(subscription)

        def unsubscribe() -> None:
            try:
                self._subscriptions.remove(subscription)
            except ValueError:
                pass

        return unsubscribe

    def fire(self, value: T) -> None:
        """Deliver ``value`` to all current subscribers in registration order."""
        for subscription in list(self._subscriptions):
            if subscription not in self._subscriptions:
                continue
            try:
                subscription.handler(value)
            except Exception as e:
                logger.error(f"Notifier: subscriber failed: {e}", exc_info=e)

    def clear_all(self) -> None:
        """Remove every subscriber without calling any of them."""
        self._subscriptions.clear()
