"""EventTracker contract.

A tracker tracks all events of one kind for a single analytics root. The
registry creates at most one tracker per (root, kind); triggers subscribe to it
with ``add`` and the root disposes it on teardown.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Mapping, Protocol, Union, runtime_checkable

from tripwire.core.events import AnalyticsEvent
from tripwire.core.protocols import AnalyticsRoot, Element
from tripwire.domains.triggers.config import TriggerConfig

Listener = Callable[[AnalyticsEvent], None]
Unlisten = Callable[[], None]
TriggerConfigLike = Union[TriggerConfig, Mapping[str, Any], None]


def no_unlisten() -> None:
    """Unsubscribe handle for registrations with nothing to tear down."""


def scope_of(context: Element) -> Element:
    """Element selectors are resolved under: the context's parent if any."""
    return getattr(context, "parent_element", None) or context


class EventTracker(ABC):
    """Base class for all trackers.

    Attributes:
        root: The analytics root this tracker is bound to. Shared, not owned.
    """

    def __init__(self, root: AnalyticsRoot) -> None:
        """Bind the tracker to its root."""
        self.root = root

    @abstractmethod
    def dispose(self) -> None:
        """Release listeners, timers and buffers. Called once, at root teardown."""

    @abstractmethod
    def add(
        self,
        context: Element,
        event_type: str,
        config: TriggerConfigLike,
        listener: Listener,
    ) -> Unlisten:
        """Register ``listener`` for ``event_type`` occurrences.

        Args:
            context: Element relative selectors are resolved against.
            event_type: The trigger's ``on`` value.
            config: Trigger configuration, raw mapping or parsed.
            listener: Receives one AnalyticsEvent per occurrence.

        Returns:
            Idempotent callable removing exactly this registration, safe to
            call before any asynchronous target resolution has finished.

        Raises:
            ConfigurationError: If the configuration is invalid for this kind.
        """


@runtime_checkable
class SignalTrackerProtocol(Protocol):
    """Trackers whose readiness can gate other trackers (``waitFor``)."""

    def get_root_signal(self, event_type: str) -> Awaitable[Any]:
        """Resolves when the root reaches the tracked milestone."""
        ...

    def get_element_signal(self, event_type: str, element: Any) -> Awaitable[Any]:
        """Resolves when ``element`` reaches the tracked milestone."""
        ...


class Registration:
    """Liveness flag of a single ``add`` call.

    Asynchronous continuations check ``active`` before delivering, which is
    how unsubscribing before resolution turns the resolution into a no-op.
    """

    __slots__ = ("active", "_teardown")

    def __init__(self, teardown: Unlisten = no_unlisten) -> None:
        self.active = True
        self._teardown = teardown

    def is_active(self) -> bool:
        return self.active

    def bind(self, teardown: Unlisten) -> None:
        """Set what ``unlisten`` tears down besides deactivating."""
        self._teardown = teardown

    def unlisten(self) -> None:
        """Deactivate and tear down. Idempotent."""
        if not self.active:
            return
        self.active = False
        self._teardown()
