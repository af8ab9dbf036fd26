"""Protocols for the host document the engine observes.

The engine does not model a document tree. It only needs elements that can
answer containment, expose ``data-vars-*`` attributes, and optionally expose
lifecycle signals; plus an event target on which host events are dispatched.
"""

from typing import Any, Awaitable, Callable, Mapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class SignalSource(Protocol):
    """One-time, awaitable lifecycle milestones of a root or an element."""

    def when_signal(self, name: str) -> Awaitable[Any]:
        """Return an awaitable that resolves once ``name`` has been signalled.

        Can be asked repeatedly; every awaitable for the same name resolves
        when the signal happens (or immediately if it already did).
        """
        ...


@runtime_checkable
class Element(Protocol):
    """A node of the host document."""

    @property
    def parent_element(self) -> Optional["Element"]:
        """The enclosing element, or None at the top."""
        ...

    @property
    def dataset(self) -> Mapping[str, str]:
        """``data-*`` attributes keyed by camel-cased name (``varsFooBar``)."""
        ...

    def contains(self, other: Any) -> bool:
        """True if ``other`` is this element or one of its descendants."""
        ...


@runtime_checkable
class SignalingElement(Element, Protocol):
    """An element that exposes lifecycle signals."""

    def signals(self) -> SignalSource:
        """Return the element's signal source."""
        ...


@runtime_checkable
class HostEvent(Protocol):
    """An event dispatched by the host (click, video session event, ...)."""

    @property
    def type(self) -> str:
        """Event type name."""
        ...

    @property
    def target(self) -> Any:
        """Element the event originated from."""
        ...

    @property
    def detail(self) -> Mapping[str, Any]:
        """Event payload, empty when the event carries none."""
        ...


HostEventListener = Callable[[HostEvent], None]


@runtime_checkable
class EventTarget(Protocol):
    """Anchor on which host events are delegated."""

    def add_event_listener(self, event_type: str, listener: HostEventListener) -> None:
        """Listen for ``event_type`` events."""
        ...

    def remove_event_listener(self, event_type: str, listener: HostEventListener) -> None:
        """Stop listening. Unknown listeners are ignored."""
        ...


@runtime_checkable
class Viewer(Protocol):
    """Page visibility (foreground/background) of the host."""

    def is_visible(self) -> bool:
        """True while the page is in the foreground."""
        ...

    def on_visibility_changed(self, handler: Callable[[], None]) -> Callable[[], None]:
        """Call ``handler`` on every visibility change.

        Returns:
            Callable that removes the handler.
        """
        ...
