"""Fake host document for testing.

A tiny element tree with containment, ``data-vars-*`` datasets and signals,
plus an event target that dispatches host events synchronously.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional


class FakeSignalSource:
    """In-memory fake for SignalSource. Signals are raised by the test."""

    def __init__(self) -> None:
        """Initialize with no signal raised."""
        self._futures: dict[str, asyncio.Future[Any]] = {}
        self.requested: list[str] = []

    def _future(self, name: str) -> "asyncio.Future[Any]":
        future = self._futures.get(name)
        if future is None:
            future = asyncio.get_running_loop().create_future()
            self._futures[name] = future
        return future

    def when_signal(self, name: str) -> "asyncio.Future[Any]":
        """Return the shared future for ``name``."""
        self.requested.append(name)
        return self._future(name)

    # Test helpers

    def signal(self, name: str) -> None:
        """Raise ``name``; every awaiting future resolves."""
        future = self._future(name)
        if not future.done():
            future.set_result(None)

    def reject(self, name: str, error: Exception) -> None:
        """Fail ``name``."""
        future = self._future(name)
        if not future.done():
            future.set_exception(error)


class FakeElement:
    """Element without lifecycle signals.

    Matches ``name`` and ``#name`` selectors.
    """

    def __init__(
        self,
        name: str,
        parent: Optional["FakeElement"] = None,
        dataset: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Create an element under ``parent``."""
        self.name = name
        self._parent = parent
        self.dataset: dict[str, str] = dict(dataset or {})

    @property
    def parent_element(self) -> Optional["FakeElement"]:
        return self._parent

    def contains(self, other: Any) -> bool:
        node = other
        while node is not None:
            if node is self:
                return True
            node = getattr(node, "parent_element", None)
        return False

    def matches(self, selector: str) -> bool:
        return selector in (self.name, f"#{self.name}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class FakeManagedElement(FakeElement):
    """Element exposing lifecycle signals."""

    def __init__(
        self,
        name: str,
        parent: Optional[FakeElement] = None,
        dataset: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Create a signal-capable element under ``parent``."""
        super().__init__(name, parent, dataset)
        self.signal_source = FakeSignalSource()

    def signals(self) -> FakeSignalSource:
        return self.signal_source


@dataclass(frozen=True)
class FakeHostEvent:
    """Host event as dispatched on the fake event target."""

    type: str
    target: Any
    detail: Mapping[str, Any] = field(default_factory=dict)


class FakeEventTarget:
    """In-memory fake for EventTarget."""

    def __init__(self) -> None:
        """Initialize with no listeners."""
        self._listeners: dict[str, list[Callable[[Any], None]]] = {}

    def add_event_listener(self, event_type: str, listener: Callable[[Any], None]) -> None:
        self._listeners.setdefault(event_type, []).append(listener)

    def remove_event_listener(self, event_type: str, listener: Callable[[Any], None]) -> None:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    # Test helpers

    def dispatch(self, event: FakeHostEvent) -> None:
        """Deliver ``event`` to the listeners of its type."""
        for listener in list(self._listeners.get(event.type, [])):
            listener(event)

    def listener_count(self, event_type: str) -> int:
        return len(self._listeners.get(event_type, []))


class FakeViewer:
    """In-memory fake for Viewer. Visibility is flipped by the test."""

    def __init__(self, visible: bool = True) -> None:
        """Initialize with the given page visibility."""
        self._visible = visible
        self._handlers: list[Callable[[], None]] = []

    def is_visible(self) -> bool:
        return self._visible

    def on_visibility_changed(self, handler: Callable[[], None]) -> Callable[[], None]:
        self._handlers.append(handler)

        def unlisten() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unlisten

    # Test helpers

    def set_visible(self, visible: bool) -> None:
        """Change visibility and notify handlers."""
        self._visible = visible
        for handler in list(self._handlers):
            handler()

    @property
    def handler_count(self) -> int:
        return len(self._handlers)
