"""AnalyticsRoot protocol: the scoping context trackers operate in.

A root is a document or a subtree of one. It resolves selectors, exposes
signals, owns the visibility engine and hands out the trackers created for it.
All trackers of a root share it by reference; none of them owns its lifecycle.
"""

from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, Protocol, runtime_checkable

from tripwire.core.protocols.dom import (
    Element,
    EventTarget,
    HostEventListener,
    SignalingElement,
    SignalSource,
    Viewer,
)
from tripwire.core.protocols.scheduler import Scheduler
from tripwire.core.protocols.visibility import VisibilityService

if TYPE_CHECKING:
    from tripwire.domains.triggers.trackers.base import EventTracker

SelectiveHandler = Callable[[Any, Any], None]


@runtime_checkable
class AnalyticsRoot(Protocol):
    """Protocol for the scope a set of trackers is bound to."""

    def get_root(self) -> EventTarget:
        """Event-delegation anchor for host events."""
        ...

    def get_root_element(self) -> Element:
        """Element standing for the whole root."""
        ...

    def get_element(
        self, context: Element, selector: str, selection_method: Optional[str] = None
    ) -> Awaitable[Element]:
        """Resolve ``selector`` relative to ``context``.

        Never resolves if nothing matches.
        """
        ...

    def get_managed_element(
        self, context: Element, selector: str, selection_method: Optional[str] = None
    ) -> Awaitable[SignalingElement]:
        """Resolve a signal-capable element once the document is fully parsed."""
        ...

    def signals(self) -> SignalSource:
        """Signals of the root itself."""
        ...

    def when_ini_loaded(self) -> Awaitable[Any]:
        """Resolves when the elements in the first viewport have loaded."""
        ...

    def get_tracker_for_allowlist(
        self, key: str, allowlist: Any
    ) -> Optional["EventTracker"]:
        """Shared tracker for ``key`` if ``key`` is in ``allowlist``, else None."""
        ...

    def get_visibility_manager(self) -> VisibilityService:
        """Visibility engine of this root."""
        ...

    def get_viewer(self) -> Viewer:
        """Page visibility of the host."""
        ...

    def get_scheduler(self) -> Scheduler:
        """Host clock for delayed and periodic callbacks."""
        ...

    def create_selective_listener(
        self,
        handler: SelectiveHandler,
        context: Element,
        selector: str,
        selection_method: Optional[str] = None,
    ) -> HostEventListener:
        """Wrap ``handler`` so it only runs for events whose target matches.

        The returned listener walks from the event target up to ``context``
        and calls ``handler(matched_element, event)`` for the first element
        matching ``selector``.
        """
        ...
