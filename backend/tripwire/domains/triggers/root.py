"""Base analytics root.

Hosts implement the document-facing half of the AnalyticsRoot protocol
(element resolution, signals, viewer, visibility engine, selective listeners).
This base supplies the engine-facing half: the tracker registry, the scheduler
and teardown.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Mapping, Optional

from tripwire.adapters.scheduler import AsyncioScheduler
from tripwire.core.events import TriggerKind
from tripwire.core.protocols import (
    Element,
    EventTarget,
    HostEventListener,
    Scheduler,
    SelectiveHandler,
    SignalingElement,
    SignalSource,
    Viewer,
    VisibilityService,
)
from tripwire.domains.triggers.registry import TrackerRegistry
from tripwire.domains.triggers.trackers import EventTracker
from tripwire.domains.triggers.types import TrackerTypeEntry


class BaseAnalyticsRoot(ABC):
    """Scope shared by all trackers created for it."""

    def __init__(self, scheduler: Optional[Scheduler] = None) -> None:
        """Initialize the root.

        Args:
            scheduler: Host clock. Defaults to the asyncio loop.
        """
        self._scheduler = scheduler or AsyncioScheduler()
        self._registry = TrackerRegistry(self)

    def get_scheduler(self) -> Scheduler:
        return self._scheduler

    def get_tracker(self, kind: TriggerKind) -> EventTracker:
        """Shared tracker of ``kind`` for this root."""
        return self._registry.get(kind)

    def get_tracker_for_allowlist(
        self, key: str, allowlist: Mapping[str, TrackerTypeEntry]
    ) -> Optional[EventTracker]:
        """Shared tracker for ``key`` if ``allowlist`` admits it, else None."""
        return self._registry.get_tracker_for_allowlist(key, allowlist)

    def dispose(self) -> None:
        """Dispose every tracker created for this root."""
        self._registry.dispose()

    @abstractmethod
    def get_root(self) -> EventTarget: ...

    @abstractmethod
    def get_root_element(self) -> Element: ...

    @abstractmethod
    def get_element(
        self, context: Element, selector: str, selection_method: Optional[str] = None
    ) -> Awaitable[Element]: ...

    @abstractmethod
    def get_managed_element(
        self, context: Element, selector: str, selection_method: Optional[str] = None
    ) -> Awaitable[SignalingElement]: ...

    @abstractmethod
    def signals(self) -> SignalSource: ...

    @abstractmethod
    def when_ini_loaded(self) -> Awaitable[Any]: ...

    @abstractmethod
    def get_visibility_manager(self) -> VisibilityService: ...

    @abstractmethod
    def get_viewer(self) -> Viewer: ...

    @abstractmethod
    def create_selective_listener(
        self,
        handler: SelectiveHandler,
        context: Element,
        selector: str,
        selection_method: Optional[str] = None,
    ) -> HostEventListener: ...
