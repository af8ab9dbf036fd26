"""Tracker registry: one tracker per (root, kind), created on first use."""

from types import MappingProxyType
from typing import Mapping, Optional

from tripwire.core.events import TriggerKind
from tripwire.core.logging import logger
from tripwire.core.protocols import AnalyticsRoot
from tripwire.domains.triggers.trackers import (
    ClickEventTracker,
    CustomEventTracker,
    EventTracker,
    IniLoadTracker,
    SignalTracker,
    TimerEventTracker,
    VideoEventTracker,
    VisibilityTracker,
)
from tripwire.domains.triggers.types import TrackerTypeEntry

registry_logger = logger.with_prefix("TrackerRegistry: ").with_context(
    component="tracker_registry"
)

TRACKER_CLASSES: Mapping[TriggerKind, type[EventTracker]] = MappingProxyType(
    {
        TriggerKind.CLICK: ClickEventTracker,
        TriggerKind.CUSTOM: CustomEventTracker,
        TriggerKind.RENDER_START: SignalTracker,
        TriggerKind.INI_LOAD: IniLoadTracker,
        TriggerKind.TIMER: TimerEventTracker,
        TriggerKind.VIDEO: VideoEventTracker,
        TriggerKind.VISIBLE: VisibilityTracker,
        TriggerKind.HIDDEN: VisibilityTracker,
    }
)


class TrackerRegistry:
    """In-memory tracker registry bound to one root."""

    def __init__(self, root: AnalyticsRoot) -> None:
        """Initialize an empty registry for ``root``."""
        self._root = root
        self._trackers: dict[TriggerKind, EventTracker] = {}

    def get(self, kind: TriggerKind) -> EventTracker:
        """Get the tracker for ``kind``, creating it on first use.

        Args:
            kind: The tracker kind.

        Returns:
            The root's shared tracker of that kind.
        """
        tracker = self._trackers.get(kind)
        if tracker is None:
            tracker = TRACKER_CLASSES[kind](self._root)
            self._trackers[kind] = tracker
            registry_logger.debug(f"Created {type(tracker).__name__} for '{kind.value}'")
        return tracker

    def get_tracker_for_allowlist(
        self, key: str, allowlist: Mapping[str, TrackerTypeEntry]
    ) -> Optional[EventTracker]:
        """Get the tracker for ``key`` if the allowlist admits it, else None."""
        entry = allowlist.get(key)
        if entry is None:
            return None
        return self.get(entry.kind)

    def list_all(self) -> list[EventTracker]:
        """List the trackers created so far."""
        return list(self._trackers.values())

    def dispose(self) -> None:
        """Dispose every tracker; a failing one does not stop the others."""
        trackers, self._trackers = self._trackers, {}
        for kind, tracker in trackers.items():
            try:
                tracker.dispose()
            except Exception as e:
                registry_logger.error(f"Failed to dispose '{kind.value}' tracker: {e}", exc_info=e)
