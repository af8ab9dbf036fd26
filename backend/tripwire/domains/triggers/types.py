"""Value objects for the triggers domain.

The tracker-type table: which ``TriggerKind`` may be used where. A trigger at
the top level of a configuration may use any kind; a timer's start/stop spec
and a visibility ``waitFor`` gate are restricted to the kinds whose
``allowed_for`` names them.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from tripwire.core.events.enums import TriggerKind

ROOT_SELECTORS = frozenset({":root", ":host"})
DEFAULT_SELECTOR = ":root"
SANDBOX_EVENT_PREFIX = "sandbox-"
VIDEO_EVENT_PREFIX = "video"
WAIT_FOR_NONE = "none"

ALLOWED_IN_TIMER = "timer"
ALLOWED_IN_VISIBILITY = "visible"


@dataclass(frozen=True)
class TrackerTypeEntry:
    """One row of the tracker-type table."""

    kind: TriggerKind
    allowed_for: frozenset[str]


TRACKER_TYPES: Mapping[str, TrackerTypeEntry] = MappingProxyType(
    {
        TriggerKind.CLICK.value: TrackerTypeEntry(
            TriggerKind.CLICK, frozenset({ALLOWED_IN_TIMER})
        ),
        TriggerKind.CUSTOM.value: TrackerTypeEntry(
            TriggerKind.CUSTOM, frozenset({ALLOWED_IN_TIMER})
        ),
        TriggerKind.RENDER_START.value: TrackerTypeEntry(
            TriggerKind.RENDER_START, frozenset({ALLOWED_IN_TIMER, ALLOWED_IN_VISIBILITY})
        ),
        TriggerKind.INI_LOAD.value: TrackerTypeEntry(
            TriggerKind.INI_LOAD, frozenset({ALLOWED_IN_TIMER, ALLOWED_IN_VISIBILITY})
        ),
        TriggerKind.TIMER.value: TrackerTypeEntry(TriggerKind.TIMER, frozenset()),
        TriggerKind.VIDEO.value: TrackerTypeEntry(
            TriggerKind.VIDEO, frozenset({ALLOWED_IN_TIMER})
        ),
        TriggerKind.VISIBLE.value: TrackerTypeEntry(
            TriggerKind.VISIBLE, frozenset({ALLOWED_IN_TIMER})
        ),
        TriggerKind.HIDDEN.value: TrackerTypeEntry(
            TriggerKind.HIDDEN, frozenset({ALLOWED_IN_TIMER})
        ),
    }
)


def _allowlist_for(context: str) -> Mapping[str, TrackerTypeEntry]:
    return MappingProxyType(
        {key: entry for key, entry in TRACKER_TYPES.items() if context in entry.allowed_for}
    )


def get_tracker_types_for_timer() -> Mapping[str, TrackerTypeEntry]:
    """Kinds usable as a timer's start or stop trigger."""
    return _allowlist_for(ALLOWED_IN_TIMER)


def get_tracker_types_for_visibility() -> Mapping[str, TrackerTypeEntry]:
    """Kinds usable as a visibility ``waitFor`` gate."""
    return _allowlist_for(ALLOWED_IN_VISIBILITY)


def get_tracker_types_for_analytics() -> Mapping[str, TrackerTypeEntry]:
    """Kinds usable by a top-level trigger: all of them."""
    return TRACKER_TYPES


def is_video_trigger_type(event_type: str) -> bool:
    """True for ``video-*`` event types, all served by the video tracker."""
    return event_type.startswith(VIDEO_EVENT_PREFIX)


def is_reserved_trigger_type(event_type: str) -> bool:
    """True if ``event_type`` names a tracker kind rather than a custom event."""
    return event_type in TRACKER_TYPES


def is_sandbox_event(event_type: str) -> bool:
    """True for custom events that wait for exactly one listener."""
    return event_type.startswith(SANDBOX_EVENT_PREFIX)


def is_root_selector(selector: str | None) -> bool:
    """True if ``selector`` designates the whole root rather than an element."""
    return not selector or selector in ROOT_SELECTORS


def get_tracker_key_name(event_type: str) -> str:
    """Map a trigger's ``on`` value to the tracker key serving it.

    ``video-*`` types go to the video tracker; anything that is not a
    reserved kind name is a custom event.
    """
    if is_video_trigger_type(event_type):
        return TriggerKind.VIDEO.value
    if not is_reserved_trigger_type(event_type):
        return TriggerKind.CUSTOM.value
    return event_type
