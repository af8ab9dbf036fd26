"""Trigger vocabulary enums.

``TriggerKind`` is the closed set of tracker variants a trigger can select.
The remaining enums name the host-side events and signals trackers listen to.

When adding a new tracker kind:
1. Define its member here
2. Add its entry to TRACKER_TYPES in domains/triggers/types.py
3. Map it to a tracker class in domains/triggers/registry.py
"""

from enum import Enum


class TriggerKind(str, Enum):
    """Tracker variants, keyed by the name used in trigger configuration."""

    CLICK = "click"
    CUSTOM = "custom"
    RENDER_START = "render-start"
    INI_LOAD = "ini-load"
    TIMER = "timer"
    VIDEO = "video"
    VISIBLE = "visible"
    HIDDEN = "hidden"


class VideoAnalyticsEvent(str, Enum):
    """Raw video session event types dispatched on the root event target."""

    PLAY = "video-play"
    PAUSE = "video-pause"
    ENDED = "video-ended"
    SESSION = "video-session"
    SESSION_VISIBLE = "video-session-visible"
    SECONDS_PLAYED = "video-seconds-played"


class PlayingState(str, Enum):
    """Playback state reported in video event details."""

    PLAYING_AUTO = "playing_auto"
    PLAYING_MANUAL = "playing_manual"
    PAUSED = "paused"


class CommonSignal(str, Enum):
    """Lifecycle signals exposed by roots and managed elements."""

    RENDER_START = "render-start"
    INI_LOAD = "ini-load"
    LOAD_START = "load-start"
    LOAD_END = "load-end"
    UNLOAD = "unload"
