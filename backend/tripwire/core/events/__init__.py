"""Events and trigger vocabulary."""

from tripwire.core.events.base import AnalyticsEvent
from tripwire.core.events.enums import (
    CommonSignal,
    PlayingState,
    TriggerKind,
    VideoAnalyticsEvent,
)

__all__ = [
    "AnalyticsEvent",
    "CommonSignal",
    "PlayingState",
    "TriggerKind",
    "VideoAnalyticsEvent",
]
