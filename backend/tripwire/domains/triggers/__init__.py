"""Triggers domain: trackers, their registry and the trigger service."""

from tripwire.domains.triggers.config import TimerSpec, TriggerConfig, VideoSpec, VisibilitySpec
from tripwire.domains.triggers.registry import TRACKER_CLASSES, TrackerRegistry
from tripwire.domains.triggers.root import BaseAnalyticsRoot
from tripwire.domains.triggers.service import TriggerService

__all__ = [
    "BaseAnalyticsRoot",
    "TRACKER_CLASSES",
    "TimerSpec",
    "TrackerRegistry",
    "TriggerConfig",
    "TriggerService",
    "VideoSpec",
    "VisibilitySpec",
]
