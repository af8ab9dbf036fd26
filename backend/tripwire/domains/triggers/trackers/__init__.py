"""Tracker variants."""

from tripwire.domains.triggers.trackers.base import (
    EventTracker,
    Listener,
    SignalTrackerProtocol,
    Unlisten,
)
from tripwire.domains.triggers.trackers.click import ClickEventTracker
from tripwire.domains.triggers.trackers.custom import CustomEventTracker
from tripwire.domains.triggers.trackers.signal import IniLoadTracker, SignalTracker
from tripwire.domains.triggers.trackers.timer import TimerEventTracker
from tripwire.domains.triggers.trackers.video import VideoEventTracker
from tripwire.domains.triggers.trackers.visibility import VisibilityTracker

__all__ = [
    "ClickEventTracker",
    "CustomEventTracker",
    "EventTracker",
    "IniLoadTracker",
    "Listener",
    "SignalTracker",
    "SignalTrackerProtocol",
    "TimerEventTracker",
    "Unlisten",
    "VideoEventTracker",
    "VisibilityTracker",
]
