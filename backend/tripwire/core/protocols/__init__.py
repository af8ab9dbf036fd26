"""Core protocols for dependency injection.

Cross-cutting collaborator protocols: the analytics root, the host document,
the visibility engine and the host clock.
"""

from tripwire.core.protocols.analytics_root import AnalyticsRoot, SelectiveHandler
from tripwire.core.protocols.dom import (
    Element,
    EventTarget,
    HostEvent,
    HostEventListener,
    SignalingElement,
    SignalSource,
    Viewer,
)
from tripwire.core.protocols.scheduler import ScheduledCall, Scheduler
from tripwire.core.protocols.visibility import (
    ReadyReportFactory,
    VisibilityCallback,
    VisibilityService,
)

__all__ = [
    "AnalyticsRoot",
    "Element",
    "EventTarget",
    "HostEvent",
    "HostEventListener",
    "ReadyReportFactory",
    "ScheduledCall",
    "Scheduler",
    "SelectiveHandler",
    "SignalSource",
    "SignalingElement",
    "Viewer",
    "VisibilityCallback",
    "VisibilityService",
]
