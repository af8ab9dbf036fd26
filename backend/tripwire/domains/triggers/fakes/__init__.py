"""Fakes for the triggers domain."""

from tripwire.domains.triggers.fakes.dom import (
    FakeElement,
    FakeEventTarget,
    FakeHostEvent,
    FakeManagedElement,
    FakeSignalSource,
    FakeViewer,
)
from tripwire.domains.triggers.fakes.root import FakeAnalyticsRoot
from tripwire.domains.triggers.fakes.visibility import FakeVisibilityService, ListenCall

__all__ = [
    "FakeAnalyticsRoot",
    "FakeElement",
    "FakeEventTarget",
    "FakeHostEvent",
    "FakeManagedElement",
    "FakeSignalSource",
    "FakeViewer",
    "FakeVisibilityService",
    "ListenCall",
]
