"""Fake analytics root for testing.

Selectors resolve against elements registered with ``add_element``. A lookup
for an element that is not registered yet stays pending until it is, which
lets tests unsubscribe "mid-flight".
"""

import asyncio
from typing import Any, Optional

from tripwire.adapters.scheduler import FakeScheduler
from tripwire.core.events import CommonSignal
from tripwire.core.futures import resolved
from tripwire.domains.triggers.fakes.dom import (
    FakeElement,
    FakeEventTarget,
    FakeSignalSource,
    FakeViewer,
)
from tripwire.domains.triggers.fakes.visibility import FakeVisibilityService
from tripwire.domains.triggers.root import BaseAnalyticsRoot
from tripwire.domains.triggers.types import ROOT_SELECTORS


class FakeAnalyticsRoot(BaseAnalyticsRoot):
    """In-memory AnalyticsRoot on a manual clock.

    Usage:
        root = FakeAnalyticsRoot()
        button = FakeElement("buy", parent=root.root_element)
        root.add_element(button)
        root.scheduler.advance(10)
    """

    def __init__(self, scheduler: Optional[FakeScheduler] = None) -> None:
        """Initialize an empty document with a root element."""
        self.scheduler = scheduler or FakeScheduler()
        super().__init__(self.scheduler)
        self.root_element = FakeElement("root")
        self.event_target = FakeEventTarget()
        self.root_signals = FakeSignalSource()
        self.viewer = FakeViewer()
        self.visibility = FakeVisibilityService()
        self._elements: dict[str, FakeElement] = {}
        self._pending: dict[str, asyncio.Future[Any]] = {}
        self.lookups: list[tuple[Any, str, Optional[str]]] = []

    # Test helpers

    def add_element(self, element: FakeElement, selector: Optional[str] = None) -> None:
        """Make ``element`` resolvable by ``selector`` (default ``#name``)."""
        selector = selector or f"#{element.name}"
        self._elements[selector] = element
        pending = self._pending.pop(selector, None)
        if pending is not None and not pending.done():
            pending.set_result(element)

    # AnalyticsRoot

    def _lookup(self, context: Any, selector: str, selection_method: Optional[str]):
        self.lookups.append((context, selector, selection_method))
        if selector in ROOT_SELECTORS:
            return resolved(self.root_element)
        element = self._elements.get(selector)
        if element is not None:
            return resolved(element)
        pending = self._pending.get(selector)
        if pending is None:
            pending = asyncio.get_running_loop().create_future()
            self._pending[selector] = pending
        return pending

    def get_element(self, context, selector, selection_method=None):
        return self._lookup(context, selector, selection_method)

    def get_managed_element(self, context, selector, selection_method=None):
        return self._lookup(context, selector, selection_method)

    def get_root(self) -> FakeEventTarget:
        return self.event_target

    def get_root_element(self) -> FakeElement:
        return self.root_element

    def signals(self) -> FakeSignalSource:
        return self.root_signals

    def when_ini_loaded(self) -> "asyncio.Future[Any]":
        return self.root_signals.when_signal(CommonSignal.INI_LOAD.value)

    def get_visibility_manager(self) -> FakeVisibilityService:
        return self.visibility

    def get_viewer(self) -> FakeViewer:
        return self.viewer

    def create_selective_listener(self, handler, context, selector, selection_method=None):
        def listener(event: Any) -> None:
            node = event.target
            while node is not None:
                if node.matches(selector) and context.contains(node):
                    handler(node, event)
                    return
                if node is context:
                    return
                node = node.parent_element

        return listener
