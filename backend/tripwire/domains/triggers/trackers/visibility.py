"""Visibility tracker.

Forwards ``visible`` / ``hidden`` triggers to the root's visibility engine,
which owns the viewport math. This tracker contributes the readiness gate
(``waitFor``), the report-ready promise of ``hidden`` triggers and the
conversion of a reported state into an AnalyticsEvent.

The ``waitFor`` gate is another tracker's signal: ``ini-load`` by default when
a selector is given, nothing when it is not, and never when set to ``none``.
"""

import asyncio
from functools import partial
from typing import Any, Awaitable, Callable, Optional

from tripwire.core.events import AnalyticsEvent, TriggerKind
from tripwire.core.exceptions import ConfigurationError
from tripwire.core.futures import resolved, when_resolved
from tripwire.core.logging import logger
from tripwire.core.protocols import AnalyticsRoot, Element
from tripwire.domains.triggers.attributes import get_data_params_from_attributes
from tripwire.domains.triggers.config import TriggerConfig
from tripwire.domains.triggers.trackers.base import (
    EventTracker,
    Listener,
    Registration,
    SignalTrackerProtocol,
    TriggerConfigLike,
    Unlisten,
    scope_of,
)
from tripwire.domains.triggers.types import (
    WAIT_FOR_NONE,
    get_tracker_types_for_visibility,
    is_root_selector,
)

tracker_logger = logger.with_prefix("VisibilityTracker: ").with_context(
    component="visibility_tracker"
)


class VisibilityTracker(EventTracker):
    """Tracks visibility events."""

    def __init__(self, root: AnalyticsRoot) -> None:
        """Initialize with an empty gate-tracker cache."""
        super().__init__(root)
        self._wait_for_trackers: dict[str, SignalTrackerProtocol] = {}

    def dispose(self) -> None:
        """Forget cached gate trackers; the root disposes them itself."""
        self._wait_for_trackers.clear()

    def add(
        self,
        context: Element,
        event_type: str,
        config: TriggerConfigLike,
        listener: Listener,
    ) -> Unlisten:
        """Listen for visibility of the root or of the configured element."""
        trigger = TriggerConfig.coerce(config)
        visibility_spec = trigger.visibility_spec
        selector = trigger.selector or visibility_spec.selector
        wait_for = visibility_spec.wait_for
        self._validate_wait_for(wait_for)
        manager = self.root.get_visibility_manager()

        create_report_ready: Optional[Callable[[], Awaitable[Any]]] = None
        if event_type == TriggerKind.HIDDEN.value:
            create_report_ready = self.create_report_ready_promise

        registration = Registration()
        if is_root_selector(selector):
            root_element = self.root.get_root_element()
            registration.bind(
                manager.listen_root(
                    visibility_spec,
                    self.get_ready_promise(wait_for, selector),
                    create_report_ready,
                    partial(self._on_event, event_type, listener, root_element),
                )
            )
            return registration.unlisten

        selection_method = trigger.selection_method or visibility_spec.selection_method

        def listen_element(element: Element) -> None:
            registration.bind(
                manager.listen_element(
                    element,
                    visibility_spec,
                    self.get_ready_promise(wait_for, selector, element),
                    create_report_ready,
                    partial(self._on_event, event_type, listener, element),
                )
            )

        when_resolved(
            self.root.get_managed_element(scope_of(context), selector, selection_method),
            listen_element,
            is_active=registration.is_active,
        )
        return registration.unlisten

    def create_report_ready_promise(self) -> "asyncio.Future[Any]":
        """Resolves once the page leaves the foreground (at once if it already has)."""
        viewer = self.root.get_viewer()
        if not viewer.is_visible():
            return resolved()

        ready: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        unlisten: Optional[Callable[[], None]] = None

        def on_visibility_changed() -> None:
            if viewer.is_visible() or ready.done():
                return
            ready.set_result(None)
            if unlisten is not None:
                unlisten()

        unlisten = viewer.on_visibility_changed(on_visibility_changed)
        return ready

    @staticmethod
    def _validate_wait_for(wait_for: Optional[str]) -> None:
        if not wait_for or wait_for == WAIT_FOR_NONE:
            return
        if wait_for not in get_tracker_types_for_visibility():
            raise ConfigurationError(f"waitFor value {wait_for} not supported")

    def get_ready_promise(
        self,
        wait_for: Optional[str],
        selector: Optional[str],
        element: Optional[Element] = None,
    ) -> Optional[Awaitable[Any]]:
        """Readiness gate for a visibility registration, or None for no gate.

        Args:
            wait_for: The ``waitFor`` value of the visibility spec.
            selector: The trigger's selector, if any.
            element: The resolved element; None for root-level triggers.

        Raises:
            ConfigurationError: If ``wait_for`` names an unsupported kind.
        """
        if not wait_for:
            if not selector:
                return None
            wait_for = TriggerKind.INI_LOAD.value

        self._validate_wait_for(wait_for)
        allowlist = get_tracker_types_for_visibility()
        tracker = self._wait_for_trackers.get(wait_for) or self.root.get_tracker_for_allowlist(
            wait_for, allowlist
        )
        if tracker is None:
            tracker_logger.debug(f"No gate for waitFor '{wait_for}', reporting ungated")
            return None
        self._wait_for_trackers[wait_for] = tracker

        if element is not None:
            return tracker.get_element_signal(wait_for, element)
        return tracker.get_root_signal(wait_for)

    @staticmethod
    def _on_event(
        event_type: str, listener: Listener, target: Element, state: dict[str, Any]
    ) -> None:
        state.update(get_data_params_from_attributes(target))
        listener(AnalyticsEvent(target, event_type, state))
