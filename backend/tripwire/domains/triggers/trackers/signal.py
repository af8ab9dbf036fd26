"""Signal-based trackers.

Both trackers fire exactly once per registration, when the root or a managed
element reaches a lifecycle milestone:

- ``SignalTracker`` waits for the signal named by the trigger (``render-start``);
- ``IniLoadTracker`` waits for the first viewport to be loaded. For an element
  that is the first of its ``ini-load`` and ``load-end`` signals.

Both also serve as ``waitFor`` gates for visibility triggers.
"""

from abc import abstractmethod
from typing import Any, Awaitable, Optional

from tripwire.core.events import AnalyticsEvent, CommonSignal
from tripwire.core.futures import first_completed, resolved, when_resolved
from tripwire.core.protocols import Element
from tripwire.domains.triggers.config import TriggerConfig
from tripwire.domains.triggers.trackers.base import (
    EventTracker,
    Listener,
    Registration,
    TriggerConfigLike,
    Unlisten,
    scope_of,
)
from tripwire.domains.triggers.types import is_root_selector


def _element_signals(element: Any) -> Optional[Any]:
    """Signal source of ``element``, or None if it exposes no signals."""
    signals = getattr(element, "signals", None)
    return signals() if callable(signals) else None


class _SignalTrackerBase(EventTracker):
    """Shared ``add`` for trackers that wait for a single milestone."""

    def dispose(self) -> None:
        """Nothing to release: registrations hold no shared resources."""

    @abstractmethod
    def get_root_signal(self, event_type: str) -> Awaitable[Any]:
        """Awaitable settled when the document reaches ``event_type``."""

    @abstractmethod
    def get_element_signal(self, event_type: str, element: Any) -> Awaitable[Any]:
        """Awaitable settled when ``element`` reaches ``event_type``."""

    def add(
        self,
        context: Element,
        event_type: str,
        config: TriggerConfigLike,
        listener: Listener,
    ) -> Unlisten:
        """Deliver one event once the target has reached the milestone."""
        trigger = TriggerConfig.coerce(config)
        registration = Registration()

        if is_root_selector(trigger.selector):
            target = self.root.get_root_element()
            when_resolved(
                self.get_root_signal(event_type),
                lambda _: listener(AnalyticsEvent(target, event_type)),
                is_active=registration.is_active,
            )
        else:
            when_resolved(
                self._when_element_signaled(context, event_type, trigger),
                lambda element: listener(AnalyticsEvent(element, event_type)),
                is_active=registration.is_active,
            )
        return registration.unlisten

    async def _when_element_signaled(
        self, context: Element, event_type: str, trigger: TriggerConfig
    ) -> Element:
        # Managed elements are looked up once the document is fully parsed,
        # so an early lookup cannot miss them.
        element = await self.root.get_managed_element(
            scope_of(context), trigger.selector, trigger.selection_method
        )
        await self.get_element_signal(event_type, element)
        return element


class SignalTracker(_SignalTrackerBase):
    """Tracks events based on named signals."""

    def get_root_signal(self, event_type: str) -> Awaitable[Any]:
        """Resolves when the root emits ``event_type``."""
        return self.root.signals().when_signal(event_type)

    def get_element_signal(self, event_type: str, element: Any) -> Awaitable[Any]:
        """Resolves when ``element`` emits ``event_type``; at once if it has no signals."""
        signals = _element_signals(element)
        if signals is None:
            return resolved()
        return signals.when_signal(event_type)


class IniLoadTracker(_SignalTrackerBase):
    """Tracks when the elements in the first viewport have been loaded."""

    def get_root_signal(self, event_type: str = CommonSignal.INI_LOAD.value) -> Awaitable[Any]:
        """Resolves when the root's first viewport has loaded."""
        return self.root.when_ini_loaded()

    def get_element_signal(self, event_type: str, element: Any) -> Awaitable[Any]:
        """Resolves on the element's first ``ini-load`` or ``load-end`` signal."""
        signals = _element_signals(element)
        if signals is None:
            return resolved()
        return first_completed(
            signals.when_signal(CommonSignal.INI_LOAD.value),
            signals.when_signal(CommonSignal.LOAD_END.value),
        )
