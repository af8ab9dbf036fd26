"""Click tracker: one root-level click listener fanned out per selector."""

from functools import partial
from typing import Any

from tripwire.core.events import AnalyticsEvent, TriggerKind
from tripwire.core.exceptions import ConfigurationError
from tripwire.core.notifier import Notifier
from tripwire.core.protocols import AnalyticsRoot, Element, HostEvent
from tripwire.domains.triggers.attributes import get_data_params_from_attributes
from tripwire.domains.triggers.config import TriggerConfig
from tripwire.domains.triggers.trackers.base import (
    EventTracker,
    Listener,
    TriggerConfigLike,
    Unlisten,
    scope_of,
)

CLICK_EVENT = "click"


class ClickEventTracker(EventTracker):
    """Tracks click events."""

    def __init__(self, root: AnalyticsRoot) -> None:
        """Start delegating root clicks to the shared notifier."""
        super().__init__(root)
        self._clicks: Notifier[HostEvent] = Notifier()
        self.root.get_root().add_event_listener(CLICK_EVENT, self._on_click)

    def _on_click(self, event: HostEvent) -> None:
        self._clicks.fire(event)

    def dispose(self) -> None:
        """Stop listening on the root and drop every listener."""
        self.root.get_root().remove_event_listener(CLICK_EVENT, self._on_click)
        self._clicks.clear_all()

    def add(
        self,
        context: Element,
        event_type: str,
        config: TriggerConfigLike,
        listener: Listener,
    ) -> Unlisten:
        """Listen for clicks on elements matching the required ``selector``."""
        trigger = TriggerConfig.coerce(config)
        if not trigger.selector:
            raise ConfigurationError("Missing required selector on click trigger")
        return self._clicks.subscribe(
            self.root.create_selective_listener(
                partial(self._handle_click, listener),
                scope_of(context),
                trigger.selector,
                trigger.selection_method,
            )
        )

    @staticmethod
    def _handle_click(listener: Listener, target: Element, event: Any) -> None:
        params = get_data_params_from_attributes(target)
        listener(AnalyticsEvent(target, TriggerKind.CLICK.value, params))
