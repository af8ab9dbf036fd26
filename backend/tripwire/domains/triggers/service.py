"""Trigger service: the entry point hosts use to wire configured triggers.

Picks the tracker serving a trigger from its ``on`` value and registers the
listener on it.
"""

from typing import Any, Optional

from tripwire.core.events import AnalyticsEvent, TriggerKind
from tripwire.core.exceptions import ConfigurationError, UnknownTriggerError
from tripwire.core.logging import logger
from tripwire.core.protocols import AnalyticsRoot, Element
from tripwire.domains.triggers.config import TriggerConfig
from tripwire.domains.triggers.trackers import CustomEventTracker, Listener, Unlisten
from tripwire.domains.triggers.trackers.base import TriggerConfigLike
from tripwire.domains.triggers.types import get_tracker_key_name, get_tracker_types_for_analytics

service_logger = logger.with_prefix("TriggerService: ").with_context(component="trigger_service")


class TriggerService:
    """Registers triggers on the trackers of one root."""

    def __init__(self, root: AnalyticsRoot) -> None:
        """Bind the service to ``root``."""
        self._root = root

    def add_trigger(
        self, context: Element, config: TriggerConfigLike, listener: Listener
    ) -> Unlisten:
        """Register ``listener`` for the trigger described by ``config``.

        Args:
            context: Element the trigger is declared in.
            config: Trigger mapping; ``on`` selects the tracker.
            listener: Receives each AnalyticsEvent.

        Returns:
            Unsubscribe handle from the serving tracker.

        Raises:
            ConfigurationError: If ``on`` is missing or the configuration is invalid.
        """
        trigger = TriggerConfig.coerce(config)
        if not trigger.on:
            raise ConfigurationError("Trigger requires an 'on' value")

        key = get_tracker_key_name(trigger.on)
        tracker = self._root.get_tracker_for_allowlist(key, get_tracker_types_for_analytics())
        if tracker is None:
            raise UnknownTriggerError(key)

        service_logger.debug(f"Adding '{trigger.on}' trigger on {type(tracker).__name__}")
        return tracker.add(context, trigger.on, trigger, listener)

    def trigger_custom_event(
        self,
        event_type: str,
        target: Optional[Any] = None,
        vars: Optional[dict[str, Any]] = None,
    ) -> AnalyticsEvent:
        """Trigger a custom event on the root.

        Args:
            event_type: Custom event name.
            target: Element the event concerns. Defaults to the root element.
            vars: Variables carried by the event.

        Returns:
            The event that was triggered.
        """
        tracker = self._root.get_tracker_for_allowlist(
            TriggerKind.CUSTOM.value, get_tracker_types_for_analytics()
        )
        if not isinstance(tracker, CustomEventTracker):
            raise UnknownTriggerError(TriggerKind.CUSTOM.value)
        event = AnalyticsEvent(
            target if target is not None else self._root.get_root_element(), event_type, vars
        )
        tracker.trigger(event)
        return event
