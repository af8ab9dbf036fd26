"""Custom event tracker.

Arbitrary named events triggered by the host. Events triggered before any
listener exists are buffered, because there is no way to predict how fast all
trigger configurations get instrumented:

- ordinary events go to the main buffer, which is discarded for good
  ``CUSTOM_EVENT_BUFFER_SECONDS`` after the tracker is created;
- ``sandbox-*`` events go to the sandbox buffer, which never expires and is
  cleared once a listener for that type has been replayed its contents.
"""

import asyncio
from typing import Optional

from tripwire.core.config import settings
from tripwire.core.events import AnalyticsEvent
from tripwire.core.futures import when_resolved
from tripwire.core.logging import logger
from tripwire.core.notifier import Notifier
from tripwire.core.protocols import AnalyticsRoot, Element, ScheduledCall
from tripwire.domains.triggers.config import TriggerConfig
from tripwire.domains.triggers.trackers.base import (
    EventTracker,
    Listener,
    Registration,
    TriggerConfigLike,
    Unlisten,
)
from tripwire.domains.triggers.types import DEFAULT_SELECTOR, is_sandbox_event

tracker_logger = logger.with_prefix("CustomEventTracker: ").with_context(
    component="custom_event_tracker"
)

EventBuffer = dict[str, list[AnalyticsEvent]]


class CustomEventTracker(EventTracker):
    """Tracks custom events."""

    def __init__(self, root: AnalyticsRoot) -> None:
        """Create the tracker and start the main buffering window."""
        super().__init__(root)
        self._notifiers: dict[str, Notifier[AnalyticsEvent]] = {}
        self._buffer: Optional[EventBuffer] = {}
        self._sandbox_buffer: Optional[EventBuffer] = {}
        self._buffer_expiry: Optional[ScheduledCall] = root.get_scheduler().call_later(
            settings.CUSTOM_EVENT_BUFFER_SECONDS, self._expire_buffer
        )

    @property
    def buffering(self) -> bool:
        """True while ordinary events are still buffered for late listeners."""
        return self._buffer is not None

    def _expire_buffer(self) -> None:
        self._buffer_expiry = None
        if self._buffer is not None:
            dropped = sum(len(events) for events in self._buffer.values())
            tracker_logger.debug(f"Buffering window closed, dropping {dropped} buffered events")
        self._buffer = None

    def dispose(self) -> None:
        """Disable both buffers and drop every listener."""
        if self._buffer_expiry is not None:
            self._buffer_expiry.cancel()
            self._buffer_expiry = None
        self._buffer = None
        self._sandbox_buffer = None
        for notifier in self._notifiers.values():
            notifier.clear_all()

    def add(
        self,
        context: Element,
        event_type: str,
        config: TriggerConfigLike,
        listener: Listener,
    ) -> Unlisten:
        """Listen for ``event_type`` events targeting the configured element."""
        trigger = TriggerConfig.coerce(config)
        selector = trigger.selector or DEFAULT_SELECTOR
        target_ready = asyncio.ensure_future(
            self.root.get_element(context, selector, trigger.selection_method)
        )
        registration = Registration()
        sandbox = is_sandbox_event(event_type)

        buffer = self._sandbox_buffer if sandbox else self._buffer
        buffered = list(buffer.get(event_type) or []) if buffer is not None else []
        if buffered:
            when_resolved(
                target_ready,
                lambda target: asyncio.get_running_loop().call_soon(
                    self._replay, registration, event_type, buffered, target, listener
                ),
                is_active=registration.is_active,
            )

        notifier = self._notifiers.get(event_type)
        if notifier is None:
            notifier = Notifier()
            self._notifiers[event_type] = notifier

        def on_event(event: AnalyticsEvent) -> None:
            when_resolved(
                target_ready,
                lambda target: self._deliver_if_contained(target, event, listener),
                is_active=registration.is_active,
            )

        registration.bind(notifier.subscribe(on_event))
        return registration.unlisten

    def _replay(
        self,
        registration: Registration,
        event_type: str,
        events: list[AnalyticsEvent],
        target: Element,
        listener: Listener,
    ) -> None:
        if not registration.active:
            return
        tracker_logger.debug(f"Replaying {len(events)} buffered '{event_type}' events")
        for event in events:
            if not registration.active:
                return
            self._deliver_if_contained(target, event, listener)
        if is_sandbox_event(event_type) and self._sandbox_buffer is not None:
            # Sandbox events have a single listener; replayed means consumed.
            self._sandbox_buffer.pop(event_type, None)

    @staticmethod
    def _deliver_if_contained(target: Element, event: AnalyticsEvent, listener: Listener) -> None:
        if target.contains(event.target):
            listener(event)

    def trigger(self, event: AnalyticsEvent) -> None:
        """Trigger a custom event for the associated root.

        Delivered right away to existing listeners, and buffered for late ones
        as described in the module docstring.
        """
        event_type = event.type
        sandbox = is_sandbox_event(event_type)
        notifier = self._notifiers.get(event_type)

        if notifier is not None:
            notifier.fire(event)
            if sandbox:
                return

        if sandbox:
            if self._sandbox_buffer is not None:
                self._sandbox_buffer.setdefault(event_type, []).append(event)
        elif self._buffer is not None:
            self._buffer.setdefault(event_type, []).append(event)
