"""Video tracker.

Video players dispatch raw session events (``video-play``,
``video-seconds-played``...) on the root event target. The tracker listens for
all of them once and filters the shared stream per registration.
"""

import asyncio
from typing import Optional

from tripwire.core.events import AnalyticsEvent, PlayingState, VideoAnalyticsEvent
from tripwire.core.futures import when_resolved
from tripwire.core.logging import logger
from tripwire.core.notifier import Notifier
from tripwire.core.protocols import AnalyticsRoot, Element, HostEvent
from tripwire.domains.triggers.config import TriggerConfig
from tripwire.domains.triggers.trackers.base import (
    EventTracker,
    Listener,
    Registration,
    TriggerConfigLike,
    Unlisten,
)
from tripwire.domains.triggers.types import DEFAULT_SELECTOR

tracker_logger = logger.with_prefix("VideoEventTracker: ").with_context(
    component="video_event_tracker"
)


class VideoEventTracker(EventTracker):
    """Tracks video session events."""

    def __init__(self, root: AnalyticsRoot) -> None:
        """Start listening for every video event type on the root."""
        super().__init__(root)
        self._sessions: Optional[Notifier[HostEvent]] = Notifier()
        for video_event in VideoAnalyticsEvent:
            self.root.get_root().add_event_listener(video_event.value, self._on_session)

    def _on_session(self, event: HostEvent) -> None:
        if self._sessions is not None:
            self._sessions.fire(event)

    def dispose(self) -> None:
        """Stop listening on the root and drop every listener."""
        root = self.root.get_root()
        for video_event in VideoAnalyticsEvent:
            root.remove_event_listener(video_event.value, self._on_session)
        if self._sessions is not None:
            self._sessions.clear_all()
            self._sessions = None

    def add(
        self,
        context: Element,
        event_type: str,
        config: TriggerConfigLike,
        listener: Listener,
    ) -> Unlisten:
        """Listen for the video events named by ``config["on"]``."""
        trigger = TriggerConfig.coerce(config)
        video_spec = trigger.video_spec
        selector = trigger.selector or video_spec.selector or DEFAULT_SELECTOR
        target_ready = asyncio.ensure_future(
            self.root.get_element(context, selector, trigger.selection_method)
        )
        registration = Registration()
        on = trigger.on
        interval = video_spec.interval
        interval_counter = 0

        def on_session(event: HostEvent) -> None:
            nonlocal interval_counter
            is_visible_type = event.type == VideoAnalyticsEvent.SESSION_VISIBLE.value
            normalized_type = VideoAnalyticsEvent.SESSION.value if is_visible_type else event.type
            details = dict(event.detail or {})

            if normalized_type != on:
                return

            if normalized_type == VideoAnalyticsEvent.SECONDS_PLAYED.value:
                if not interval:
                    tracker_logger.error(
                        "video-seconds-played requires interval spec with non-zero value"
                    )
                    return
                interval_counter += 1
                if interval_counter % interval != 0:
                    return

            if is_visible_type and not video_spec.end_session_when_invisible:
                return

            autoplay = details.get("state") == PlayingState.PLAYING_AUTO.value
            if video_spec.exclude_autoplay and autoplay:
                return

            element = event.target
            if element is None:
                tracker_logger.warning(f"No target specified by video session event '{event.type}'")
                return

            def deliver(target: Element) -> None:
                if target.contains(element):
                    listener(AnalyticsEvent(target, normalized_type, details))

            when_resolved(target_ready, deliver, is_active=registration.is_active)

        if self._sessions is None:
            tracker_logger.warning("add() called on a disposed tracker")
            return registration.unlisten
        registration.bind(self._sessions.subscribe(on_session))
        return registration.unlisten
