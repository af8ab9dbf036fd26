"""Timer tracker.

A timer trigger fires its listener every ``interval`` seconds while running.
It starts at registration, or when its ``startSpec`` trigger fires, and stops
when its ``stopSpec`` trigger fires. Start and stop triggers are themselves
registrations on other trackers of the same root (recursive composition).

Start and stop registrations both call the same toggle handler, so when both
conditions are the same event on the same target every occurrence flips the
timer instead of starting it twice.

A timer without a stop trigger cannot be stopped by configuration; it is
removed ``maxTimerLength`` seconds after it starts.
"""

import weakref
from enum import Enum
from functools import partial
from typing import Callable, Optional

from tripwire.core.events import AnalyticsEvent
from tripwire.core.exceptions import ConfigurationError, InvariantViolationError
from tripwire.core.logging import logger
from tripwire.core.protocols import AnalyticsRoot, Element, ScheduledCall, Scheduler
from tripwire.domains.triggers.config import TriggerConfig
from tripwire.domains.triggers.trackers.base import (
    EventTracker,
    Listener,
    TriggerConfigLike,
    Unlisten,
)
from tripwire.domains.triggers.types import get_tracker_key_name, get_tracker_types_for_timer

tracker_logger = logger.with_prefix("TimerEventTracker: ").with_context(
    component="timer_event_tracker"
)

UnlistenBuilder = Callable[[], Unlisten]


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


class TimerState(str, Enum):
    """Lifecycle of one timer registration."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class TimerInput(str, Enum):
    """What happened to a timer."""

    START = "start"
    STOP = "stop"
    TOGGLE = "toggle"


# (state, input) -> next state. Missing pairs leave the state unchanged.
TIMER_TRANSITIONS: dict[tuple[TimerState, TimerInput], TimerState] = {
    (TimerState.IDLE, TimerInput.START): TimerState.RUNNING,
    (TimerState.STOPPED, TimerInput.START): TimerState.RUNNING,
    (TimerState.RUNNING, TimerInput.STOP): TimerState.STOPPED,
    (TimerState.IDLE, TimerInput.TOGGLE): TimerState.RUNNING,
    (TimerState.STOPPED, TimerInput.TOGGLE): TimerState.RUNNING,
    (TimerState.RUNNING, TimerInput.TOGGLE): TimerState.STOPPED,
}


class TimerStateMachine:
    """Single source of truth for whether a timer is running."""

    def __init__(self) -> None:
        self.state = TimerState.IDLE

    @property
    def running(self) -> bool:
        return self.state is TimerState.RUNNING

    def next_state(self, timer_input: TimerInput) -> TimerState:
        """State ``timer_input`` would lead to, without applying it."""
        return TIMER_TRANSITIONS.get((self.state, timer_input), self.state)

    def apply(self, timer_input: TimerInput) -> bool:
        """Apply ``timer_input``; return True if the state changed."""
        new_state = self.next_state(timer_input)
        changed = new_state is not self.state
        self.state = new_state
        return changed


# ---------------------------------------------------------------------------
# Per-registration handler
# ---------------------------------------------------------------------------


class TimerEventHandler:
    """Scheduling side of one timer registration.

    Holds the interval handle (present iff running), the max-length cap and
    the start/stop registrations currently armed.

    It also remembers the events that already toggled it. A start or stop
    trigger armed on the custom tracker is replayed the buffered events, which
    include the one that just flipped the timer; that one must not flip it
    again.
    """

    def __init__(
        self,
        interval_seconds: float,
        max_length_seconds: float,
        is_unstoppable: bool,
        fire_immediately: bool,
        start_builder: Optional[UnlistenBuilder] = None,
        stop_builder: Optional[UnlistenBuilder] = None,
    ) -> None:
        """Initialize an idle timer.

        Args:
            interval_seconds: Seconds between timer events.
            max_length_seconds: Cap applied when the timer is unstoppable.
            is_unstoppable: True when no stop trigger was configured.
            fire_immediately: Fire once as soon as the timer starts.
            start_builder: Arms the start trigger and returns its unlisten.
            stop_builder: Arms the stop trigger and returns its unlisten.
        """
        self.interval_seconds = interval_seconds
        self.max_length_seconds = max_length_seconds
        self.is_unstoppable = is_unstoppable
        self.fire_immediately = fire_immediately
        self.machine = TimerStateMachine()
        self._interval: Optional[ScheduledCall] = None
        self._cap: Optional[ScheduledCall] = None
        self._unlisten_start: Optional[Unlisten] = None
        self._unlisten_stop: Optional[Unlisten] = None
        self._start_builder = start_builder
        self._stop_builder = stop_builder
        # id -> event; entries vanish with the event, so an id is never reused.
        self._toggled_by: "weakref.WeakValueDictionary[int, AnalyticsEvent]" = (
            weakref.WeakValueDictionary()
        )

    @property
    def running(self) -> bool:
        return self.machine.running

    def claim_toggle(self, event: AnalyticsEvent) -> bool:
        """Record ``event`` as a toggle; False if it already toggled this timer."""
        if self._toggled_by.get(id(event)) is event:
            return False
        self._toggled_by[id(event)] = event
        return True

    def can_listen_for_start(self) -> bool:
        return self._start_builder is not None

    def is_listening_for_start(self) -> bool:
        return self._unlisten_start is not None

    def listen_for_start(self) -> None:
        if not self.can_listen_for_start():
            raise InvariantViolationError("Cannot listen for timer start.")
        self._unlisten_start = self._start_builder()

    def unlisten_for_start(self) -> None:
        if self._unlisten_start is not None:
            unlisten, self._unlisten_start = self._unlisten_start, None
            unlisten()

    def can_listen_for_stop(self) -> bool:
        return self._stop_builder is not None

    def is_listening_for_stop(self) -> bool:
        return self._unlisten_stop is not None

    def listen_for_stop(self) -> None:
        if not self.can_listen_for_stop():
            raise InvariantViolationError("Cannot listen for timer stop.")
        self._unlisten_stop = self._stop_builder()

    def unlisten_for_stop(self) -> None:
        if self._unlisten_stop is not None:
            unlisten, self._unlisten_stop = self._unlisten_stop, None
            unlisten()

    def start_interval(
        self,
        scheduler: Scheduler,
        timer_callback: Callable[[], None],
        timeout_callback: Callable[[], None],
    ) -> None:
        """Arm the repeating callback, plus the cap if the timer is unstoppable."""
        self.clear_interval()
        self.machine.apply(TimerInput.START)
        self._interval = scheduler.call_every(self.interval_seconds, timer_callback)
        if self.is_unstoppable and self._cap is None:
            self._cap = scheduler.call_later(self.max_length_seconds, timeout_callback)

    def clear_interval(self) -> None:
        """Disarm the repeating callback."""
        if self._interval is not None:
            self._interval.cancel()
            self._interval = None
        self.machine.apply(TimerInput.STOP)

    def clear_cap(self) -> None:
        if self._cap is not None:
            self._cap.cancel()
            self._cap = None


# ---------------------------------------------------------------------------
# Tracker
# ---------------------------------------------------------------------------


class TimerEventTracker(EventTracker):
    """Tracks timer events."""

    def __init__(self, root: AnalyticsRoot) -> None:
        """Initialize with no timers."""
        super().__init__(root)
        self._timers: dict[int, TimerEventHandler] = {}
        self._timer_id_sequence = 1

    def get_tracked_timer_keys(self) -> list[int]:
        """Ids of the timers currently registered."""
        return list(self._timers)

    def dispose(self) -> None:
        """Tear down every timer; one failing teardown does not stop the others."""
        for timer_id in self.get_tracked_timer_keys():
            try:
                self._remove_tracker(timer_id)
            except Exception as e:
                tracker_logger.error(f"Failed to tear down timer {timer_id}: {e}", exc_info=e)

    def add(
        self,
        context: Element,
        event_type: str,
        config: TriggerConfigLike,
        listener: Listener,
    ) -> Unlisten:
        """Register a timer described by ``config["timerSpec"]``."""
        trigger = TriggerConfig.coerce(config)
        timer_spec = trigger.timer_spec
        if timer_spec is None:
            raise ConfigurationError("Bad timer specification")

        timer_start = timer_spec.start_spec
        timer_stop = timer_spec.stop_spec
        is_unstoppable = timer_stop is None

        # Resolve both delegated trackers before allocating an id, so a bad
        # spec leaves nothing behind.
        start_tracker = self._get_tracker(timer_start, "start") if timer_start else None
        stop_tracker = self._get_tracker(timer_stop, "stop") if timer_stop else None

        timer_id = self._generate_timer_id()

        def toggle(event: AnalyticsEvent) -> None:
            self._handle_timer_toggle(timer_id, event_type, listener, event)

        start_builder = None
        if start_tracker is not None:
            start_builder = partial(start_tracker.add, context, timer_start.on, timer_start, toggle)
        stop_builder = None
        if stop_tracker is not None:
            stop_builder = partial(stop_tracker.add, context, timer_stop.on, timer_stop, toggle)

        handler = TimerEventHandler(
            timer_spec.interval,
            timer_spec.max_timer_length,
            is_unstoppable,
            timer_spec.immediate,
            start_builder,
            stop_builder,
        )
        self._timers[timer_id] = handler

        if timer_start is None:
            # Timer starts on load.
            self._start_timer(timer_id, event_type, listener)
        else:
            # Timer starts on event.
            handler.listen_for_start()

        return lambda: self._remove_tracker(timer_id)

    def _generate_timer_id(self) -> int:
        self._timer_id_sequence += 1
        return self._timer_id_sequence

    def _get_tracker(self, spec: TriggerConfig, role: str) -> EventTracker:
        """Tracker serving a start or stop spec, restricted to timer-safe kinds."""
        if not isinstance(spec.on, str) or not spec.on:
            raise ConfigurationError(f"Timer {role} specification requires 'on'")
        tracker = self.root.get_tracker_for_allowlist(
            get_tracker_key_name(spec.on), get_tracker_types_for_timer()
        )
        if tracker is None:
            raise ConfigurationError(f"Cannot track timer {role}")
        return tracker

    def _handle_timer_toggle(
        self, timer_id: int, event_type: str, listener: Listener, event: AnalyticsEvent
    ) -> None:
        """Flip the timer and re-arm whichever trigger can change it next."""
        handler = self._timers.get(timer_id)
        if handler is None or not handler.claim_toggle(event):
            return
        if handler.machine.next_state(TimerInput.TOGGLE) is TimerState.STOPPED:
            # Stop timer and listen for start.
            self._stop_timer(timer_id)
            if timer_id not in self._timers:
                return
            if handler.can_listen_for_start():
                handler.listen_for_start()
        else:
            # Start timer and listen for stop.
            self._start_timer(timer_id, event_type, listener)
            # The listener may have removed the timer during the immediate fire.
            if timer_id not in self._timers:
                return
            if handler.can_listen_for_stop():
                handler.listen_for_stop()

    def _start_timer(self, timer_id: int, event_type: str, listener: Listener) -> None:
        handler = self._timers[timer_id]
        if handler.running:
            return

        def timer_callback() -> None:
            listener(self._create_event(event_type))

        handler.start_interval(
            self.root.get_scheduler(),
            timer_callback,
            lambda: self._remove_tracker(timer_id),
        )
        handler.unlisten_for_start()
        tracker_logger.debug(
            f"Timer {timer_id} started ({handler.interval_seconds}s interval, "
            f"immediate={handler.fire_immediately})"
        )
        if handler.fire_immediately:
            timer_callback()

    def _stop_timer(self, timer_id: int) -> None:
        handler = self._timers[timer_id]
        if not handler.running:
            return
        handler.clear_interval()
        handler.unlisten_for_stop()
        tracker_logger.debug(f"Timer {timer_id} stopped")

    def _create_event(self, event_type: str) -> AnalyticsEvent:
        return AnalyticsEvent(self.root.get_root_element(), event_type)

    def _remove_tracker(self, timer_id: int) -> None:
        handler = self._timers.get(timer_id)
        if handler is None:
            return
        try:
            self._stop_timer(timer_id)
            handler.clear_cap()
            handler.unlisten_for_start()
            handler.unlisten_for_stop()
        finally:
            del self._timers[timer_id]
