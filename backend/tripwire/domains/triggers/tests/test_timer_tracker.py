"""Unit tests for TimerEventTracker: scheduling and start/stop composition."""

import pytest

from tripwire.core.events import AnalyticsEvent, TriggerKind
from tripwire.core.exceptions import ConfigurationError
from tripwire.domains.triggers.fakes import FakeElement, FakeHostEvent


@pytest.fixture
def tracker(fake_root):
    return fake_root.get_tracker(TriggerKind.TIMER)


@pytest.fixture
def start_button(fake_root):
    return FakeElement("start", parent=fake_root.root_element)


@pytest.fixture
def stop_button(fake_root):
    return FakeElement("stop", parent=fake_root.root_element)


def _timer(**timer_spec):
    return {"on": "timer", "timerSpec": timer_spec}


def _click(root, target):
    root.event_target.dispatch(FakeHostEvent("click", target))


class TestUnconditionalTimer:
    def test_fires_immediately_then_every_interval(self, fake_root, tracker, received):
        tracker.add(fake_root.root_element, "timer", _timer(interval=1), received.append)
        assert len(received) == 1

        fake_root.scheduler.advance(3)

        assert len(received) == 4
        assert all(e.type == "timer" for e in received)
        assert all(e.target is fake_root.root_element for e in received)

    def test_not_immediate(self, fake_root, tracker, received):
        tracker.add(
            fake_root.root_element, "timer", _timer(interval=1, immediate=False), received.append
        )
        assert received == []

        fake_root.scheduler.advance(2)

        assert len(received) == 2

    def test_removed_at_max_timer_length(self, fake_root, tracker, received):
        tracker.add(
            fake_root.root_element, "timer", _timer(interval=1, maxTimerLength=5), received.append
        )

        fake_root.scheduler.advance(60)

        assert len(received) <= 6
        assert len(received) == 5
        assert tracker.get_tracked_timer_keys() == []
        assert fake_root.scheduler.pending == []

    def test_each_add_gets_its_own_timer(self, fake_root, tracker, received):
        tracker.add(fake_root.root_element, "timer", _timer(interval=1), received.append)
        tracker.add(fake_root.root_element, "timer", _timer(interval=1), received.append)

        keys = tracker.get_tracked_timer_keys()

        assert len(keys) == 2
        assert len(set(keys)) == 2

    def test_first_timer_id_is_two(self, fake_root, tracker, received):
        tracker.add(fake_root.root_element, "timer", _timer(interval=1), received.append)

        assert tracker.get_tracked_timer_keys() == [2]


class TestValidation:
    def test_missing_timer_spec(self, fake_root, tracker, received):
        with pytest.raises(ConfigurationError) as exc_info:
            tracker.add(fake_root.root_element, "timer", {"on": "timer"}, received.append)

        assert exc_info.value.message == "Bad timer specification"

    def test_bad_interval(self, fake_root, tracker, received):
        with pytest.raises(ConfigurationError) as exc_info:
            tracker.add(fake_root.root_element, "timer", _timer(interval=0.2), received.append)

        assert exc_info.value.message == "Bad timer interval specification"

    @pytest.mark.parametrize("role, key", [("start", "startSpec"), ("stop", "stopSpec")])
    def test_timer_cannot_start_or_stop_on_timer(self, fake_root, tracker, received, role, key):
        config = _timer(interval=1, **{key: {"on": "timer"}})

        with pytest.raises(ConfigurationError) as exc_info:
            tracker.add(fake_root.root_element, "timer", config, received.append)

        assert exc_info.value.message == f"Cannot track timer {role}"
        assert tracker.get_tracked_timer_keys() == []

    def test_start_spec_requires_on(self, fake_root, tracker, received):
        config = _timer(interval=1, startSpec={"selector": "#start"})

        with pytest.raises(ConfigurationError):
            tracker.add(fake_root.root_element, "timer", config, received.append)


class TestStartStop:
    def test_waits_for_start_trigger(self, fake_root, tracker, start_button, received):
        config = _timer(interval=1, startSpec={"on": "click", "selector": "#start"})
        tracker.add(fake_root.root_element, "timer", config, received.append)

        fake_root.scheduler.advance(5)
        assert received == []

        _click(fake_root, start_button)
        assert len(received) == 1

        fake_root.scheduler.advance(2)
        assert len(received) == 3

    def test_start_then_stop(self, fake_root, tracker, start_button, stop_button, received):
        config = _timer(
            interval=1,
            startSpec={"on": "click", "selector": "#start"},
            stopSpec={"on": "click", "selector": "#stop"},
        )
        tracker.add(fake_root.root_element, "timer", config, received.append)

        _click(fake_root, stop_button)
        assert received == []

        _click(fake_root, start_button)
        _click(fake_root, start_button)
        fake_root.scheduler.advance(2)
        assert len(received) == 3

        _click(fake_root, stop_button)
        fake_root.scheduler.advance(5)
        assert len(received) == 3

        _click(fake_root, start_button)
        assert len(received) == 4

    def test_same_event_alternates_start_and_stop(self, fake_root, tracker, start_button, received):
        spec = {"on": "click", "selector": "#start"}
        tracker.add(
            fake_root.root_element,
            "timer",
            _timer(interval=1, startSpec=spec, stopSpec=spec),
            received.append,
        )
        (timer_id,) = tracker.get_tracked_timer_keys()
        handler = tracker._timers[timer_id]

        states = []
        for _ in range(4):
            _click(fake_root, start_button)
            states.append(handler.running)

        assert states == [True, False, True, False]
        assert len(received) == 2

    def test_stoppable_timer_is_not_capped(self, fake_root, tracker, stop_button, received):
        config = _timer(interval=1, maxTimerLength=2, stopSpec={"on": "click", "selector": "#stop"})
        tracker.add(fake_root.root_element, "timer", config, received.append)

        fake_root.scheduler.advance(10)

        assert len(received) == 11
        assert len(tracker.get_tracked_timer_keys()) == 1


class TestCustomEventToggle:
    @pytest.fixture
    def custom(self, fake_root):
        return fake_root.get_tracker(TriggerKind.CUSTOM)

    def _add_toggled_timer(self, fake_root, tracker, received):
        spec = {"on": "toggle-me"}
        tracker.add(
            fake_root.root_element,
            "timer",
            _timer(interval=1, startSpec=spec, stopSpec=spec),
            received.append,
        )
        (timer_id,) = tracker.get_tracked_timer_keys()
        return tracker._timers[timer_id]

    @pytest.mark.asyncio
    async def test_buffered_toggle_does_not_flip_timer_again(
        self, fake_root, tracker, custom, received, drain
    ):
        handler = self._add_toggled_timer(fake_root, tracker, received)
        await drain()

        custom.trigger(AnalyticsEvent(fake_root.root_element, "toggle-me"))
        await drain(50)

        assert handler.running
        assert len(received) == 1

        custom.trigger(AnalyticsEvent(fake_root.root_element, "toggle-me"))
        await drain(50)

        assert not handler.running
        assert len(received) == 1

        fake_root.scheduler.advance(3)
        assert len(received) == 1

    @pytest.mark.asyncio
    async def test_event_before_add_starts_timer_once(
        self, fake_root, tracker, custom, received, drain
    ):
        custom.trigger(AnalyticsEvent(fake_root.root_element, "toggle-me"))

        handler = self._add_toggled_timer(fake_root, tracker, received)
        await drain(50)

        assert handler.running
        assert len(received) == 1

        fake_root.scheduler.advance(2)
        assert len(received) == 3


class TestTeardown:
    def test_unlisten_removes_timer(self, fake_root, tracker, start_button, received):
        config = _timer(interval=1, startSpec={"on": "click", "selector": "#start"})
        unlisten = tracker.add(fake_root.root_element, "timer", config, received.append)

        unlisten()
        unlisten()
        _click(fake_root, start_button)
        fake_root.scheduler.advance(5)

        assert received == []
        assert tracker.get_tracked_timer_keys() == []

    def test_unlisten_during_immediate_fire_arms_nothing(
        self, fake_root, tracker, start_button, received
    ):
        spec = {"on": "click", "selector": "#start"}
        handles = {}

        def listener(event):
            received.append(event)
            handles["unlisten"]()

        handles["unlisten"] = tracker.add(
            fake_root.root_element,
            "timer",
            _timer(interval=1, startSpec=spec, stopSpec=spec),
            listener,
        )

        _click(fake_root, start_button)

        assert len(received) == 1
        assert tracker.get_tracked_timer_keys() == []
        assert len(fake_root.get_tracker(TriggerKind.CLICK)._clicks) == 0
        assert fake_root.scheduler.pending == []

    def test_unlisten_running_timer_cancels_schedule(self, fake_root, tracker, received):
        unlisten = tracker.add(fake_root.root_element, "timer", _timer(interval=1), received.append)

        unlisten()

        assert fake_root.scheduler.pending == []

    def test_dispose_removes_every_timer(self, fake_root, tracker, received):
        tracker.add(fake_root.root_element, "timer", _timer(interval=1), received.append)
        tracker.add(fake_root.root_element, "timer", _timer(interval=2), received.append)

        tracker.dispose()
        fake_root.scheduler.advance(10)

        assert len(received) == 2
        assert tracker.get_tracked_timer_keys() == []
