"""Unit tests for FakeScheduler: manual clock ordering and cancellation."""

import pytest

from tripwire.adapters.scheduler.fake import FakeScheduler


class TestCallLater:
    def test_runs_only_once_due(self):
        scheduler = FakeScheduler()
        calls = []
        scheduler.call_later(2.0, lambda: calls.append(scheduler.now))

        scheduler.advance(1.0)
        assert calls == []

        scheduler.advance(1.0)
        assert calls == [2.0]

    def test_cancelled_call_never_runs(self):
        scheduler = FakeScheduler()
        calls = []
        handle = scheduler.call_later(1.0, lambda: calls.append(1))

        handle.cancel()
        scheduler.advance(5.0)

        assert calls == []
        assert scheduler.pending == []

    def test_same_due_time_runs_in_scheduling_order(self):
        scheduler = FakeScheduler()
        calls = []
        scheduler.call_later(1.0, lambda: calls.append("a"))
        scheduler.call_later(1.0, lambda: calls.append("b"))

        scheduler.advance(1.0)

        assert calls == ["a", "b"]


class TestCallEvery:
    def test_repeats_each_interval(self):
        scheduler = FakeScheduler()
        ticks = []
        scheduler.call_every(1.0, lambda: ticks.append(scheduler.now))

        scheduler.advance(3.5)

        assert ticks == [1.0, 2.0, 3.0]
        assert scheduler.now == 3.5

    def test_callback_can_cancel_itself(self):
        scheduler = FakeScheduler()
        ticks = []
        handles = {}

        def tick():
            ticks.append(scheduler.now)
            handles["tick"].cancel()

        handles["tick"] = scheduler.call_every(1.0, tick)
        scheduler.advance(5.0)

        assert ticks == [1.0]

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            FakeScheduler().call_every(0, lambda: None)
