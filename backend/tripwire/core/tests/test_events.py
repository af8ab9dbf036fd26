"""Unit tests for AnalyticsEvent and the event enums."""

import pytest
from pydantic import ValidationError

from tripwire.core.events import AnalyticsEvent, TriggerKind, VideoAnalyticsEvent


class TestAnalyticsEvent:
    def test_positional_construction(self):
        event = AnalyticsEvent("el", "click", {"id": "1"})

        assert event.target == "el"
        assert event.type == "click"
        assert event.vars == {"id": "1"}

    def test_vars_default_to_fresh_dict(self):
        first = AnalyticsEvent("el", "click")
        second = AnalyticsEvent("el", "click")

        assert first.vars == {}
        assert first.vars is not second.vars

    def test_event_is_frozen(self):
        event = AnalyticsEvent("el", "click")

        with pytest.raises(ValidationError):
            event.type = "other"


class TestEnums:
    def test_trigger_kinds_use_wire_names(self):
        assert TriggerKind("render-start") is TriggerKind.RENDER_START
        assert TriggerKind.INI_LOAD.value == "ini-load"

    def test_video_events_share_prefix(self):
        assert all(event.value.startswith("video-") for event in VideoAnalyticsEvent)
