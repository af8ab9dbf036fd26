"""Unit tests for VisibilityTracker: readiness gates and report forwarding."""

import pytest

from tripwire.core.events import TriggerKind
from tripwire.core.exceptions import ConfigurationError
from tripwire.domains.triggers.fakes import FakeManagedElement
from tripwire.domains.triggers.trackers import IniLoadTracker


@pytest.fixture
def tracker(fake_root):
    return fake_root.get_tracker(TriggerKind.VISIBLE)


class TestRootVisibility:
    def test_root_trigger_is_ungated(self, fake_root, tracker, received):
        tracker.add(fake_root.root_element, "visible", {"on": "visible"}, received.append)

        (call,) = fake_root.visibility.root_calls
        assert call.ready is None
        assert call.create_report_ready is None

    def test_reported_state_becomes_event(self, fake_root, tracker, received):
        tracker.add(fake_root.root_element, "visible", {"on": "visible"}, received.append)

        fake_root.visibility.root_calls[0].report({"totalVisibleTime": 1500})

        assert len(received) == 1
        assert received[0].target is fake_root.root_element
        assert received[0].type == "visible"
        assert received[0].vars == {"totalVisibleTime": 1500}

    def test_spec_extras_reach_visibility_service(self, fake_root, tracker, received):
        config = {"on": "visible", "visibilitySpec": {"visiblePercentageMin": 50}}
        tracker.add(fake_root.root_element, "visible", config, received.append)

        spec = fake_root.visibility.root_calls[0].spec
        assert spec.model_extra == {"visiblePercentageMin": 50}

    def test_hidden_gets_report_ready_factory(self, fake_root, received):
        tracker = fake_root.get_tracker(TriggerKind.HIDDEN)

        tracker.add(fake_root.root_element, "hidden", {"on": "hidden"}, received.append)

        assert fake_root.visibility.root_calls[0].create_report_ready is not None

    def test_unlisten_forwards_to_service(self, fake_root, tracker, received):
        unlisten = tracker.add(
            fake_root.root_element, "visible", {"on": "visible"}, received.append
        )

        unlisten()

        assert fake_root.visibility.root_calls[0].unlistened

    def test_unlisten_twice_tears_down_once(self, fake_root, tracker, received):
        unlisten = tracker.add(
            fake_root.root_element, "visible", {"on": "visible"}, received.append
        )

        unlisten()
        unlisten()

        assert fake_root.visibility.root_calls[0].unlisten_count == 1

    @pytest.mark.asyncio
    async def test_wait_for_render_start(self, fake_root, tracker, received, drain):
        config = {"on": "visible", "visibilitySpec": {"waitFor": "render-start"}}
        tracker.add(fake_root.root_element, "visible", config, received.append)

        ready = fake_root.visibility.root_calls[0].ready
        assert not ready.done()

        fake_root.root_signals.signal("render-start")
        await drain()

        assert ready.done()


class TestElementVisibility:
    @pytest.mark.asyncio
    async def test_element_waits_for_ini_load_by_default(
        self, fake_root, tracker, ad, received, drain
    ):
        tracker.add(
            fake_root.root_element, "visible", {"on": "visible", "selector": "#ad"}, received.append
        )
        await drain()

        (call,) = fake_root.visibility.element_calls
        assert call.element is ad
        assert not call.ready.done()

        ad.signal_source.signal("ini-load")
        await drain()

        assert call.ready.done()

    @pytest.mark.asyncio
    async def test_wait_for_none_disables_gate(self, fake_root, tracker, ad, received, drain):
        config = {"on": "visible", "selector": "#ad", "visibilitySpec": {"waitFor": "none"}}
        tracker.add(fake_root.root_element, "visible", config, received.append)
        await drain()

        assert fake_root.visibility.element_calls[0].ready is None

    @pytest.mark.asyncio
    async def test_report_merges_data_vars(self, fake_root, tracker, ad, received, drain):
        tracker.add(
            fake_root.root_element, "visible", {"on": "visible", "selector": "#ad"}, received.append
        )
        await drain()

        fake_root.visibility.element_calls[0].report({"maxVisiblePercentage": 100})

        assert received[0].target is ad
        assert received[0].vars == {"maxVisiblePercentage": 100, "slot": "top"}

    @pytest.mark.asyncio
    async def test_selector_from_visibility_spec(self, fake_root, tracker, ad, received, drain):
        config = {"on": "visible", "visibilitySpec": {"selector": "#ad"}}
        tracker.add(fake_root.root_element, "visible", config, received.append)
        await drain()

        assert fake_root.visibility.element_calls[0].element is ad

    @pytest.mark.asyncio
    async def test_unlisten_before_element_resolves(self, fake_root, tracker, received, drain):
        unlisten = tracker.add(
            fake_root.root_element,
            "visible",
            {"on": "visible", "selector": "#late"},
            received.append,
        )
        await drain()

        unlisten()
        fake_root.add_element(FakeManagedElement("late", parent=fake_root.root_element))
        await drain()

        assert fake_root.visibility.element_calls == []

    @pytest.mark.asyncio
    async def test_unlisten_after_resolution(self, fake_root, tracker, ad, received, drain):
        unlisten = tracker.add(
            fake_root.root_element, "visible", {"on": "visible", "selector": "#ad"}, received.append
        )
        await drain()

        unlisten()

        assert fake_root.visibility.element_calls[0].unlistened


class TestReadyPromise:
    def test_no_wait_for_and_no_selector_is_ungated(self, tracker):
        assert tracker.get_ready_promise(None, None) is None

    @pytest.mark.asyncio
    async def test_selector_defaults_to_ini_load(self, fake_root, tracker):
        ready = tracker.get_ready_promise(None, "#ad")

        assert ready is not None
        assert "ini-load" in fake_root.root_signals.requested
        assert isinstance(tracker._wait_for_trackers["ini-load"], IniLoadTracker)

    @pytest.mark.parametrize("wait_for", ["click", "timer", "visible"])
    def test_unsupported_wait_for(self, fake_root, tracker, received, wait_for):
        config = {"on": "visible", "visibilitySpec": {"waitFor": wait_for}}

        with pytest.raises(ConfigurationError) as exc_info:
            tracker.add(fake_root.root_element, "visible", config, received.append)

        assert exc_info.value.message == f"waitFor value {wait_for} not supported"
        assert fake_root.visibility.root_calls == []


class TestReportReadyPromise:
    @pytest.mark.asyncio
    async def test_resolved_when_page_already_hidden(self, fake_root, tracker):
        fake_root.viewer.set_visible(False)

        assert tracker.create_report_ready_promise().done()

    @pytest.mark.asyncio
    async def test_resolves_when_page_becomes_hidden(self, fake_root, tracker):
        ready = tracker.create_report_ready_promise()
        assert not ready.done()

        fake_root.viewer.set_visible(True)
        assert not ready.done()

        fake_root.viewer.set_visible(False)

        assert ready.done()
        assert fake_root.viewer.handler_count == 0
