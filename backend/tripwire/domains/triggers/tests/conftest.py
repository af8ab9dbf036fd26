"""Fixtures for triggers domain tests."""

import pytest

from tripwire.domains.triggers.fakes import FakeElement, FakeManagedElement


@pytest.fixture
def received():
    """Listener sink: collects every delivered AnalyticsEvent."""
    return []


@pytest.fixture
def panel(fake_root):
    """Registered plain element under the root, resolvable as ``#panel``."""
    element = FakeElement("panel", parent=fake_root.root_element)
    fake_root.add_element(element)
    return element


@pytest.fixture
def ad(fake_root):
    """Registered managed element under the root, resolvable as ``#ad``."""
    element = FakeManagedElement("ad", parent=fake_root.root_element, dataset={"varsSlot": "top"})
    fake_root.add_element(element)
    return element
