"""Unit tests for data-vars attribute extraction."""

import re

from tripwire.domains.triggers.attributes import get_data_params_from_attributes
from tripwire.domains.triggers.fakes import FakeElement


class TestGetDataParamsFromAttributes:
    def test_strips_prefix_and_lowercases_first_letter(self):
        element = FakeElement("el", dataset={"varsEventId": "42", "varsColor": "red"})

        assert get_data_params_from_attributes(element) == {"eventId": "42", "color": "red"}

    def test_ignores_other_attributes(self):
        element = FakeElement("el", dataset={"trigger": "x", "variant": "b"})

        assert get_data_params_from_attributes(element) == {}

    def test_element_without_dataset(self):
        assert get_data_params_from_attributes(object()) == {}

    def test_custom_pattern(self):
        element = FakeElement("el", dataset={"paramsPage": "2"})

        assert get_data_params_from_attributes(element, re.compile(r"^params(.+)")) == {
            "page": "2"
        }
