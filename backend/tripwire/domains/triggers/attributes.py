"""Variable extraction from ``data-vars-*`` attributes."""

import re
from typing import Any, Pattern

VARIABLE_DATA_ATTRIBUTE_KEY = re.compile(r"^vars(.+)")


def get_data_params_from_attributes(
    element: Any, param_pattern: Pattern[str] = VARIABLE_DATA_ATTRIBUTE_KEY
) -> dict[str, str]:
    """Collect dataset entries matching ``param_pattern`` under their bare name.

    ``data-vars-event-id`` shows up in the dataset as ``varsEventId`` and is
    returned as ``eventId``. Elements without a dataset yield nothing.
    """
    dataset = getattr(element, "dataset", None) or {}
    params: dict[str, str] = {}
    for key, value in dataset.items():
        match = param_pattern.match(key)
        if match:
            name = match.group(1)
            params[name[0].lower() + name[1:]] = value
    return params
