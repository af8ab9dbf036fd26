"""The analytics event produced by every tracker.

Frozen Pydantic model: once a tracker builds an event, listeners and buffers
share it without copying.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AnalyticsEvent(BaseModel):
    """Normalized occurrence of a trigger.

    Attributes:
        target: The most relevant element for the occurrence.
        type: Trigger event type, e.g. ``click`` or ``video-session``.
        vars: Variables contributed by the occurrence. Each event gets its own
            empty dict by default.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    target: Any
    type: str
    vars: dict[str, Any] = Field(default_factory=dict)

    def __init__(self, target: Any, type: str, vars: dict[str, Any] | None = None, **data: Any):
        """Allow positional construction: ``AnalyticsEvent(target, "click")``."""
        super().__init__(target=target, type=type, vars={} if vars is None else vars, **data)
