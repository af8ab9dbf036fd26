"""Trigger configuration schemas with defaults.

A trigger arrives as a flat, string-keyed mapping using the configuration's
own camelCase keys (``selectionMethod``, ``timerSpec``, ``waitFor``...). It is
parsed once, at registration, into these frozen models. Unknown keys are kept
so collaborators (the visibility engine in particular) still see them.
"""

import math
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from tripwire.core.config import settings
from tripwire.core.exceptions import configuration_error_from

_SPEC_CONFIG = ConfigDict(frozen=True, populate_by_name=True, extra="allow")


def _to_number(value: Any) -> float:
    """Numeric reading of a configuration value; NaN when it has none."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if value is None:
        return 0.0
    if isinstance(value, str):
        try:
            return float(value.strip() or 0)
        except ValueError:
            return math.nan
    return math.nan


def _none_as_empty(value: Any) -> Any:
    return {} if value is None else value


class VideoSpec(BaseModel):
    """``videoSpec`` of a video trigger."""

    model_config = _SPEC_CONFIG

    selector: Optional[str] = None
    interval: Optional[int] = Field(
        None, description="Deliver every Nth video-seconds-played event"
    )
    end_session_when_invisible: bool = Field(False, alias="end-session-when-invisible")
    exclude_autoplay: bool = Field(False, alias="exclude-autoplay")


class VisibilitySpec(BaseModel):
    """``visibilitySpec`` of a visible/hidden trigger.

    Thresholds and timing keys are not modelled; they stay in the extras for
    the visibility engine.
    """

    model_config = _SPEC_CONFIG

    selector: Optional[str] = None
    selection_method: Optional[str] = Field(None, alias="selectionMethod")
    wait_for: Optional[str] = Field(None, alias="waitFor")


class TimerSpec(BaseModel):
    """``timerSpec`` of a timer trigger."""

    model_config = _SPEC_CONFIG

    interval: float = Field(..., description="Seconds between timer events")
    max_timer_length: float = Field(
        default_factory=lambda: settings.DEFAULT_MAX_TIMER_LENGTH_SECONDS,
        alias="maxTimerLength",
        description="Cap in seconds for timers without a stop trigger",
    )
    immediate: bool = Field(True, description="Fire once as soon as the timer starts")
    start_spec: Optional["TriggerConfig"] = Field(None, alias="startSpec")
    stop_spec: Optional["TriggerConfig"] = Field(None, alias="stopSpec")

    @model_validator(mode="before")
    @classmethod
    def validate_shape(cls, data: Any) -> Any:
        """Require a mapping with an ``interval`` key."""
        if isinstance(data, TimerSpec):
            return data
        if not isinstance(data, Mapping):
            raise ValueError("Bad timer specification")
        if "interval" not in data:
            raise ValueError("Timer interval specification required")
        return data

    @field_validator("interval", mode="before")
    @classmethod
    def validate_interval(cls, value: Any) -> float:
        """Interval must be at least the minimum timer interval."""
        interval = _to_number(value)
        if math.isnan(interval):
            interval = 0.0
        if interval < settings.MIN_TIMER_INTERVAL_SECONDS:
            raise ValueError("Bad timer interval specification")
        return interval

    @field_validator("max_timer_length", mode="before")
    @classmethod
    def validate_max_timer_length(cls, value: Any) -> float:
        """Max length must be a positive number of seconds."""
        max_length = _to_number(value)
        if math.isnan(max_length) or max_length <= 0:
            raise ValueError("Bad maxTimerLength specification")
        return max_length

    @field_validator("immediate", mode="before")
    @classmethod
    def validate_immediate(cls, value: Any) -> bool:
        """Any truthy value means fire immediately."""
        return bool(value)

    @field_validator("start_spec", mode="before")
    @classmethod
    def validate_start_spec(cls, value: Any) -> Any:
        """Start spec, when given, is itself a trigger mapping."""
        if value is not None and not isinstance(value, (Mapping, TriggerConfig)):
            raise ValueError("Bad timer start specification")
        return value

    @field_validator("stop_spec", mode="before")
    @classmethod
    def validate_stop_spec(cls, value: Any) -> Any:
        """Stop spec, when given, is itself a trigger mapping."""
        if value is not None and not isinstance(value, (Mapping, TriggerConfig)):
            raise ValueError("Bad timer stop specification")
        return value


class TriggerConfig(BaseModel):
    """One trigger as handed to ``EventTracker.add``.

    Usage:
        config = TriggerConfig.coerce({"on": "click", "selector": "#buy"})
        config.selection_method  # None
    """

    model_config = _SPEC_CONFIG

    on: Optional[str] = None
    selector: Optional[str] = None
    selection_method: Optional[str] = Field(None, alias="selectionMethod")
    timer_spec: Optional[TimerSpec] = Field(None, alias="timerSpec")
    video_spec: VideoSpec = Field(default_factory=VideoSpec, alias="videoSpec")
    visibility_spec: VisibilitySpec = Field(default_factory=VisibilitySpec, alias="visibilitySpec")

    @field_validator("video_spec", "visibility_spec", mode="before")
    @classmethod
    def default_empty_spec(cls, value: Any) -> Any:
        """A null nested spec behaves like an empty one."""
        return _none_as_empty(value)

    @classmethod
    def coerce(cls, config: Union["TriggerConfig", Mapping[str, Any], None]) -> "TriggerConfig":
        """Parse a raw trigger mapping, or pass an already parsed one through.

        Raises:
            ConfigurationError: If the mapping is malformed.
        """
        if isinstance(config, TriggerConfig):
            return config
        try:
            return cls.model_validate(_none_as_empty(config))
        except ValidationError as e:
            raise configuration_error_from(e) from e


TimerSpec.model_rebuild()
