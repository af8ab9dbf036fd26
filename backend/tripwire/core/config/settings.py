"""Engine settings with defaults.

All defaults are defined here in the schema. Uses Pydantic Settings for
automatic env var loading, e.g. ``TRIPWIRE_LOG_LEVEL=DEBUG``.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Tripwire settings.

    Env vars use the ``TRIPWIRE_`` prefix:
        TRIPWIRE_CUSTOM_EVENT_BUFFER_SECONDS=5
    """

    model_config = SettingsConfigDict(
        env_prefix="TRIPWIRE_",
        extra="ignore",
    )

    LOG_LEVEL: str = Field("INFO", description="Level for the tripwire logger")

    CUSTOM_EVENT_BUFFER_SECONDS: float = Field(
        10.0,
        gt=0,
        description="How long custom events fired before any listener are kept for replay",
    )
    MIN_TIMER_INTERVAL_SECONDS: float = Field(
        0.5, gt=0, description="Smallest interval a timer trigger may use"
    )
    DEFAULT_MAX_TIMER_LENGTH_SECONDS: float = Field(
        7200.0,
        gt=0,
        description="Cap for timers that have no stop trigger",
    )

    @model_validator(mode="after")
    def validate_log_level(self):
        """Normalize the log level name."""
        self.LOG_LEVEL = self.LOG_LEVEL.upper()
        if self.LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid config: unknown log level '{self.LOG_LEVEL}'")
        return self
