"""Logging for Tripwire.

Wraps the standard library logger in a ``ContextualLogger`` that carries
identity dimensions (component, root, tracker kind) and an optional message
prefix. Child loggers are derived, never mutated:

    tracker_logger = logger.with_prefix("TimerEventTracker: ").with_context(
        component="timer_tracker"
    )
"""

import logging
from typing import Any, MutableMapping

from tripwire.core.config import settings

_LOGGER_NAME = "tripwire"
_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter with structured context dimensions and a message prefix.

    Dimensions are attached to every record under ``extra`` so handlers can
    render or ship them. ``with_context`` and ``with_prefix`` return new
    adapters sharing the same underlying logger.
    """

    def __init__(
        self,
        logger: logging.Logger,
        dimensions: dict[str, Any] | None = None,
        prefix: str = "",
    ) -> None:
        """Initialize the contextual logger.

        Args:
            logger: Underlying stdlib logger.
            dimensions: Context key/values attached to each record.
            prefix: Text prepended to each message.
        """
        super().__init__(logger, dict(dimensions or {}))
        self.dimensions: dict[str, Any] = dict(dimensions or {})
        self.prefix = prefix

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, Any]:
        """Prepend the prefix and merge dimensions into ``extra``."""
        extra = dict(self.dimensions)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return f"{self.prefix}{msg}", kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a child logger with additional dimensions."""
        merged = {**self.dimensions, **dimensions}
        return ContextualLogger(self.logger, merged, self.prefix)

    def with_prefix(self, prefix: str) -> "ContextualLogger":
        """Return a child logger whose messages start with ``prefix``."""
        return ContextualLogger(self.logger, self.dimensions, f"{self.prefix}{prefix}")


def _configure_base_logger() -> logging.Logger:
    base = logging.getLogger(_LOGGER_NAME)
    base.setLevel(settings.LOG_LEVEL)
    if not base.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        base.addHandler(handler)
    return base


logger = ContextualLogger(_configure_base_logger())
