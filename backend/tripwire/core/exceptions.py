"""Shared exceptions module."""

from typing import Optional

from pydantic import ValidationError


class TripwireException(Exception):
    """Base exception for Tripwire."""

    pass


class ConfigurationError(TripwireException):
    """Exception raised when a trigger configuration is missing or malformed.

    User-caused: bad selector, malformed timer spec, unsupported waitFor value.
    Raised synchronously from ``EventTracker.add``.
    """

    def __init__(self, message: Optional[str] = "Invalid trigger configuration"):
        """Create a new ConfigurationError instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


class InvariantViolationError(TripwireException):
    """Exception raised when an internal invariant of the engine is broken.

    Indicates a defect in the engine itself rather than bad input, e.g. asking a
    timer to listen for a start trigger it was never given.
    """

    def __init__(self, message: Optional[str] = "Internal invariant violated"):
        """Create a new InvariantViolationError instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


class UnknownTriggerError(ConfigurationError):
    """Raised when a trigger names a tracker kind that is not allowed in its context."""

    def __init__(self, trigger_name: str, context: str = "analytics"):
        """Create a new UnknownTriggerError instance.

        Args:
        ----
            trigger_name (str): The tracker key the configuration asked for.
            context (str, optional): Where the trigger was declared.

        """
        self.trigger_name = trigger_name
        self.context = context
        super().__init__(f"Trigger type '{trigger_name}' is not supported for {context}")


def unpack_validation_error(exc: ValidationError) -> dict:
    """Unpack a Pydantic validation error into a dictionary.

    Args:
    ----
        exc (ValidationError): The Pydantic validation error.

    Returns:
    -------
        dict: The dictionary representation of the validation error.

    """
    error_messages = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        ctx_error = error.get("ctx", {}).get("error")
        message = str(ctx_error) if ctx_error is not None else error["msg"]
        error_messages.append({field: message})

    return {"errors": error_messages}


def configuration_error_from(exc: ValidationError) -> ConfigurationError:
    """Convert a Pydantic validation error into a ConfigurationError.

    The first reported problem becomes the message, so validators that raise
    ``ValueError("Bad timer interval specification")`` surface that exact text.
    """
    errors = unpack_validation_error(exc)["errors"]
    if not errors:
        return ConfigurationError()
    (message,) = errors[0].values()
    return ConfigurationError(message)
