"""Unit tests for exceptions and validation-error conversion."""

from pydantic import BaseModel, ValidationError, field_validator

from tripwire.core.exceptions import (
    ConfigurationError,
    UnknownTriggerError,
    configuration_error_from,
    unpack_validation_error,
)


class _Model(BaseModel):
    interval: int

    @field_validator("interval")
    @classmethod
    def positive(cls, value):
        if value <= 0:
            raise ValueError("Bad interval")
        return value


def _validation_error(data) -> ValidationError:
    try:
        _Model.model_validate(data)
    except ValidationError as e:
        return e
    raise AssertionError("expected a validation error")


class TestUnpackValidationError:
    def test_uses_validator_message(self):
        errors = unpack_validation_error(_validation_error({"interval": -1}))

        assert errors == {"errors": [{"interval": "Bad interval"}]}

    def test_falls_back_to_pydantic_message(self):
        errors = unpack_validation_error(_validation_error({}))

        assert list(errors["errors"][0]) == ["interval"]


class TestConfigurationError:
    def test_default_message(self):
        assert ConfigurationError().message == "Invalid trigger configuration"

    def test_from_validation_error_keeps_first_message(self):
        error = configuration_error_from(_validation_error({"interval": 0}))

        assert isinstance(error, ConfigurationError)
        assert str(error) == "Bad interval"

    def test_unknown_trigger_is_a_configuration_error(self):
        error = UnknownTriggerError("timer", context="timer")

        assert isinstance(error, ConfigurationError)
        assert error.trigger_name == "timer"
        assert "timer" in error.message
