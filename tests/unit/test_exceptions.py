"""
Unit Tests for Picton Exceptions

Tests for the exception hierarchy and its dictionary form.
"""

import pytest

from picton.exceptions import (
    ArgumentMissingError,
    ArgumentOutOfRangeError,
    MissingCredentialError,
    PictonError,
)


class TestPictonError:
    """Tests for base PictonError class."""

    def test_basic_error(self):
        error = PictonError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.error_code == "PictonError"
        assert error.details == {}

    def test_error_with_custom_code(self):
        error = PictonError("Custom error", error_code="CustomCode", details={"key": "value"})
        assert error.error_code == "CustomCode"
        assert error.to_dict() == {
            "error": {
                "code": "CustomCode",
                "message": "Custom error",
                "details": {"key": "value"}
            }
        }


class TestArgumentErrors:

    def test_argument_missing(self):
        error = ArgumentMissingError("blob")

        assert isinstance(error, PictonError)
        assert isinstance(error, ValueError)
        assert error.error_code == "ArgumentMissing"
        assert error.message == "Argument 'blob' must not be None"
        assert error.details == {"parameter": "blob"}

    def test_argument_out_of_range(self):
        error = ArgumentOutOfRangeError("max_lease_attempts", 0, 1, 10)

        assert isinstance(error, ValueError)
        assert error.value == 0
        assert error.message == "Argument 'max_lease_attempts' must be between 1 and 10 (got 0)"

    def test_custom_message(self):
        error = ArgumentOutOfRangeError("lease_duration", 5, 15, 60, message="too short")

        assert str(error) == "too short"

    def test_catch_as_value_error(self):
        with pytest.raises(ValueError):
            raise ArgumentOutOfRangeError("lease_duration", 5, 15, 60)


class TestMissingCredentialError:

    def test_message(self):
        error = MissingCredentialError("generate a shared access signature")

        assert error.message == "An account key is required to generate a shared access signature"
        assert error.error_code == "MissingCredential"
        assert not isinstance(error, ValueError)
