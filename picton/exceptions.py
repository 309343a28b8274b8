"""
Picton Exception Hierarchy

Exception types raised by the blob helpers, with error codes and context.

Remote failures are never wrapped: errors raised by the storage SDK
(``azure.core.exceptions.HttpResponseError`` and friends) reach the caller
unchanged.

Author: Picton Contributors
Date: 2025
"""

from typing import Any, Dict, Optional


class PictonError(Exception):
    """
    Base exception for all Picton errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code (e.g., 'ArgumentMissing')
        details: Additional context (parameter name, bounds, etc.)
    """

    error_code: str = "PictonError"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.error_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


# ========== Argument Errors ==========

class ArgumentMissingError(PictonError, ValueError):
    """Raised when a required argument is None."""
    error_code = "ArgumentMissing"

    def __init__(self, parameter: str, message: Optional[str] = None):
        message = message or f"Argument '{parameter}' must not be None"
        super().__init__(message, details={"parameter": parameter})
        self.parameter = parameter


class ArgumentOutOfRangeError(PictonError, ValueError):
    """Raised when an argument lies outside its allowed bounds."""
    error_code = "ArgumentOutOfRange"

    def __init__(
        self,
        parameter: str,
        value: Any,
        minimum: Any,
        maximum: Any,
        message: Optional[str] = None
    ):
        message = message or (
            f"Argument '{parameter}' must be between {minimum} and {maximum} "
            f"(got {value})"
        )
        details = {
            "parameter": parameter,
            "value": value,
            "minimum": minimum,
            "maximum": maximum
        }
        super().__init__(message, details=details)
        self.parameter = parameter
        self.value = value


# ========== Credential Errors ==========

class MissingCredentialError(PictonError):
    """Raised when an operation needs an account key that was not supplied."""
    error_code = "MissingCredential"

    def __init__(self, operation: str, message: Optional[str] = None):
        message = message or f"An account key is required to {operation}"
        super().__init__(message, details={"operation": operation})
