"""
Blob Models

Lease requests, remote failure classification, metadata and SAS policies.

Author: Picton Contributors
Date: 2025
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..exceptions import ArgumentMissingError, ArgumentOutOfRangeError

# Lease durations accepted by the service, in seconds
MIN_LEASE_DURATION = 15
MAX_LEASE_DURATION = 60
DEFAULT_LEASE_DURATION = 15

MIN_LEASE_ATTEMPTS = 1
MAX_LEASE_ATTEMPTS = 10

SAS_PERMISSION_LETTERS = "racwdxytlfmeop"


class BlobType(str, Enum):
    """Blob type."""
    BLOCK_BLOB = "BlockBlob"
    APPEND_BLOB = "AppendBlob"
    PAGE_BLOB = "PageBlob"


def _check_count(parameter: str, value: Any, minimum: int, maximum: int) -> None:
    """Require a whole number (bool excluded) within [minimum, maximum]."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ArgumentOutOfRangeError(
            parameter,
            value,
            minimum,
            maximum,
            message=f"Argument '{parameter}' must be an integer between {minimum} and {maximum} (got {value!r})",
        )
    if not minimum <= value <= maximum:
        raise ArgumentOutOfRangeError(parameter, value, minimum, maximum)


def validate_lease_duration(lease_duration: Optional[int]) -> None:
    """Raise ArgumentOutOfRangeError unless the duration is None or 15-60 seconds."""
    if lease_duration is None:
        return
    _check_count("lease_duration", lease_duration, MIN_LEASE_DURATION, MAX_LEASE_DURATION)


@dataclass(frozen=True)
class LeaseRequest:
    """
    A single lease acquisition request.

    Validated on construction; lives only for the duration of one call.

    Attributes:
        blob: Handle of the remote object to lease
        lease_duration: Lease duration in seconds, or None for the service default
        max_attempts: Number of acquire calls allowed before giving up
    """

    blob: Any
    lease_duration: Optional[int] = None
    max_attempts: int = 1

    def __post_init__(self):
        if self.blob is None:
            raise ArgumentMissingError("blob")
        validate_lease_duration(self.lease_duration)
        _check_count("max_lease_attempts", self.max_attempts, MIN_LEASE_ATTEMPTS, MAX_LEASE_ATTEMPTS)

    @property
    def effective_duration(self) -> int:
        """Duration sent to the service."""
        if self.lease_duration is None:
            return DEFAULT_LEASE_DURATION
        return self.lease_duration


class FailureKind(str, Enum):
    """Classification of a remote storage error."""
    CONFLICT = "conflict"
    REMOTE = "remote"


@dataclass(frozen=True)
class RemoteFailure:
    """
    A remote error reduced to the fields the retry loop branches on.

    Attributes:
        kind: CONFLICT when the resource is already leased, REMOTE otherwise
        status_code: HTTP status reported by the service, if any
        error_code: Storage error code (e.g., 'LeaseAlreadyPresent'), if any
        message: Error message
    """

    kind: FailureKind
    status_code: Optional[int]
    error_code: Optional[str]
    message: str

    @property
    def retryable(self) -> bool:
        return self.kind is FailureKind.CONFLICT


class BlobMetadata(BaseModel):
    """
    Blob metadata (x-ms-meta-* headers).

    Names must be valid identifiers; the service rejects anything else.
    """

    metadata: Dict[str, str] = Field(default_factory=dict)

    @field_validator('metadata', mode='before')
    @classmethod
    def validate_metadata(cls, v: Dict[str, Any]) -> Dict[str, str]:
        """Ensure names are identifiers and values are strings."""
        for key in v:
            if not isinstance(key, str) or not key.isidentifier():
                raise ValueError(f"Invalid metadata name '{key}': must be a valid identifier")
        return {k: str(val) for k, val in v.items()}


class SharedAccessPolicy(BaseModel):
    """Permission and validity window of a shared access signature."""

    permission: str = Field(description="SAS permission letters, e.g. 'r' or 'rw'")
    start: datetime = Field(description="Time the signature becomes valid (UTC)")
    expiry: datetime = Field(description="Time the signature expires (UTC)")

    @field_validator('permission')
    @classmethod
    def validate_permission(cls, v: str) -> str:
        """Permission letters must be known and unique."""
        if not v:
            raise ValueError("Permission cannot be empty")
        unknown = set(v) - set(SAS_PERMISSION_LETTERS)
        if unknown:
            raise ValueError(f"Unknown SAS permission letters: {''.join(sorted(unknown))}")
        if len(set(v)) != len(v):
            raise ValueError("SAS permission letters must not repeat")
        return v

    @model_validator(mode='after')
    def validate_window(self) -> 'SharedAccessPolicy':
        if self.expiry <= self.start:
            raise ValueError("SAS expiry must be after start")
        return self
