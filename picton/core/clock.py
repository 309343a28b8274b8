"""
Clock abstraction.

SAS policies are computed relative to "now"; injecting the clock keeps
them reproducible.
"""

from datetime import datetime, timezone
from typing import Protocol


class SystemClock(Protocol):
    """Anything that can report the current UTC time."""

    def utc_now(self) -> datetime:
        ...


class UtcClock:
    """Wall-clock implementation of SystemClock."""

    def utc_now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock frozen at a given instant."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self._instant = instant

    def utc_now(self) -> datetime:
        return self._instant
