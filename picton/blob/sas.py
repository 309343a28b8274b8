"""
Shared access signature URIs.
"""

import logging
from datetime import timedelta
from typing import Optional

from ..core.clock import SystemClock, UtcClock
from ..exceptions import ArgumentMissingError, PictonError
from .interface import CloudBlob
from .models import SharedAccessPolicy

logger = logging.getLogger(__name__)

DEFAULT_SAS_DURATION = timedelta(minutes=15)

# Signatures start slightly in the past to tolerate clock skew between
# this machine and the storage service
SAS_START_SKEW = timedelta(minutes=5)


def build_shared_access_policy(
    permission: str,
    duration: Optional[timedelta] = None,
    clock: Optional[SystemClock] = None,
    start_skew: timedelta = SAS_START_SKEW,
) -> SharedAccessPolicy:
    """
    Build the policy for a signature valid from now (minus skew) for duration.

    Raises:
        PictonError: If duration is not positive
    """
    duration = DEFAULT_SAS_DURATION if duration is None else duration
    if duration <= timedelta(0):
        raise PictonError(
            f"SAS duration must be positive (got {duration})",
            error_code="InvalidSasDuration",
        )

    now = (clock or UtcClock()).utc_now()
    return SharedAccessPolicy(
        permission=permission,
        start=now - start_skew,
        expiry=now + duration,
    )


def get_shared_access_signature_uri(
    blob: CloudBlob,
    permission: str,
    duration: Optional[timedelta] = None,
    clock: Optional[SystemClock] = None,
    start_skew: timedelta = SAS_START_SKEW,
) -> str:
    """
    Return the blob URL with a shared access signature appended.

    Args:
        blob: Blob to share
        permission: SAS permission letters (e.g., "r" for read)
        duration: How long the signature stays valid (default 15 minutes)
        clock: Source of the current time (default: system UTC clock)
        start_skew: How far before now the signature becomes valid

    Returns:
        Absolute URI carrying the SAS token in its query string

    Raises:
        ArgumentMissingError: If blob is None
    """
    if blob is None:
        raise ArgumentMissingError("blob")

    policy = build_shared_access_policy(permission, duration, clock, start_skew)
    token = blob.generate_sas(policy).lstrip("?")

    logger.debug(f"Generated SAS for {blob.url} (permission={policy.permission}, expiry={policy.expiry.isoformat()})")
    return f"{blob.url}?{token}"
