"""
Blob Lease Helpers

Acquire, renew and release leases on blobs. ``try_acquire_lease`` retries
while another holder owns the lease and reports exhaustion as ``None``
rather than raising.

Author: Picton Contributors
Date: 2025
"""

import logging
from typing import Optional

from azure.core.exceptions import HttpResponseError

from ..core.logging_config import log_with_context
from ..exceptions import ArgumentMissingError
from .errors import classify_remote_error
from .interface import LeaseCapable
from .models import LeaseRequest

logger = logging.getLogger(__name__)


async def try_acquire_lease(
    blob: LeaseCapable,
    lease_duration: Optional[int] = None,
    max_lease_attempts: int = 1,
) -> Optional[str]:
    """
    Try to acquire a lease, retrying while the blob is already leased.

    Attempts run back to back; each acquire call counts toward the limit
    whether it succeeds or hits a conflict.

    Args:
        blob: Blob to lease
        lease_duration: Lease duration in seconds (15-60), or None for the
            service default of 15 seconds
        max_lease_attempts: Maximum number of acquire calls (1-10)

    Returns:
        The lease id returned by the service (passed through verbatim, even
        when empty), or None if every attempt hit a conflict

    Raises:
        ArgumentMissingError: If blob is None
        ArgumentOutOfRangeError: If lease_duration or max_lease_attempts is out of range
        HttpResponseError: If the service fails for any reason other than a conflict
    """
    request = LeaseRequest(blob, lease_duration, max_lease_attempts)

    for attempt in range(1, request.max_attempts + 1):
        try:
            return await request.blob.acquire_lease(request.effective_duration, None)
        except HttpResponseError as e:
            failure = classify_remote_error(e)
            if not failure.retryable:
                raise
            logger.debug(
                f"Lease attempt {attempt}/{request.max_attempts} rejected: "
                f"{failure.error_code or failure.status_code}"
            )

    log_with_context(
        logger,
        logging.INFO,
        "Lease not acquired: blob is leased by another holder",
        attempts=request.max_attempts,
        lease_duration=request.effective_duration,
    )
    return None


async def acquire_lease(blob: LeaseCapable, lease_duration: Optional[int] = None) -> str:
    """
    Acquire a lease with a single call.

    Unlike try_acquire_lease, a conflict is raised to the caller.

    Raises:
        ArgumentMissingError: If blob is None
        ArgumentOutOfRangeError: If lease_duration is out of range
        HttpResponseError: If the service rejects the request
    """
    request = LeaseRequest(blob, lease_duration)
    return await request.blob.acquire_lease(request.effective_duration, None)


async def renew_lease(blob: LeaseCapable, lease_id: str) -> None:
    """Renew a lease held on the blob."""
    if blob is None:
        raise ArgumentMissingError("blob")
    if lease_id is None:
        raise ArgumentMissingError("lease_id")
    await blob.renew_lease(lease_id)


async def try_renew_lease(blob: LeaseCapable, lease_id: str) -> bool:
    """
    Renew a lease, reporting failure instead of raising.

    Returns:
        True if the lease was renewed, False if the renewal call failed

    Raises:
        ArgumentMissingError: If blob or lease_id is None
    """
    if blob is None:
        raise ArgumentMissingError("blob")
    if lease_id is None:
        raise ArgumentMissingError("lease_id")

    try:
        await blob.renew_lease(lease_id)
    except Exception:
        logger.warning(f"Failed to renew lease {lease_id}", exc_info=True)
        return False
    return True


async def release_lease(blob: LeaseCapable, lease_id: str) -> None:
    """Release a lease held on the blob."""
    if blob is None:
        raise ArgumentMissingError("blob")
    if lease_id is None:
        raise ArgumentMissingError("lease_id")
    await blob.release_lease(lease_id)
