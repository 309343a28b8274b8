"""
Picton: convenience helpers for Azure Blob Storage.

Lease acquisition with retries, conditional upload/append, metadata,
text/byte downloads and shared access signature URIs.
"""

__version__ = "0.1.0"

from .blob import (
    AzureBlobResource,
    CloudBlob,
    acquire_lease,
    get_shared_access_signature_uri,
    release_lease,
    renew_lease,
    try_acquire_lease,
    try_renew_lease,
)
from .exceptions import ArgumentMissingError, ArgumentOutOfRangeError, PictonError

__all__ = [
    "ArgumentMissingError",
    "ArgumentOutOfRangeError",
    "AzureBlobResource",
    "CloudBlob",
    "PictonError",
    "__version__",
    "acquire_lease",
    "get_shared_access_signature_uri",
    "release_lease",
    "renew_lease",
    "try_acquire_lease",
    "try_renew_lease",
]
