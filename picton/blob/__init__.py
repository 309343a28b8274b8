"""
Picton Blob Helpers

Lease, transfer, metadata and SAS helpers over Azure Blob Storage.

Author: Picton Contributors
Date: 2025
"""

from .azure_blob import AzureBlobResource
from .errors import classify_remote_error
from .interface import CloudBlob, LeaseCapable
from .leases import (
    acquire_lease,
    release_lease,
    renew_lease,
    try_acquire_lease,
    try_renew_lease,
)
from .models import BlobMetadata, BlobType, FailureKind, LeaseRequest, RemoteFailure, SharedAccessPolicy
from .sas import get_shared_access_signature_uri
from .transfer import (
    append_bytes,
    append_stream,
    append_text,
    download_bytes,
    download_text,
    set_metadata,
    upload_bytes,
    upload_stream,
    upload_text,
)

__all__ = [
    "AzureBlobResource",
    "BlobMetadata",
    "BlobType",
    "CloudBlob",
    "FailureKind",
    "LeaseCapable",
    "LeaseRequest",
    "RemoteFailure",
    "SharedAccessPolicy",
    "acquire_lease",
    "append_bytes",
    "append_stream",
    "append_text",
    "classify_remote_error",
    "download_bytes",
    "download_text",
    "get_shared_access_signature_uri",
    "release_lease",
    "renew_lease",
    "set_metadata",
    "try_acquire_lease",
    "try_renew_lease",
    "upload_bytes",
    "upload_stream",
    "upload_text",
]
