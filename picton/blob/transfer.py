"""
Blob Transfer Helpers

Upload, append and download blob content, and replace blob metadata.
Every write honours an optional lease id.

Author: Picton Contributors
Date: 2025
"""

import logging
from typing import BinaryIO, Mapping, Optional

from ..exceptions import ArgumentMissingError
from .interface import CloudBlob, LeaseCapable
from .models import BlobMetadata, BlobType

logger = logging.getLogger(__name__)


def _read_stream(stream: Optional[BinaryIO]) -> bytes:
    if stream is None:
        raise ArgumentMissingError("stream")
    return stream.read()


async def upload_bytes(blob: CloudBlob, data: bytes, lease_id: Optional[str] = None) -> None:
    """
    Replace the blob's content.

    Append blobs are recreated and the data appended; other blobs are
    overwritten in a single upload.

    Args:
        blob: Target blob
        data: New content
        lease_id: Active lease id, if the blob is leased

    Raises:
        ArgumentMissingError: If blob or data is None
    """
    if blob is None:
        raise ArgumentMissingError("blob")
    if data is None:
        raise ArgumentMissingError("data")

    if blob.blob_type == BlobType.APPEND_BLOB:
        await blob.create_append_blob(lease_id)
        await blob.append_block(data, lease_id)
    else:
        await blob.upload(data, lease_id)

    logger.debug(f"Uploaded {len(data)} bytes to {blob.url}")


async def upload_stream(blob: CloudBlob, stream: BinaryIO, lease_id: Optional[str] = None) -> None:
    """Replace the blob's content with everything read from a binary stream."""
    if blob is None:
        raise ArgumentMissingError("blob")
    await upload_bytes(blob, _read_stream(stream), lease_id)


async def upload_text(
    blob: CloudBlob,
    content: str,
    lease_id: Optional[str] = None,
    encoding: str = "utf-8",
) -> None:
    """Replace the blob's content with encoded text."""
    if blob is None:
        raise ArgumentMissingError("blob")
    if content is None:
        raise ArgumentMissingError("content")
    await upload_bytes(blob, content.encode(encoding), lease_id)


async def append_bytes(blob: CloudBlob, data: bytes, lease_id: Optional[str] = None) -> None:
    """
    Append data to the end of the blob, creating it when missing.

    Append blobs get a native append. Block and page blobs are read back,
    concatenated and rewritten, so the lease should be held for the whole
    operation to keep concurrent writers out.

    Args:
        blob: Target blob
        data: Content to append
        lease_id: Active lease id, if the blob is leased

    Raises:
        ArgumentMissingError: If blob or data is None
    """
    if blob is None:
        raise ArgumentMissingError("blob")
    if data is None:
        raise ArgumentMissingError("data")

    exists = await blob.exists()

    if blob.blob_type == BlobType.APPEND_BLOB:
        if not exists:
            await blob.create_append_blob(lease_id)
        await blob.append_block(data, lease_id)
    elif exists:
        current = await blob.download(lease_id)
        await blob.upload(current + data, lease_id)
    else:
        await blob.upload(data, lease_id)

    logger.debug(f"Appended {len(data)} bytes to {blob.url}")


async def append_stream(blob: CloudBlob, stream: BinaryIO, lease_id: Optional[str] = None) -> None:
    """Append everything read from a binary stream to the blob."""
    if blob is None:
        raise ArgumentMissingError("blob")
    await append_bytes(blob, _read_stream(stream), lease_id)


async def append_text(
    blob: CloudBlob,
    content: str,
    lease_id: Optional[str] = None,
    encoding: str = "utf-8",
) -> None:
    """Append encoded text to the blob."""
    if blob is None:
        raise ArgumentMissingError("blob")
    if content is None:
        raise ArgumentMissingError("content")
    await append_bytes(blob, content.encode(encoding), lease_id)


async def download_bytes(blob: CloudBlob) -> bytes:
    """Download the blob's full content."""
    if blob is None:
        raise ArgumentMissingError("blob")
    return await blob.download()


async def download_text(blob: CloudBlob, encoding: str = "utf-8") -> str:
    """Download the blob's content and decode it."""
    if blob is None:
        raise ArgumentMissingError("blob")
    data = await blob.download()
    return data.decode(encoding)


async def set_metadata(
    blob: LeaseCapable,
    metadata: Mapping[str, str],
    lease_id: Optional[str] = None,
) -> None:
    """
    Replace all metadata on the blob.

    Args:
        blob: Target blob
        metadata: Metadata names and values; an empty mapping clears metadata
        lease_id: Active lease id, if the blob is leased

    Raises:
        ArgumentMissingError: If blob or metadata is None
        pydantic.ValidationError: If a metadata name is not a valid identifier
    """
    if blob is None:
        raise ArgumentMissingError("blob")
    if metadata is None:
        raise ArgumentMissingError("metadata")

    validated = BlobMetadata(metadata=dict(metadata))
    await blob.set_metadata(validated.metadata, lease_id)
