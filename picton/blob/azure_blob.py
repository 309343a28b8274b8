"""
Azure Blob Storage adapter.

Implements the CloudBlob capability over ``azure.storage.blob.aio.BlobClient``.

Author: Picton Contributors
Date: 2025
"""

import logging
from typing import Dict, Optional

from azure.storage.blob import BlobSasPermissions, generate_blob_sas
from azure.storage.blob.aio import BlobClient, BlobLeaseClient

from ..core.config_manager import PictonConfig
from ..exceptions import ArgumentMissingError, MissingCredentialError, PictonError
from .models import BlobType, SharedAccessPolicy

logger = logging.getLogger(__name__)

# Largest block accepted by Append Block on older service versions
MAX_APPEND_BLOCK_SIZE = 4 * 1024 * 1024


class AzureBlobResource:
    """
    A single Azure blob addressed through an async BlobClient.

    Usable as an async context manager; leaving the context closes the
    underlying client.
    """

    def __init__(
        self,
        client: BlobClient,
        blob_type: BlobType = BlobType.BLOCK_BLOB,
        account_key: Optional[str] = None,
    ):
        self._client = client
        self._blob_type = blob_type
        self._account_key = account_key

    @classmethod
    def from_config(
        cls,
        config: PictonConfig,
        blob_name: str,
        container: Optional[str] = None,
        blob_type: BlobType = BlobType.BLOCK_BLOB,
    ) -> "AzureBlobResource":
        """
        Build a resource from the storage section of the configuration.

        Args:
            config: Loaded configuration
            blob_name: Blob name within the container
            container: Container name (defaults to storage.container)
            blob_type: Kind of blob addressed

        Raises:
            ArgumentMissingError: If no container is given or configured
            PictonError: If neither a connection string nor an account URL is configured
        """
        storage = config.storage
        container = container or storage.container
        if not container:
            raise ArgumentMissingError("container")

        if storage.connection_string:
            client = BlobClient.from_connection_string(
                storage.connection_string,
                container_name=container,
                blob_name=blob_name,
            )
        elif storage.account_url:
            client = BlobClient(
                account_url=storage.account_url,
                container_name=container,
                blob_name=blob_name,
                credential=storage.account_key,
            )
        else:
            raise PictonError(
                "No storage account configured: set storage.connection_string or storage.account_url",
                error_code="StorageNotConfigured",
            )

        return cls(client, blob_type=blob_type, account_key=storage.account_key)

    @property
    def url(self) -> str:
        return self._client.url

    @property
    def blob_type(self) -> BlobType:
        return self._blob_type

    # Leases

    async def acquire_lease(self, lease_duration: int, proposed_lease_id: Optional[str] = None) -> str:
        lease = await self._client.acquire_lease(lease_duration=lease_duration, lease_id=proposed_lease_id)
        logger.debug(f"Acquired lease {lease.id} on {self.url} for {lease_duration}s")
        return lease.id

    async def renew_lease(self, lease_id: str) -> None:
        await BlobLeaseClient(self._client, lease_id=lease_id).renew()

    async def release_lease(self, lease_id: str) -> None:
        await BlobLeaseClient(self._client, lease_id=lease_id).release()
        logger.debug(f"Released lease {lease_id} on {self.url}")

    async def set_metadata(self, metadata: Dict[str, str], lease_id: Optional[str] = None) -> None:
        await self._client.set_blob_metadata(metadata=metadata, lease=lease_id)

    # Content

    async def exists(self) -> bool:
        return await self._client.exists()

    async def upload(self, data: bytes, lease_id: Optional[str] = None) -> None:
        await self._client.upload_blob(data, overwrite=True, lease=lease_id)

    async def download(self, lease_id: Optional[str] = None) -> bytes:
        downloader = await self._client.download_blob(lease=lease_id)
        return await downloader.readall()

    async def create_append_blob(self, lease_id: Optional[str] = None) -> None:
        await self._client.create_append_blob(lease=lease_id)

    async def append_block(self, data: bytes, lease_id: Optional[str] = None) -> None:
        for offset in range(0, len(data), MAX_APPEND_BLOCK_SIZE):
            chunk = data[offset:offset + MAX_APPEND_BLOCK_SIZE]
            await self._client.append_block(chunk, length=len(chunk), lease=lease_id)

    # Sharing

    def generate_sas(self, policy: SharedAccessPolicy) -> str:
        account_key = self._account_key or getattr(self._client.credential, "account_key", None)
        if not account_key:
            raise MissingCredentialError("generate a shared access signature")

        return generate_blob_sas(
            account_name=self._client.account_name,
            container_name=self._client.container_name,
            blob_name=self._client.blob_name,
            account_key=account_key,
            permission=BlobSasPermissions.from_string(policy.permission),
            start=policy.start,
            expiry=policy.expiry,
        )

    async def close(self) -> None:
        await self._client.close()

    async def __aenter__(self) -> "AzureBlobResource":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()
