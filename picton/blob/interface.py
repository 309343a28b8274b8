"""
Blob Resource Interface

Capabilities a blob handle must offer for the helpers in this package.
Any object with these members works; no base class is required.
"""

from typing import Dict, Optional, Protocol, runtime_checkable

from .models import BlobType, SharedAccessPolicy


@runtime_checkable
class LeaseCapable(Protocol):
    """A remote object that supports leases and metadata."""

    async def acquire_lease(self, lease_duration: int, proposed_lease_id: Optional[str] = None) -> str:
        """Acquire a lease and return its id."""
        ...

    async def renew_lease(self, lease_id: str) -> None:
        ...

    async def release_lease(self, lease_id: str) -> None:
        ...

    async def set_metadata(self, metadata: Dict[str, str], lease_id: Optional[str] = None) -> None:
        """Replace all metadata on the object."""
        ...


@runtime_checkable
class CloudBlob(LeaseCapable, Protocol):
    """A blob that can also be read, written and shared."""

    @property
    def url(self) -> str:
        ...

    @property
    def blob_type(self) -> BlobType:
        ...

    async def exists(self) -> bool:
        ...

    async def upload(self, data: bytes, lease_id: Optional[str] = None) -> None:
        """Create or overwrite the blob with data."""
        ...

    async def download(self, lease_id: Optional[str] = None) -> bytes:
        ...

    async def create_append_blob(self, lease_id: Optional[str] = None) -> None:
        """Create an empty append blob, replacing any existing one."""
        ...

    async def append_block(self, data: bytes, lease_id: Optional[str] = None) -> None:
        ...

    def generate_sas(self, policy: SharedAccessPolicy) -> str:
        """Return a SAS token (query string) for the policy."""
        ...
