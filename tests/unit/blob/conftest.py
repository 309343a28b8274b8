"""
Shared fixtures for blob helper tests.
"""

from http import HTTPStatus
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from azure.core.exceptions import HttpResponseError, ResourceExistsError

from picton.blob.models import BlobType


@pytest.fixture
def make_http_error():
    """
    Factory for storage errors as raised by the SDK.

    include_response=False mimics a failure where the service response
    could not be read.
    """

    def factory(
        message: str,
        status_code: int,
        error_code: str = None,
        include_response: bool = True,
    ) -> HttpResponseError:
        error_type = ResourceExistsError if status_code == HTTPStatus.CONFLICT else HttpResponseError
        error = error_type(message=message)
        if include_response:
            error.response = SimpleNamespace(status_code=status_code, reason=HTTPStatus(status_code).phrase)
            error.status_code = status_code
            error.reason = HTTPStatus(status_code).phrase
        error.error_code = error_code
        return error

    return factory


@pytest.fixture
def conflict_error(make_http_error):
    """Error raised when the blob is already leased."""
    return make_http_error("There is already a lease present.", 409, "LeaseAlreadyPresent")


@pytest.fixture
def mock_blob():
    """Block blob handle with every remote call mocked."""
    blob = AsyncMock()
    blob.url = "http://bogus:10000/devstoreaccount1/container/test.txt"
    blob.blob_type = BlobType.BLOCK_BLOB
    blob.generate_sas = MagicMock(return_value="sv=2023-11-03&sr=b&sp=r&sig=abc123")
    return blob


@pytest.fixture
def mock_append_blob(mock_blob):
    """Append blob handle with every remote call mocked."""
    mock_blob.blob_type = BlobType.APPEND_BLOB
    return mock_blob
