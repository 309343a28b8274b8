"""
Remote error classification.

Storage errors are inspected once here and turned into a RemoteFailure,
so callers branch on a tag instead of raw status codes.
"""

from http import HTTPStatus

from azure.core.exceptions import HttpResponseError

from .models import FailureKind, RemoteFailure


def classify_remote_error(error: HttpResponseError) -> RemoteFailure:
    """
    Classify an error raised by the storage service.

    A 409 that came back with a response means the blob is already leased.
    Everything else, including errors without a response, is a plain
    remote failure.

    Args:
        error: Error raised by the SDK

    Returns:
        RemoteFailure describing the error
    """
    status_code = error.status_code
    error_code = getattr(error, "error_code", None)
    if error_code is None and error.error is not None:
        error_code = error.error.code

    if error.response is not None and status_code == HTTPStatus.CONFLICT:
        kind = FailureKind.CONFLICT
    else:
        kind = FailureKind.REMOTE

    return RemoteFailure(
        kind=kind,
        status_code=status_code,
        error_code=error_code,
        message=error.message,
    )
