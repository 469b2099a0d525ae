"""Helper utilities shared across API route handlers."""

from typing import TypeVar

from fastapi import HTTPException, status

from takurabid.domain.results import Failure, Result, StoreErrorKind

T = TypeVar("T")

_FAILURE_STATUS = {
    StoreErrorKind.TRANSPORT: status.HTTP_503_SERVICE_UNAVAILABLE,
    StoreErrorKind.UNKNOWN: status.HTTP_503_SERVICE_UNAVAILABLE,
    StoreErrorKind.PERMISSION: status.HTTP_403_FORBIDDEN,
    StoreErrorKind.CONSTRAINT: status.HTTP_422_UNPROCESSABLE_ENTITY,
    StoreErrorKind.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def failure_status_code(failure: Failure) -> int:
    """Return the HTTP status used to report ``failure``."""

    return _FAILURE_STATUS.get(failure.error.kind, status.HTTP_503_SERVICE_UNAVAILABLE)


def unwrap_or_raise(result: Result[T]) -> T:
    """Return the value of ``result`` or raise the matching ``HTTPException``."""

    if isinstance(result, Failure):
        code = failure_status_code(result)
        if code == status.HTTP_503_SERVICE_UNAVAILABLE:
            # Store internals stay in the logs.
            detail = "Notifications are temporarily unavailable"
        else:
            detail = result.error.message
        raise HTTPException(status_code=code, detail=detail)
    return result.value
