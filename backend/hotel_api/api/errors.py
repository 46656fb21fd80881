"""Translation of domain errors into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException, status

from hotel_api.core.errors import (
    ConflictError,
    DuplicateKeyError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)

_STATUS_BY_ERROR: tuple[tuple[type[ValueError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (ConflictError, status.HTTP_409_CONFLICT),
    (DuplicateKeyError, status.HTTP_409_CONFLICT),
    (InvalidTransitionError, status.HTTP_409_CONFLICT),
)


def to_http_exception(exc: ValueError) -> HTTPException:
    """Map a service error to an HTTPException; unknown ValueErrors are 400."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
