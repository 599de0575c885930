"""Translate domain errors into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException, status
from src.api.schemas.questions import QuestionResponse
from src.domain.errors import (
    AccountInactiveError,
    AuthorizationError,
    ConflictError,
    DuplicateEmailError,
    InvalidCredentialsError,
    LifecycleError,
    NotFoundError,
    StoreError,
    ValidationError,
)

_PLAIN_STATUS: tuple[tuple[type[LifecycleError], int], ...] = (
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (AccountInactiveError, status.HTTP_403_FORBIDDEN),
    (InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (DuplicateEmailError, status.HTTP_409_CONFLICT),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (StoreError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def to_http_error(exc: LifecycleError) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": str(exc), "field": exc.field},
        )
    if isinstance(exc, ConflictError):
        # Include the refreshed question so clients can update their view
        current = (
            QuestionResponse.model_validate(exc.current).model_dump(mode="json")
            if exc.current is not None
            else None
        )
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": str(exc), "question": current},
        )
    for error_type, status_code in _PLAIN_STATUS:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
