"""Typed failures raised by the lifecycle engine and its collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.domain.models import QuestionRecord


class LifecycleError(Exception):
    """Base exception for question workflow and account errors."""


class ValidationError(LifecycleError):
    """Raised when input is missing or malformed."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class AuthorizationError(LifecycleError):
    """Raised when the caller lacks the role or is not the question's responder."""


class NotFoundError(LifecycleError):
    """Raised when a question or responder does not exist."""


class ConflictError(LifecycleError):
    """Raised when a conditional transition matched no row.

    ``current`` holds the re-fetched question so callers can refresh their view.
    """

    def __init__(self, message: str, *, current: QuestionRecord | None = None) -> None:
        super().__init__(message)
        self.current = current


class StoreError(LifecycleError):
    """Raised when the underlying store fails. Never retried by the engine."""


class AccountError(LifecycleError):
    """Base class for sign-up and sign-in failures."""


class DuplicateEmailError(AccountError):
    """Raised when an email is already registered to another account."""


class InvalidCredentialsError(AccountError):
    """Raised when an email/password pair does not match."""


class AccountInactiveError(AccountError):
    """Raised when an inactive or suspended account tries to sign in."""
