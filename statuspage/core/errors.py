from __future__ import annotations


class StatusPageError(Exception):
    """Base class for errors raised by the service layer."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(StatusPageError):
    pass


class NotFoundError(StatusPageError):
    pass


class ConflictError(StatusPageError):
    """The operation would break a protective invariant (uniqueness, references)."""


class AuthError(StatusPageError):
    pass


class PermissionDeniedError(StatusPageError):
    pass
