"""Domain exceptions mapped to `{"error": message}` responses."""

from __future__ import annotations

from fastapi import status


class FundManagerError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    detail: str = "Request failed"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


class ValidationError(FundManagerError):
    """Raised when a required field is missing or a value is out of range."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid request"


class AuthError(FundManagerError):
    """Raised for bad credentials or a missing/invalid session token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Invalid username or password"


class ForbiddenError(FundManagerError):
    """Raised when an authenticated caller lacks the admin role."""

    status_code = status.HTTP_403_FORBIDDEN
    detail = "Admin privileges required"


class NotFoundError(FundManagerError):
    """Raised when an update targets a row that does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"


class StorageError(FundManagerError):
    """Raised when the database rejects a statement. The cause is logged, never returned."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Storage error"
