"""Custom exception types for domain and API layers."""
from __future__ import annotations


class AppError(Exception):
    """Base app exception. Rendered as an internal failure unless overridden."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthorizedError(AppError):
    """Missing identity or identity with the wrong role."""

    status_code = 401
    default_message = "Unauthorized"


class ValidationError(AppError):
    """Malformed or missing input, or an invalid enum value."""

    status_code = 400
    default_message = "Invalid request"


class ForbiddenError(AppError):
    """Business rule denial such as an exhausted product quota."""

    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    """A referenced record does not exist."""

    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    """Requested transition is not allowed from the record's current state."""

    status_code = 409
    default_message = "Conflict"
