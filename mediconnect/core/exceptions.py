"""
Application error hierarchy.

Every error carries the HTTP status it is rendered with; the handlers
registered in ``mediconnect.main`` turn them into ``{"error": message}``.
"""
from fastapi import status


class AppError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthenticatedError(AppError):
    """Missing, invalid or revoked bearer token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class ForbiddenError(AppError):
    """Caller has the wrong role or does not own the record."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class ApprovalRequiredError(ForbiddenError):
    """Staff account has not been approved by an admin."""


class NotFoundError(AppError):
    """Referenced record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class InvalidTransitionError(ValidationError):
    """Lifecycle transition not allowed from the record's current status."""


class UpstreamError(AppError):
    """Identity provider, store or object store call failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Upstream service failure"
