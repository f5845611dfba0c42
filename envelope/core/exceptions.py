"""Application errors that map onto error envelopes.

Handlers raise these to abort a request with a specific HTTP status. The
exception handlers in ``envelope.api.middleware.error_handler`` turn them into
error envelopes whose ``status.error`` is the exception message, verbatim.

Key components:
- **ApiError**: Base exception carrying the HTTP status code
- **Specialized exceptions**: Common client and server failures with their
  conventional status codes
"""

from http import HTTPStatus
from typing import Any


class ApiError(Exception):
    """Base exception for errors surfaced to API clients.

    Args:
        message: Human-readable error message, sent to the client as-is
        status_code: HTTP status code of the error response
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.context = context or {}
        self.cause = cause

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(message='{self.message}', "
            f"status_code={int(self.status_code)}{context_str})"
        )


class ValidationError(ApiError):
    """Raised when user input doesn't meet the expected format or rules."""

    status_code = HTTPStatus.BAD_REQUEST


class UnauthorizedError(ApiError):
    """Raised when a caller is not authenticated or lacks permissions."""

    status_code = HTTPStatus.UNAUTHORIZED


class NotFoundError(ApiError):
    """Raised when a requested resource doesn't exist."""

    status_code = HTTPStatus.NOT_FOUND


class ConflictError(ApiError):
    """Raised when a request conflicts with the current state of a resource."""

    status_code = HTTPStatus.CONFLICT


class ServiceUnavailableError(ApiError):
    """Raised when a backing service the request depends on is down."""

    status_code = HTTPStatus.SERVICE_UNAVAILABLE
