"""Global exception handlers for the FastAPI application.

Every failure that reaches the application boundary is answered with an
error envelope written by the application's ``ResponseWriter``. Status codes
in the fatal set are logged by the writer itself.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from loguru import logger
from starlette.exceptions import HTTPException

from envelope.api.constants import HTTP_422_UNPROCESSABLE_ENTITY
from envelope.api.utils.responses import error_response
from envelope.api.writer import ResponseWriter
from envelope.core.config import get_settings
from envelope.core.exceptions import ApiError


def get_response_writer(request: Request) -> ResponseWriter | None:
    """Return the writer registered on the request's application, if any."""
    return getattr(request.app.state, "response_writer", None)


def format_validation_errors(exc: RequestValidationError) -> str:
    """Summarize validation errors as ``field: message`` pairs.

    Args:
        exc: The validation error raised by FastAPI.

    Returns:
        str: One ``field: message`` entry per error, joined by ``"; "``.
    """
    entries = []
    for error in exc.errors():
        # Drop the location prefix (body, query, path...)
        field_path = error.get("loc", ())
        field_name = ".".join(str(loc) for loc in field_path[1:] if loc != "__root__")
        entries.append(f"{field_name or 'root'}: {error.get('msg', 'Invalid value')}")
    return "; ".join(entries)


def internal_error_message(exc: Exception) -> str:
    """Return the client-facing message for an unhandled exception.

    Production responses never name the exception type.
    """
    if get_settings().environment == "production":
        return "An internal server error occurred"
    return f"Internal server error: {type(exc).__name__}"


async def api_error_handler(request: Request, exc: Exception) -> Response:
    """Handle ApiError exceptions.

    Args:
        request: The FastAPI request that caused the exception
        exc: The ApiError exception to handle

    Returns:
        Response: Error envelope with the exception's status code and message

    Raises:
        TypeError: If exc is not an ApiError instance
    """
    if not isinstance(exc, ApiError):
        raise TypeError(f"Expected ApiError, got {type(exc).__name__}")

    logger.debug(
        "Handling {exception_type}: {message}",
        exception_type=type(exc).__name__,
        message=exc.message,
        status_code=int(exc.status_code),
    )
    return error_response(
        request, exc.status_code, exc, get_response_writer(request)
    )


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle Starlette HTTPException, using its detail as the error text.

    Raises:
        TypeError: If exc is not an HTTPException instance
    """
    if not isinstance(exc, HTTPException):
        raise TypeError(f"Expected HTTPException, got {type(exc).__name__}")

    return error_response(
        request, exc.status_code, str(exc.detail), get_response_writer(request)
    )


async def validation_error_handler(request: Request, exc: Exception) -> Response:
    """Handle FastAPI RequestValidationError with a 422 envelope.

    Raises:
        TypeError: If exc is not a RequestValidationError instance
    """
    if not isinstance(exc, RequestValidationError):
        raise TypeError(f"Expected RequestValidationError, got {type(exc).__name__}")

    message = format_validation_errors(exc)
    logger.warning(
        "Request validation failed",
        method=request.method,
        path=request.url.path,
        validation_errors=message,
    )
    return error_response(
        request,
        HTTP_422_UNPROCESSABLE_ENTITY,
        message,
        get_response_writer(request),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle any other exception with a 500 envelope.

    The full traceback is logged; the client only sees a generic message.
    """
    logger.opt(exception=exc).error(
        "Unhandled exception: {exception_type}",
        exception_type=type(exc).__name__,
        method=request.method,
        path=request.url.path,
    )
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        internal_error_message(exc),
        get_response_writer(request),
    )


def register_exception_handlers(
    app: FastAPI, writer: ResponseWriter | None = None
) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
        writer: Writer used for the error envelopes; the default writer
            when omitted
    """
    app.state.response_writer = writer

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers registered")
