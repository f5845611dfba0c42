"""Response writer for JSON envelope responses.

``ResponseWriter`` builds a ``ResponseEnvelope``, encodes it with orjson and
writes it to a sink: headers first, then the status code, then the bytes.

    writer = ResponseWriter()
    writer.write_success(sink, {"id": 1})
    writer.write_error(sink, request, 503, "db down")

Collaborators are structural protocols so any HTTP stack can be plugged in:
- **ResponseSink**: receives headers, the status code and the body bytes
- **RequestInfo**: request method and URL, used only for error logging
- **EnvelopeLogger**: leveled logging with key/value fields

Error responses with a fatal status code (see ``FATAL_STATUS_CODES``) are
logged at warning level before they are written. A payload that cannot be
encoded is a programming error: the writer logs it as fatal, calls its
termination hook and writes nothing.
"""

import os
import sys
from collections.abc import Callable
from decimal import Decimal
from typing import Any, NoReturn, Protocol

import orjson
from loguru import logger
from pydantic import BaseModel

from envelope.api.constants import (
    CONTENT_LENGTH_HEADER,
    CONTENT_TYPE_HEADER,
    FATAL_RESPONSE_LOG_MESSAGE,
    JSON_CONTENT_TYPE,
    SERIALIZATION_FAILURE_LOG_MESSAGE,
)
from envelope.api.schemas.envelope import ResponseEnvelope
from envelope.api.status import is_fatal_status
from envelope.core.constants import EXIT_SERIALIZATION_FAILURE


class ResponseSink(Protocol):
    """Output side of an HTTP response."""

    def set_header(self, key: str, value: str) -> None:
        """Set a header, replacing any previous value for ``key``."""
        ...

    def write_header(self, status_code: int) -> None:
        """Write the status line."""
        ...

    def write(self, data: bytes) -> None:
        """Write body bytes."""
        ...


class RequestInfo(Protocol):
    """The parts of a request needed to log a failed response."""

    @property
    def method(self) -> str:
        """HTTP method."""
        ...

    @property
    def url(self) -> object:
        """Request URL; logged in its string form."""
        ...


class EnvelopeLogger(Protocol):
    """Logging capability used by the writer."""

    def warn(self, message: str, **fields: object) -> None:
        """Log a warning with structured fields."""
        ...

    def fatal(self, message: str, **fields: object) -> None:
        """Log an unrecoverable condition with structured fields."""
        ...


class LoguruEnvelopeLogger:
    """EnvelopeLogger backed by Loguru; fields are bound as record extras."""

    def __init__(self, bound_logger: Any = logger) -> None:  # noqa: ANN401 - loguru Logger
        self._logger = bound_logger

    def warn(self, message: str, **fields: object) -> None:
        """Log ``message`` at WARNING with ``fields`` bound as extras.

        Args:
            message: Log message.
            **fields: Structured context, e.g. ``method``, ``url``, ``code``.
        """
        self._logger.bind(**fields).warning(message)

    def fatal(self, message: str, **fields: object) -> None:
        """Log ``message`` at CRITICAL with ``fields`` bound as extras.

        This only logs; ending the process is left to the writer's
        termination hook.

        Args:
            message: Log message.
            **fields: Structured context, e.g. ``error``.
        """
        self._logger.bind(**fields).critical(message)


def terminate_process(status: int) -> NoReturn:
    """Flush pending log records and end the process with ``status``.

    Uses ``os._exit``: a ``SystemExit`` raised inside an ASGI request is
    caught by the server, which keeps serving.
    """
    logger.complete()
    sys.stdout.flush()
    sys.stderr.flush()
    os._exit(status)


def _encode_default(obj: object) -> object:
    """Handle the types orjson does not encode natively."""
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, Decimal):
        return str(obj)
    raise TypeError(f"Type is not JSON serializable: {type(obj).__name__}")


def encode_envelope(envelope: ResponseEnvelope) -> bytes:
    """Encode an envelope to JSON bytes.

    Keys are not sorted: ``status`` precedes ``body`` and body mappings keep
    their insertion order.

    Raises:
        TypeError: If the body contains a value that cannot be encoded.
    """
    return orjson.dumps(
        envelope.to_content(),
        default=_encode_default,
        option=orjson.OPT_NON_STR_KEYS,
    )


def error_text(err: BaseException | str) -> str:
    """Return the message text of an error, as sent to the client."""
    return str(err)


class ResponseWriter:
    """Writes JSON envelopes to response sinks.

    The writer keeps no state between calls, so one instance can serve any
    number of requests. Each sink must only be written by one call.

    Args:
        logger: Logging capability; defaults to ``LoguruEnvelopeLogger``.
        terminate: Called with an exit status when a payload cannot be
            encoded; defaults to ``terminate_process``.
    """

    def __init__(
        self,
        logger: EnvelopeLogger | None = None,
        terminate: Callable[[int], object] | None = None,
    ) -> None:
        self._logger = logger if logger is not None else LoguruEnvelopeLogger()
        self._terminate = terminate if terminate is not None else terminate_process

    def write_success(self, sink: ResponseSink, body: Any) -> None:  # noqa: ANN401 - any serializable payload
        """Write a 200 envelope carrying ``body``.

        Args:
            sink: Response sink to write to.
            body: Payload placed under ``body``.
        """
        self.write_json(sink, ResponseEnvelope.success(body))

    def write_error(
        self,
        sink: ResponseSink,
        request: RequestInfo,
        code: int,
        err: BaseException | str,
    ) -> None:
        """Write an error envelope with status ``code``.

        The error message becomes ``status.error``; no body is written. Fatal
        codes are logged with the request method and URL first.

        Args:
            sink: Response sink to write to.
            request: The request being answered.
            code: HTTP status code.
            err: The error, or its message.
        """
        code = int(code)
        message = error_text(err)

        if is_fatal_status(code):
            self._logger.warn(
                FATAL_RESPONSE_LOG_MESSAGE,
                method=request.method,
                url=str(request.url),
                code=code,
                error=message,
            )

        self.write_json(sink, ResponseEnvelope.failure(code, message))

    def write_json(self, sink: ResponseSink, envelope: ResponseEnvelope) -> None:
        """Encode ``envelope`` and write it with its headers and status code."""
        try:
            payload = encode_envelope(envelope)
        except TypeError as e:
            self._logger.fatal(SERIALIZATION_FAILURE_LOG_MESSAGE, error=str(e))
            self._terminate(EXIT_SERIALIZATION_FAILURE)
            return

        sink.set_header(CONTENT_TYPE_HEADER, JSON_CONTENT_TYPE)
        sink.set_header(CONTENT_LENGTH_HEADER, str(len(payload)))
        sink.write_header(envelope.status.code)
        sink.write(payload)


default_writer = ResponseWriter()


def write_response(sink: ResponseSink, body: Any) -> None:  # noqa: ANN401 - any serializable payload
    """Write a success envelope using the default writer."""
    default_writer.write_success(sink, body)


def write_error_response(
    sink: ResponseSink,
    request: RequestInfo,
    code: int,
    err: BaseException | str,
) -> None:
    """Write an error envelope using the default writer."""
    default_writer.write_error(sink, request, code, err)
