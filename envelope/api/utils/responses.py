"""Bridge between the response writer and Starlette responses.

``BufferedSink`` collects what the writer emits in memory; ``to_response()``
then hands the exact headers, status code and bytes to Starlette. The helper
functions below are what route handlers and exception handlers return.
"""

from typing import Any

from loguru import logger
from starlette.datastructures import MutableHeaders
from starlette.responses import Response

from envelope.api.writer import RequestInfo, ResponseWriter, default_writer


class BufferedSink:
    """In-memory ResponseSink.

    Attributes:
        headers: Headers set so far; setting a key replaces its value.
        status_code: First status code written, or None.
        body: Bytes written so far.
    """

    def __init__(self) -> None:
        self.headers = MutableHeaders()
        self.status_code: int | None = None
        self.body = bytearray()

    def set_header(self, key: str, value: str) -> None:
        self.headers[key] = value

    def write_header(self, status_code: int) -> None:
        if self.status_code is not None:
            logger.debug(
                "Superfluous status write ignored",
                status_code=status_code,
                written_status_code=self.status_code,
            )
            return
        self.status_code = status_code

    def write(self, data: bytes) -> None:
        self.body.extend(data)

    def to_response(self) -> Response:
        """Build a Starlette Response from the buffered output.

        Raises:
            RuntimeError: If no status code was written.
        """
        if self.status_code is None:
            raise RuntimeError("No status code was written to the sink")

        return Response(
            content=bytes(self.body),
            status_code=self.status_code,
            headers=dict(self.headers),
        )


def success_response(
    body: Any,  # noqa: ANN401 - any serializable payload
    writer: ResponseWriter | None = None,
) -> Response:
    """Return a 200 envelope response carrying ``body``.

    Raises:
        RuntimeError: If ``body`` cannot be encoded and the writer's
            termination hook returns instead of ending the process. The
            application then answers with its generic 500 envelope.
    """
    sink = BufferedSink()
    (writer or default_writer).write_success(sink, body)
    return sink.to_response()


def error_response(
    request: RequestInfo,
    code: int,
    err: BaseException | str,
    writer: ResponseWriter | None = None,
) -> Response:
    """Return an error envelope response with status ``code``."""
    sink = BufferedSink()
    (writer or default_writer).write_error(sink, request, code, err)
    return sink.to_response()
