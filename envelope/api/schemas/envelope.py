"""Response envelope models.

Every response written by ``ResponseWriter`` has the shape::

    {"status": {"code": 200, "message": "OK", "error": ""}, "body": ...}

Success envelopes always carry ``body`` (possibly ``null``); error envelopes
omit it and carry the error text in ``status.error`` instead. The two
builders below are the only way the writer constructs an envelope, which
keeps body and error mutually exclusive.
"""

from http import HTTPStatus
from typing import Any, Self

from pydantic import BaseModel, Field

from envelope.api.status import status_text


class ResponseStatus(BaseModel):
    """JSON representation of the HTTP status of a response."""

    code: int = Field(
        ...,
        description="HTTP status code, identical to the status line",
        examples=[200, 404, 503],
    )

    message: str = Field(
        ...,
        description="Standard reason phrase for the code",
        examples=["OK", "Not Found", "Service Unavailable"],
    )

    error: str = Field(
        default="",
        description="Error message; empty on success responses",
        examples=["", "user 42 not found", "db down"],
    )


class ResponseEnvelope(BaseModel):
    """Top-level JSON object combining status metadata and payload body."""

    status: ResponseStatus

    body: Any = Field(
        default=None,
        description="Response payload; omitted from error responses",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": {"code": 200, "message": "OK", "error": ""},
                    "body": {"id": 1},
                },
                {
                    "status": {
                        "code": 503,
                        "message": "Service Unavailable",
                        "error": "db down",
                    },
                },
            ]
        }
    }

    @classmethod
    def success(cls, body: Any) -> Self:  # noqa: ANN401 - any serializable payload
        """Build a 200 envelope carrying ``body``."""
        return cls(
            status=ResponseStatus(
                code=HTTPStatus.OK.value,
                message=status_text(HTTPStatus.OK),
            ),
            body=body,
        )

    @classmethod
    def failure(cls, code: int, error: str) -> Self:
        """Build an error envelope for ``code`` without a body."""
        return cls(
            status=ResponseStatus(code=code, message=status_text(code), error=error),
        )

    @property
    def has_body(self) -> bool:
        """Whether ``body`` was supplied, even as ``None``."""
        return "body" in self.model_fields_set

    def to_content(self) -> dict[str, Any]:
        """Return the wire representation, ready for JSON encoding.

        The body is passed through untouched so the encoder sees the
        caller's original objects.

        Returns:
            dict[str, Any]: ``status`` first, then ``body`` when present.
        """
        content: dict[str, Any] = {"status": self.status.model_dump()}
        if self.has_body:
            content["body"] = self.body
        return content
