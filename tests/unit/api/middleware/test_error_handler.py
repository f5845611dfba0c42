"""Unit tests for the exception handler helpers."""

import pytest
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from pytest_mock import MockerFixture

from envelope.api.middleware.error_handler import (
    api_error_handler,
    format_validation_errors,
    generic_exception_handler,
    get_response_writer,
    http_exception_handler,
    internal_error_message,
    register_exception_handlers,
    validation_error_handler,
)
from envelope.api.writer import ResponseWriter
from envelope.core.config import get_settings
from envelope.core.exceptions import ApiError


@pytest.mark.unit
class TestHelpers:
    """Test the formatting helpers."""

    def test_format_validation_errors(self) -> None:
        """Test errors are listed as field: message pairs."""
        exc = RequestValidationError(
            [
                {"loc": ("path", "item_id"), "msg": "Input should be a valid integer"},
                {"loc": ("body", "user", "email"), "msg": "Field required"},
                {"loc": ("body",), "msg": "Invalid JSON"},
            ]
        )

        assert format_validation_errors(exc) == (
            "item_id: Input should be a valid integer; "
            "user.email: Field required; "
            "root: Invalid JSON"
        )

    def test_internal_error_message_development(self) -> None:
        """Test development messages name the exception type."""
        assert internal_error_message(KeyError("x")) == "Internal server error: KeyError"

    def test_internal_error_message_production(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test production messages hide the exception type."""
        monkeypatch.setenv("ENVIRONMENT", "production")
        get_settings.cache_clear()

        assert internal_error_message(KeyError("x")) == (
            "An internal server error occurred"
        )


@pytest.mark.unit
class TestRegistration:
    """Test handler registration."""

    def test_registers_handlers_and_writer(self) -> None:
        """Test every handler is registered and the writer stored."""
        app = FastAPI()
        writer = ResponseWriter()

        register_exception_handlers(app, writer)

        assert app.state.response_writer is writer
        assert app.exception_handlers[ApiError] is api_error_handler
        assert app.exception_handlers[RequestValidationError] is validation_error_handler
        assert app.exception_handlers[Exception] is generic_exception_handler

    def test_get_response_writer(self, mocker: MockerFixture) -> None:
        """Test the writer is looked up on the request's application."""
        app = FastAPI()
        register_exception_handlers(app)
        request = mocker.Mock()
        request.app = app

        assert get_response_writer(request) is None


@pytest.mark.unit
class TestTypeGuards:
    """Test handlers reject exceptions of the wrong type."""

    @pytest.mark.parametrize(
        "handler",
        [api_error_handler, http_exception_handler, validation_error_handler],
    )
    async def test_wrong_exception_type(
        self, handler: object, mocker: MockerFixture
    ) -> None:
        """Test a mismatched exception raises TypeError."""
        with pytest.raises(TypeError, match="Expected"):
            await handler(mocker.Mock(), ValueError("nope"))  # type: ignore[operator]
