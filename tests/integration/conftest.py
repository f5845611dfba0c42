"""Shared fixtures for integration tests."""

from collections.abc import AsyncGenerator
from unittest.mock import Mock

import pytest
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import Response
from httpx import ASGITransport, AsyncClient

from envelope.api.main import create_app
from envelope.api.utils.responses import success_response
from envelope.api.writer import ResponseWriter
from envelope.core.config import Settings
from envelope.core.exceptions import NotFoundError, ServiceUnavailableError
from tests.fixtures.doubles import RecordingLogger


@pytest.fixture
def terminate() -> Mock:
    """Provide a termination hook that records calls instead of exiting."""
    return Mock()


@pytest.fixture
def app(recording_logger: RecordingLogger, terminate: Mock) -> FastAPI:
    """Build an application with a recording writer and failing routes."""
    # debug=False so unhandled errors reach the envelope handler
    application = create_app(
        Settings(debug=False),
        ResponseWriter(logger=recording_logger, terminate=terminate),
    )

    @application.get("/items/{item_id}")
    async def get_item(item_id: int) -> dict[str, int]:
        raise NotFoundError(f"item {item_id} not found")

    @application.get("/db")
    async def db() -> None:
        raise ServiceUnavailableError("db down")

    @application.get("/forbidden")
    async def forbidden() -> None:
        raise HTTPException(status_code=403, detail="nope")

    @application.get("/boom")
    async def boom() -> None:
        raise RuntimeError("unexpected")

    @application.get("/unencodable")
    async def unencodable(request: Request) -> Response:
        return success_response({"s": {1, 2}}, request.app.state.response_writer)

    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Provide an HTTP client bound to the test application.

    Unhandled exceptions are re-raised by Starlette after the 500 response is
    sent; the transport is told not to propagate them.
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
