"""Root conftest.py for the test suite.

This file contains project-wide fixtures and pytest configuration.
"""

import os
from collections.abc import Generator
from typing import Any

import pytest
from loguru import logger

from envelope.core.config import get_settings
from tests.fixtures.doubles import FakeRequest, RecordingLogger, RecordingSink


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components in isolation"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that test multiple components"
    )


@pytest.fixture
def sink() -> RecordingSink:
    """Provide a fresh recording sink."""
    return RecordingSink()


@pytest.fixture
def recording_logger() -> RecordingLogger:
    """Provide a fresh recording logger."""
    return RecordingLogger()


@pytest.fixture
def fake_request() -> FakeRequest:
    """Provide a GET request for /items/7."""
    return FakeRequest()


@pytest.fixture
def captured_logs() -> Generator[list[dict[str, Any]]]:
    """Capture Loguru records emitted during the test.

    Yields:
        list[dict[str, Any]]: Loguru record dicts, in emission order.
    """
    records: list[dict[str, Any]] = []
    handler_id = logger.add(
        lambda message: records.append(message.record), level="DEBUG"
    )
    yield records
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def clean_lru_cache() -> Generator[None]:
    """Clear the settings cache before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[pytest.MonkeyPatch]:
    """Remove app-specific environment variables for the duration of a test.

    Yields:
        pytest.MonkeyPatch: The monkeypatch instance for env manipulation.
    """
    env_prefixes = ["APP_", "API_", "ENVIRONMENT", "DEBUG", "LOG_CONFIG__", "PORT"]
    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in env_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield monkeypatch
