"""Structured logging built on Loguru.

Two output formats are supported:
- **console**: Human-readable lines with the bound fields shown inline
  (development)
- **json**: One JSON object per line (staging, production, managed runtimes)

Records emitted through the standard library, uvicorn's included, are
forwarded to Loguru by ``InterceptHandler`` so every line shares one format.
Field names listed in ``LogConfig.sensitive_fields`` are redacted by both
formatters.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Final, Protocol, cast

from loguru import logger

from envelope.core.config import get_settings
from envelope.core.constants import REDACTED
from envelope.core.types import LogContext


class _LoggingState:
    """Simple state holder to track if logging has been configured."""

    def __init__(self) -> None:
        self.configured = False


_state = _LoggingState()


class LogConfigProtocol(Protocol):
    """Protocol for log configuration objects."""

    @property
    def log_level(self) -> str:
        """Logging level."""
        ...

    @property
    def log_formatter_type(self) -> str | None:
        """Log formatter type."""
        ...


class SettingsProtocol(Protocol):
    """Protocol for settings objects that setup_logging can accept."""

    @property
    def debug(self) -> bool:
        """Debug mode flag."""
        ...

    @property
    def log_config(self) -> LogConfigProtocol:
        """Log configuration."""
        ...


DEFAULT_LOG_FORMAT: Final[str] = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "{message}"
)
MAX_FIELD_VALUE_LENGTH: Final[int] = 100

# Shown first, in this order, by the console formatter
PRIORITY_FIELDS: Final[tuple[str, ...]] = ("method", "url", "code", "error")


def _escape(value: object) -> str:
    """Escape braces so Loguru does not treat them as format fields."""
    return str(value).replace("{", "{{").replace("}", "}}")


def redact_fields(extra: LogContext) -> LogContext:
    """Return the public extra fields with sensitive values redacted.

    Args:
        extra: Extra fields bound on a log record.

    Returns:
        LogContext: Fields without Loguru-internal keys, sensitive ones redacted.
    """
    sensitive = {field.lower() for field in get_settings().log_config.sensitive_fields}
    return {
        key: REDACTED if key.lower() in sensitive else value
        for key, value in extra.items()
        if not key.startswith("_")
    }


def _format_field(key: str, value: object) -> str:
    """Format one context field for console display."""
    str_value = str(value)
    if len(str_value) > MAX_FIELD_VALUE_LENGTH:
        str_value = str_value[: MAX_FIELD_VALUE_LENGTH - 3] + "..."
    return f"{_escape(key)}={_escape(str_value)}"


def format_console_with_context(record: dict[str, Any]) -> str:
    """Format log record for console with all context fields visible.

    Args:
        record: Loguru record to format.

    Returns:
        str: Format string for Loguru, terminated by a newline.
    """
    try:
        level = record["level"]
        parts = [
            f"<green>{record['time'].strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]}</green>",
            f"<level>{level.name: <8}</level>",
            f"<cyan>{record['name']}:{record['function']}:{record['line']}</cyan>",
        ]

        extra = redact_fields(record.get("extra", {}))
        context_parts = [
            f"[<yellow>{_format_field(key, extra[key])}</yellow>]"
            for key in PRIORITY_FIELDS
            if extra.get(key) is not None
        ]
        context_parts.extend(
            f"[<dim>{_format_field(key, value)}</dim>]"
            for key, value in extra.items()
            if key not in PRIORITY_FIELDS and value is not None
        )
        if context_parts:
            parts.append(" ".join(context_parts))

        parts.append(_escape(record.get("message", "")))
        line = " | ".join(parts)
        if record.get("exception"):
            line += "\n{exception}"
        return line + "\n"
    except (AttributeError, TypeError, ValueError, KeyError) as e:
        logger.trace(f"Failed to format log record: {e}")
        return DEFAULT_LOG_FORMAT + "\n"


def serialize_for_json(record: dict[str, Any]) -> str:
    """Format log record as a single JSON line.

    Args:
        record: Loguru record to format.

    Returns:
        str: JSON-formatted log entry with newline.
    """
    log_entry: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "logger": record["name"],
        "function": record["function"],
        "module": record["module"],
        "line": record["line"],
    }

    if extra := record.get("extra", {}):
        log_entry.update(redact_fields(extra))

    if exc := record.get("exception"):
        log_entry["exception"] = {
            "type": exc.type.__name__ if exc.type else None,
            "value": str(exc.value) if exc.value else None,
        }

    return json.dumps(log_entry, default=str) + "\n"


class InterceptHandler(logging.Handler):
    """Intercept standard logging and redirect to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        """Forward log record to Loguru.

        Args:
            record: Standard library LogRecord to forward.
        """
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(settings: SettingsProtocol) -> None:
    """Configure Loguru with the formatter selected in settings.

    Args:
        settings: Application settings containing log configuration.

    Note:
        This function ensures it's only called once using module state.
    """
    if _state.configured:
        return

    logger.remove()

    formatter_type = settings.log_config.log_formatter_type or "console"

    if formatter_type == "json":

        def structured_sink(message: object) -> None:
            """Write each record as one JSON line to stdout."""
            sys.stdout.write(serialize_for_json(cast("Any", message).record))
            sys.stdout.flush()

        logger.add(
            structured_sink,
            level=settings.log_config.log_level,
            enqueue=True,
            diagnose=False,
            backtrace=False,
        )
    else:
        logger.add(
            sys.stdout,
            format=cast("Any", format_console_with_context),
            level=settings.log_config.log_level,
            enqueue=True,
            colorize=True,
            diagnose=settings.debug,
            backtrace=settings.debug,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for logger_name in ["uvicorn", "uvicorn.error", "uvicorn.access"]:
        uvicorn_logger = logging.getLogger(logger_name)
        uvicorn_logger.handlers = [InterceptHandler()]
        uvicorn_logger.propagate = False

    logger.info(
        "Logging configured with {} formatter",
        formatter_type,
        formatter_type=formatter_type,
        log_level=settings.log_config.log_level,
    )

    _state.configured = True
