"""Type aliases for dynamic data structures throughout the application."""

from typing import Any, TypeAlias

# Context dictionary for logging additional information
# Values must be JSON-serializable for structured logging
LogContext: TypeAlias = dict[str, Any]
