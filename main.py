"""Main entry point for running the envelope demo service."""

import os

import uvicorn
from loguru import logger

from envelope.api.main import app
from envelope.core.config import get_settings
from envelope.core.logging import setup_logging

# Route uvicorn's own loggers through Loguru
UVICORN_LOG_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "default": {
            "class": "envelope.core.logging.InterceptHandler",
        },
    },
    "loggers": {
        "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
        "uvicorn.error": {"handlers": ["default"], "level": "INFO", "propagate": False},
        "uvicorn.access": {"handlers": ["default"], "level": "INFO", "propagate": False},
    },
}


def main() -> None:
    """Run the application with uvicorn."""
    settings = get_settings()

    setup_logging(settings)

    # Container platforms announce the listening port through PORT
    port = int(os.environ.get("PORT", settings.api_port))

    if settings.debug:
        logger.info(
            f"Starting Uvicorn on http://{settings.api_host}:{port} "
            "(development mode with auto-reload)"
        )
        # Reload requires the app as an import string
        uvicorn.run(
            "envelope.api.main:app",
            host=settings.api_host,
            port=port,
            reload=True,
            log_config=UVICORN_LOG_CONFIG,
        )
    else:
        logger.info(
            f"Starting Uvicorn on http://{settings.api_host}:{port} (production mode)"
        )
        uvicorn.run(
            app,
            host=settings.api_host,
            port=port,
            reload=False,
            log_config=UVICORN_LOG_CONFIG,
        )


if __name__ == "__main__":
    main()
