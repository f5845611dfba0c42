"""FastAPI application factory for the envelope demo service.

The application answers every route, and every failure, with a JSON
envelope:
- Route handlers return ``success_response(...)``
- Exception handlers turn errors into ``error_response(...)``
"""

from typing import Annotated

from fastapi import Depends, FastAPI
from fastapi.responses import Response

from envelope.api.middleware.error_handler import register_exception_handlers
from envelope.api.utils.responses import success_response
from envelope.api.writer import ResponseWriter
from envelope.core.config import Settings, get_settings
from envelope.core.logging import setup_logging


def create_app(
    settings: Settings | None = None, writer: ResponseWriter | None = None
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings instance. If not provided, will use get_settings().
        writer: Optional response writer shared by routes and error handlers.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
    )

    register_exception_handlers(application, writer)

    @application.get("/health")
    async def health() -> Response:
        """Health check endpoint for monitoring and container orchestration."""
        return success_response({"status": "healthy"}, writer)

    @application.get("/info")
    async def info(
        app_settings: Annotated[Settings, Depends(get_settings)],
    ) -> Response:
        """Get application information."""
        return success_response(
            {
                "app_name": app_settings.app_name,
                "version": app_settings.app_version,
                "environment": app_settings.environment,
                "debug": app_settings.debug,
            },
            writer,
        )

    return application


app = create_app()
