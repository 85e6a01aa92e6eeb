"""
FastAPI application setup with dependency injection.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from contextlib import asynccontextmanager
from typing import Optional

from phrasebook_api.config.loader import load_config_for_environment
from phrasebook_api.config.settings import Settings, get_settings
from phrasebook_api.core.dependencies import ServiceContainer
from phrasebook_api.core.error_handlers import setup_error_handlers
from phrasebook_api.core.logging import configure_logging
from phrasebook_api.middleware import RequestContextMiddleware

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[ServiceContainer] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Application settings (defaults to the process-wide settings)
        container: Service container (defaults to one built from settings)

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()
    container = container or ServiceContainer(settings)

    configure_logging(settings.log_level.value, json_format=settings.log_json, log_file=settings.log_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.app_name} v{settings.app_version}")

        await container.initialize_services()
        app.state.service_container = container
        logger.info("Application startup complete")

        try:
            yield
        finally:
            logger.info("Shutting down application")
            await container.cleanup_services()
            logger.info("Application shutdown complete")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan
    )

    # Request ids must exist before error handlers run
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        **settings.get_cors_config()
    )

    setup_error_handlers(app)

    from phrasebook_api.api import health_router, translation_router, sync_router
    app.include_router(health_router)
    app.include_router(translation_router)
    app.include_router(sync_router)

    @app.get("/")
    async def root():
        """Root endpoint for basic health check."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "status": "running"
        }

    return app


# Application for `uvicorn phrasebook_api.main:app`; reads ENVIRONMENT and its
# .env.<environment> file, which run.py exports before reload or worker mode
app = create_app(load_config_for_environment())
