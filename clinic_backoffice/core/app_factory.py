"""
Application factory for FastAPI.

Handles only FastAPI application creation and configuration.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clinic_backoffice.api.exception_handlers import register_exception_handlers
from clinic_backoffice.api.middleware import RequestLoggingMiddleware
from clinic_backoffice.api.router import api_router
from clinic_backoffice.config.settings import Settings, get_settings
from clinic_backoffice.core.lifecycle import get_lifecycle_manager, lifespan

logger = logging.getLogger(__name__)


class AppFactory:
    """
    Factory for creating and configuring FastAPI applications.

    Each configuration step is handled by a dedicated method.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """
        Initialize app factory.

        Args:
            settings: Application settings (uses default if not provided)
        """
        self._settings = settings or get_settings()

    def create_app(self) -> FastAPI:
        """
        Create and configure the FastAPI application.

        Returns:
            Configured FastAPI application instance.
        """
        app = FastAPI(
            title=self._settings.PROJECT_NAME,
            description=self._settings.PROJECT_DESCRIPTION,
            version=self._settings.VERSION,
            docs_url=f"{self._settings.API_V1_STR}/docs" if self._settings.DEBUG else None,
            redoc_url=f"{self._settings.API_V1_STR}/redoc" if self._settings.DEBUG else None,
            lifespan=lifespan,
        )

        self._configure_middleware(app)
        register_exception_handlers(app)
        app.include_router(api_router, prefix=self._settings.API_V1_STR)
        self._configure_health_endpoint(app)

        logger.info(f"Application created: {self._settings.PROJECT_NAME}")
        return app

    def _configure_middleware(self, app: FastAPI) -> None:
        """
        Configure application middleware.

        CORS is added last so it is the outermost layer.
        """
        app.add_middleware(RequestLoggingMiddleware)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=self._settings.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def _configure_health_endpoint(self, app: FastAPI) -> None:
        """Add health check endpoint."""

        @app.get("/health", tags=["health"])
        async def health_check() -> dict[str, str]:
            scheduler_running = get_lifecycle_manager().reminder_scheduler_running
            return {
                "status": "ok",
                "environment": self._settings.ENVIRONMENT,
                "reminder_scheduler": "running" if scheduler_running else "stopped",
            }


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create FastAPI application using the factory.

    Args:
        settings: Optional settings override

    Returns:
        Configured FastAPI application
    """
    return AppFactory(settings).create_app()
