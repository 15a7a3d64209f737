"""
Application lifecycle management using the FastAPI lifespan pattern.

Starts the reminder scheduler runner on startup and stops it on
shutdown, letting an in-flight tick finish.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from clinic_backoffice.config.settings import Settings, get_settings
from clinic_backoffice.core.container import get_container
from clinic_backoffice.database.async_db import check_db_connection
from clinic_backoffice.domains.scheduling.infrastructure.scheduler import (
    ReminderSchedulerRunner,
    shutdown_reminder_scheduler_runner,
)

logger = logging.getLogger(__name__)


class LifecycleManager:
    """
    Manages application lifecycle events.

    Handles startup initialization and graceful shutdown.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._runner: ReminderSchedulerRunner | None = None
        self._initialized = False

    async def startup(self) -> None:
        """
        Execute startup tasks.

        Called when the application starts.
        """
        if self._initialized:
            logger.warning("Lifecycle already initialized, skipping startup")
            return

        logger.info("Starting application lifecycle...")

        self._verify_configurations()
        if not await check_db_connection():
            logger.warning("Database unreachable at startup; reminder ticks will fail until it recovers")
        await self._start_reminder_scheduler()

        self._initialized = True
        logger.info("Application lifecycle startup completed")

    async def shutdown(self) -> None:
        """
        Execute shutdown tasks.

        Called when the application stops.
        """
        if not self._initialized:
            logger.warning("Lifecycle not initialized, skipping shutdown")
            return

        logger.info("Stopping application lifecycle...")

        if self._runner is not None:
            await shutdown_reminder_scheduler_runner()
            self._runner = None

        self._initialized = False
        logger.info("Application lifecycle shutdown completed")

    @property
    def reminder_scheduler_running(self) -> bool:
        return self._runner is not None and self._runner.is_running

    def _verify_configurations(self) -> None:
        """Log configuration that disables parts of the app."""
        if not self._settings.REMINDER_SCHEDULER_ENABLED:
            logger.info("Reminder scheduler is disabled via REMINDER_SCHEDULER_ENABLED=False")

        if not self._settings.DB_PASSWORD:
            logger.warning("DB_PASSWORD not configured")

    async def _start_reminder_scheduler(self) -> None:
        if not self._settings.REMINDER_SCHEDULER_ENABLED:
            return

        try:
            self._runner = get_container().create_reminder_scheduler_runner()
            await self._runner.start()
        except Exception as e:
            logger.error(f"Failed to start reminder scheduler: {e}", exc_info=True)
            self._runner = None


# Global lifecycle manager instance
_lifecycle_manager: LifecycleManager | None = None


def get_lifecycle_manager() -> LifecycleManager:
    """Get or create the global lifecycle manager instance."""
    global _lifecycle_manager
    if _lifecycle_manager is None:
        _lifecycle_manager = LifecycleManager()
    return _lifecycle_manager


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Usage:
        app = FastAPI(lifespan=lifespan)
    """
    lifecycle = get_lifecycle_manager()

    await lifecycle.startup()

    yield

    await lifecycle.shutdown()
