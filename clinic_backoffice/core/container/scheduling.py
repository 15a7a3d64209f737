# ============================================================================
# SCOPE: DOMAIN
# Description: Container for Scheduling domain dependencies.
#              Provides factories for repositories, services and use cases
#              bound to a database session.
# ============================================================================
"""
Scheduling Domain Container.

Provides dependency injection for the Scheduling domain. Repositories are
per-session; the messaging provider is a shared singleton.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from clinic_backoffice.config.settings import Settings
    from clinic_backoffice.domains.scheduling.application.ports import IMessagingProvider
    from clinic_backoffice.domains.scheduling.application.services import (
        AppointmentConflictValidator,
        BusinessHoursResolver,
        ReminderWindowScheduler,
    )
    from clinic_backoffice.domains.scheduling.application.use_cases import (
        BookAppointmentUseCase,
        DeliveryStatusTracker,
        NotificationDispatcher,
        RescheduleAppointmentUseCase,
        RetryCoordinator,
        UpdateMessagingConfigUseCase,
    )
    from clinic_backoffice.domains.scheduling.infrastructure.scheduler import ReminderSchedulerRunner

logger = logging.getLogger(__name__)


class SchedulingContainer:
    """Container for Scheduling domain dependencies.

    Single Responsibility: Wire scheduling dependencies.
    """

    def __init__(self, settings: "Settings", messaging_provider: "IMessagingProvider | None" = None):
        """Initialize container.

        Args:
            settings: Application settings.
            messaging_provider: Provider override (tests); defaults to the WhatsApp Cloud client.
        """
        self.settings = settings
        self._messaging_provider = messaging_provider
        logger.debug("SchedulingContainer initialized")

    # ============================================================
    # SINGLETONS
    # ============================================================

    def get_messaging_provider(self) -> "IMessagingProvider":
        """Get messaging provider (singleton)."""
        if self._messaging_provider is None:
            from clinic_backoffice.integrations.whatsapp import WhatsAppCloudClient

            logger.info(f"Creating WhatsAppCloudClient ({self.settings.WHATSAPP_API_VERSION})")
            self._messaging_provider = WhatsAppCloudClient.from_settings(self.settings)
        return self._messaging_provider

    # ============================================================
    # REPOSITORIES
    # ============================================================

    def create_appointment_repository(self, db: "AsyncSession"):
        from clinic_backoffice.domains.scheduling.infrastructure.repositories import (
            SQLAlchemyAppointmentRepository,
        )

        return SQLAlchemyAppointmentRepository(db)

    def create_business_hours_repository(self, db: "AsyncSession"):
        from clinic_backoffice.domains.scheduling.infrastructure.repositories import (
            SQLAlchemyBusinessHoursRepository,
        )

        return SQLAlchemyBusinessHoursRepository(db)

    def create_notification_repository(self, db: "AsyncSession"):
        from clinic_backoffice.domains.scheduling.infrastructure.repositories import (
            SQLAlchemyNotificationRepository,
        )

        return SQLAlchemyNotificationRepository(db)

    def create_contact_repository(self, db: "AsyncSession"):
        from clinic_backoffice.domains.scheduling.infrastructure.repositories import (
            SQLAlchemyContactRepository,
        )

        return SQLAlchemyContactRepository(db)

    def create_messaging_config_repository(self, db: "AsyncSession"):
        from clinic_backoffice.domains.scheduling.infrastructure.repositories import (
            SQLAlchemyMessagingConfigRepository,
        )

        return SQLAlchemyMessagingConfigRepository(db)

    def create_webhook_log_repository(self, db: "AsyncSession"):
        from clinic_backoffice.domains.scheduling.infrastructure.repositories import (
            SQLAlchemyWebhookLogRepository,
        )

        return SQLAlchemyWebhookLogRepository(db)

    # ============================================================
    # BOOKING
    # ============================================================

    def create_business_hours_resolver(self, db: "AsyncSession") -> "BusinessHoursResolver":
        from clinic_backoffice.domains.scheduling.application.services import BusinessHoursResolver

        return BusinessHoursResolver(self.create_business_hours_repository(db))

    def create_conflict_validator(self, db: "AsyncSession") -> "AppointmentConflictValidator":
        from clinic_backoffice.domains.scheduling.application.services import AppointmentConflictValidator

        return AppointmentConflictValidator(
            appointment_repository=self.create_appointment_repository(db),
            business_hours_resolver=self.create_business_hours_resolver(db),
            tz=self.settings.clinic_tz,
        )

    def create_book_appointment_use_case(self, db: "AsyncSession") -> "BookAppointmentUseCase":
        from clinic_backoffice.domains.scheduling.application.use_cases import BookAppointmentUseCase

        return BookAppointmentUseCase(
            appointment_repository=self.create_appointment_repository(db),
            validator=self.create_conflict_validator(db),
        )

    def create_reschedule_appointment_use_case(self, db: "AsyncSession") -> "RescheduleAppointmentUseCase":
        from clinic_backoffice.domains.scheduling.application.use_cases import RescheduleAppointmentUseCase

        return RescheduleAppointmentUseCase(
            appointment_repository=self.create_appointment_repository(db),
            validator=self.create_conflict_validator(db),
        )

    # ============================================================
    # REMINDERS
    # ============================================================

    def create_notification_dispatcher(self, db: "AsyncSession") -> "NotificationDispatcher":
        from clinic_backoffice.domains.scheduling.application.use_cases import NotificationDispatcher

        return NotificationDispatcher(
            provider=self.get_messaging_provider(),
            notification_repository=self.create_notification_repository(db),
            tz=self.settings.clinic_tz,
        )

    def create_retry_coordinator(self, db: "AsyncSession") -> "RetryCoordinator":
        from clinic_backoffice.domains.scheduling.application.use_cases import RetryCoordinator

        return RetryCoordinator(
            notification_repository=self.create_notification_repository(db),
            appointment_repository=self.create_appointment_repository(db),
            contact_repository=self.create_contact_repository(db),
            dispatcher=self.create_notification_dispatcher(db),
            max_attempts=self.settings.REMINDER_MAX_ATTEMPTS,
            send_delay_seconds=self.settings.REMINDER_SEND_DELAY_SECONDS,
        )

    def create_delivery_status_tracker(self, db: "AsyncSession") -> "DeliveryStatusTracker":
        from clinic_backoffice.domains.scheduling.application.use_cases import DeliveryStatusTracker

        return DeliveryStatusTracker(self.create_notification_repository(db))

    def create_update_messaging_config_use_case(self, db: "AsyncSession") -> "UpdateMessagingConfigUseCase":
        from clinic_backoffice.domains.scheduling.application.use_cases import UpdateMessagingConfigUseCase

        return UpdateMessagingConfigUseCase(self.create_messaging_config_repository(db))

    def create_reminder_window_scheduler(self, db: "AsyncSession") -> "ReminderWindowScheduler":
        from clinic_backoffice.domains.scheduling.application.services import ReminderWindowScheduler

        return ReminderWindowScheduler(
            config_repository=self.create_messaging_config_repository(db),
            appointment_repository=self.create_appointment_repository(db),
            notification_repository=self.create_notification_repository(db),
            contact_repository=self.create_contact_repository(db),
            dispatcher=self.create_notification_dispatcher(db),
            retry_coordinator=self.create_retry_coordinator(db),
            window_width=timedelta(minutes=self.settings.REMINDER_WINDOW_MINUTES),
            retry_batch_size=self.settings.REMINDER_RETRY_BATCH_SIZE,
            max_attempts=self.settings.REMINDER_MAX_ATTEMPTS,
            send_delay_seconds=self.settings.REMINDER_SEND_DELAY_SECONDS,
        )

    @asynccontextmanager
    async def reminder_tick_scope(self) -> AsyncIterator["ReminderWindowScheduler"]:
        """Open a session and yield a window scheduler bound to it."""
        from clinic_backoffice.database.async_db import get_async_db_context

        async with get_async_db_context() as db:
            yield self.create_reminder_window_scheduler(db)

    def create_reminder_scheduler_runner(self) -> "ReminderSchedulerRunner":
        from clinic_backoffice.domains.scheduling.infrastructure.scheduler import get_reminder_scheduler_runner

        return get_reminder_scheduler_runner(
            tick_scope=self.reminder_tick_scope,
            interval_seconds=self.settings.REMINDER_TICK_INTERVAL_SECONDS,
            timeout_seconds=self.settings.REMINDER_TICK_TIMEOUT_SECONDS,
            enabled=self.settings.REMINDER_SCHEDULER_ENABLED,
        )
