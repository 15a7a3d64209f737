# ============================================================================
# SCOPE: GLOBAL
# Description: Dependencias FastAPI para inyección: sesión de base de datos,
#              contenedor y casos de uso del dominio Scheduling.
# ============================================================================
import logging

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_backoffice.core.container import SchedulingContainer, get_container
from clinic_backoffice.database.async_db import get_async_db
from clinic_backoffice.domains.scheduling.application.ports import (
    IMessagingConfigRepository,
    IWebhookLogRepository,
)
from clinic_backoffice.domains.scheduling.application.services import BusinessHoursResolver
from clinic_backoffice.domains.scheduling.application.use_cases import (
    BookAppointmentUseCase,
    DeliveryStatusTracker,
    RescheduleAppointmentUseCase,
    UpdateMessagingConfigUseCase,
)
from clinic_backoffice.domains.scheduling.infrastructure.scheduler import ReminderSchedulerRunner

logger = logging.getLogger(__name__)


# ============================================================
# CONTAINER
# ============================================================


def get_di_container() -> SchedulingContainer:
    """Get Dependency Injection Container singleton."""
    return get_container()


# ============================================================
# BOOKING
# ============================================================


def get_book_appointment_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: SchedulingContainer = Depends(get_di_container),  # noqa: B008
) -> BookAppointmentUseCase:
    """Get BookAppointmentUseCase instance"""
    return container.create_book_appointment_use_case(db)


def get_reschedule_appointment_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: SchedulingContainer = Depends(get_di_container),  # noqa: B008
) -> RescheduleAppointmentUseCase:
    """Get RescheduleAppointmentUseCase instance"""
    return container.create_reschedule_appointment_use_case(db)


def get_business_hours_resolver(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: SchedulingContainer = Depends(get_di_container),  # noqa: B008
) -> BusinessHoursResolver:
    """Get BusinessHoursResolver instance"""
    return container.create_business_hours_resolver(db)


# ============================================================
# WHATSAPP WEBHOOK / CONFIG
# ============================================================


def get_messaging_config_repository(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: SchedulingContainer = Depends(get_di_container),  # noqa: B008
) -> IMessagingConfigRepository:
    return container.create_messaging_config_repository(db)


def get_webhook_log_repository(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: SchedulingContainer = Depends(get_di_container),  # noqa: B008
) -> IWebhookLogRepository:
    return container.create_webhook_log_repository(db)


def get_delivery_status_tracker(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: SchedulingContainer = Depends(get_di_container),  # noqa: B008
) -> DeliveryStatusTracker:
    return container.create_delivery_status_tracker(db)


def get_update_messaging_config_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: SchedulingContainer = Depends(get_di_container),  # noqa: B008
) -> UpdateMessagingConfigUseCase:
    return container.create_update_messaging_config_use_case(db)


# ============================================================
# REMINDER SCHEDULER
# ============================================================


def get_reminder_runner(
    container: SchedulingContainer = Depends(get_di_container),  # noqa: B008
) -> ReminderSchedulerRunner:
    """Get the reminder scheduler runner singleton."""
    return container.create_reminder_scheduler_runner()
