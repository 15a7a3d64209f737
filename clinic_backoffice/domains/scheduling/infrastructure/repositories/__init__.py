"""
Scheduling repositories (SQLAlchemy / PostgreSQL).
"""

from .appointment_repository import SQLAlchemyAppointmentRepository
from .business_hours_repository import SQLAlchemyBusinessHoursRepository
from .contact_repository import SQLAlchemyContactRepository
from .messaging_config_repository import SQLAlchemyMessagingConfigRepository
from .notification_repository import SQLAlchemyNotificationRepository
from .webhook_log_repository import SQLAlchemyWebhookLogRepository

__all__ = [
    "SQLAlchemyAppointmentRepository",
    "SQLAlchemyBusinessHoursRepository",
    "SQLAlchemyContactRepository",
    "SQLAlchemyMessagingConfigRepository",
    "SQLAlchemyNotificationRepository",
    "SQLAlchemyWebhookLogRepository",
]
