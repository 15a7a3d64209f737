# ============================================================================
# SCOPE: APPLICATION LAYER (Scheduling)
# Description: Ports (interfaces) for storage and messaging collaborators.
# ============================================================================
"""Scheduling Application Ports.

Interface definitions following the hexagonal architecture. Each port is
segregated so that a service depends only on what it uses.
"""

from .appointment_port import IAppointmentRepository
from .business_hours_port import IBusinessHoursRepository
from .contact_port import IContactRepository
from .messaging_port import IMessagingConfigRepository, IMessagingProvider
from .notification_port import INotificationRepository, IWebhookLogRepository

__all__ = [
    "IAppointmentRepository",
    "IBusinessHoursRepository",
    "IContactRepository",
    "IMessagingConfigRepository",
    "IMessagingProvider",
    "INotificationRepository",
    "IWebhookLogRepository",
]
