"""
Database models package - Organized by responsibility
"""

from .base import Base, TimestampMixin
from .messaging import WhatsAppConfigModel, WhatsAppNotificationModel, WhatsAppWebhookLogModel
from .scheduling import AppointmentModel, BusinessHourModel, BusinessHourOverrideModel, PatientModel

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Scheduling
    "PatientModel",
    "AppointmentModel",
    "BusinessHourModel",
    "BusinessHourOverrideModel",
    # Messaging
    "WhatsAppConfigModel",
    "WhatsAppNotificationModel",
    "WhatsAppWebhookLogModel",
]
