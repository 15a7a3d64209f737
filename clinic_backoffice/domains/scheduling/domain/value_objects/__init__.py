from .business_hours import BusinessHourInterval
from .contact import Contact
from .messaging_config import MessagingConfig
from .notification_status import NotificationStatus
from .reminder_offset import (
    ONE_DAY_BEFORE,
    THREE_DAYS_BEFORE,
    TWO_HOURS_BEFORE,
    ReminderOffset,
)
from .status_event import StatusEventKind, WebhookStatusEvent
from .time_range import TimeRange

__all__ = [
    "BusinessHourInterval",
    "Contact",
    "MessagingConfig",
    "NotificationStatus",
    "ReminderOffset",
    "THREE_DAYS_BEFORE",
    "ONE_DAY_BEFORE",
    "TWO_HOURS_BEFORE",
    "StatusEventKind",
    "WebhookStatusEvent",
    "TimeRange",
]
