from .business_hours_resolver import BusinessHoursResolver
from .conflict_validator import AppointmentConflictValidator, is_within_business_hours
from .reminder_window_scheduler import ReminderWindowScheduler

__all__ = [
    "BusinessHoursResolver",
    "AppointmentConflictValidator",
    "is_within_business_hours",
    "ReminderWindowScheduler",
]
