"""Reminder offsets: how long before an appointment each reminder fires."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from clinic_backoffice.core.domain.exceptions import ValidationException
from clinic_backoffice.core.domain.value_objects import ValueObject

from .time_range import TimeRange


@dataclass(frozen=True)
class ReminderOffset(ValueObject):
    """
    Named reminder trigger.

    Attributes:
        lead_time: How long before the appointment start the reminder is due.
        message_type: Reminder kind, part of the notification idempotency key.
    """

    lead_time: timedelta
    message_type: str

    def _validate(self) -> None:
        if self.lead_time <= timedelta(0):
            raise ValidationException("Reminder lead time must be positive", field="lead_time")
        if not self.message_type:
            raise ValidationException("Reminder message type is required", field="message_type")

    def due_window(self, now: datetime, width: timedelta) -> TimeRange:
        """Appointments starting in ``[now + lead, now + lead + width)`` are due."""
        start = now + self.lead_time
        return TimeRange(start=start, end=start + width)


THREE_DAYS_BEFORE = ReminderOffset(lead_time=timedelta(hours=72), message_type="3_days")
ONE_DAY_BEFORE = ReminderOffset(lead_time=timedelta(hours=24), message_type="1_day")
TWO_HOURS_BEFORE = ReminderOffset(lead_time=timedelta(hours=2), message_type="2_hours")
