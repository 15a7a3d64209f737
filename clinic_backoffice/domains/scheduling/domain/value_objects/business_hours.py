"""Business hour interval value object."""

from dataclasses import dataclass
from datetime import date, datetime, time

import pytz

from clinic_backoffice.core.domain.exceptions import ValidationException
from clinic_backoffice.core.domain.value_objects import ValueObject

from .time_range import TimeRange


@dataclass(frozen=True)
class BusinessHourInterval(ValueObject):
    """
    Local time-of-day interval during which the clinic is open.

    Intervals never cross midnight: ``start`` must be strictly before ``end``.
    """

    start: time
    end: time

    def _validate(self) -> None:
        if self.start >= self.end:
            raise ValidationException(
                f"Business interval start {self.start:%H:%M} must be before end {self.end:%H:%M}",
                field="start",
            )

    def on(self, day: date, tz: pytz.BaseTzInfo) -> TimeRange:
        """Absolute range for this interval on ``day`` in the clinic timezone."""
        return TimeRange(
            start=tz.localize(datetime.combine(day, self.start)),
            end=tz.localize(datetime.combine(day, self.end)),
        )

    def __str__(self) -> str:
        return f"{self.start:%H:%M}-{self.end:%H:%M}"
