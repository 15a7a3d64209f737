"""Half-open time range value object."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from clinic_backoffice.core.domain.exceptions import ValidationException
from clinic_backoffice.core.domain.value_objects import ValueObject


@dataclass(frozen=True)
class TimeRange(ValueObject):
    """
    Range of absolute instants ``[start, end)``.

    Both ends must be timezone-aware. Two ranges that only touch
    (one ends exactly when the other starts) do not overlap.
    """

    start: datetime
    end: datetime

    def _validate(self) -> None:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValidationException("Time range instants must be timezone-aware", field="start")
        if self.end <= self.start:
            raise ValidationException("Time range end must be after start", field="end")

    @classmethod
    def from_duration(cls, start: datetime, duration: timedelta) -> "TimeRange":
        return cls(start=start, end=start + duration)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, other: "TimeRange") -> bool:
        """True iff the two half-open ranges share at least one instant."""
        return self.start < other.end and other.start < self.end

    def contains(self, other: "TimeRange") -> bool:
        """True iff ``other`` lies entirely inside this range."""
        return self.start <= other.start and other.end <= self.end

    def includes(self, instant: datetime) -> bool:
        return self.start <= instant < self.end

    def __str__(self) -> str:
        return f"{self.start.isoformat()} - {self.end.isoformat()}"
