"""Appointment Entity.

A booked time slot for a patient. The scheduling core only reads
appointments; creation and rescheduling go through the validator first.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from clinic_backoffice.core.domain.entities import Entity
from clinic_backoffice.core.domain.exceptions import ValidationException

from ..value_objects.time_range import TimeRange


@dataclass
class Appointment(Entity[int]):
    """Turno de la clínica.

    Either ``patient_id`` (registered patient) or ``patient_name``
    (free-text booking) identifies who the appointment is for.
    """

    patient_id: int | None = None
    patient_name: str = ""
    start: datetime | None = None
    duration_minutes: int = 0
    notes: str = ""

    @property
    def duration(self) -> timedelta:
        return timedelta(minutes=self.duration_minutes)

    @property
    def end(self) -> datetime:
        if self.start is None:
            raise ValidationException("Appointment has no start time", field="start")
        return self.start + self.duration

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(start=self.start, end=self.end)

    def has_subject(self) -> bool:
        return self.patient_id is not None or bool(self.patient_name.strip())

    def validate(self) -> None:
        """Check the entity invariants.

        Raises:
            ValidationException: Missing subject, missing/naive start or
                non-positive duration.
        """
        if not self.has_subject():
            raise ValidationException("Either patient_id or patient_name is required", field="patient_id")
        if self.start is None:
            raise ValidationException("Appointment start is required", field="start")
        if self.start.tzinfo is None:
            raise ValidationException("Appointment start must be timezone-aware", field="start")
        if self.duration_minutes <= 0:
            raise ValidationException("Appointment duration must be greater than zero", field="duration_minutes")

    def reschedule(self, start: datetime, duration_minutes: int | None = None) -> None:
        self.start = start
        if duration_minutes is not None:
            self.duration_minutes = duration_minutes
        self.validate()
        self.touch()

    def __repr__(self) -> str:
        return f"Appointment(id={self.id}, start={self.start}, duration={self.duration_minutes}m)"
