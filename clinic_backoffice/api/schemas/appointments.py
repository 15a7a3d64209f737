"""
Appointment API Schemas

Pydantic models for booking and rescheduling requests and responses.
"""

from datetime import datetime

from pydantic import AwareDatetime, BaseModel, Field

from clinic_backoffice.domains.scheduling.domain.entities.appointment import Appointment


class AppointmentCreate(BaseModel):
    """Schema for booking an appointment."""

    start: AwareDatetime = Field(..., description="Start instant with UTC offset")
    duration_minutes: int = Field(..., description="Duration in minutes")
    patient_id: int | None = Field(default=None, description="Registered patient")
    patient_name: str = Field(default="", max_length=200, description="Free-text subject when there is no patient")
    notes: str = Field(default="", description="Optional notes")

    model_config = {
        "json_schema_extra": {
            "example": {"start": "2025-03-10T10:00:00-03:00", "duration_minutes": 30, "patient_id": 12}
        }
    }


class AppointmentReschedule(BaseModel):
    """Schema for moving an appointment."""

    start: AwareDatetime = Field(..., description="New start instant with UTC offset")
    duration_minutes: int | None = Field(default=None, description="New duration; keeps the current one if omitted")


class AppointmentResponse(BaseModel):
    """Booked appointment."""

    id: int
    patient_id: int | None
    patient_name: str
    start: datetime
    end: datetime
    duration_minutes: int
    notes: str

    @classmethod
    def from_entity(cls, appointment: Appointment) -> "AppointmentResponse":
        assert appointment.id is not None
        return cls(
            id=appointment.id,
            patient_id=appointment.patient_id,
            patient_name=appointment.patient_name,
            start=appointment.start,
            end=appointment.end,
            duration_minutes=appointment.duration_minutes,
            notes=appointment.notes,
        )
