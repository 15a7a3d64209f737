# ============================================================================
# SCOPE: SCHEDULING
# Description: Appointments, patients (contact data only) and clinic
#              business hours used by the appointment validator.
# ============================================================================
"""
Scheduling models.

Business hours are stored as a recurring weekly schedule (business_hours)
plus date-specific overrides (business_hour_overrides). When a date has
any override rows they replace the weekly schedule for that date; an
override row with null times marks the date as closed.

Usage:
    overrides = await session.execute(
        select(BusinessHourOverrideModel).where(BusinessHourOverrideModel.override_date == day)
    )
"""

from __future__ import annotations

from datetime import date, datetime, time

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Index, Integer, SmallInteger, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class PatientModel(Base, TimestampMixin):
    """Patient contact data needed to address reminders."""

    __tablename__ = "patients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False, comment="Patient first name")

    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="", comment="Patient last name")

    phone: Mapped[str | None] = mapped_column(
        String(30),
        nullable=True,
        comment="WhatsApp phone in international format (may lack '+')",
    )

    appointments: Mapped[list["AppointmentModel"]] = relationship(back_populates="patient")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<PatientModel(id={self.id}, name='{self.full_name}')>"


class AppointmentModel(Base, TimestampMixin):
    """
    Booked appointment.

    end_at is stored (not derived in SQL) so the GiST exclusion constraint
    created by the migration can index tstzrange(start_at, end_at).
    """

    __tablename__ = "appointments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    patient_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("patients.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Registered patient, null for walk-in bookings",
    )

    patient_name: Mapped[str | None] = mapped_column(
        String(200),
        nullable=True,
        comment="Free-text subject when there is no patient row",
    )

    start_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="Appointment start instant",
    )

    end_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="start_at + duration_minutes",
    )

    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, comment="Duration in minutes")

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    patient: Mapped[PatientModel | None] = relationship(back_populates="appointments", lazy="joined")

    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="positive_duration"),
        CheckConstraint("end_at > start_at", name="end_after_start"),
        Index("idx_appointments_start_at", "start_at"),
    )

    def __repr__(self) -> str:
        return f"<AppointmentModel(id={self.id}, start_at={self.start_at}, duration={self.duration_minutes})>"


class BusinessHourModel(Base, TimestampMixin):
    """Recurring weekly opening interval."""

    __tablename__ = "business_hours"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    weekday: Mapped[int] = mapped_column(
        SmallInteger,
        nullable=False,
        comment="ISO weekday: Monday=1 ... Sunday=7",
    )

    opens_at: Mapped[time] = mapped_column(Time, nullable=False, comment="Local opening time")

    closes_at: Mapped[time] = mapped_column(Time, nullable=False, comment="Local closing time")

    __table_args__ = (
        CheckConstraint("weekday BETWEEN 1 AND 7", name="iso_weekday"),
        CheckConstraint("opens_at < closes_at", name="opens_before_closes"),
        Index("idx_business_hours_weekday", "weekday"),
    )

    def __repr__(self) -> str:
        return f"<BusinessHourModel(weekday={self.weekday}, {self.opens_at}-{self.closes_at})>"


class BusinessHourOverrideModel(Base, TimestampMixin):
    """Date-specific schedule (holiday or special hours)."""

    __tablename__ = "business_hour_overrides"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    override_date: Mapped[date] = mapped_column(
        "date",
        Date,
        nullable=False,
        index=True,
        comment="Calendar date the override applies to",
    )

    opens_at: Mapped[time | None] = mapped_column(Time, nullable=True, comment="Null means closed all day")

    closes_at: Mapped[time | None] = mapped_column(Time, nullable=True, comment="Null means closed all day")

    reason: Mapped[str | None] = mapped_column(String(200), nullable=True, comment="e.g. holiday name")

    __table_args__ = (
        CheckConstraint(
            "(opens_at IS NULL AND closes_at IS NULL) OR (opens_at < closes_at)",
            name="closed_or_valid_interval",
        ),
    )

    def __repr__(self) -> str:
        return f"<BusinessHourOverrideModel(date={self.override_date}, {self.opens_at}-{self.closes_at})>"
