# ============================================================================
# SCOPE: APPLICATION LAYER (Scheduling)
# Description: Checks a candidate appointment for overlaps and business hours.
# ============================================================================
"""Appointment Conflict Validator.

Validation order is fixed: overlap first, then business-hours
containment. A candidate that both overlaps and falls outside hours
always reports the conflict.
"""

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING

import pytz

from clinic_backoffice.core.domain.exceptions import (
    AppointmentConflictException,
    OutOfHoursException,
)

from ...domain.value_objects.time_range import TimeRange

if TYPE_CHECKING:
    from ...domain.value_objects.business_hours import BusinessHourInterval
    from ..ports import IAppointmentRepository
    from .business_hours_resolver import BusinessHoursResolver

logger = logging.getLogger(__name__)


def is_within_business_hours(
    candidate: TimeRange,
    intervals: Iterable["BusinessHourInterval"],
    tz: pytz.BaseTzInfo,
) -> bool:
    """True iff some interval, placed on the candidate's local date, fully contains it."""
    local_day = candidate.start.astimezone(tz).date()
    return any(interval.on(local_day, tz).contains(candidate) for interval in intervals)


class AppointmentConflictValidator:
    """Decides whether a candidate appointment may be booked.

    The validator never writes; persistence is up to the caller.
    """

    def __init__(
        self,
        appointment_repository: "IAppointmentRepository",
        business_hours_resolver: "BusinessHoursResolver",
        tz: pytz.BaseTzInfo,
    ) -> None:
        """Initialize validator.

        Args:
            appointment_repository: Overlap lookups (DIP).
            business_hours_resolver: Open intervals per date.
            tz: Clinic timezone business hours are expressed in.
        """
        self._appointments = appointment_repository
        self._resolver = business_hours_resolver
        self._tz = tz

    async def validate(
        self,
        candidate_start: datetime,
        candidate_end: datetime,
        exclude_id: int | None = None,
    ) -> None:
        """Validate the candidate ``[candidate_start, candidate_end)``.

        Args:
            candidate_start: Timezone-aware start instant.
            candidate_end: Timezone-aware end instant.
            exclude_id: Appointment being updated, ignored by the overlap check.

        Raises:
            ValidationException: Malformed range.
            AppointmentConflictException: Overlaps an existing appointment.
            OutOfHoursException: Not inside any open interval of its date.
        """
        candidate = TimeRange(start=candidate_start, end=candidate_end)

        if await self._appointments.has_overlapping_appointment(candidate.start, candidate.end, exclude_id):
            logger.info(f"Appointment conflict for {candidate} (exclude_id={exclude_id})")
            raise AppointmentConflictException(time_slot=str(candidate))

        local_start = candidate.start.astimezone(self._tz)
        intervals = await self._resolver.resolve(local_start.date())
        if not is_within_business_hours(candidate, intervals, self._tz):
            hours = ", ".join(str(interval) for interval in intervals) or "closed"
            logger.info(f"Appointment {candidate} outside working hours ({hours})")
            raise OutOfHoursException(time_slot=str(candidate))
