# ============================================================================
# SCOPE: APPLICATION LAYER (Scheduling)
# Description: Use cases for booking and rescheduling appointments.
# ============================================================================
"""Book / Reschedule Appointment Use Cases.

Both use cases validate and write inside one transaction after taking the
scheduling lock, so two concurrent requests cannot both pass the overlap
check for the same slot.
"""

import logging
from typing import TYPE_CHECKING

from clinic_backoffice.core.domain.exceptions import EntityNotFoundException

from ...domain.entities.appointment import Appointment
from ..dto.scheduling_dtos import BookAppointmentRequest, RescheduleAppointmentRequest

if TYPE_CHECKING:
    from ..ports import IAppointmentRepository
    from ..services.conflict_validator import AppointmentConflictValidator

logger = logging.getLogger(__name__)


class BookAppointmentUseCase:
    """Use case for booking a new appointment.

    Raises ValidationException, AppointmentConflictException or
    OutOfHoursException, in that priority order.
    """

    def __init__(
        self,
        appointment_repository: "IAppointmentRepository",
        validator: "AppointmentConflictValidator",
    ) -> None:
        self._appointments = appointment_repository
        self._validator = validator

    async def execute(self, request: BookAppointmentRequest) -> Appointment:
        """Execute the booking use case.

        Args:
            request: Booking request.

        Returns:
            The persisted appointment.
        """
        appointment = Appointment(
            patient_id=request.patient_id,
            patient_name=request.patient_name,
            start=request.start,
            duration_minutes=request.duration_minutes,
            notes=request.notes,
        )
        appointment.validate()

        await self._appointments.acquire_scheduling_lock()
        await self._validator.validate(appointment.start, appointment.end)
        saved = await self._appointments.create(appointment)

        logger.info(f"Appointment {saved.id} booked for {saved.start.isoformat()} ({saved.duration_minutes}m)")
        return saved


class RescheduleAppointmentUseCase:
    """Use case for moving an existing appointment to a new slot."""

    def __init__(
        self,
        appointment_repository: "IAppointmentRepository",
        validator: "AppointmentConflictValidator",
    ) -> None:
        self._appointments = appointment_repository
        self._validator = validator

    async def execute(self, request: RescheduleAppointmentRequest) -> Appointment:
        """Execute the reschedule use case.

        The appointment's own current slot is excluded from the overlap check.

        Raises:
            EntityNotFoundException: Unknown appointment id.
        """
        appointment = await self._appointments.get_by_id(request.appointment_id)
        if appointment is None:
            raise EntityNotFoundException("Appointment", request.appointment_id)

        appointment.reschedule(request.new_start, request.duration_minutes)

        await self._appointments.acquire_scheduling_lock()
        await self._validator.validate(appointment.start, appointment.end, exclude_id=appointment.id)
        updated = await self._appointments.update(appointment)

        logger.info(f"Appointment {updated.id} rescheduled to {updated.start.isoformat()}")
        return updated
