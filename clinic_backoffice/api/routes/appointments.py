"""
Appointment booking endpoints.

Both endpoints run the conflict validator; domain errors are turned into
HTTP responses by the registered exception handlers (409 for conflicts
and out-of-hours, 400 for malformed candidates, 404 for unknown ids).
"""

import logging

from fastapi import APIRouter, Depends, status

from clinic_backoffice.api.dependencies import (
    get_book_appointment_use_case,
    get_reschedule_appointment_use_case,
)
from clinic_backoffice.api.schemas.appointments import (
    AppointmentCreate,
    AppointmentReschedule,
    AppointmentResponse,
)
from clinic_backoffice.domains.scheduling.application.dto import (
    BookAppointmentRequest,
    RescheduleAppointmentRequest,
)
from clinic_backoffice.domains.scheduling.application.use_cases import (
    BookAppointmentUseCase,
    RescheduleAppointmentUseCase,
)

router = APIRouter(prefix="/appointments", tags=["appointments"])
logger = logging.getLogger(__name__)


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    payload: AppointmentCreate,
    use_case: BookAppointmentUseCase = Depends(get_book_appointment_use_case),  # noqa: B008
) -> AppointmentResponse:
    """Book a new appointment."""
    appointment = await use_case.execute(
        BookAppointmentRequest(
            start=payload.start,
            duration_minutes=payload.duration_minutes,
            patient_id=payload.patient_id,
            patient_name=payload.patient_name,
            notes=payload.notes,
        )
    )
    return AppointmentResponse.from_entity(appointment)


@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def reschedule_appointment(
    appointment_id: int,
    payload: AppointmentReschedule,
    use_case: RescheduleAppointmentUseCase = Depends(get_reschedule_appointment_use_case),  # noqa: B008
) -> AppointmentResponse:
    """Move an existing appointment to a new slot."""
    appointment = await use_case.execute(
        RescheduleAppointmentRequest(
            appointment_id=appointment_id,
            new_start=payload.start,
            duration_minutes=payload.duration_minutes,
        )
    )
    return AppointmentResponse.from_entity(appointment)
