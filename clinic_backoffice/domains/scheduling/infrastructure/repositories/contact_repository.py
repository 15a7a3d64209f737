"""
Contact Repository Implementation

Resolves the reminder recipient of an appointment from the patients table.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_backoffice.core.domain.exceptions import EntityNotFoundException
from clinic_backoffice.domains.scheduling.application.ports import IContactRepository
from clinic_backoffice.domains.scheduling.domain.entities.appointment import Appointment
from clinic_backoffice.domains.scheduling.domain.value_objects.contact import Contact
from clinic_backoffice.models.db.scheduling import PatientModel

from .session_utils import execute_or_rollback

logger = logging.getLogger(__name__)


class SQLAlchemyContactRepository(IContactRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_contact(self, appointment: Appointment) -> Contact:
        """
        Contact for a registered patient, or a phone-less contact for
        free-text bookings (the dispatcher records those as failed).
        """
        if appointment.patient_id is None:
            logger.debug(f"Appointment {appointment.id} has no registered patient")
            return Contact(display_name=appointment.patient_name)

        result = await execute_or_rollback(
            self.session,
            select(PatientModel).where(PatientModel.id == appointment.patient_id),
        )
        patient = result.scalar_one_or_none()
        if patient is None:
            raise EntityNotFoundException("Patient", appointment.patient_id)

        return Contact(
            display_name=patient.full_name or appointment.patient_name,
            phone=patient.phone,
            patient_id=patient.id,
        )
