"""
Appointment Repository Implementation

SQLAlchemy implementation of IAppointmentRepository.
"""

import logging
from datetime import datetime

from sqlalchemy import and_, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_backoffice.core.domain.exceptions import AppointmentConflictException, EntityNotFoundException
from clinic_backoffice.domains.scheduling.application.ports import IAppointmentRepository
from clinic_backoffice.domains.scheduling.domain.entities.appointment import Appointment
from clinic_backoffice.models.db.scheduling import AppointmentModel

from .session_utils import execute_or_rollback

logger = logging.getLogger(__name__)

# pg_advisory_xact_lock key for booking writes
SCHEDULING_LOCK_KEY = 0x636C6E63

# GiST exclusion constraint created by the initial migration
OVERLAP_CONSTRAINT = "ex_appointments_no_overlap"
EXCLUSION_VIOLATION = "23P01"


def _is_overlap_violation(error: IntegrityError) -> bool:
    sqlstate = getattr(error.orig, "sqlstate", None) or getattr(error.orig, "pgcode", None)
    return sqlstate == EXCLUSION_VIOLATION or OVERLAP_CONSTRAINT in str(error.orig)


class SQLAlchemyAppointmentRepository(IAppointmentRepository):
    """
    SQLAlchemy implementation of appointment repository.

    Handles all appointment data persistence operations.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def get_by_id(self, appointment_id: int) -> Appointment | None:
        """Find appointment by ID."""
        result = await execute_or_rollback(
            self.session,
            select(AppointmentModel).where(AppointmentModel.id == appointment_id),
        )
        model = result.unique().scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_appointments_in_range(self, start: datetime, end: datetime) -> list[Appointment]:
        """Appointments starting in [start, end)."""
        result = await execute_or_rollback(
            self.session,
            select(AppointmentModel)
            .where(
                and_(
                    AppointmentModel.start_at >= start,
                    AppointmentModel.start_at < end,
                )
            )
            .order_by(AppointmentModel.start_at)
        )
        models = result.unique().scalars().all()
        return [self._to_entity(m) for m in models]

    async def has_overlapping_appointment(
        self,
        start: datetime,
        end: datetime,
        exclude_id: int | None = None,
    ) -> bool:
        """Check if [start, end) overlaps any stored appointment."""
        query = select(func.count()).select_from(AppointmentModel).where(
            and_(
                AppointmentModel.start_at < end,
                AppointmentModel.end_at > start,
            )
        )

        if exclude_id is not None:
            query = query.where(AppointmentModel.id != exclude_id)

        result = await execute_or_rollback(self.session, query)
        return result.scalar_one() > 0

    async def acquire_scheduling_lock(self) -> None:
        """Take the transaction-scoped booking lock (released on commit/rollback)."""
        await execute_or_rollback(self.session, select(func.pg_advisory_xact_lock(SCHEDULING_LOCK_KEY)))

    async def create(self, appointment: Appointment) -> Appointment:
        """Insert a new appointment."""
        model = self._to_model(appointment)
        self.session.add(model)
        await self._commit(appointment)
        await self.session.refresh(model)
        return self._to_entity(model)

    async def update(self, appointment: Appointment) -> Appointment:
        """Update slot and details of an existing appointment."""
        result = await execute_or_rollback(
            self.session,
            select(AppointmentModel).where(AppointmentModel.id == appointment.id),
        )
        model = result.unique().scalar_one_or_none()
        if model is None:
            raise EntityNotFoundException("Appointment", appointment.id)

        model.patient_id = appointment.patient_id
        model.patient_name = appointment.patient_name or None
        model.start_at = appointment.start
        model.end_at = appointment.end
        model.duration_minutes = appointment.duration_minutes
        model.notes = appointment.notes or None

        await self._commit(appointment)
        await self.session.refresh(model)
        return self._to_entity(model)

    async def _commit(self, appointment: Appointment) -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if _is_overlap_violation(e):
                logger.warning(f"Overlap rejected by database for {appointment.start} (id={appointment.id})")
                raise AppointmentConflictException(
                    time_slot=f"{appointment.start.isoformat()} - {appointment.end.isoformat()}"
                ) from e
            raise

    def _to_model(self, appointment: Appointment) -> AppointmentModel:
        return AppointmentModel(
            patient_id=appointment.patient_id,
            patient_name=appointment.patient_name or None,
            start_at=appointment.start,
            end_at=appointment.end,
            duration_minutes=appointment.duration_minutes,
            notes=appointment.notes or None,
        )

    def _to_entity(self, model: AppointmentModel) -> Appointment:
        """Convert model to entity."""
        return Appointment(
            id=model.id,
            patient_id=model.patient_id,
            patient_name=model.patient_name or "",
            start=model.start_at,
            duration_minutes=model.duration_minutes,
            notes=model.notes or "",
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
