# ============================================================================
# SCOPE: APPLICATION LAYER (Scheduling)
# Description: Appointment storage port.
# ============================================================================
"""Appointment Repository Port.

Storage operations needed by the validator, the booking use cases and
the reminder window scan.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ...domain.entities.appointment import Appointment


@runtime_checkable
class IAppointmentRepository(Protocol):
    """Interface for appointment persistence.

    Implementations: SQLAlchemyAppointmentRepository
    """

    async def list_appointments_in_range(self, start: datetime, end: datetime) -> list["Appointment"]:
        """Appointments whose start falls in ``[start, end)``, ordered by start."""
        ...

    async def has_overlapping_appointment(
        self,
        start: datetime,
        end: datetime,
        exclude_id: int | None = None,
    ) -> bool:
        """Whether any appointment other than ``exclude_id`` overlaps ``[start, end)``."""
        ...

    async def get_by_id(self, appointment_id: int) -> "Appointment | None":
        ...

    async def create(self, appointment: "Appointment") -> "Appointment":
        """Persist a new appointment and return it with its id assigned."""
        ...

    async def update(self, appointment: "Appointment") -> "Appointment":
        ...

    async def acquire_scheduling_lock(self) -> None:
        """Serialize check-then-write sections until the transaction ends."""
        ...
