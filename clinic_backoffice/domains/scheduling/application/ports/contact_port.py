# ============================================================================
# SCOPE: APPLICATION LAYER (Scheduling)
# Description: Reminder recipient lookup port.
# ============================================================================
"""Contact Repository Port."""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ...domain.entities.appointment import Appointment
    from ...domain.value_objects.contact import Contact


@runtime_checkable
class IContactRepository(Protocol):
    """Interface for resolving who receives an appointment's reminders.

    Implementations: SQLAlchemyContactRepository
    """

    async def get_contact(self, appointment: "Appointment") -> "Contact":
        """Contact for the appointment.

        Raises:
            EntityNotFoundException: If the referenced patient does not exist.
        """
        ...
