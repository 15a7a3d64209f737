# ============================================================================
# SCOPE: APPLICATION LAYER (Scheduling)
# Description: Business hours lookup port.
# ============================================================================
"""Business Hours Repository Port."""

from datetime import date
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ...domain.value_objects.business_hours import BusinessHourInterval


@runtime_checkable
class IBusinessHoursRepository(Protocol):
    """Interface for clinic opening hours.

    Implementations: SQLAlchemyBusinessHoursRepository
    """

    async def get_overrides_for_date(self, day: date) -> list["BusinessHourInterval"] | None:
        """Date-specific schedule.

        Returns:
            None when the date has no override rows. Otherwise the override
            intervals; an empty list means closed all day.
        """
        ...

    async def get_weekly_hours(self, weekday: int) -> list["BusinessHourInterval"]:
        """Recurring intervals for an ISO weekday (Monday=1 ... Sunday=7)."""
        ...
