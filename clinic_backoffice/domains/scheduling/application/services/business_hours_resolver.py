# ============================================================================
# SCOPE: APPLICATION LAYER (Scheduling)
# Description: Resolves the clinic's open intervals for a calendar date.
# ============================================================================
"""Business Hours Resolver.

Date-specific overrides (holidays, special schedules) fully replace the
recurring weekly schedule for their date. They are never merged with it.
"""

import logging
from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.value_objects.business_hours import BusinessHourInterval
    from ..ports import IBusinessHoursRepository

logger = logging.getLogger(__name__)


class BusinessHoursResolver:
    """Open intervals for a date, ordered by start time.

    An empty result means the clinic is closed that day.
    """

    def __init__(self, repository: "IBusinessHoursRepository") -> None:
        self._repository = repository

    async def resolve(self, day: date) -> list["BusinessHourInterval"]:
        """Resolve the open intervals for ``day``.

        Repository errors propagate to the caller.
        """
        overrides = await self._repository.get_overrides_for_date(day)
        if overrides is not None:
            logger.debug(f"Using {len(overrides)} override interval(s) for {day}")
            return sorted(overrides, key=lambda interval: interval.start)

        weekday = day.isoweekday()
        intervals = await self._repository.get_weekly_hours(weekday)
        return sorted(intervals, key=lambda interval: interval.start)
