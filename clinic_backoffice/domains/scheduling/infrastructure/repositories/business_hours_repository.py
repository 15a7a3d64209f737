"""
Business Hours Repository Implementation

SQLAlchemy implementation of IBusinessHoursRepository.
"""

from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_backoffice.domains.scheduling.application.ports import IBusinessHoursRepository
from clinic_backoffice.domains.scheduling.domain.value_objects.business_hours import BusinessHourInterval
from clinic_backoffice.models.db.scheduling import BusinessHourModel, BusinessHourOverrideModel

from .session_utils import execute_or_rollback


class SQLAlchemyBusinessHoursRepository(IBusinessHoursRepository):
    """Reads weekly hours and date overrides."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_overrides_for_date(self, day: date) -> list[BusinessHourInterval] | None:
        result = await execute_or_rollback(
            self.session,
            select(BusinessHourOverrideModel)
            .where(BusinessHourOverrideModel.override_date == day)
            .order_by(BusinessHourOverrideModel.opens_at)
        )
        rows = result.scalars().all()
        if not rows:
            return None

        # Rows without times mark the date as closed and contribute no interval
        return [
            BusinessHourInterval(start=row.opens_at, end=row.closes_at)
            for row in rows
            if row.opens_at is not None and row.closes_at is not None
        ]

    async def get_weekly_hours(self, weekday: int) -> list[BusinessHourInterval]:
        result = await execute_or_rollback(
            self.session,
            select(BusinessHourModel).where(BusinessHourModel.weekday == weekday).order_by(BusinessHourModel.opens_at),
        )
        return [BusinessHourInterval(start=row.opens_at, end=row.closes_at) for row in result.scalars().all()]
