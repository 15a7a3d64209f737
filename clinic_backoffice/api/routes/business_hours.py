"""
Business hours lookup.

  - GET /business-hours?date=YYYY-MM-DD → open intervals for that date

An empty list means the clinic is closed. Date overrides take precedence
over the weekly schedule.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query

from clinic_backoffice.api.dependencies import get_business_hours_resolver
from clinic_backoffice.api.schemas.business_hours import BusinessHourIntervalResponse
from clinic_backoffice.core.domain.exceptions import ValidationException
from clinic_backoffice.domains.scheduling.application.services import BusinessHoursResolver

router = APIRouter(prefix="/business-hours", tags=["business-hours"])
logger = logging.getLogger(__name__)


@router.get("", response_model=list[BusinessHourIntervalResponse])
async def get_business_hours(
    date: str | None = Query(default=None, description="Local date, YYYY-MM-DD"),  # noqa: B008
    resolver: BusinessHoursResolver = Depends(get_business_hours_resolver),  # noqa: B008
) -> list[BusinessHourIntervalResponse]:
    if not date:
        raise ValidationException("Missing date parameter", field="date")
    try:
        day = datetime.strptime(date, "%Y-%m-%d").date()
    except ValueError as e:
        raise ValidationException("Invalid date format, expected YYYY-MM-DD", field="date") from e

    intervals = await resolver.resolve(day)
    return [BusinessHourIntervalResponse.from_interval(interval) for interval in intervals]
