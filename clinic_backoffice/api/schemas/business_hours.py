"""Business hours API schemas."""

from datetime import time

from pydantic import BaseModel

from clinic_backoffice.domains.scheduling.domain.value_objects.business_hours import BusinessHourInterval


class BusinessHourIntervalResponse(BaseModel):
    start: time
    end: time

    @classmethod
    def from_interval(cls, interval: BusinessHourInterval) -> "BusinessHourIntervalResponse":
        return cls(start=interval.start, end=interval.end)
