"""
Shared pytest fixtures for all tests.

Provides the clinic timezone, in-memory scheduling repositories and a
fake messaging provider.
"""

import os
from datetime import time

import pytest
import pytz

# Ensure test environment before settings are first loaded
os.environ["ENVIRONMENT"] = "test"
os.environ["REMINDER_SCHEDULER_ENABLED"] = "false"
os.environ.setdefault("CLINIC_TIMEZONE", "America/Argentina/Buenos_Aires")

from clinic_backoffice.domains.scheduling.domain.value_objects.business_hours import (  # noqa: E402
    BusinessHourInterval,
)
from tests.utils.builders import MessagingConfigBuilder  # noqa: E402
from tests.utils.fakes import (  # noqa: E402
    FakeMessagingProvider,
    InMemoryAppointmentRepository,
    InMemoryBusinessHoursRepository,
    InMemoryContactRepository,
    InMemoryMessagingConfigRepository,
    InMemoryNotificationRepository,
)

# ============================================================================
# CLINIC FIXTURES
# ============================================================================


@pytest.fixture
def clinic_tz() -> pytz.BaseTzInfo:
    """Clinic timezone (UTC-3, no DST)."""
    return pytz.timezone("America/Argentina/Buenos_Aires")


@pytest.fixture
def weekday_hours() -> dict[int, list[BusinessHourInterval]]:
    """09:00-17:00 Monday to Friday."""
    return {weekday: [BusinessHourInterval(start=time(9, 0), end=time(17, 0))] for weekday in range(1, 6)}


# ============================================================================
# REPOSITORY FIXTURES
# ============================================================================


@pytest.fixture
def appointment_repository() -> InMemoryAppointmentRepository:
    return InMemoryAppointmentRepository()


@pytest.fixture
def business_hours_repository(weekday_hours) -> InMemoryBusinessHoursRepository:
    return InMemoryBusinessHoursRepository(weekly=weekday_hours)


@pytest.fixture
def notification_repository(appointment_repository) -> InMemoryNotificationRepository:
    return InMemoryNotificationRepository(appointments=appointment_repository)


@pytest.fixture
def contact_repository() -> InMemoryContactRepository:
    return InMemoryContactRepository(
        patients={
            1: ("Ana Pérez", "+54 9 11 5555-1234"),
            2: ("Luis Gómez", "5491144443333"),
            3: ("Sin Teléfono", None),
        }
    )


@pytest.fixture
def messaging_config():
    return MessagingConfigBuilder().build()


@pytest.fixture
def config_repository(messaging_config) -> InMemoryMessagingConfigRepository:
    return InMemoryMessagingConfigRepository(messaging_config)


@pytest.fixture
def messaging_provider() -> FakeMessagingProvider:
    return FakeMessagingProvider()
