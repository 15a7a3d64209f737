"""
Unit tests for RetryCoordinator.
"""

from datetime import UTC, datetime, timedelta

import pytest

from clinic_backoffice.domains.scheduling.application.use_cases.dispatch_reminder import NotificationDispatcher
from clinic_backoffice.domains.scheduling.application.use_cases.retry_reminders import RetryCoordinator
from clinic_backoffice.domains.scheduling.domain.entities.notification import NotificationRecord
from clinic_backoffice.domains.scheduling.domain.value_objects.notification_status import NotificationStatus
from tests.utils.builders import AppointmentBuilder

NOW = datetime(2025, 3, 9, 12, 0, tzinfo=UTC)


@pytest.fixture
def coordinator(notification_repository, appointment_repository, contact_repository, messaging_provider, clinic_tz):
    dispatcher = NotificationDispatcher(messaging_provider, notification_repository, clinic_tz, clock=lambda: NOW)
    return RetryCoordinator(
        notification_repository,
        appointment_repository,
        contact_repository,
        dispatcher,
        max_attempts=3,
    )


@pytest.fixture
def upcoming(appointment_repository):
    return appointment_repository.add(AppointmentBuilder().for_patient(2).starting_at(NOW + timedelta(hours=6)).build())


def _failed(appointment_id: int, attempts: int, message_type: str = "1_day") -> NotificationRecord:
    record = NotificationRecord.failed(appointment_id, message_type, "timeout", NOW - timedelta(hours=1))
    record.attempts = attempts
    return record


@pytest.mark.unit
@pytest.mark.use_case
@pytest.mark.asyncio
async def test_retry_failed_below_cap(coordinator, notification_repository, messaging_config, upcoming):
    """Test that a failed record below the cap is re-sent in place."""
    # Arrange
    notification_repository.seed(_failed(upcoming.id, attempts=2))

    # Act
    retried = await coordinator.retry_pending(10, messaging_config, now=NOW)

    # Assert
    assert retried == 1
    record = notification_repository.get(upcoming.id, "1_day")
    assert record.status == NotificationStatus.SENT
    assert record.attempts == 3
    assert len(notification_repository.all()) == 1


@pytest.mark.unit
@pytest.mark.use_case
@pytest.mark.asyncio
async def test_retry_stops_at_cap(coordinator, notification_repository, messaging_provider, messaging_config, upcoming):
    """Test that records with max attempts are never retried."""
    notification_repository.seed(_failed(upcoming.id, attempts=3))

    retried = await coordinator.retry_pending(10, messaging_config, now=NOW)

    assert retried == 0
    assert messaging_provider.sent == []


@pytest.mark.unit
@pytest.mark.use_case
@pytest.mark.asyncio
async def test_retry_skips_excluded_keys(coordinator, notification_repository, messaging_provider, messaging_config, upcoming):
    """Test that keys attempted earlier in the tick are left alone."""
    notification_repository.seed(_failed(upcoming.id, attempts=1))

    retried = await coordinator.retry_pending(10, messaging_config, now=NOW, exclude={(upcoming.id, "1_day")})

    assert retried == 0
    assert messaging_provider.sent == []


@pytest.mark.unit
@pytest.mark.use_case
@pytest.mark.asyncio
async def test_retry_skips_started_appointments(
    coordinator, notification_repository, appointment_repository, messaging_provider, messaging_config
):
    """Test that reminders for appointments already under way are not retried."""
    past = appointment_repository.add(AppointmentBuilder().starting_at(NOW - timedelta(minutes=30)).build())
    notification_repository.seed(_failed(past.id, attempts=1))

    retried = await coordinator.retry_pending(10, messaging_config, now=NOW)

    assert retried == 0
    assert messaging_provider.sent == []


@pytest.mark.unit
@pytest.mark.use_case
@pytest.mark.asyncio
async def test_retry_respects_limit(coordinator, notification_repository, appointment_repository, messaging_config):
    """Test that at most ``limit`` records are retried per pass."""
    for hours in (5, 6, 7):
        appointment = appointment_repository.add(
            AppointmentBuilder().for_patient(2).starting_at(NOW + timedelta(hours=hours)).build()
        )
        notification_repository.seed(_failed(appointment.id, attempts=1))

    retried = await coordinator.retry_pending(2, messaging_config, now=NOW)

    assert retried == 2


@pytest.mark.unit
@pytest.mark.use_case
@pytest.mark.asyncio
async def test_retry_failure_is_recorded(coordinator, notification_repository, appointment_repository, messaging_config):
    """Test that a retry that fails again increments attempts and stays failed."""
    # Arrange
    no_phone = appointment_repository.add(
        AppointmentBuilder().for_patient(3).starting_at(NOW + timedelta(hours=5)).build()
    )
    notification_repository.seed(_failed(no_phone.id, attempts=1))

    # Act
    retried = await coordinator.retry_pending(10, messaging_config, now=NOW)

    # Assert
    assert retried == 1
    record = notification_repository.get(no_phone.id, "1_day")
    assert record.status == NotificationStatus.FAILED
    assert record.attempts == 2


@pytest.mark.unit
@pytest.mark.use_case
@pytest.mark.asyncio
async def test_retry_of_unknown_patient_counts_an_attempt(
    coordinator, notification_repository, appointment_repository, messaging_provider, messaging_config
):
    """Test that a missing patient is recorded as another failed attempt."""
    # Arrange
    orphan = appointment_repository.add(
        AppointmentBuilder().for_patient(99).starting_at(NOW + timedelta(hours=6)).build()
    )
    notification_repository.seed(_failed(orphan.id, attempts=1))

    # Act
    retried = await coordinator.retry_pending(10, messaging_config, now=NOW)

    # Assert
    assert retried == 1
    assert messaging_provider.sent == []
    record = notification_repository.get(orphan.id, "1_day")
    assert record.status == NotificationStatus.FAILED
    assert record.attempts == 2
    assert record.error_message == "Patient with ID 99 not found"
