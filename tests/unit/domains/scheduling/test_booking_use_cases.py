"""
Unit tests for the booking use cases.

Tests:
- BookAppointmentUseCase
- RescheduleAppointmentUseCase
"""

from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from clinic_backoffice.core.domain.exceptions import (
    AppointmentConflictException,
    EntityNotFoundException,
    OutOfHoursException,
    ValidationException,
)
from clinic_backoffice.domains.scheduling.application.dto.scheduling_dtos import (
    BookAppointmentRequest,
    RescheduleAppointmentRequest,
)
from clinic_backoffice.domains.scheduling.application.services.business_hours_resolver import (
    BusinessHoursResolver,
)
from clinic_backoffice.domains.scheduling.application.services.conflict_validator import (
    AppointmentConflictValidator,
)
from clinic_backoffice.domains.scheduling.application.use_cases.book_appointment import (
    BookAppointmentUseCase,
    RescheduleAppointmentUseCase,
)
from tests.utils.builders import AppointmentBuilder

# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def local(clinic_tz):
    def _local(hour: int, minute: int = 0) -> datetime:
        return clinic_tz.localize(datetime(2025, 3, 10, hour, minute))

    return _local


@pytest.fixture
def validator(appointment_repository, business_hours_repository, clinic_tz):
    return AppointmentConflictValidator(
        appointment_repository,
        BusinessHoursResolver(business_hours_repository),
        clinic_tz,
    )


@pytest.fixture
def book_use_case(appointment_repository, validator):
    return BookAppointmentUseCase(appointment_repository, validator)


@pytest.fixture
def reschedule_use_case(appointment_repository, validator):
    return RescheduleAppointmentUseCase(appointment_repository, validator)


# ============================================================================
# BookAppointmentUseCase Tests
# ============================================================================


@pytest.mark.unit
@pytest.mark.use_case
@pytest.mark.asyncio
async def test_book_appointment_success(book_use_case, appointment_repository, local):
    """Test booking a free slot inside business hours."""
    # Arrange
    request = BookAppointmentRequest(start=local(10), duration_minutes=30, patient_id=1, notes="Control")

    # Act
    saved = await book_use_case.execute(request)

    # Assert
    assert saved.id is not None
    assert saved.end == local(10, 30)
    assert appointment_repository.stored(saved.id).notes == "Control"
    assert appointment_repository.lock_calls == 1


@pytest.mark.unit
@pytest.mark.use_case
@pytest.mark.asyncio
async def test_book_appointment_conflict_is_not_persisted(book_use_case, appointment_repository, local):
    """Test that a conflicting booking raises and writes nothing."""
    # Arrange
    appointment_repository.add(AppointmentBuilder().starting_at(local(10)).lasting(60).build())
    request = BookAppointmentRequest(start=local(10, 30), duration_minutes=60, patient_id=2)

    # Act & Assert
    with pytest.raises(AppointmentConflictException):
        await book_use_case.execute(request)
    assert len(await appointment_repository.list_appointments_in_range(local(0), local(23))) == 1


@pytest.mark.unit
@pytest.mark.use_case
@pytest.mark.asyncio
async def test_book_appointment_out_of_hours(book_use_case, local):
    """Test booking after closing time."""
    request = BookAppointmentRequest(start=local(18), duration_minutes=60, patient_name="Walk-in")

    with pytest.raises(OutOfHoursException):
        await book_use_case.execute(request)


@pytest.mark.unit
@pytest.mark.use_case
@pytest.mark.asyncio
async def test_book_appointment_invalid_request_skips_lock(book_use_case, appointment_repository, local):
    """Test that malformed requests are rejected before taking the lock."""
    request = BookAppointmentRequest(start=local(10), duration_minutes=0, patient_id=1)

    with pytest.raises(ValidationException):
        await book_use_case.execute(request)
    assert appointment_repository.lock_calls == 0


@pytest.mark.unit
@pytest.mark.use_case
@pytest.mark.asyncio
async def test_book_appointment_takes_lock_before_validating(local):
    """Test the lock -> validate -> create call order."""
    # Arrange
    calls: list[str] = []
    repository = AsyncMock()
    repository.acquire_scheduling_lock.side_effect = lambda: calls.append("lock")
    repository.create.side_effect = lambda appointment: calls.append("create") or appointment
    validator = AsyncMock()
    validator.validate.side_effect = lambda *args, **kwargs: calls.append("validate")
    use_case = BookAppointmentUseCase(repository, validator)

    # Act
    await use_case.execute(BookAppointmentRequest(start=local(10), duration_minutes=30, patient_id=1))

    # Assert
    assert calls == ["lock", "validate", "create"]


# ============================================================================
# RescheduleAppointmentUseCase Tests
# ============================================================================


@pytest.mark.unit
@pytest.mark.use_case
@pytest.mark.asyncio
async def test_reschedule_overlapping_own_slot(reschedule_use_case, appointment_repository, local):
    """Test moving an appointment by 30 minutes over its own previous slot."""
    # Arrange
    existing = appointment_repository.add(AppointmentBuilder().starting_at(local(10)).lasting(60).build())

    # Act
    updated = await reschedule_use_case.execute(
        RescheduleAppointmentRequest(appointment_id=existing.id, new_start=local(10, 30))
    )

    # Assert
    assert updated.start == local(10, 30)
    assert appointment_repository.stored(existing.id).start == local(10, 30)
    assert appointment_repository.lock_calls == 1


@pytest.mark.unit
@pytest.mark.use_case
@pytest.mark.asyncio
async def test_reschedule_into_other_appointment(reschedule_use_case, appointment_repository, local):
    """Test that moving onto another booking conflicts and leaves the row unchanged."""
    # Arrange
    appointment_repository.add(AppointmentBuilder().starting_at(local(10)).lasting(60).build())
    moving = appointment_repository.add(AppointmentBuilder().starting_at(local(14)).lasting(60).build())

    # Act & Assert
    with pytest.raises(AppointmentConflictException):
        await reschedule_use_case.execute(
            RescheduleAppointmentRequest(appointment_id=moving.id, new_start=local(10, 15), duration_minutes=30)
        )
    assert appointment_repository.stored(moving.id).start == local(14)


@pytest.mark.unit
@pytest.mark.use_case
@pytest.mark.asyncio
async def test_reschedule_unknown_appointment(reschedule_use_case, local):
    """Test rescheduling an id that does not exist."""
    with pytest.raises(EntityNotFoundException):
        await reschedule_use_case.execute(RescheduleAppointmentRequest(appointment_id=999, new_start=local(10)))
