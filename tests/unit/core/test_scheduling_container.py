"""
Unit tests for the dependency injection container.
"""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_backoffice.config.settings import Settings
from clinic_backoffice.core.container import SchedulingContainer, get_container, reset_container
from clinic_backoffice.domains.scheduling.application.services import (
    AppointmentConflictValidator,
    BusinessHoursResolver,
    ReminderWindowScheduler,
)
from clinic_backoffice.domains.scheduling.application.use_cases import (
    BookAppointmentUseCase,
    DeliveryStatusTracker,
    UpdateMessagingConfigUseCase,
)
from clinic_backoffice.integrations.whatsapp import WhatsAppCloudClient
from tests.utils.fakes import FakeMessagingProvider


@pytest.fixture
def settings():
    return Settings(REMINDER_WINDOW_MINUTES=30, REMINDER_MAX_ATTEMPTS=5)


@pytest.fixture
def session():
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def fresh_container():
    reset_container()
    yield
    reset_container()


class TestSchedulingContainer:
    """Tests for SchedulingContainer factories."""

    def test_window_scheduler_uses_settings(self, settings, session) -> None:
        """Should build the window scheduler from reminder settings."""
        provider = FakeMessagingProvider()
        container = SchedulingContainer(settings, messaging_provider=provider)

        scheduler = container.create_reminder_window_scheduler(session)

        assert isinstance(scheduler, ReminderWindowScheduler)
        assert scheduler._window_width == timedelta(minutes=30)
        assert scheduler._max_attempts == 5
        assert scheduler._dispatcher._provider is provider

    def test_booking_factories(self, settings, session) -> None:
        """Should wire booking use cases and the validator."""
        container = SchedulingContainer(settings)

        assert isinstance(container.create_conflict_validator(session), AppointmentConflictValidator)
        assert isinstance(container.create_book_appointment_use_case(session), BookAppointmentUseCase)
        assert isinstance(container.create_delivery_status_tracker(session), DeliveryStatusTracker)
        assert isinstance(container.create_business_hours_resolver(session), BusinessHoursResolver)
        assert isinstance(
            container.create_update_messaging_config_use_case(session), UpdateMessagingConfigUseCase
        )

    def test_default_provider_is_whatsapp_singleton(self, settings) -> None:
        """Should lazily create one WhatsApp Cloud client."""
        container = SchedulingContainer(settings)

        first = container.get_messaging_provider()

        assert isinstance(first, WhatsAppCloudClient)
        assert container.get_messaging_provider() is first


def test_get_container_is_singleton(fresh_container):
    """Test that the global container is created once."""
    assert get_container() is get_container()
