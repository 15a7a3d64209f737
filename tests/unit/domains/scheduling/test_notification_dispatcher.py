"""
Unit tests for NotificationDispatcher.

Send failures must be recorded on the notification record and reported
in the result, never raised.
"""

from datetime import UTC, datetime

import pytest

from clinic_backoffice.domains.scheduling.application.use_cases.dispatch_reminder import NotificationDispatcher
from clinic_backoffice.domains.scheduling.domain.value_objects.contact import Contact
from clinic_backoffice.domains.scheduling.domain.value_objects.notification_status import NotificationStatus
from tests.utils.builders import AppointmentBuilder, MessagingConfigBuilder
from tests.utils.fakes import FakeMessagingProvider

NOW = datetime(2025, 3, 9, 12, 0, tzinfo=UTC)


@pytest.fixture
def dispatcher(messaging_provider, notification_repository, clinic_tz):
    return NotificationDispatcher(messaging_provider, notification_repository, clinic_tz, clock=lambda: NOW)


@pytest.fixture
def appointment():
    # 2025-03-10 10:00 local
    return AppointmentBuilder().with_id(10).for_patient(1).build()


class TestNotificationDispatcher:
    """Tests for NotificationDispatcher.send."""

    @pytest.mark.asyncio
    async def test_send_success_records_sent(
        self, dispatcher, appointment, contact_repository, notification_repository, messaging_provider, messaging_config
    ) -> None:
        """Should send the template and upsert a sent record."""
        # Arrange
        contact = await contact_repository.get_contact(appointment)

        # Act
        result = await dispatcher.send(appointment, contact, "1_day", messaging_config)

        # Assert
        assert result.success is True
        assert result.provider_message_id == "wamid.1"
        assert messaging_provider.sent == [
            {
                "to": "+5491155551234",
                "template_name": "appointment_reminder",
                "language_code": "es_AR",
                "params": ["Ana Pérez", "10/03/2025", "10:00"],
            }
        ]
        record = notification_repository.get(10, "1_day")
        assert record.status == NotificationStatus.SENT
        assert record.provider_message_id == "wamid.1"
        assert record.sent_at == NOW
        assert record.attempts == 1

    @pytest.mark.asyncio
    async def test_params_use_clinic_local_date(self, dispatcher, contact_repository) -> None:
        """Should render date and time in clinic time even when the UTC date differs."""
        # 01:30 UTC on the 11th is 22:30 on the 10th in clinic time
        appointment = AppointmentBuilder().with_id(11).starting_at(datetime(2025, 3, 11, 1, 30, tzinfo=UTC)).build()
        contact = await contact_repository.get_contact(appointment)

        assert dispatcher.render_params(appointment, contact) == ["Ana Pérez", "10/03/2025", "22:30"]

    @pytest.mark.asyncio
    async def test_provider_failure_is_recorded_not_raised(
        self, notification_repository, contact_repository, clinic_tz, appointment, messaging_config
    ) -> None:
        """Should record a failed attempt with the provider error."""
        # Arrange
        provider = FakeMessagingProvider(failing_phones={"+5491155551234"})
        dispatcher = NotificationDispatcher(provider, notification_repository, clinic_tz, clock=lambda: NOW)
        contact = await contact_repository.get_contact(appointment)

        # Act
        result = await dispatcher.send(appointment, contact, "3_days", messaging_config)

        # Assert
        assert result.success is False
        assert result.error_code == "PROVIDER_ERROR"
        record = notification_repository.get(10, "3_days")
        assert record.status == NotificationStatus.FAILED
        assert record.error_message == "Recipient not reachable"
        assert record.provider_message_id is None

    @pytest.mark.asyncio
    async def test_missing_phone_is_recorded_without_calling_provider(
        self, dispatcher, contact_repository, notification_repository, messaging_provider, messaging_config
    ) -> None:
        """Should record a failed attempt when the patient has no phone."""
        # Arrange
        appointment = AppointmentBuilder().with_id(12).for_patient(3).build()
        contact = await contact_repository.get_contact(appointment)

        # Act
        result = await dispatcher.send(appointment, contact, "1_day", messaging_config)

        # Assert
        assert result.success is False
        assert result.error_code == "VALIDATION_ERROR"
        assert messaging_provider.sent == []
        assert notification_repository.get(12, "1_day").status == NotificationStatus.FAILED

    @pytest.mark.asyncio
    async def test_disabled_config_is_recorded_as_failed(
        self, dispatcher, appointment, contact_repository, notification_repository, messaging_provider
    ) -> None:
        """Should record a configuration failure instead of sending."""
        config = MessagingConfigBuilder().inactive().build()
        contact = await contact_repository.get_contact(appointment)

        result = await dispatcher.send(appointment, contact, "1_day", config)

        assert result.success is False
        assert result.error_code == "CONFIGURATION_ERROR"
        assert messaging_provider.sent == []
        assert notification_repository.get(10, "1_day").status == NotificationStatus.FAILED

    @pytest.mark.asyncio
    async def test_repeated_sends_update_one_record(
        self, notification_repository, contact_repository, clinic_tz, appointment, messaging_config
    ) -> None:
        """Should keep one record per key and count attempts."""
        # Arrange
        provider = FakeMessagingProvider(failing_phones={"+5491155551234"})
        dispatcher = NotificationDispatcher(provider, notification_repository, clinic_tz, clock=lambda: NOW)
        contact = await contact_repository.get_contact(appointment)
        await dispatcher.send(appointment, contact, "1_day", messaging_config)

        # Act
        provider.failing_phones.clear()
        result = await dispatcher.send(appointment, contact, "1_day", messaging_config)

        # Assert
        assert result.success is True
        assert len(notification_repository.all()) == 1
        record = notification_repository.get(10, "1_day")
        assert record.status == NotificationStatus.SENT
        assert record.error_message is None
        assert record.attempts == 2

    @pytest.mark.asyncio
    async def test_free_text_booking_is_recorded_as_failed(self, dispatcher, messaging_config, notification_repository):
        """Should fail a free-text booking for lack of a phone."""
        appointment = AppointmentBuilder().with_id(13).for_patient(None).with_name("Walk-in").build()

        result = await dispatcher.send(appointment, Contact(display_name="Walk-in"), "1_day", messaging_config)

        assert result.success is False
        assert notification_repository.get(13, "1_day").error_message == "Patient has no phone number"
