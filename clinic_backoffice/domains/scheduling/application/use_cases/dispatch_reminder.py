# ============================================================================
# SCOPE: APPLICATION LAYER (Scheduling)
# Description: Sends one reminder and records the outcome idempotently.
# ============================================================================
"""Notification Dispatcher.

Renders the reminder template parameters, calls the messaging provider
and upserts the notification record keyed by (appointment_id, message_type).
Send failures are recorded on that record and reported in the result;
they are never raised to the caller.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytz

from clinic_backoffice.core.domain.exceptions import (
    ConfigurationException,
    DomainException,
    ProviderException,
    ValidationException,
)

from ...domain.entities.notification import NotificationRecord
from ..dto.scheduling_dtos import DispatchResult

if TYPE_CHECKING:
    from ...domain.entities.appointment import Appointment
    from ...domain.value_objects.contact import Contact
    from ...domain.value_objects.messaging_config import MessagingConfig
    from ..ports import IMessagingProvider, INotificationRepository

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d/%m/%Y"
TIME_FORMAT = "%H:%M"


class NotificationDispatcher:
    """Envía un recordatorio y registra el resultado."""

    def __init__(
        self,
        provider: "IMessagingProvider",
        notification_repository: "INotificationRepository",
        tz: pytz.BaseTzInfo,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize dispatcher.

        Args:
            provider: Messaging provider (DIP).
            notification_repository: Notification record storage.
            tz: Clinic timezone used to render date and time.
            clock: Source of "now" for sent_at.
        """
        self._provider = provider
        self._notifications = notification_repository
        self._tz = tz
        self._clock = clock or (lambda: datetime.now(UTC))

    def render_params(self, appointment: "Appointment", contact: "Contact") -> list[str]:
        """Template body parameters: patient name, date and time."""
        local_start = appointment.start.astimezone(self._tz)
        name = contact.display_name or appointment.patient_name
        return [name, local_start.strftime(DATE_FORMAT), local_start.strftime(TIME_FORMAT)]

    async def send(
        self,
        appointment: "Appointment",
        contact: "Contact",
        message_type: str,
        config: "MessagingConfig",
    ) -> DispatchResult:
        """Send the ``message_type`` reminder for ``appointment``.

        Returns:
            DispatchResult; ``success`` is False when the attempt was
            recorded as failed.
        """
        attempted_at = self._clock()

        try:
            config.ensure_can_send()
            to = contact.normalized_phone()
            params = self.render_params(appointment, contact)
            provider_message_id = await self._provider.send_template_message(
                config=config,
                to=to,
                template_name=config.template_name,
                language_code=config.template_language,
                params=params,
            )
        except (ValidationException, ConfigurationException, ProviderException) as e:
            return await self.record_failure(appointment, message_type, e)

        await self._notifications.upsert_notification(
            NotificationRecord.sent(appointment.id, message_type, provider_message_id, attempted_at)
        )
        logger.info(f"Reminder '{message_type}' sent for appointment {appointment.id} (wamid={provider_message_id})")
        return DispatchResult(
            appointment_id=appointment.id,
            message_type=message_type,
            success=True,
            provider_message_id=provider_message_id,
        )

    async def record_failure(
        self,
        appointment: "Appointment",
        message_type: str,
        error: DomainException,
    ) -> DispatchResult:
        """Record a failed attempt without calling the provider.

        The attempt counts toward the retry cap like a provider failure.
        """
        logger.warning(
            f"Reminder '{message_type}' for appointment {appointment.id} failed: [{error.code}] {error.message}"
        )
        await self._notifications.upsert_notification(
            NotificationRecord.failed(appointment.id, message_type, error.message, self._clock())
        )
        return DispatchResult(
            appointment_id=appointment.id,
            message_type=message_type,
            success=False,
            error_code=error.code,
            error_message=error.message,
        )
