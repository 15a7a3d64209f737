# ============================================================================
# SCOPE: APPLICATION LAYER (Scheduling)
# Description: Re-attempts failed reminders under an attempt cap.
# ============================================================================
"""Retry Coordinator.

A record is retryable when its status is pending or failed and it has
fewer than ``max_attempts`` dispatch attempts. Retries reuse the same
(appointment_id, message_type) key, so the record is updated in place.
"""

import asyncio
import logging
from collections.abc import Collection
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from clinic_backoffice.core.domain.exceptions import EntityNotFoundException

if TYPE_CHECKING:
    from ...domain.value_objects.messaging_config import MessagingConfig
    from ..ports import IAppointmentRepository, IContactRepository, INotificationRepository
    from .dispatch_reminder import NotificationDispatcher

logger = logging.getLogger(__name__)


class RetryCoordinator:
    """Reintenta recordatorios fallidos."""

    def __init__(
        self,
        notification_repository: "INotificationRepository",
        appointment_repository: "IAppointmentRepository",
        contact_repository: "IContactRepository",
        dispatcher: "NotificationDispatcher",
        max_attempts: int = 3,
        send_delay_seconds: float = 0.0,
    ) -> None:
        self._notifications = notification_repository
        self._appointments = appointment_repository
        self._contacts = contact_repository
        self._dispatcher = dispatcher
        self._max_attempts = max_attempts
        self._send_delay_seconds = send_delay_seconds

    async def retry_pending(
        self,
        limit: int,
        config: "MessagingConfig",
        now: datetime | None = None,
        exclude: Collection[tuple[int, str]] = (),
    ) -> int:
        """Retry up to ``limit`` retryable records.

        Args:
            limit: Maximum records fetched this pass.
            config: Messaging configuration loaded for the current tick.
            now: Reference instant; appointments already started are skipped.
            exclude: Keys already attempted earlier in the same tick.

        Returns:
            Number of retries dispatched (successful or not).
        """
        now = now or datetime.now(UTC)
        records = await self._notifications.get_pending_notifications(limit, self._max_attempts, upcoming_after=now)
        if not records:
            return 0

        logger.info(f"Retrying {len(records)} pending reminder(s)")
        retried = 0

        for record in records:
            if record.key in exclude or not record.is_retryable(self._max_attempts):
                continue

            try:
                appointment = await self._appointments.get_by_id(record.appointment_id)
                if appointment is None:
                    raise EntityNotFoundException("Appointment", record.appointment_id)
                if appointment.start <= now:
                    logger.debug(f"Appointment {appointment.id} already started, not retrying '{record.message_type}'")
                    continue

                try:
                    contact = await self._contacts.get_contact(appointment)
                except EntityNotFoundException as e:
                    await self._dispatcher.record_failure(appointment, record.message_type, e)
                else:
                    await self._dispatcher.send(appointment, contact, record.message_type, config)
                retried += 1

                if self._send_delay_seconds:
                    await asyncio.sleep(self._send_delay_seconds)

            except EntityNotFoundException as e:
                logger.warning(f"Skipping retry of '{record.message_type}' for appointment {record.appointment_id}: {e}")
            except Exception as e:
                logger.error(
                    f"Retry of '{record.message_type}' for appointment {record.appointment_id} failed: {e}",
                    exc_info=True,
                )

        return retried
