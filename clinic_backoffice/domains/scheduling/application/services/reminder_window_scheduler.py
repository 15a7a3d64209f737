# ============================================================================
# SCOPE: APPLICATION LAYER (Scheduling)
# Description: One pass of the reminder pipeline: scan due windows,
#              dispatch reminders, then retry failed ones.
# ============================================================================
"""Reminder Window Scheduler.

For every enabled reminder offset, appointments starting in
``[now + lead_time, now + lead_time + window)`` are due. A reminder whose
record already reached sent/delivered/read is never sent again, so
consecutive ticks that see the same appointment send it only once.

The periodic driver lives in infrastructure/scheduler; this class holds
the per-tick logic and is driven with an explicit ``now``.
"""

import asyncio
import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from clinic_backoffice.core.domain.exceptions import EntityNotFoundException

from ..dto.scheduling_dtos import TickResult

if TYPE_CHECKING:
    from ...domain.entities.appointment import Appointment
    from ...domain.value_objects.messaging_config import MessagingConfig
    from ...domain.value_objects.reminder_offset import ReminderOffset
    from ..ports import (
        IAppointmentRepository,
        IContactRepository,
        IMessagingConfigRepository,
        INotificationRepository,
    )
    from ..use_cases.dispatch_reminder import NotificationDispatcher
    from ..use_cases.retry_reminders import RetryCoordinator

logger = logging.getLogger(__name__)


class ReminderWindowScheduler:
    """Runs one reminder tick.

    Single Responsibility: decide which reminders are due and hand them to
    the dispatcher. A failing candidate or window is logged and counted;
    it never aborts the tick.
    """

    def __init__(
        self,
        config_repository: "IMessagingConfigRepository",
        appointment_repository: "IAppointmentRepository",
        notification_repository: "INotificationRepository",
        contact_repository: "IContactRepository",
        dispatcher: "NotificationDispatcher",
        retry_coordinator: "RetryCoordinator",
        window_width: timedelta = timedelta(hours=1),
        retry_batch_size: int = 50,
        max_attempts: int = 3,
        send_delay_seconds: float = 0.0,
    ) -> None:
        self._config = config_repository
        self._appointments = appointment_repository
        self._notifications = notification_repository
        self._contacts = contact_repository
        self._dispatcher = dispatcher
        self._retry = retry_coordinator
        self._window_width = window_width
        self._retry_batch_size = retry_batch_size
        self._max_attempts = max_attempts
        self._send_delay_seconds = send_delay_seconds

    async def run_tick(self, now: datetime | None = None) -> TickResult:
        """Scan every enabled window, then run one retry pass.

        Args:
            now: Reference instant (defaults to the current UTC time).

        Returns:
            TickResult with per-tick counters; ``executed`` is False when
            messaging is missing, inactive or has reminders disabled.
        """
        now = now or datetime.now(UTC)

        config = await self._config.load()
        if config is None:
            logger.warning("No WhatsApp configuration stored, skipping reminder tick")
            return TickResult.noop(now)
        if not config.is_dispatch_enabled:
            logger.debug("WhatsApp reminders disabled, skipping reminder tick")
            return TickResult.noop(now)

        result = TickResult(started_at=now)
        attempted: set[tuple[int, str]] = set()

        for offset in config.enabled_offsets():
            await self._scan_window(offset, now, config, result, attempted)

        try:
            result.retried = await self._retry.retry_pending(
                self._retry_batch_size,
                config,
                now=now,
                exclude=attempted,
            )
        except Exception as e:
            logger.error(f"Reminder retry pass failed: {e}", exc_info=True)

        logger.info(
            f"Reminder tick done: scanned={result.scanned} dispatched={result.dispatched} "
            f"skipped={result.skipped} failed={result.failed} retried={result.retried}"
        )
        return result

    async def _scan_window(
        self,
        offset: "ReminderOffset",
        now: datetime,
        config: "MessagingConfig",
        result: TickResult,
        attempted: set[tuple[int, str]],
    ) -> None:
        window = offset.due_window(now, self._window_width)
        try:
            appointments = await self._appointments.list_appointments_in_range(window.start, window.end)
        except Exception as e:
            logger.error(f"Error loading appointments for '{offset.message_type}' window {window}: {e}", exc_info=True)
            result.failed += 1
            return

        result.windows[offset.message_type] = len(appointments)
        if appointments:
            logger.info(f"Found {len(appointments)} appointment(s) due for '{offset.message_type}' reminder")

        for appointment in appointments:
            result.scanned += 1
            try:
                if await self._should_skip(appointment, offset.message_type):
                    result.skipped += 1
                    continue

                attempted.add((appointment.id, offset.message_type))
                try:
                    contact = await self._contacts.get_contact(appointment)
                except EntityNotFoundException as e:
                    dispatch = await self._dispatcher.record_failure(appointment, offset.message_type, e)
                else:
                    dispatch = await self._dispatcher.send(appointment, contact, offset.message_type, config)
                if dispatch.success:
                    result.dispatched += 1
                else:
                    result.failed += 1

                if self._send_delay_seconds:
                    await asyncio.sleep(self._send_delay_seconds)

            except Exception as e:
                result.failed += 1
                logger.error(
                    f"Error sending '{offset.message_type}' reminder for appointment {appointment.id}: {e}",
                    exc_info=True,
                )

    async def _should_skip(self, appointment: "Appointment", message_type: str) -> bool:
        """Skip keys already sent successfully or out of attempts."""
        records = await self._notifications.get_notifications_by_appointment(appointment.id)
        for record in records:
            if record.message_type != message_type:
                continue
            if record.is_terminal_success():
                logger.debug(f"Reminder '{message_type}' already {record.status.value} for appointment {appointment.id}")
                return True
            if record.attempts >= self._max_attempts:
                logger.debug(f"Reminder '{message_type}' out of attempts for appointment {appointment.id}")
                return True
        return False
