"""Notification Record Entity.

Delivery state of one reminder kind for one appointment.
"""

from dataclasses import dataclass
from datetime import datetime

from clinic_backoffice.core.domain.entities import Entity

from ..value_objects.notification_status import NotificationStatus
from ..value_objects.status_event import StatusEventKind, WebhookStatusEvent


@dataclass
class NotificationRecord(Entity[int]):
    """
    Registro de recordatorio enviado.

    ``(appointment_id, message_type)`` is the identity of the reminder:
    repeated dispatch attempts overwrite the same record.
    """

    appointment_id: int = 0
    message_type: str = ""
    status: NotificationStatus = NotificationStatus.PENDING
    provider_message_id: str | None = None
    error_message: str | None = None
    attempts: int = 0
    sent_at: datetime | None = None
    delivered_at: datetime | None = None
    read_at: datetime | None = None

    @property
    def key(self) -> tuple[int, str]:
        return (self.appointment_id, self.message_type)

    @classmethod
    def sent(
        cls,
        appointment_id: int,
        message_type: str,
        provider_message_id: str,
        at: datetime,
    ) -> "NotificationRecord":
        return cls(
            appointment_id=appointment_id,
            message_type=message_type,
            status=NotificationStatus.SENT,
            provider_message_id=provider_message_id,
            sent_at=at,
        )

    @classmethod
    def failed(
        cls,
        appointment_id: int,
        message_type: str,
        error_message: str,
        at: datetime,
    ) -> "NotificationRecord":
        return cls(
            appointment_id=appointment_id,
            message_type=message_type,
            status=NotificationStatus.FAILED,
            error_message=error_message,
            sent_at=at,
        )

    def is_terminal_success(self) -> bool:
        return self.status.is_terminal_success()

    def is_retryable(self, max_attempts: int) -> bool:
        return self.status.is_retryable() and self.attempts < max_attempts

    def record_attempt(self, attempt: "NotificationRecord") -> None:
        """Overwrite this record with a new dispatch attempt.

        Delivery timestamps are kept: they belong to the callback lifecycle.
        """
        self.status = attempt.status
        self.error_message = attempt.error_message
        self.sent_at = attempt.sent_at
        self.provider_message_id = attempt.provider_message_id
        self.attempts += 1
        self.touch()

    def apply_status_event(self, event: WebhookStatusEvent) -> None:
        """Apply a provider callback without regressing any state.

        delivered_at/read_at are only set when still empty, and the status
        only moves to an equal or higher lifecycle rank.
        """
        if event.kind == StatusEventKind.DELIVERED and self.delivered_at is None:
            self.delivered_at = event.timestamp
        elif event.kind == StatusEventKind.READ and self.read_at is None:
            self.read_at = event.timestamp
        elif event.kind == StatusEventKind.FAILED and event.error_message:
            self.error_message = event.error_message

        new_status = event.kind.notification_status
        if self.status.can_advance_to(new_status):
            self.status = new_status
        self.touch()
