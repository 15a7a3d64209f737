"""Inbound delivery status events, decoded once from the webhook payload."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from clinic_backoffice.core.domain.exceptions import ValidationException
from clinic_backoffice.core.domain.value_objects import ValueObject

from .notification_status import NotificationStatus


class StatusEventKind(str, Enum):
    """Status values reported by WhatsApp for an outbound message."""

    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"
    FAILED = "failed"

    @property
    def notification_status(self) -> NotificationStatus:
        return NotificationStatus(self.value)


@dataclass(frozen=True)
class WebhookStatusEvent(ValueObject):
    """
    One status change for one provider message.

    ``error_message`` is only populated for FAILED events.
    """

    kind: StatusEventKind
    provider_message_id: str
    timestamp: datetime
    recipient_id: str | None = None
    error_message: str | None = None

    def _validate(self) -> None:
        if not self.provider_message_id:
            raise ValidationException("Status event without provider message id", field="provider_message_id")
        if self.timestamp.tzinfo is None:
            raise ValidationException("Status event timestamp must be timezone-aware", field="timestamp")
