# ============================================================================
# SCOPE: APPLICATION LAYER (Scheduling)
# Description: Notification record and webhook log storage ports.
# ============================================================================
"""Notification Repository Ports."""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ...domain.entities.notification import NotificationRecord
    from ...domain.value_objects.status_event import WebhookStatusEvent


@runtime_checkable
class INotificationRepository(Protocol):
    """Interface for reminder notification records.

    Implementations: SQLAlchemyNotificationRepository
    """

    async def upsert_notification(self, record: "NotificationRecord") -> "NotificationRecord":
        """Insert or overwrite the record keyed by (appointment_id, message_type).

        Overwrites status, error_message, sent_at and provider_message_id,
        increments attempts and leaves delivered_at/read_at untouched.
        """
        ...

    async def get_notifications_by_appointment(self, appointment_id: int) -> list["NotificationRecord"]:
        ...

    async def get_pending_notifications(
        self,
        limit: int,
        max_attempts: int,
        upcoming_after: datetime | None = None,
    ) -> list["NotificationRecord"]:
        """Retryable records (pending or failed, attempts below max), oldest first.

        When ``upcoming_after`` is given, only records whose appointment
        starts after that instant are returned.
        """
        ...

    async def apply_status_event(self, event: "WebhookStatusEvent") -> bool:
        """Apply a callback by provider message id as a compare-and-set update.

        Returns:
            False if no record carries the event's provider message id.
        """
        ...


@runtime_checkable
class IWebhookLogRepository(Protocol):
    """Interface for raw webhook payload storage."""

    async def record(self, event_type: str, payload: dict[str, Any]) -> None:
        ...
