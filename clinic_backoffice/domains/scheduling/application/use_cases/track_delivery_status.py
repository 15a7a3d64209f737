# ============================================================================
# SCOPE: APPLICATION LAYER (Scheduling)
# Description: Applies WhatsApp delivery/read callbacks to reminder records.
# ============================================================================
"""Delivery Status Tracker."""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.value_objects.status_event import WebhookStatusEvent
    from ..ports import INotificationRepository

logger = logging.getLogger(__name__)


class DeliveryStatusTracker:
    """Applies status events looked up by provider message id.

    Events may arrive late, duplicated or out of order. The repository
    applies each one as a conditional update so timestamps and status
    never regress.
    """

    def __init__(self, notification_repository: "INotificationRepository") -> None:
        self._notifications = notification_repository

    async def apply(self, event: "WebhookStatusEvent") -> bool:
        """Apply one event.

        Returns:
            True if a notification record matched the provider message id.
        """
        found = await self._notifications.apply_status_event(event)
        if not found:
            logger.warning(
                f"Status '{event.kind.value}' for unknown message {event.provider_message_id}, dropping event"
            )
            return False

        logger.debug(f"Applied status '{event.kind.value}' to message {event.provider_message_id}")
        return True

    async def apply_many(self, events: Iterable["WebhookStatusEvent"]) -> int:
        """Apply each event independently; a failing event does not stop the rest."""
        applied = 0
        for event in events:
            try:
                if await self.apply(event):
                    applied += 1
            except Exception as e:
                logger.error(
                    f"Error applying status '{event.kind.value}' to message {event.provider_message_id}: {e}",
                    exc_info=True,
                )
        return applied
