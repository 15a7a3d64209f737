"""
WhatsApp Webhook Handling

Subscription handshake and decoding of status callbacks into
WebhookStatusEvent values. Decoding happens once, here; the rest of the
application only sees typed events.
"""

import hmac
import logging
from datetime import UTC, datetime
from typing import Any

from clinic_backoffice.core.domain.exceptions import WebhookVerificationException
from clinic_backoffice.domains.scheduling.domain.value_objects.status_event import (
    StatusEventKind,
    WebhookStatusEvent,
)

from .models import MessageStatus, WhatsAppWebhookRequest

logger = logging.getLogger(__name__)

SUBSCRIBE_MODE = "subscribe"


def verify_webhook(
    mode: str | None,
    token: str | None,
    challenge: str | None,
    expected_token: str | None,
) -> str:
    """
    Validate a webhook subscription request.

    Returns:
        The challenge to echo back.

    Raises:
        WebhookVerificationException: Wrong mode, missing or mismatched token.
    """
    if mode != SUBSCRIBE_MODE:
        raise WebhookVerificationException(f"Invalid hub.mode: {mode}")
    if not expected_token:
        raise WebhookVerificationException("Webhook verify token is not configured")
    if not token or not hmac.compare_digest(token, expected_token):
        raise WebhookVerificationException("Webhook verify token mismatch")
    return challenge or ""


def classify_event_type(payload: dict[str, Any]) -> str:
    """Coarse event type stored in the webhook log."""
    entries = payload.get("entry")
    if not isinstance(entries, list):
        return "unknown"
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        for change in entry.get("changes") or []:
            value = change.get("value") if isinstance(change, dict) else None
            if not isinstance(value, dict):
                continue
            if value.get("statuses"):
                return "statuses"
            if value.get("messages"):
                return "messages"
    return "unknown"


def _to_event(status: MessageStatus) -> WebhookStatusEvent | None:
    if not status.id:
        logger.warning("Status callback without message id, skipping")
        return None

    try:
        kind = StatusEventKind(status.status.lower())
    except ValueError:
        logger.debug(f"Ignoring unsupported status '{status.status}' for message {status.id}")
        return None

    try:
        timestamp = datetime.fromtimestamp(int(status.timestamp), tz=UTC)
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Invalid timestamp '{status.timestamp}' for message {status.id}, skipping")
        return None

    error_message = None
    if kind == StatusEventKind.FAILED and status.errors:
        error_message = status.errors[0].description

    return WebhookStatusEvent(
        kind=kind,
        provider_message_id=status.id,
        timestamp=timestamp,
        recipient_id=status.recipient_id,
        error_message=error_message,
    )


def extract_status_events(request: WhatsAppWebhookRequest) -> list[WebhookStatusEvent]:
    """Status events in payload order; unsupported or malformed ones are skipped."""
    events = []
    for status in request.iter_statuses():
        event = _to_event(status)
        if event is not None:
            events.append(event)
    return events
