"""
Unit tests for DeliveryStatusTracker.

Tests:
- read without delivered
- out-of-order and duplicate callbacks
- unknown provider message ids
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from clinic_backoffice.domains.scheduling.application.use_cases.track_delivery_status import (
    DeliveryStatusTracker,
)
from clinic_backoffice.domains.scheduling.domain.entities.notification import NotificationRecord
from clinic_backoffice.domains.scheduling.domain.value_objects.notification_status import NotificationStatus
from clinic_backoffice.domains.scheduling.domain.value_objects.status_event import (
    StatusEventKind,
    WebhookStatusEvent,
)

SENT_AT = datetime(2025, 3, 9, 12, 0, tzinfo=UTC)


def _event(kind: StatusEventKind, minutes: int, message_id: str = "wamid.1") -> WebhookStatusEvent:
    return WebhookStatusEvent(kind=kind, provider_message_id=message_id, timestamp=SENT_AT + timedelta(minutes=minutes))


@pytest.fixture
def sent_record(notification_repository):
    return notification_repository.seed(NotificationRecord.sent(10, "1_day", "wamid.1", SENT_AT))


@pytest.fixture
def tracker(notification_repository):
    return DeliveryStatusTracker(notification_repository)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_read_without_delivered(tracker, sent_record):
    """Test that a read event alone sets read_at and leaves delivered_at null."""
    # Act
    found = await tracker.apply(_event(StatusEventKind.READ, 2))

    # Assert
    assert found is True
    assert sent_record.status == NotificationStatus.READ
    assert sent_record.read_at == SENT_AT + timedelta(minutes=2)
    assert sent_record.delivered_at is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_delivered_then_read(tracker, sent_record):
    """Test the normal callback order."""
    applied = await tracker.apply_many([_event(StatusEventKind.DELIVERED, 1), _event(StatusEventKind.READ, 4)])

    assert applied == 2
    assert sent_record.status == NotificationStatus.READ
    assert sent_record.delivered_at == SENT_AT + timedelta(minutes=1)
    assert sent_record.read_at == SENT_AT + timedelta(minutes=4)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_late_delivered_after_read(tracker, sent_record):
    """Test that a late delivered event fills its timestamp without regressing status."""
    # Arrange
    await tracker.apply(_event(StatusEventKind.READ, 4))

    # Act
    await tracker.apply(_event(StatusEventKind.DELIVERED, 1))

    # Assert
    assert sent_record.status == NotificationStatus.READ
    assert sent_record.delivered_at == SENT_AT + timedelta(minutes=1)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_duplicate_event_is_idempotent(tracker, sent_record):
    """Test that re-applying the same event changes nothing."""
    event = _event(StatusEventKind.DELIVERED, 1)

    await tracker.apply(event)
    await tracker.apply(event)

    assert sent_record.status == NotificationStatus.DELIVERED
    assert sent_record.delivered_at == SENT_AT + timedelta(minutes=1)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unknown_message_id_is_dropped(tracker, sent_record):
    """Test that events for unknown messages are ignored without error."""
    found = await tracker.apply(_event(StatusEventKind.DELIVERED, 1, message_id="wamid.unknown"))

    assert found is False
    assert sent_record.status == NotificationStatus.SENT


@pytest.mark.unit
@pytest.mark.asyncio
async def test_apply_many_continues_after_error():
    """Test that one failing event does not stop the batch."""
    # Arrange
    repository = AsyncMock()
    repository.apply_status_event.side_effect = [RuntimeError("db down"), True]
    tracker = DeliveryStatusTracker(repository)

    # Act
    applied = await tracker.apply_many([_event(StatusEventKind.DELIVERED, 1), _event(StatusEventKind.READ, 2)])

    # Assert
    assert applied == 1
    assert repository.apply_status_event.await_count == 2
