# ============================================================================
# Tests for scheduling value objects
# ============================================================================
"""Unit tests for TimeRange, BusinessHourInterval, ReminderOffset,
NotificationStatus, MessagingConfig, Contact and WebhookStatusEvent."""

from datetime import UTC, date, datetime, time, timedelta

import pytest

from clinic_backoffice.core.domain.exceptions import ConfigurationException, ValidationException
from clinic_backoffice.domains.scheduling.domain.value_objects import (
    ONE_DAY_BEFORE,
    THREE_DAYS_BEFORE,
    TWO_HOURS_BEFORE,
    BusinessHourInterval,
    Contact,
    NotificationStatus,
    ReminderOffset,
    StatusEventKind,
    TimeRange,
    WebhookStatusEvent,
)
from tests.utils.builders import MessagingConfigBuilder


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime(2025, 3, 10, hour, minute, tzinfo=UTC)


class TestTimeRange:
    """Tests for TimeRange."""

    def test_rejects_naive_instants(self) -> None:
        """Should reject instants without timezone."""
        with pytest.raises(ValidationException):
            TimeRange(start=datetime(2025, 3, 10, 10), end=datetime(2025, 3, 10, 11))

    @pytest.mark.parametrize("end_hour", [10, 9])
    def test_rejects_empty_or_inverted_range(self, end_hour: int) -> None:
        """Should require end to be strictly after start."""
        with pytest.raises(ValidationException):
            TimeRange(start=_at(10), end=_at(end_hour))

    def test_overlap_is_detected_both_ways(self) -> None:
        """Should report overlap symmetrically."""
        a = TimeRange(start=_at(10), end=_at(11))
        b = TimeRange(start=_at(10, 30), end=_at(11, 30))
        assert a.overlaps(b) is True
        assert b.overlaps(a) is True

    def test_touching_ranges_do_not_overlap(self) -> None:
        """Should treat ranges as half-open: [10,11) and [11,12) are adjacent."""
        a = TimeRange(start=_at(10), end=_at(11))
        b = TimeRange(start=_at(11), end=_at(12))
        assert a.overlaps(b) is False
        assert b.overlaps(a) is False

    def test_nested_range_overlaps_and_is_contained(self) -> None:
        """Should overlap and contain a range nested inside it."""
        outer = TimeRange(start=_at(9), end=_at(17))
        inner = TimeRange(start=_at(10), end=_at(11))
        assert outer.overlaps(inner) is True
        assert outer.contains(inner) is True
        assert inner.contains(outer) is False

    def test_from_duration_and_includes(self) -> None:
        """Should build from a duration and include start but not end."""
        slot = TimeRange.from_duration(_at(10), timedelta(minutes=30))
        assert slot.end == _at(10, 30)
        assert slot.duration == timedelta(minutes=30)
        assert slot.includes(_at(10)) is True
        assert slot.includes(_at(10, 30)) is False


class TestBusinessHourInterval:
    """Tests for BusinessHourInterval."""

    def test_rejects_interval_crossing_midnight(self) -> None:
        """Should require start before end."""
        with pytest.raises(ValidationException):
            BusinessHourInterval(start=time(17, 0), end=time(9, 0))

    def test_on_localizes_to_clinic_timezone(self, clinic_tz) -> None:
        """Should place the interval on a date in the clinic timezone."""
        interval = BusinessHourInterval(start=time(9, 0), end=time(17, 0))

        slot = interval.on(date(2025, 3, 10), clinic_tz)

        assert slot.start == datetime(2025, 3, 10, 12, 0, tzinfo=UTC)
        assert slot.end == datetime(2025, 3, 10, 20, 0, tzinfo=UTC)
        assert str(interval) == "09:00-17:00"


class TestReminderOffset:
    """Tests for ReminderOffset."""

    def test_default_offsets(self) -> None:
        """Should define 72h, 24h and 2h reminders."""
        assert (THREE_DAYS_BEFORE.lead_time, THREE_DAYS_BEFORE.message_type) == (timedelta(hours=72), "3_days")
        assert (ONE_DAY_BEFORE.lead_time, ONE_DAY_BEFORE.message_type) == (timedelta(hours=24), "1_day")
        assert (TWO_HOURS_BEFORE.lead_time, TWO_HOURS_BEFORE.message_type) == (timedelta(hours=2), "2_hours")

    def test_due_window_starts_at_lead_time(self) -> None:
        """Should cover [now + lead, now + lead + width)."""
        now = _at(8)

        window = ONE_DAY_BEFORE.due_window(now, timedelta(hours=1))

        assert window.start == now + timedelta(hours=24)
        assert window.end == now + timedelta(hours=25)

    def test_rejects_non_positive_lead_time(self) -> None:
        """Should reject a zero lead time."""
        with pytest.raises(ValidationException):
            ReminderOffset(lead_time=timedelta(0), message_type="now")


class TestNotificationStatus:
    """Tests for NotificationStatus lifecycle ranks."""

    def test_terminal_success_statuses(self) -> None:
        """Should treat sent, delivered and read as terminal success."""
        assert [s.value for s in NotificationStatus if s.is_terminal_success()] == ["sent", "delivered", "read"]

    def test_retryable_statuses(self) -> None:
        """Should only retry pending and failed."""
        assert {s for s in NotificationStatus if s.is_retryable()} == {
            NotificationStatus.PENDING,
            NotificationStatus.FAILED,
        }

    @pytest.mark.parametrize(
        ("current", "new", "allowed"),
        [
            (NotificationStatus.SENT, NotificationStatus.DELIVERED, True),
            (NotificationStatus.DELIVERED, NotificationStatus.READ, True),
            (NotificationStatus.SENT, NotificationStatus.READ, True),
            (NotificationStatus.READ, NotificationStatus.DELIVERED, False),
            (NotificationStatus.DELIVERED, NotificationStatus.SENT, False),
            (NotificationStatus.SENT, NotificationStatus.FAILED, True),
            (NotificationStatus.READ, NotificationStatus.FAILED, False),
        ],
    )
    def test_can_advance_only_to_equal_or_higher_rank(self, current, new, allowed) -> None:
        """Should never move back in the delivery lifecycle."""
        assert current.can_advance_to(new) is allowed


class TestMessagingConfig:
    """Tests for MessagingConfig."""

    def test_default_offsets_enabled(self) -> None:
        """Should enable 3-day and 1-day reminders by default."""
        config = MessagingConfigBuilder().build()
        assert config.enabled_offsets() == [THREE_DAYS_BEFORE, ONE_DAY_BEFORE]

    def test_only_selected_offsets(self) -> None:
        """Should return only offsets whose flag is on."""
        config = MessagingConfigBuilder().only_offsets("2_hours").build()
        assert config.enabled_offsets() == [TWO_HOURS_BEFORE]

    def test_dispatch_disabled_when_inactive_or_reminders_off(self) -> None:
        """Should disable dispatch if inactive or reminders are off."""
        assert MessagingConfigBuilder().build().is_dispatch_enabled is True
        assert MessagingConfigBuilder().inactive().build().is_dispatch_enabled is False
        assert MessagingConfigBuilder().reminders_disabled().build().is_dispatch_enabled is False

    def test_ensure_can_send_requires_credentials(self) -> None:
        """Should raise ConfigurationException without an access token."""
        config = MessagingConfigBuilder().with_token("").build()

        with pytest.raises(ConfigurationException) as exc_info:
            config.ensure_can_send()

        assert exc_info.value.setting == "access_token"

    def test_ensure_can_send_rejects_inactive(self) -> None:
        """Should raise ConfigurationException when messaging is inactive."""
        with pytest.raises(ConfigurationException):
            MessagingConfigBuilder().inactive().build().ensure_can_send()


class TestContact:
    """Tests for Contact phone normalization."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("+54 9 11 5555-1234", "+5491155551234"),
            ("5491144443333", "+5491144443333"),
            ("(011) 4444.3333", "+01144443333"),
        ],
    )
    def test_normalizes_phone(self, raw: str, expected: str) -> None:
        """Should strip separators and add a leading '+'."""
        assert Contact(display_name="Ana", phone=raw).normalized_phone() == expected

    @pytest.mark.parametrize("raw", [None, "", "  ", "+", "54-11-abc"])
    def test_rejects_missing_or_invalid_phone(self, raw) -> None:
        """Should raise ValidationException for unusable phones."""
        with pytest.raises(ValidationException):
            Contact(display_name="Ana", phone=raw).normalized_phone()


class TestWebhookStatusEvent:
    """Tests for WebhookStatusEvent."""

    def test_kind_maps_to_notification_status(self) -> None:
        """Should map each event kind to the same-named status."""
        assert StatusEventKind.READ.notification_status is NotificationStatus.READ
        assert StatusEventKind.FAILED.notification_status is NotificationStatus.FAILED

    def test_requires_aware_timestamp(self) -> None:
        """Should reject naive timestamps."""
        with pytest.raises(ValidationException):
            WebhookStatusEvent(
                kind=StatusEventKind.SENT,
                provider_message_id="wamid.1",
                timestamp=datetime(2025, 3, 10, 10),
            )
