"""Test utilities and helpers."""

from tests.utils.builders import AppointmentBuilder, MessagingConfigBuilder
from tests.utils.fakes import (
    FakeMessagingProvider,
    InMemoryAppointmentRepository,
    InMemoryBusinessHoursRepository,
    InMemoryContactRepository,
    InMemoryMessagingConfigRepository,
    InMemoryNotificationRepository,
    InMemoryWebhookLogRepository,
)

__all__ = [
    # Builders
    "AppointmentBuilder",
    "MessagingConfigBuilder",
    # Fakes
    "FakeMessagingProvider",
    "InMemoryAppointmentRepository",
    "InMemoryBusinessHoursRepository",
    "InMemoryContactRepository",
    "InMemoryMessagingConfigRepository",
    "InMemoryNotificationRepository",
    "InMemoryWebhookLogRepository",
]
