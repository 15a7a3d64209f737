"""Messaging configuration snapshot."""

from dataclasses import dataclass

from clinic_backoffice.core.domain.exceptions import ConfigurationException
from clinic_backoffice.core.domain.value_objects import ValueObject

from .reminder_offset import ONE_DAY_BEFORE, THREE_DAYS_BEFORE, TWO_HOURS_BEFORE, ReminderOffset


@dataclass(frozen=True)
class MessagingConfig(ValueObject):
    """
    WhatsApp configuration as loaded at the start of a scheduler tick.

    Passed explicitly to the dispatcher so that one tick works against a
    single consistent snapshot.
    """

    phone_number_id: str
    access_token: str
    webhook_verify_token: str = ""
    business_account_id: str | None = None
    is_active: bool = True
    reminder_enabled: bool = True
    reminder_3_days_before: bool = True
    reminder_1_day_before: bool = True
    reminder_2_hours_before: bool = False
    template_name: str = "appointment_reminder"
    template_language: str = "es_AR"

    @property
    def is_dispatch_enabled(self) -> bool:
        return self.is_active and self.reminder_enabled

    def enabled_offsets(self) -> list[ReminderOffset]:
        """Reminder offsets whose individual flag is on, longest lead first."""
        flags = [
            (THREE_DAYS_BEFORE, self.reminder_3_days_before),
            (ONE_DAY_BEFORE, self.reminder_1_day_before),
            (TWO_HOURS_BEFORE, self.reminder_2_hours_before),
        ]
        return [offset for offset, enabled in flags if enabled]

    def ensure_can_send(self) -> None:
        """
        Raises:
            ConfigurationException: If messaging is disabled or credentials are missing.
        """
        if not self.is_active:
            raise ConfigurationException("WhatsApp messaging is disabled", setting="is_active")
        if not self.phone_number_id:
            raise ConfigurationException("WhatsApp phone_number_id is not configured", setting="phone_number_id")
        if not self.access_token:
            raise ConfigurationException("WhatsApp access_token is not configured", setting="access_token")
        if not self.template_name:
            raise ConfigurationException("Reminder template is not configured", setting="template_name_reminder")
