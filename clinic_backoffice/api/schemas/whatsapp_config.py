"""
WhatsApp Configuration API Schemas

Secrets are write-only: responses carry a masked form of each token.
"""

from pydantic import BaseModel, ConfigDict, Field

from clinic_backoffice.domains.scheduling.domain.value_objects.messaging_config import MessagingConfig


def mask_secret(value: str) -> str:
    """Keep only the last four characters of a secret."""
    if not value:
        return ""
    if len(value) <= 8:
        return "****"
    return f"****{value[-4:]}"


class MessagingConfigUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={"example": {"reminder_2_hours_before": True, "template_name": "recordatorio_cita"}},
    )

    phone_number_id: str | None = Field(default=None, max_length=50)
    access_token: str | None = Field(default=None, description="Blank values are ignored")
    webhook_verify_token: str | None = Field(default=None, max_length=255, description="Blank values are ignored")
    business_account_id: str | None = Field(default=None, max_length=50)
    is_active: bool | None = None
    reminder_enabled: bool | None = None
    reminder_3_days_before: bool | None = None
    reminder_1_day_before: bool | None = None
    reminder_2_hours_before: bool | None = None
    template_name: str | None = Field(default=None, max_length=100)
    template_language: str | None = Field(default=None, max_length=10)

    def changes(self) -> dict:
        """Fields sent by the client; explicit nulls on required text fields are dropped."""
        data = self.model_dump(exclude_unset=True)
        return {key: value for key, value in data.items() if value is not None or key == "business_account_id"}


class MessagingConfigResponse(BaseModel):
    """Stored configuration with masked secrets."""

    phone_number_id: str
    access_token: str
    webhook_verify_token: str
    business_account_id: str | None
    is_active: bool
    reminder_enabled: bool
    reminder_3_days_before: bool
    reminder_1_day_before: bool
    reminder_2_hours_before: bool
    template_name: str
    template_language: str

    @classmethod
    def from_config(cls, config: MessagingConfig) -> "MessagingConfigResponse":
        return cls(
            phone_number_id=config.phone_number_id,
            access_token=mask_secret(config.access_token),
            webhook_verify_token=mask_secret(config.webhook_verify_token),
            business_account_id=config.business_account_id,
            is_active=config.is_active,
            reminder_enabled=config.reminder_enabled,
            reminder_3_days_before=config.reminder_3_days_before,
            reminder_1_day_before=config.reminder_1_day_before,
            reminder_2_hours_before=config.reminder_2_hours_before,
            template_name=config.template_name,
            template_language=config.template_language,
        )
