"""
WhatsApp Cloud API models.

Pydantic models for the template send response and for the status
callbacks delivered to the webhook. Unknown fields are ignored so new
Meta payload fields do not break decoding.
"""

from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field


class _WhatsAppModel(BaseModel):
    model_config: ClassVar[ConfigDict] = ConfigDict(populate_by_name=True, extra="ignore")


# ============================================================================
# Outbound: template send
# ============================================================================


class TemplateParameter(_WhatsAppModel):
    type: Literal["text"] = "text"
    text: str


class TemplateComponent(_WhatsAppModel):
    type: Literal["body"] = "body"
    parameters: list[TemplateParameter]


class TemplateLanguage(_WhatsAppModel):
    code: str


class Template(_WhatsAppModel):
    name: str
    language: TemplateLanguage
    components: list[TemplateComponent] = Field(default_factory=list)


class TemplateMessageRequest(_WhatsAppModel):
    """Cuerpo del POST /messages para un mensaje de plantilla"""

    messaging_product: Literal["whatsapp"] = "whatsapp"
    recipient_type: Literal["individual"] = "individual"
    to: str
    type: Literal["template"] = "template"
    template: Template

    @classmethod
    def build(cls, to: str, template_name: str, language_code: str, params: list[str]) -> "TemplateMessageRequest":
        components = []
        if params:
            components.append(TemplateComponent(parameters=[TemplateParameter(text=p) for p in params]))
        return cls(
            to=to,
            template=Template(
                name=template_name,
                language=TemplateLanguage(code=language_code),
                components=components,
            ),
        )


class SentMessage(_WhatsAppModel):
    id: str
    message_status: str | None = None


class SendMessageResponse(_WhatsAppModel):
    """Respuesta exitosa de la API al enviar un mensaje"""

    messaging_product: str | None = None
    contacts: list[dict[str, Any]] = Field(default_factory=list)
    messages: list[SentMessage] = Field(default_factory=list)


# ============================================================================
# Inbound: webhook status callbacks
# ============================================================================


class StatusError(_WhatsAppModel):
    code: int | None = None
    title: str | None = None
    message: str | None = None

    @property
    def description(self) -> str:
        return self.title or self.message or (f"error {self.code}" if self.code is not None else "unknown error")


class MessageStatus(_WhatsAppModel):
    """Estado de un mensaje enviado (sent, delivered, read, failed)"""

    id: str
    status: str
    timestamp: str
    recipient_id: str | None = None
    conversation: dict[str, Any] | None = None
    pricing: dict[str, Any] | None = None
    errors: list[StatusError] = Field(default_factory=list)


class ChangeValue(_WhatsAppModel):
    messaging_product: str | None = None
    metadata: dict[str, Any] | None = None
    statuses: list[MessageStatus] = Field(default_factory=list)
    messages: list[dict[str, Any]] = Field(default_factory=list)


class Change(_WhatsAppModel):
    """Modelo para cambios en el webhook"""

    field: str
    value: ChangeValue


class Entry(_WhatsAppModel):
    """Modelo para entradas en el webhook"""

    id: str
    changes: list[Change] = Field(default_factory=list)


class WhatsAppWebhookRequest(_WhatsAppModel):
    """Modelo para solicitudes de webhook de WhatsApp"""

    object: str
    entry: list[Entry] = Field(default_factory=list)

    def iter_statuses(self) -> list[MessageStatus]:
        """All status callbacks across entries and changes."""
        return [status for entry in self.entry for change in entry.changes for status in change.value.statuses]
