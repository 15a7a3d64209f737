"""
WhatsApp Cloud Client

Messaging provider used by the reminder dispatcher: sends pre-approved
template messages and returns the provider message id (wamid).
"""

import logging

from pydantic import ValidationError

from clinic_backoffice.config.settings import Settings
from clinic_backoffice.core.domain.exceptions import ProviderException
from clinic_backoffice.domains.scheduling.application.ports import IMessagingProvider
from clinic_backoffice.domains.scheduling.domain.value_objects.messaging_config import MessagingConfig

from .http_client import WhatsAppHttpClient
from .models import SendMessageResponse, TemplateMessageRequest

logger = logging.getLogger(__name__)


class WhatsAppCloudClient(IMessagingProvider):
    """
    Cliente de la API de WhatsApp Cloud para mensajes de plantilla.
    """

    def __init__(self, http_client: WhatsAppHttpClient):
        self._http = http_client

    @classmethod
    def from_settings(cls, settings: Settings) -> "WhatsAppCloudClient":
        return cls(
            WhatsAppHttpClient(
                base_url=settings.WHATSAPP_API_BASE,
                version=settings.WHATSAPP_API_VERSION,
                timeout=settings.WHATSAPP_TIMEOUT_SECONDS,
            )
        )

    async def send_template_message(
        self,
        config: MessagingConfig,
        to: str,
        template_name: str,
        language_code: str,
        params: list[str],
    ) -> str:
        """
        Send a template message.

        Args:
            config: Credentials snapshot (phone_number_id, access_token).
            to: Recipient phone, with or without '+'.
            template_name: Name of the pre-approved template.
            language_code: Template language code (e.g. es_AR).
            params: Body parameters, in template order.

        Returns:
            Provider message id.

        Raises:
            ProviderException: If the API rejects the message or returns no id.
        """
        request = TemplateMessageRequest.build(to, template_name, language_code, params)
        logger.info(f"Sending template '{template_name}' to {to}")

        data = await self._http.post_message(
            phone_number_id=config.phone_number_id,
            access_token=config.access_token,
            payload=request.model_dump(),
        )

        try:
            response = SendMessageResponse.model_validate(data)
        except ValidationError as e:
            raise ProviderException("Unexpected WhatsApp API response", original_error=e) from e

        if not response.messages:
            raise ProviderException("No message ID in WhatsApp API response")

        return response.messages[0].id
