"""
WhatsApp HTTP Client.

Single Responsibility: Handle HTTP communication with the WhatsApp Cloud API.
"""

import logging
from typing import Any

import httpx

from clinic_backoffice.core.domain.exceptions import ProviderException

logger = logging.getLogger(__name__)


class WhatsAppHttpClient:
    """
    HTTP client for the WhatsApp Cloud API.

    Credentials are passed per call because they come from the
    whatsapp_config row loaded at each scheduler tick.
    """

    def __init__(
        self,
        base_url: str,
        version: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize HTTP client.

        Args:
            base_url: WhatsApp API base URL
            version: API version (e.g. v20.0)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self._base_url = base_url.rstrip("/")
        self._version = version
        self._timeout = timeout
        self._transport = transport

    def message_url(self, phone_number_id: str) -> str:
        """Get URL for sending messages."""
        return f"{self._base_url}/{self._version}/{phone_number_id}/messages"

    @staticmethod
    def headers(access_token: str) -> dict[str, str]:
        """Get standard headers for requests."""
        return {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }

    async def post_message(
        self,
        phone_number_id: str,
        access_token: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        """
        POST a message payload.

        Returns:
            Decoded JSON body of a 2xx response.

        Raises:
            ProviderException: Timeout, connection error or non-2xx response.
        """
        url = self.message_url(phone_number_id)

        try:
            logger.debug(f"POST {url}")
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload, headers=self.headers(access_token))
        except httpx.TimeoutException as e:
            raise ProviderException("Timeout connecting to WhatsApp API", original_error=e) from e
        except httpx.HTTPError as e:
            raise ProviderException(f"Connection error with WhatsApp API: {e}", original_error=e) from e

        logger.info(f"WhatsApp API Response: {response.status_code}")

        if not response.is_success:
            self._raise_for_error(response)

        try:
            return response.json()
        except ValueError as e:
            raise ProviderException(
                "Invalid JSON in WhatsApp API response",
                status_code=response.status_code,
                original_error=e,
            ) from e

    def _raise_for_error(self, response: httpx.Response) -> None:
        """Translate an error response into ProviderException."""
        error_detail = response.text
        logger.error(f"Error {response.status_code} from WhatsApp API: {error_detail}")

        error_message = error_detail
        error_code = None
        try:
            error = response.json().get("error") or {}
            error_message = error.get("message") or error_detail
            error_code = error.get("code")
        except ValueError:
            pass

        raise ProviderException(
            f"HTTP {response.status_code}: {error_message}",
            status_code=response.status_code,
            error_code=error_code,
        )
