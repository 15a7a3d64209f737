# ============================================================================
# SCOPE: APPLICATION LAYER (Scheduling)
# Description: Messaging provider and configuration ports.
# ============================================================================
"""Messaging Ports.

The provider port is the only thing the dispatcher knows about WhatsApp.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ...domain.value_objects.messaging_config import MessagingConfig


@runtime_checkable
class IMessagingProvider(Protocol):
    """Interface for sending template messages.

    Implementations: WhatsAppCloudClient
    """

    async def send_template_message(
        self,
        config: "MessagingConfig",
        to: str,
        template_name: str,
        language_code: str,
        params: list[str],
    ) -> str:
        """Send a template message.

        Returns:
            Provider-issued message id.

        Raises:
            ProviderException: On network, auth or quota failures.
        """
        ...


@runtime_checkable
class IMessagingConfigRepository(Protocol):
    """Interface for loading and storing the messaging configuration."""

    async def load(self) -> "MessagingConfig | None":
        """Current configuration, or None if none has been stored."""
        ...

    async def save(self, config: "MessagingConfig") -> "MessagingConfig":
        """Store ``config`` as the current configuration, creating it if absent."""
        ...
