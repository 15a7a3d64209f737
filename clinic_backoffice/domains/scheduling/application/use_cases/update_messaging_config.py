# ============================================================================
# SCOPE: APPLICATION LAYER (Scheduling)
# Description: Partial update of the WhatsApp messaging configuration.
# ============================================================================
"""Messaging configuration update.

Only the fields present in the change set are applied. Blank secrets are
ignored so that a form echoing back masked tokens never wipes them.
"""

import logging
from dataclasses import fields, replace
from typing import TYPE_CHECKING, Any

from clinic_backoffice.core.domain.exceptions import ValidationException

from ...domain.value_objects.messaging_config import MessagingConfig

if TYPE_CHECKING:
    from ..ports import IMessagingConfigRepository

logger = logging.getLogger(__name__)

SECRET_FIELDS = frozenset({"access_token", "webhook_verify_token"})


class UpdateMessagingConfigUseCase:
    def __init__(self, config_repository: "IMessagingConfigRepository") -> None:
        self._configs = config_repository

    async def execute(self, changes: dict[str, Any]) -> MessagingConfig:
        """Apply ``changes`` on top of the stored configuration.

        Starts from a configuration without credentials when nothing has
        been stored yet.

        Raises:
            ValidationException: If a change names an unknown field.
        """
        known = {f.name for f in fields(MessagingConfig)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ValidationException(f"Unknown configuration field(s): {', '.join(unknown)}", field=unknown[0])

        current = await self._configs.load()
        if current is None:
            current = MessagingConfig(phone_number_id="", access_token="")

        applied = {key: value for key, value in changes.items() if not (key in SECRET_FIELDS and not value)}
        updated = replace(current, **applied)

        saved = await self._configs.save(updated)
        logger.info(f"Messaging configuration updated: {', '.join(sorted(applied)) or 'no changes'}")
        return saved
