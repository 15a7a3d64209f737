"""
Webhook Log Repository Implementation

Stores raw inbound WhatsApp webhook payloads.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_backoffice.domains.scheduling.application.ports import IWebhookLogRepository
from clinic_backoffice.models.db.messaging import WhatsAppWebhookLogModel


class SQLAlchemyWebhookLogRepository(IWebhookLogRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def record(self, event_type: str, payload: dict[str, Any]) -> None:
        self.session.add(
            WhatsAppWebhookLogModel(
                event_type=event_type,
                payload=payload,
                processed=False,
                created_at=datetime.now(UTC),
            )
        )
        # The status updates that follow share this session
        try:
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise
