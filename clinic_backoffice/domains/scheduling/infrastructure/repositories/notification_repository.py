"""
Notification Repository Implementation

SQLAlchemy implementation of INotificationRepository on PostgreSQL.
Dispatch attempts are upserts on (appointment_id, message_type) and
status callbacks are single conditional UPDATE statements, so concurrent
writers never produce duplicate rows or regress delivery timestamps.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import and_, case, func, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_backoffice.domains.scheduling.application.ports import INotificationRepository
from clinic_backoffice.domains.scheduling.domain.entities.notification import NotificationRecord
from clinic_backoffice.domains.scheduling.domain.value_objects.notification_status import NotificationStatus
from clinic_backoffice.domains.scheduling.domain.value_objects.status_event import (
    StatusEventKind,
    WebhookStatusEvent,
)
from clinic_backoffice.models.db.messaging import WhatsAppNotificationModel
from clinic_backoffice.models.db.scheduling import AppointmentModel

from .session_utils import execute_or_rollback

logger = logging.getLogger(__name__)

UNIQUE_KEY_CONSTRAINT = "uq_whatsapp_notifications_appointment_type"

RETRYABLE_STATUSES = [status.value for status in NotificationStatus if status.is_retryable()]


def _status_rank_expr() -> Any:
    """SQL expression mapping the stored status to its lifecycle rank."""
    return case(
        {status.value: status.rank for status in NotificationStatus},
        value=WhatsAppNotificationModel.status,
        else_=0,
    )


class SQLAlchemyNotificationRepository(INotificationRepository):
    """
    SQLAlchemy implementation of the notification record repository.

    Every write commits immediately.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def upsert_notification(self, record: NotificationRecord) -> NotificationRecord:
        """Insert or overwrite the record for (appointment_id, message_type)."""
        now = datetime.now(UTC)
        stmt = insert(WhatsAppNotificationModel).values(
            appointment_id=record.appointment_id,
            message_type=record.message_type,
            status=record.status.value,
            provider_message_id=record.provider_message_id,
            error_message=record.error_message,
            sent_at=record.sent_at,
            attempts=1,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            constraint=UNIQUE_KEY_CONSTRAINT,
            set_={
                "status": stmt.excluded.status,
                "provider_message_id": stmt.excluded.provider_message_id,
                "error_message": stmt.excluded.error_message,
                "sent_at": stmt.excluded.sent_at,
                "attempts": WhatsAppNotificationModel.attempts + 1,
                "updated_at": stmt.excluded.updated_at,
            },
        ).returning(WhatsAppNotificationModel)

        try:
            result = await self.session.execute(stmt, execution_options={"populate_existing": True})
            model = result.scalar_one()
            saved = self._to_entity(model)
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise

        return saved

    async def get_notifications_by_appointment(self, appointment_id: int) -> list[NotificationRecord]:
        result = await execute_or_rollback(
            self.session,
            select(WhatsAppNotificationModel)
            .where(WhatsAppNotificationModel.appointment_id == appointment_id)
            .order_by(WhatsAppNotificationModel.id)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def get_pending_notifications(
        self,
        limit: int,
        max_attempts: int,
        upcoming_after: datetime | None = None,
    ) -> list[NotificationRecord]:
        """Retryable records, least recently attempted first."""
        query = select(WhatsAppNotificationModel).where(
            and_(
                WhatsAppNotificationModel.status.in_(RETRYABLE_STATUSES),
                WhatsAppNotificationModel.attempts < max_attempts,
            )
        )

        if upcoming_after is not None:
            query = query.join(
                AppointmentModel,
                AppointmentModel.id == WhatsAppNotificationModel.appointment_id,
            ).where(AppointmentModel.start_at > upcoming_after)

        query = query.order_by(WhatsAppNotificationModel.updated_at).limit(limit)

        result = await execute_or_rollback(self.session, query)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def apply_status_event(self, event: WebhookStatusEvent) -> bool:
        """Apply a callback as one compare-and-set UPDATE by provider message id."""
        model = WhatsAppNotificationModel
        new_status = event.kind.notification_status

        values: dict[str, Any] = {
            # Only move to an equal or higher lifecycle rank
            "status": case(
                (_status_rank_expr() <= new_status.rank, new_status.value),
                else_=model.status,
            ),
            "updated_at": datetime.now(UTC),
        }
        if event.kind == StatusEventKind.DELIVERED:
            values["delivered_at"] = func.coalesce(model.delivered_at, event.timestamp)
        elif event.kind == StatusEventKind.READ:
            values["read_at"] = func.coalesce(model.read_at, event.timestamp)
        elif event.kind == StatusEventKind.FAILED and event.error_message:
            values["error_message"] = event.error_message

        stmt = (
            update(model)
            .where(model.provider_message_id == event.provider_message_id)
            .values(**values)
            .returning(model.id)
            .execution_options(synchronize_session=False)
        )

        try:
            result = await self.session.execute(stmt)
            updated_ids = result.scalars().all()
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise

        return bool(updated_ids)

    def _to_entity(self, model: WhatsAppNotificationModel) -> NotificationRecord:
        """Convert model to entity."""
        return NotificationRecord(
            id=model.id,
            appointment_id=model.appointment_id,
            message_type=model.message_type,
            status=NotificationStatus(model.status),
            provider_message_id=model.provider_message_id,
            error_message=model.error_message,
            attempts=model.attempts,
            sent_at=model.sent_at,
            delivered_at=model.delivered_at,
            read_at=model.read_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
