"""
Messaging Config Repository Implementation

Loads and stores the single whatsapp_config row as a MessagingConfig snapshot.
"""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_backoffice.domains.scheduling.application.ports import IMessagingConfigRepository
from clinic_backoffice.domains.scheduling.domain.value_objects.messaging_config import MessagingConfig
from clinic_backoffice.models.db.messaging import WhatsAppConfigModel

from .session_utils import execute_or_rollback


class SQLAlchemyMessagingConfigRepository(IMessagingConfigRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _first_row(self) -> WhatsAppConfigModel | None:
        result = await execute_or_rollback(
            self.session,
            select(WhatsAppConfigModel).order_by(WhatsAppConfigModel.id).limit(1),
        )
        return result.scalar_one_or_none()

    async def load(self) -> MessagingConfig | None:
        model = await self._first_row()
        if model is None:
            return None
        return self._to_value(model)

    async def save(self, config: MessagingConfig) -> MessagingConfig:
        model = await self._first_row()
        if model is None:
            model = WhatsAppConfigModel()
            self.session.add(model)

        model.phone_number_id = config.phone_number_id
        model.access_token = config.access_token
        model.webhook_verify_token = config.webhook_verify_token
        model.business_account_id = config.business_account_id
        model.is_active = config.is_active
        model.reminder_enabled = config.reminder_enabled
        model.reminder_3_days_before = config.reminder_3_days_before
        model.reminder_1_day_before = config.reminder_1_day_before
        model.reminder_2_hours_before = config.reminder_2_hours_before
        model.template_name_reminder = config.template_name
        model.template_lang_code = config.template_language

        try:
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise

        return config

    @staticmethod
    def _to_value(model: WhatsAppConfigModel) -> MessagingConfig:
        return MessagingConfig(
            phone_number_id=model.phone_number_id,
            access_token=model.access_token,
            webhook_verify_token=model.webhook_verify_token,
            business_account_id=model.business_account_id,
            is_active=model.is_active,
            reminder_enabled=model.reminder_enabled,
            reminder_3_days_before=model.reminder_3_days_before,
            reminder_1_day_before=model.reminder_1_day_before,
            reminder_2_hours_before=model.reminder_2_hours_before,
            template_name=model.template_name_reminder,
            template_language=model.template_lang_code,
        )
