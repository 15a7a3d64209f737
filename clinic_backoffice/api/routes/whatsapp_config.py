"""
WhatsApp configuration admin endpoints.

  - GET /whatsapp/config → stored configuration, tokens masked
  - PUT /whatsapp/config → partial update, returns the masked result
"""

import logging

from fastapi import APIRouter, Depends

from clinic_backoffice.api.dependencies import (
    get_messaging_config_repository,
    get_update_messaging_config_use_case,
)
from clinic_backoffice.api.schemas.whatsapp_config import MessagingConfigResponse, MessagingConfigUpdate
from clinic_backoffice.core.domain.exceptions import EntityNotFoundException
from clinic_backoffice.domains.scheduling.application.ports import IMessagingConfigRepository
from clinic_backoffice.domains.scheduling.application.use_cases import UpdateMessagingConfigUseCase

router = APIRouter(prefix="/whatsapp", tags=["WhatsApp Config"])
logger = logging.getLogger(__name__)


@router.get("/config", response_model=MessagingConfigResponse)
async def get_whatsapp_config(
    config_repository: IMessagingConfigRepository = Depends(get_messaging_config_repository),  # noqa: B008
) -> MessagingConfigResponse:
    config = await config_repository.load()
    if config is None:
        raise EntityNotFoundException("MessagingConfig", "whatsapp", "WhatsApp configuration has not been set up")
    return MessagingConfigResponse.from_config(config)


@router.put("/config", response_model=MessagingConfigResponse)
async def update_whatsapp_config(
    payload: MessagingConfigUpdate,
    use_case: UpdateMessagingConfigUseCase = Depends(get_update_messaging_config_use_case),  # noqa: B008
) -> MessagingConfigResponse:
    """Update the provided fields; blank tokens keep the stored ones."""
    config = await use_case.execute(payload.changes())
    return MessagingConfigResponse.from_config(config)
