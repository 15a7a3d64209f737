# ============================================================================
# SCOPE: GLOBAL
# Description: Webhook de WhatsApp Cloud API: verificación de suscripción y
#              recepción de estados de entrega de recordatorios.
# ============================================================================
"""
WhatsApp Webhook Endpoints.

ENDPOINTS:
  - GET /whatsapp/webhook  → Subscription handshake (hub.challenge)
  - POST /whatsapp/webhook → Status callbacks (sent/delivered/read/failed)

The POST endpoint always answers 200 so the provider does not keep
re-delivering; problems are logged.
"""

import json
import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from clinic_backoffice.api.dependencies import (
    get_delivery_status_tracker,
    get_messaging_config_repository,
    get_webhook_log_repository,
)
from clinic_backoffice.domains.scheduling.application.ports import (
    IMessagingConfigRepository,
    IWebhookLogRepository,
)
from clinic_backoffice.domains.scheduling.application.use_cases import DeliveryStatusTracker
from clinic_backoffice.integrations.whatsapp import (
    WhatsAppWebhookRequest,
    classify_event_type,
    extract_status_events,
    verify_webhook,
)

router = APIRouter(prefix="/whatsapp", tags=["WhatsApp Webhook"])
logger = logging.getLogger(__name__)

OK_RESPONSE = {"status": "ok"}


@router.get("/webhook", response_class=PlainTextResponse)
async def verify_subscription(
    mode: str | None = Query(default=None, alias="hub.mode"),
    token: str | None = Query(default=None, alias="hub.verify_token"),
    challenge: str | None = Query(default=None, alias="hub.challenge"),
    config_repository: IMessagingConfigRepository = Depends(get_messaging_config_repository),  # noqa: B008
) -> PlainTextResponse:
    """
    Answer the WhatsApp subscription handshake.

    Responds with the challenge when the verify token matches the stored
    one; WebhookVerificationException otherwise (mapped to 403).
    """
    config = await config_repository.load()
    expected_token = config.webhook_verify_token if config else None

    result = verify_webhook(mode, token, challenge, expected_token)
    logger.info("WhatsApp webhook subscription verified")
    return PlainTextResponse(content=result)


@router.post("/webhook")
async def receive_status_callback(
    request: Request,
    webhook_log: IWebhookLogRepository = Depends(get_webhook_log_repository),  # noqa: B008
    tracker: DeliveryStatusTracker = Depends(get_delivery_status_tracker),  # noqa: B008
) -> dict[str, str]:
    """
    Receive WhatsApp status callbacks.

    1. Store the raw payload in the webhook log
    2. Decode statuses into typed events
    3. Apply them to the notification records
    """
    raw_body = await request.body()
    try:
        payload = json.loads(raw_body)
    except json.JSONDecodeError as e:
        logger.warning(f"Invalid JSON in WhatsApp webhook: {e}")
        return OK_RESPONSE

    if not isinstance(payload, dict):
        logger.warning(f"Unexpected WhatsApp webhook payload type: {type(payload).__name__}")
        return OK_RESPONSE

    event_type = classify_event_type(payload)
    try:
        await webhook_log.record(event_type, payload)
    except Exception as e:
        logger.error(f"Failed to store WhatsApp webhook payload: {e}", exc_info=True)

    try:
        webhook = WhatsAppWebhookRequest.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Could not decode WhatsApp webhook ({event_type}): {e.error_count()} error(s)")
        return OK_RESPONSE

    events = extract_status_events(webhook)
    if not events:
        logger.debug(f"WhatsApp webhook without status events ({event_type})")
        return OK_RESPONSE

    try:
        applied = await tracker.apply_many(events)
        logger.info(f"Applied {applied}/{len(events)} WhatsApp status event(s)")
    except Exception as e:
        logger.error(f"Error applying WhatsApp status events: {e}", exc_info=True)

    return OK_RESPONSE
