"""
WhatsApp Integration

WhatsApp Cloud API client for reminder templates and webhook decoding
for delivery status callbacks.
"""

from clinic_backoffice.integrations.whatsapp.client import WhatsAppCloudClient
from clinic_backoffice.integrations.whatsapp.http_client import WhatsAppHttpClient
from clinic_backoffice.integrations.whatsapp.models import SendMessageResponse, WhatsAppWebhookRequest
from clinic_backoffice.integrations.whatsapp.webhook import (
    classify_event_type,
    extract_status_events,
    verify_webhook,
)

__all__ = [
    "WhatsAppCloudClient",
    "WhatsAppHttpClient",
    "SendMessageResponse",
    "WhatsAppWebhookRequest",
    "classify_event_type",
    "extract_status_events",
    "verify_webhook",
]
