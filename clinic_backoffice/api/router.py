from fastapi import APIRouter

from clinic_backoffice.api.routes import (
    appointments,
    business_hours,
    reminders_admin,
    whatsapp_config,
    whatsapp_webhook,
)

api_router = APIRouter()

# API routes (all have /api/v1 prefix from the app factory)
api_router.include_router(appointments.router)
api_router.include_router(business_hours.router)
api_router.include_router(whatsapp_webhook.router)
api_router.include_router(whatsapp_config.router)
api_router.include_router(reminders_admin.router)
