"""
Application entry point.

Configures logging and error tracking, then builds the app via the
factory.
"""

import logging

import sentry_sdk

from clinic_backoffice.config.settings import get_settings
from clinic_backoffice.core.app_factory import create_app
from clinic_backoffice.core.shared.logger import setup_logging

settings = get_settings()
setup_logging(settings)

logger = logging.getLogger(__name__)

if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        send_default_pii=False,
        environment=settings.ENVIRONMENT,
    )

app = create_app(settings)

if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting application in {settings.ENVIRONMENT} mode")
    uvicorn.run(
        "clinic_backoffice.main:app",
        host="0.0.0.0",
        port=8001,
        reload=settings.DEBUG,
    )
