"""
Middleware package for FastAPI application.
"""

from clinic_backoffice.api.middleware.logging_middleware import RequestLoggingMiddleware

__all__ = [
    "RequestLoggingMiddleware",
]
