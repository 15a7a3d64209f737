"""
Exception handlers for the FastAPI application.

Domain exceptions raised by use cases are mapped to HTTP status codes
here; routes do not catch them.
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from clinic_backoffice.core.domain.exceptions import (
    AppointmentConflictException,
    ConfigurationException,
    DomainException,
    EntityNotFoundException,
    IntegrationException,
    OutOfHoursException,
    ValidationException,
    WebhookVerificationException,
)

logger = logging.getLogger(__name__)

# Most specific class first
DOMAIN_STATUS_CODES: tuple[tuple[type[DomainException], int], ...] = (
    (ValidationException, status.HTTP_400_BAD_REQUEST),
    (EntityNotFoundException, status.HTTP_404_NOT_FOUND),
    (AppointmentConflictException, status.HTTP_409_CONFLICT),
    (OutOfHoursException, status.HTTP_409_CONFLICT),
    (WebhookVerificationException, status.HTTP_403_FORBIDDEN),
    (ConfigurationException, status.HTTP_503_SERVICE_UNAVAILABLE),
    (IntegrationException, status.HTTP_502_BAD_GATEWAY),
)


def status_code_for(exc: DomainException) -> int:
    for exc_type, code in DOMAIN_STATUS_CODES:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_400_BAD_REQUEST


async def domain_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Translate domain exceptions into HTTP responses."""
    if not isinstance(exc, DomainException):
        return await global_exception_handler(request, exc)

    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=status_code,
        content={"error": True, **exc.to_dict(), "status_code": status_code},
    )


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle HTTPException with the same envelope as domain errors."""
    if not isinstance(exc, HTTPException):
        return await global_exception_handler(request, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": True, "message": exc.detail, "status_code": exc.status_code},
        headers=exc.headers,
    )


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle request validation errors with per-field messages."""
    code = status.HTTP_422_UNPROCESSABLE_ENTITY
    errors = []
    if isinstance(exc, RequestValidationError):
        errors = [
            {"field": ".".join(str(loc) for loc in error["loc"]), "message": error["msg"], "type": error["type"]}
            for error in exc.errors()
        ]

    logger.warning(f"Validation error on {request.url.path}: {errors}")

    return JSONResponse(
        status_code=code,
        content={"error": True, "message": "Validation error", "details": errors, "status_code": code},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle all unhandled exceptions.

    Logs the full exception with traceback and returns a safe error response.
    """
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc!s}",
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": True,
            "message": "Internal server error",
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    logger.info("Exception handlers registered")
