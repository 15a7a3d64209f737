"""
Domain Exceptions for Domain-Driven Design

These exceptions represent business rule violations and domain-specific errors.
They should be caught and translated to appropriate HTTP responses in the API layer.
"""

from typing import Any


class DomainException(Exception):
    """
    Base exception for all domain-related errors.

    Provides a standardized way to communicate business rule violations.
    """

    def __init__(self, message: str, code: str | None = None, details: dict[str, Any] | None = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "APPOINTMENT_CONFLICT")
            details: Additional context about the error
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(DomainException):
    """
    Raised when domain validation fails.

    Use for malformed candidates, missing identity, unusable contact data, etc.
    """

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, "VALIDATION_ERROR", details)
        self.field = field


class EntityNotFoundException(DomainException):
    """
    Raised when an entity is not found.
    """

    def __init__(
        self,
        entity_type: str,
        entity_id: Any,
        message: str | None = None,
    ):
        self.entity_type = entity_type
        self.entity_id = entity_id
        msg = message or f"{entity_type} with ID {entity_id} not found"
        super().__init__(
            msg,
            "ENTITY_NOT_FOUND",
            {"entity_type": entity_type, "entity_id": str(entity_id)},
        )


class AppointmentConflictException(DomainException):
    """Raised when the candidate overlaps an existing appointment."""

    def __init__(
        self,
        time_slot: str | None = None,
        conflicting_id: int | None = None,
        message: str | None = None,
    ):
        self.time_slot = time_slot
        self.conflicting_id = conflicting_id
        msg = message or "Appointment conflict: time slot not available"
        details: dict[str, Any] = {}
        if time_slot:
            details["time_slot"] = time_slot
        if conflicting_id is not None:
            details["conflicting_id"] = conflicting_id
        super().__init__(msg, "APPOINTMENT_CONFLICT", details)


class OutOfHoursException(DomainException):
    """Raised when the candidate is not fully inside any open business interval."""

    def __init__(self, time_slot: str | None = None, message: str | None = None):
        self.time_slot = time_slot
        details: dict[str, Any] = {}
        if time_slot:
            details["time_slot"] = time_slot
        super().__init__(message or "Appointment outside working hours", "OUT_OF_HOURS", details)


class IntegrationException(DomainException):
    """Raised when an external integration fails."""

    def __init__(
        self,
        service: str,
        message: str,
        original_error: Exception | None = None,
        code: str = "INTEGRATION_ERROR",
        details: dict[str, Any] | None = None,
    ):
        self.service = service
        self.original_error = original_error
        merged: dict[str, Any] = {"service": service, **(details or {})}
        if original_error:
            merged["original_error"] = str(original_error)
        super().__init__(message, code, merged)


class ProviderException(IntegrationException):
    """
    Raised when the messaging provider rejects or fails a send.

    Covers network errors, authentication failures and quota rejections.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: int | str | None = None,
        original_error: Exception | None = None,
        service: str = "whatsapp",
    ):
        self.status_code = status_code
        self.error_code = error_code
        details: dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        if error_code is not None:
            details["error_code"] = error_code
        super().__init__(service, message, original_error, code="PROVIDER_ERROR", details=details)


class ConfigurationException(DomainException):
    """Raised when messaging is globally disabled or misconfigured."""

    def __init__(self, message: str, setting: str | None = None):
        self.setting = setting
        details: dict[str, Any] = {}
        if setting:
            details["setting"] = setting
        super().__init__(message, "CONFIGURATION_ERROR", details)


class WebhookVerificationException(DomainException):
    """Raised when a webhook subscription handshake is rejected."""

    def __init__(self, message: str = "Webhook verification failed"):
        super().__init__(message, "WEBHOOK_VERIFICATION_FAILED")
