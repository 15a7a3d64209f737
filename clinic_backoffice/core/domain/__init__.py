"""
Domain Layer - Core DDD building blocks

This module provides base classes for Domain-Driven Design:
- Entities: Objects with identity and lifecycle
- Value Objects: Immutable objects compared by value
- Exceptions: Domain-specific error handling
"""

from clinic_backoffice.core.domain.entities import Entity
from clinic_backoffice.core.domain.exceptions import (
    AppointmentConflictException,
    ConfigurationException,
    DomainException,
    EntityNotFoundException,
    IntegrationException,
    OutOfHoursException,
    ProviderException,
    ValidationException,
    WebhookVerificationException,
)
from clinic_backoffice.core.domain.value_objects import StatusEnum, ValueObject

__all__ = [
    # Entities
    "Entity",
    # Value Objects
    "ValueObject",
    "StatusEnum",
    # Exceptions
    "DomainException",
    "ValidationException",
    "EntityNotFoundException",
    "AppointmentConflictException",
    "OutOfHoursException",
    "IntegrationException",
    "ProviderException",
    "ConfigurationException",
    "WebhookVerificationException",
]
