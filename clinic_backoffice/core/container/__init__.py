# ============================================================================
# SCOPE: GLOBAL
# Description: Contenedor principal de inyección de dependencias (singleton).
# ============================================================================
"""
Dependency Injection Container.

Centralized access to the domain containers. Wires concrete
implementations (SQLAlchemy repositories, WhatsApp client) to the
application ports.
"""

from __future__ import annotations

import logging

from clinic_backoffice.config.settings import Settings, get_settings

from .scheduling import SchedulingContainer

logger = logging.getLogger(__name__)


# ============================================================
# GLOBAL CONTAINER INSTANCE
# ============================================================

_container: SchedulingContainer | None = None


def get_container(settings: Settings | None = None) -> SchedulingContainer:
    """
    Get global container instance (singleton).

    Args:
        settings: Optional settings (only used on first call)

    Returns:
        SchedulingContainer instance
    """
    global _container

    if _container is None:
        logger.info("Initializing global SchedulingContainer")
        _container = SchedulingContainer(settings or get_settings())
    elif settings is not None:
        logger.warning(
            "Container already initialized, ignoring new settings. Call reset_container() first to change them."
        )

    return _container


def reset_container() -> None:
    """
    Reset global container instance.

    Useful for testing or reconfiguration.
    """
    global _container
    logger.info("Resetting global SchedulingContainer")
    _container = None


__all__ = [
    "SchedulingContainer",
    "get_container",
    "reset_container",
]
