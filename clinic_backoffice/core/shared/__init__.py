"""
Shared utilities module

Domain-agnostic helpers used across the application.
"""

from .logger import JSONFormatter, configure_logging, setup_logging

__all__ = [
    "JSONFormatter",
    "configure_logging",
    "setup_logging",
]
