"""
Base value object and status enum for the scheduling domain.

Value objects are immutable and compared by value. Subclasses validate
their invariants in ``_validate`` and raise ValidationException.
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class ValueObject(ABC):
    """Frozen dataclass that validates itself after construction."""

    def __post_init__(self):
        self._validate()

    def _validate(self) -> None:
        pass


class StatusEnum(str, Enum):
    """String enum whose values are persisted verbatim."""
