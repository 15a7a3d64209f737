"""
Base entity for the scheduling domain.

Entities carry an identity assigned by the database; two instances are the
same entity when their ids match, whatever their other attributes.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Generic, TypeVar

TId = TypeVar("TId")


@dataclass
class Entity(ABC, Generic[TId]):
    """
    Base class for persisted domain objects.

    ``id`` stays None until the repository stores the entity.
    """

    id: TId | None = field(default=None)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity) or self.id is None or other.id is None:
            return False
        return type(self) is type(other) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id) if self.id is not None else id(self)

    def touch(self) -> None:
        """Mark the entity as modified now."""
        self.updated_at = datetime.now(UTC)
