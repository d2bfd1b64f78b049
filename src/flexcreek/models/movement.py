"""Movement definitions."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class MovementType(str, Enum):
    """Performance classification of a movement.

    The type decides which log variant an instance of the movement carries.
    """

    STRENGTH = "strength"
    CARDIO = "cardio"
    AMRAP = "amrap"
    EMOM = "emom"

    @classmethod
    def parse(cls, value: "MovementType | str | None") -> "MovementType | None":
        """Return the matching member, or None for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass
class Movement:
    """A named, reusable exercise definition, e.g. a kettlebell swing."""

    name: str = ""
    movement_type: MovementType | str = MovementType.STRENGTH
    description: str | None = None
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def type_value(self) -> str:
        """The movement type as stored in the database."""
        if isinstance(self.movement_type, MovementType):
            return self.movement_type.value
        return self.movement_type

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "movement_type": self.type_value,
            "description": self.description,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict, id: int | None = None) -> "Movement":
        """Create from dictionary.

        Unknown movement types are kept as plain strings so the taxonomy
        can grow without breaking stored rows.
        """
        raw_type = data.get("movement_type", MovementType.STRENGTH.value)
        return cls(
            id=id if id is not None else data.get("id"),
            name=data.get("name", ""),
            movement_type=MovementType.parse(raw_type) or raw_type,
            description=data.get("description"),
        )
