"""Movement instance model."""

from dataclasses import dataclass
from datetime import datetime

from .logs import AmrapLog, CardioLog, EmomLog, MovementLog, StrengthLog
from .movement import Movement, MovementType

def parse_rpe(value) -> int | None:
    """Coerce an RPE from request data to a whole number."""
    if value is None:
        return None
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValueError(f"RPE must be a whole number, got {value!r}")
    return int(value)


# Log fields in encode priority order, with the movement type that selects each.
LOG_FIELDS: tuple[tuple[str, MovementType, type], ...] = (
    ("strength", MovementType.STRENGTH, StrengthLog),
    ("cardio", MovementType.CARDIO, CardioLog),
    ("amrap", MovementType.AMRAP, AmrapLog),
    ("emom", MovementType.EMOM, EmomLog),
)


@dataclass
class MovementInstance:
    """One performance of a movement within a workout.

    At most one of the log fields is populated, and the legal one is the
    field matching ``movement.movement_type``.
    """

    movement: Movement | None = None
    workout_id: int | None = None
    notes: str = ""
    rpe: int | None = None  # relative perceived exertion (1-10)
    strength: StrengthLog | None = None
    cardio: CardioLog | None = None
    amrap: AmrapLog | None = None
    emom: EmomLog | None = None
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def log(self) -> MovementLog | None:
        """The populated log variant, if any."""
        for name, _, _ in LOG_FIELDS:
            value = getattr(self, name)
            if value is not None:
                return value
        return None

    def set_log(self, log: MovementLog | None) -> None:
        """Populate the field matching the log's variant and clear the rest."""
        for name, _, log_cls in LOG_FIELDS:
            setattr(self, name, log if isinstance(log, log_cls) else None)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = {
            "id": self.id,
            "workout_id": self.workout_id,
            "movement": self.movement.to_dict() if self.movement else None,
            "notes": self.notes,
            "rpe": self.rpe,
        }
        for name, _, _ in LOG_FIELDS:
            value = getattr(self, name)
            data[name] = value.to_dict() if value is not None else None
        data["created_at"] = self.created_at.isoformat() if self.created_at else None
        data["updated_at"] = self.updated_at.isoformat() if self.updated_at else None
        return data

    @classmethod
    def from_dict(cls, data: dict, id: int | None = None) -> "MovementInstance":
        """Create from dictionary."""
        movement = data.get("movement")
        if movement is None and data.get("movement_id") is not None:
            movement = {"id": data["movement_id"]}

        instance = cls(
            id=id if id is not None else data.get("id"),
            workout_id=data.get("workout_id"),
            movement=Movement.from_dict(movement) if movement else None,
            notes=data.get("notes") or "",
            rpe=parse_rpe(data.get("rpe")),
        )
        for name, _, log_cls in LOG_FIELDS:
            if data.get(name) is not None:
                setattr(instance, name, log_cls.from_dict(data[name]))
        return instance
