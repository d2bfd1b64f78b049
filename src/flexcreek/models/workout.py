"""Workout model."""

import datetime as dt
from dataclasses import dataclass, field

from .movement_instance import MovementInstance


def as_day(value: dt.date | dt.datetime | str) -> dt.date:
    """Truncate a date, datetime or ISO string to its calendar day."""
    if isinstance(value, str):
        value = dt.datetime.fromisoformat(value)
    if isinstance(value, dt.datetime):
        return value.date()
    return value


@dataclass
class Workout:
    """A dated training session aggregating movement instances.

    Instances keep their persisted order (instance id).
    """

    user_id: int
    date: dt.date = field(default_factory=dt.date.today)
    notes: str = ""
    duration: dt.timedelta = field(default_factory=dt.timedelta)
    movement_instances: list[MovementInstance] = field(default_factory=list)
    id: int | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None

    @property
    def duration_seconds(self) -> int:
        """Duration rounded down to whole seconds, as stored."""
        return int(self.duration.total_seconds())

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "date": self.date.isoformat(),
            "notes": self.notes,
            "duration": self.duration_seconds,
            "movement_instances": [mi.to_dict() for mi in self.movement_instances],
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict, id: int | None = None) -> "Workout":
        """Create from dictionary."""
        return cls(
            id=id if id is not None else data.get("id"),
            user_id=data["user_id"],
            date=as_day(data["date"]) if data.get("date") else dt.date.today(),
            notes=data.get("notes") or "",
            duration=dt.timedelta(seconds=data.get("duration") or 0),
            movement_instances=[
                MovementInstance.from_dict(mi)
                for mi in data.get("movement_instances") or []
            ],
        )
