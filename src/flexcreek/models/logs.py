"""Performance log variants recorded against a movement instance.

Exactly one variant applies to an instance, and which one is dictated by
the referenced movement's type:

    strength -> StrengthLog
    cardio   -> CardioLog
    amrap    -> AmrapLog
    emom     -> EmomLog
"""

from dataclasses import dataclass, field
from datetime import timedelta


def _seconds(value: timedelta | None) -> float | None:
    return value.total_seconds() if value is not None else None


def _duration(value: float | int | None) -> timedelta | None:
    return timedelta(seconds=value) if value is not None else None


def _require(data: dict, *keys: str) -> None:
    """Raise KeyError unless every key is present, even if its value is null."""
    missing = [key for key in keys if key not in data]
    if missing:
        raise KeyError(f"missing {', '.join(missing)}")


@dataclass
class StrengthSet:
    """A single set of a strength movement."""

    reps: int
    weight: float

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"reps": self.reps, "weight": self.weight}

    @classmethod
    def from_dict(cls, data: dict) -> "StrengthSet":
        """Create from dictionary."""
        return cls(reps=int(data["reps"]), weight=float(data["weight"]))


@dataclass
class StrengthLog:
    """Ordered sets of reps at a weight."""

    sets: list[StrengthSet] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"sets": [s.to_dict() for s in self.sets]}

    @classmethod
    def from_dict(cls, data: dict) -> "StrengthLog":
        """Create from dictionary."""
        _require(data, "sets")
        return cls(sets=[StrengthSet.from_dict(s) for s in data["sets"] or []])

    @property
    def total_volume(self) -> float:
        """Sum of reps x weight over all sets."""
        return sum(s.reps * s.weight for s in self.sets)


@dataclass
class CardioLog:
    """Distance and/or time for a cardio movement."""

    distance: float | None = None
    duration: timedelta | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary (duration in seconds)."""
        return {"distance": self.distance, "duration": _seconds(self.duration)}

    @classmethod
    def from_dict(cls, data: dict) -> "CardioLog":
        """Create from dictionary."""
        _require(data, "distance", "duration")
        distance = data["distance"]
        return cls(
            distance=float(distance) if distance is not None else None,
            duration=_duration(data["duration"]),
        )


@dataclass
class AmrapLog:
    """As many rounds/reps as possible within a time cap."""

    duration: timedelta | None = None
    rounds_completed: int = 0
    extra_reps: int = 0  # reps into the unfinished final round
    prescribed_work: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary (duration in seconds)."""
        return {
            "duration": _seconds(self.duration),
            "rounds_completed": self.rounds_completed,
            "extra_reps": self.extra_reps,
            "prescribed_work": self.prescribed_work,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AmrapLog":
        """Create from dictionary."""
        _require(data, "duration", "rounds_completed", "extra_reps", "prescribed_work")
        return cls(
            duration=_duration(data["duration"]),
            rounds_completed=int(data["rounds_completed"]),
            extra_reps=int(data["extra_reps"]),
            prescribed_work=data["prescribed_work"] or "",
        )


@dataclass
class EmomLog:
    """Every minute on the minute, for a total duration."""

    duration: timedelta | None = None
    work_per_minute: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary (duration in seconds)."""
        return {
            "duration": _seconds(self.duration),
            "work_per_minute": self.work_per_minute,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EmomLog":
        """Create from dictionary."""
        _require(data, "duration", "work_per_minute")
        return cls(
            duration=_duration(data["duration"]),
            work_per_minute=data["work_per_minute"] or "",
        )


MovementLog = StrengthLog | CardioLog | AmrapLog | EmomLog
