"""Data models for flexcreek."""

from .logs import AmrapLog, CardioLog, EmomLog, MovementLog, StrengthLog, StrengthSet
from .movement import Movement, MovementType
from .movement_instance import MovementInstance
from .user import Muscle, User
from .workout import Workout

__all__ = [
    "AmrapLog",
    "CardioLog",
    "EmomLog",
    "Movement",
    "MovementInstance",
    "MovementLog",
    "MovementType",
    "Muscle",
    "StrengthLog",
    "StrengthSet",
    "User",
    "Workout",
]
