"""Database layer for flexcreek."""

from .engine import Database, Querier, Transaction, get_db_path, init_db, transaction
from .log_codec import decode_log, encode_log
from .movement_instances import MovementInstanceRepository
from .repositories import MovementRepository, MuscleRepository, UserRepository
from .workouts import WorkoutRepository

__all__ = [
    "Database",
    "decode_log",
    "encode_log",
    "get_db_path",
    "init_db",
    "MovementInstanceRepository",
    "MovementRepository",
    "MuscleRepository",
    "Querier",
    "transaction",
    "Transaction",
    "UserRepository",
    "WorkoutRepository",
]
