"""Data access for movement instances."""

import logging
from pathlib import Path

import aiosqlite

from ..errors import NotFoundError, ValidationError
from ..models.movement import Movement, MovementType
from ..models.movement_instance import LOG_FIELDS, MovementInstance
from .engine import Database, Querier, get_db_path, parse_timestamp, store_errors
from .log_codec import decode_log, encode_log

logger = logging.getLogger(__name__)

# Instance and movement columns, aliased so workout joins can reuse them.
INSTANCE_COLUMNS = """
    mi.id AS mi_id, mi.workout_id AS mi_workout_id, mi.notes AS mi_notes,
    mi.rpe AS mi_rpe, mi.log_data AS mi_log_data,
    mi.created_at AS mi_created_at, mi.updated_at AS mi_updated_at,
    m.id AS m_id, m.name AS m_name, m.movement_type AS m_movement_type,
    m.description AS m_description,
    m.created_at AS m_created_at, m.updated_at AS m_updated_at
"""

_SELECT_INSTANCES = f"""
    SELECT {INSTANCE_COLUMNS}
    FROM movement_instances mi
    JOIN movements m ON mi.movement_id = m.id
"""


def row_to_instance(row: aiosqlite.Row) -> MovementInstance:
    """Build an instance and its movement from ``INSTANCE_COLUMNS``.

    The log is decoded using the joined movement's type.
    """
    raw_type = row["m_movement_type"]
    movement = Movement(
        id=row["m_id"],
        name=row["m_name"],
        movement_type=MovementType.parse(raw_type) or raw_type,
        description=row["m_description"],
        created_at=parse_timestamp(row["m_created_at"]),
        updated_at=parse_timestamp(row["m_updated_at"]),
    )
    instance = MovementInstance(
        id=row["mi_id"],
        workout_id=row["mi_workout_id"],
        movement=movement,
        notes=row["mi_notes"] or "",
        rpe=row["mi_rpe"],
        created_at=parse_timestamp(row["mi_created_at"]),
        updated_at=parse_timestamp(row["mi_updated_at"]),
    )
    decode_log(instance, row["mi_log_data"], raw_type)
    return instance


def _validate(instance: MovementInstance) -> None:
    if instance.movement is None or not instance.movement.id:
        raise ValidationError("A movement with a valid ID is required for a movement instance")
    if instance.workout_id is None:
        raise ValidationError("A movement instance must belong to a workout")
    rpe = instance.rpe
    if rpe is not None and (not isinstance(rpe, int) or isinstance(rpe, bool) or not 1 <= rpe <= 10):
        raise ValidationError(f"RPE must be a whole number between 1 and 10, got {rpe!r}")


def _check_log_variant(instance: MovementInstance, movement_type: str) -> None:
    """Reject a log whose variant does not match the movement's type."""
    log = instance.log
    if log is None:
        return
    known_type = MovementType.parse(movement_type)
    expected = next((cls for _, t, cls in LOG_FIELDS if t is known_type), None)
    if expected is None or not isinstance(log, expected):
        raise ValidationError(
            f"A {type(log).__name__} cannot be recorded for {movement_type} movement "
            f"{instance.movement.id}"
        )


class MovementInstanceRepository:
    """Repository for movement instances.

    Runs against a plain database by default. Pass ``querier`` to run inside
    a transaction owned by the caller; the repository then never commits.
    """

    def __init__(self, db_path: Path | None = None, *, querier: Querier | None = None):
        if querier is None:
            querier = Database(db_path or get_db_path())
        self.db = querier

    async def _check_movement(self, instance: MovementInstance, operation: str) -> None:
        """Match the log against the referenced movement's stored type.

        An unknown movement id is left for the foreign key to reject.
        """
        with store_errors(operation, instance.id):
            row = await self.db.query_row(
                "SELECT movement_type FROM movements WHERE id = ?", (instance.movement.id,)
            )
        if row is not None:
            _check_log_variant(instance, row["movement_type"])

    async def create(self, instance: MovementInstance) -> int:
        """Create a movement instance and return its id."""
        _validate(instance)
        await self._check_movement(instance, "create movement instance")
        log_data, _ = encode_log(instance)

        with store_errors("create movement instance"):
            result = await self.db.execute(
                """
                INSERT INTO movement_instances
                (workout_id, movement_id, notes, rpe, log_data)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    instance.workout_id,
                    instance.movement.id,
                    instance.notes,
                    instance.rpe,
                    log_data,
                ),
            )
        logger.debug(
            f"Created movement instance {result.lastrowid} for workout {instance.workout_id}"
        )
        return result.lastrowid

    async def get(self, instance_id: int) -> MovementInstance:
        """Get a movement instance, with its movement, by ID."""
        with store_errors("get movement instance", instance_id):
            row = await self.db.query_row(
                f"{_SELECT_INSTANCES} WHERE mi.id = ?", (instance_id,)
            )
        if row is None:
            raise NotFoundError("movement instance", instance_id)
        return row_to_instance(row)

    async def list_by_workout(self, workout_id: int) -> list[MovementInstance]:
        """List the instances of a workout in insertion order."""
        with store_errors("list movement instances by workout", workout_id):
            rows = await self.db.query(
                f"{_SELECT_INSTANCES} WHERE mi.workout_id = ? ORDER BY mi.id",
                (workout_id,),
            )
        return [row_to_instance(row) for row in rows]

    async def list_by_movement_for_user(
        self, user_id: int, movement_id: int
    ) -> list[MovementInstance]:
        """List a user's performances of one movement, newest first."""
        with store_errors("list movement instances by movement", movement_id):
            rows = await self.db.query(
                f"""
                {_SELECT_INSTANCES}
                JOIN workouts w ON mi.workout_id = w.id
                WHERE m.id = ? AND w.user_id = ?
                ORDER BY mi.created_at DESC, mi.id DESC
                """,
                (movement_id, user_id),
            )
        return [row_to_instance(row) for row in rows]

    async def list_by_user(self, user_id: int) -> list[MovementInstance]:
        """List every movement instance across a user's workouts."""
        with store_errors("list movement instances by user", user_id):
            rows = await self.db.query(
                f"""
                {_SELECT_INSTANCES}
                JOIN workouts w ON mi.workout_id = w.id
                WHERE w.user_id = ?
                ORDER BY mi.id
                """,
                (user_id,),
            )
        return [row_to_instance(row) for row in rows]

    async def update(self, instance: MovementInstance) -> None:
        """Replace the mutable fields of an existing instance."""
        if instance.id is None:
            raise ValidationError("Movement instance must have an ID to update")
        _validate(instance)
        await self._check_movement(instance, "update movement instance")
        log_data, _ = encode_log(instance)

        with store_errors("update movement instance", instance.id):
            result = await self.db.execute(
                """
                UPDATE movement_instances SET
                    workout_id = ?, movement_id = ?, notes = ?, rpe = ?, log_data = ?,
                    updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
                """,
                (
                    instance.workout_id,
                    instance.movement.id,
                    instance.notes,
                    instance.rpe,
                    log_data,
                    instance.id,
                ),
            )
        if result.rowcount == 0:
            raise NotFoundError("movement instance", instance.id)
        logger.debug(f"Updated movement instance {instance.id}")

    async def delete(self, instance_id: int) -> None:
        """Delete a movement instance."""
        with store_errors("delete movement instance", instance_id):
            result = await self.db.execute(
                "DELETE FROM movement_instances WHERE id = ?", (instance_id,)
            )
        if result.rowcount == 0:
            raise NotFoundError("movement instance", instance_id)
        logger.debug(f"Deleted movement instance {instance_id}")
