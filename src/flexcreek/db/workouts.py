"""Data access for workouts and their movement instances.

Writes touching a workout and its instances run in one transaction. Reads
use a single LEFT JOIN across workouts, movement_instances and movements,
fanning each workout out over one row per instance, and fold the rows back
into workouts here.

Deleting a workout removes its instances explicitly inside the same
transaction. The schema also declares ON DELETE CASCADE, but the store does
not depend on foreign-key enforcement being active.
"""

import datetime as dt
import logging
from collections.abc import Iterable
from pathlib import Path

import aiosqlite

from ..errors import NotFoundError, ValidationError
from ..models.workout import Workout, as_day
from .engine import Database, Transaction, get_db_path, parse_timestamp, store_errors, transaction
from .movement_instances import INSTANCE_COLUMNS, MovementInstanceRepository, row_to_instance

logger = logging.getLogger(__name__)

_SELECT_WORKOUTS = f"""
    SELECT
        w.id AS w_id, w.user_id AS w_user_id, w.workout_date AS w_workout_date,
        w.notes AS w_notes, w.duration_seconds AS w_duration_seconds,
        w.created_at AS w_created_at, w.updated_at AS w_updated_at,
        {INSTANCE_COLUMNS}
    FROM workouts w
    LEFT JOIN movement_instances mi ON mi.workout_id = w.id
    LEFT JOIN movements m ON mi.movement_id = m.id
"""

_ORDER_WORKOUTS = "ORDER BY w.workout_date DESC, w.id DESC, mi.id"


def _row_to_workout(row: aiosqlite.Row) -> Workout:
    """Build a workout, without instances, from the ``w_`` columns."""
    return Workout(
        id=row["w_id"],
        user_id=row["w_user_id"],
        date=as_day(row["w_workout_date"]),
        notes=row["w_notes"] or "",
        duration=dt.timedelta(seconds=row["w_duration_seconds"] or 0),
        created_at=parse_timestamp(row["w_created_at"]),
        updated_at=parse_timestamp(row["w_updated_at"]),
    )


def assemble_workouts(rows: Iterable[aiosqlite.Row]) -> list[Workout]:
    """Fold joined rows into workouts.

    Workouts come out in the order their id is first seen; instances keep
    row order. A row with a NULL instance id is a workout with no
    instances and contributes no instance.
    """
    workouts: dict[int, Workout] = {}
    seen: list[int] = []

    for row in rows:
        workout_id = row["w_id"]
        workout = workouts.get(workout_id)
        if workout is None:
            workout = _row_to_workout(row)
            workouts[workout_id] = workout
            seen.append(workout_id)

        if row["mi_id"] is not None:
            workout.movement_instances.append(row_to_instance(row))

    return [workouts[workout_id] for workout_id in seen]


class WorkoutRepository:
    """Repository for workouts.

    Owns the transaction boundary for multi-row writes and hands the open
    transaction to a MovementInstanceRepository for the child rows.
    """

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()
        self.db = Database(self.db_path)

    async def _insert_instances(self, tx: Transaction, workout: Workout, workout_id: int) -> None:
        instances = MovementInstanceRepository(querier=tx)
        for instance in workout.movement_instances:
            instance.workout_id = workout_id
            instance.id = await instances.create(instance)

    async def create(self, workout: Workout) -> int:
        """Create a workout and all of its movement instances atomically."""
        with store_errors("create workout"):
            async with transaction(self.db_path) as tx:
                result = await tx.execute(
                    """
                    INSERT INTO workouts (user_id, workout_date, notes, duration_seconds)
                    VALUES (?, ?, ?, ?)
                    """,
                    (
                        workout.user_id,
                        as_day(workout.date).isoformat(),
                        workout.notes,
                        workout.duration_seconds,
                    ),
                )
                workout_id = result.lastrowid
                await self._insert_instances(tx, workout, workout_id)

        logger.info(
            f"Created workout {workout_id} for user {workout.user_id} "
            f"with {len(workout.movement_instances)} movement instance(s)"
        )
        return workout_id

    async def get(self, workout_id: int) -> Workout:
        """Get a workout with its movement instances by ID."""
        with store_errors("get workout", workout_id):
            rows = await self.db.query(
                f"{_SELECT_WORKOUTS} WHERE w.id = ? ORDER BY mi.id", (workout_id,)
            )
        workouts = assemble_workouts(rows)
        if not workouts:
            raise NotFoundError("workout", workout_id)
        return workouts[0]

    async def list_by_user(self, user_id: int) -> list[Workout]:
        """List all workouts for a user, most recent first."""
        with store_errors("list workouts by user", user_id):
            rows = await self.db.query(
                f"{_SELECT_WORKOUTS} WHERE w.user_id = ? {_ORDER_WORKOUTS}", (user_id,)
            )
        return assemble_workouts(rows)

    async def list_by_date(self, user_id: int, day: dt.date | dt.datetime) -> list[Workout]:
        """List a user's workouts on one calendar day."""
        with store_errors("list workouts by date", user_id):
            rows = await self.db.query(
                f"{_SELECT_WORKOUTS} WHERE w.user_id = ? AND w.workout_date = ? {_ORDER_WORKOUTS}",
                (user_id, as_day(day).isoformat()),
            )
        return assemble_workouts(rows)

    async def list_by_date_range(
        self,
        user_id: int,
        start: dt.date | dt.datetime,
        end: dt.date | dt.datetime,
    ) -> list[Workout]:
        """List a user's workouts between two days, both inclusive."""
        with store_errors("list workouts by date range", user_id):
            rows = await self.db.query(
                f"""
                {_SELECT_WORKOUTS}
                WHERE w.user_id = ? AND w.workout_date BETWEEN ? AND ?
                {_ORDER_WORKOUTS}
                """,
                (user_id, as_day(start).isoformat(), as_day(end).isoformat()),
            )
        return assemble_workouts(rows)

    async def update(self, workout: Workout) -> None:
        """Update a workout and replace its whole instance collection.

        Instances missing from ``workout.movement_instances`` are deleted;
        the supplied ones are re-inserted with fresh ids.
        """
        if workout.id is None:
            raise ValidationError("Workout must have an ID to update")

        with store_errors("update workout", workout.id):
            async with transaction(self.db_path) as tx:
                result = await tx.execute(
                    """
                    UPDATE workouts SET
                        user_id = ?, workout_date = ?, notes = ?, duration_seconds = ?,
                        updated_at = CURRENT_TIMESTAMP
                    WHERE id = ?
                    """,
                    (
                        workout.user_id,
                        as_day(workout.date).isoformat(),
                        workout.notes,
                        workout.duration_seconds,
                        workout.id,
                    ),
                )
                if result.rowcount == 0:
                    raise NotFoundError("workout", workout.id)

                await tx.execute(
                    "DELETE FROM movement_instances WHERE workout_id = ?", (workout.id,)
                )
                await self._insert_instances(tx, workout, workout.id)

        logger.info(
            f"Updated workout {workout.id} "
            f"({len(workout.movement_instances)} movement instance(s))"
        )

    async def delete(self, workout_id: int) -> None:
        """Delete a workout and its movement instances."""
        with store_errors("delete workout", workout_id):
            async with transaction(self.db_path) as tx:
                await tx.execute(
                    "DELETE FROM movement_instances WHERE workout_id = ?", (workout_id,)
                )
                result = await tx.execute("DELETE FROM workouts WHERE id = ?", (workout_id,))
                if result.rowcount == 0:
                    raise NotFoundError("workout", workout_id)

        logger.info(f"Deleted workout {workout_id}")
