"""Tests for the movement instance repository."""

from datetime import date, timedelta

import aiosqlite
import pytest

from flexcreek.db import MovementInstanceRepository, MovementRepository, Transaction, WorkoutRepository
from flexcreek.db.engine import connect
from flexcreek.errors import ConstraintViolation, NotFoundError, ValidationError
from flexcreek.models import (
    AmrapLog,
    CardioLog,
    EmomLog,
    Movement,
    MovementInstance,
    MovementType,
    StrengthLog,
    StrengthSet,
    Workout,
)


async def _workout(db_path, user_id: int, day: date = date(2024, 1, 1)) -> int:
    return await WorkoutRepository(db_path).create(Workout(user_id=user_id, date=day))


class TestCreate:
    """Tests for creating movement instances."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, db_path, seeded):
        """An instance reads back with its movement and decoded log."""
        repo = MovementInstanceRepository(db_path)
        workout_id = await _workout(db_path, seeded["user"])

        instance_id = await repo.create(
            MovementInstance(
                workout_id=workout_id,
                movement=Movement(id=seeded["squat"]),
                notes="felt heavy",
                rpe=9,
                strength=StrengthLog(sets=[StrengthSet(5, 225.0), StrengthSet(5, 235.0)]),
            )
        )

        fetched = await repo.get(instance_id)
        assert fetched.id == instance_id
        assert fetched.workout_id == workout_id
        assert fetched.movement.name == "Squat"
        assert fetched.movement.movement_type == MovementType.STRENGTH
        assert fetched.notes == "felt heavy"
        assert fetched.rpe == 9
        assert [s.weight for s in fetched.strength.sets] == [225.0, 235.0]
        assert fetched.cardio is None
        assert fetched.created_at is not None

    @pytest.mark.asyncio
    async def test_create_without_log(self, db_path, seeded, count_rows):
        """Instances without metrics store a NULL log and read back empty."""
        repo = MovementInstanceRepository(db_path)
        workout_id = await _workout(db_path, seeded["user"])

        instance_id = await repo.create(
            MovementInstance(workout_id=workout_id, movement=Movement(id=seeded["bench"]))
        )

        assert (await repo.get(instance_id)).log is None
        assert await count_rows(
            "SELECT COUNT(*) FROM movement_instances WHERE log_data IS NULL"
        ) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("movement", [None, Movement(name="Squat"), Movement(id=0)])
    async def test_create_requires_movement_id(self, db_path, movement):
        """A resolved movement id is mandatory."""
        repo = MovementInstanceRepository(db_path)

        with pytest.raises(ValidationError):
            await repo.create(MovementInstance(workout_id=1, movement=movement))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rpe", [0, 11, 7.5, True, "5"])
    async def test_create_rejects_bad_rpe(self, db_path, seeded, rpe):
        """RPE must be a whole number from 1 to 10."""
        repo = MovementInstanceRepository(db_path)

        with pytest.raises(ValidationError):
            await repo.create(
                MovementInstance(workout_id=1, movement=Movement(id=seeded["squat"]), rpe=rpe)
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "log",
        [
            EmomLog(work_per_minute="3 cleans"),
            CardioLog(distance=5.0),
            AmrapLog(rounds_completed=4),
        ],
    )
    async def test_create_rejects_log_for_other_movement_type(self, db_path, seeded, count_rows, log):
        """Only the variant matching the movement's type may be stored."""
        repo = MovementInstanceRepository(db_path)
        workout_id = await _workout(db_path, seeded["user"])
        instance = MovementInstance(workout_id=workout_id, movement=Movement(id=seeded["squat"]))
        instance.set_log(log)

        with pytest.raises(ValidationError):
            await repo.create(instance)

        assert await count_rows("SELECT COUNT(*) FROM movement_instances") == 0

    @pytest.mark.asyncio
    async def test_create_rejects_log_for_unknown_movement_type(self, db_path, seeded):
        """Movements of an unknown type cannot carry a log."""
        repo = MovementInstanceRepository(db_path)
        workout_id = await _workout(db_path, seeded["user"])
        movement_id = await MovementRepository(db_path).create(
            Movement(name="Flow", movement_type="mobility")
        )

        with pytest.raises(ValidationError):
            await repo.create(
                MovementInstance(
                    workout_id=workout_id,
                    movement=Movement(id=movement_id),
                    strength=StrengthLog(sets=[StrengthSet(5, 100.0)]),
                )
            )

        instance_id = await repo.create(
            MovementInstance(workout_id=workout_id, movement=Movement(id=movement_id))
        )
        assert (await repo.get(instance_id)).log is None

    @pytest.mark.asyncio
    async def test_create_with_unknown_workout_violates_constraint(self, db_path, seeded):
        """The workout foreign key is enforced."""
        repo = MovementInstanceRepository(db_path)

        with pytest.raises(ConstraintViolation) as exc_info:
            await repo.create(MovementInstance(workout_id=999, movement=Movement(id=seeded["squat"])))

        assert exc_info.value.operation == "create movement instance"
        assert "INSERT" not in str(exc_info.value)


class TestRead:
    """Tests for fetching and listing movement instances."""

    @pytest.mark.asyncio
    async def test_get_missing(self, db_path):
        """Missing ids raise NotFoundError."""
        with pytest.raises(NotFoundError):
            await MovementInstanceRepository(db_path).get(42)

    @pytest.mark.asyncio
    async def test_list_by_workout(self, db_path, seeded):
        """Instances of a workout come back in insertion order."""
        repo = MovementInstanceRepository(db_path)
        workout_id = await _workout(db_path, seeded["user"])
        other_id = await _workout(db_path, seeded["user"])

        first = await repo.create(MovementInstance(workout_id=workout_id, movement=Movement(id=seeded["bench"])))
        second = await repo.create(MovementInstance(workout_id=workout_id, movement=Movement(id=seeded["squat"])))
        await repo.create(MovementInstance(workout_id=other_id, movement=Movement(id=seeded["squat"])))

        instances = await repo.list_by_workout(workout_id)
        assert [mi.id for mi in instances] == [first, second]
        assert await repo.list_by_workout(12345) == []

    @pytest.mark.asyncio
    async def test_list_by_movement_for_user(self, db_path, seeded):
        """Only the user's performances of the movement, newest first."""
        repo = MovementInstanceRepository(db_path)
        workout_id = await _workout(db_path, seeded["user"])

        older = await repo.create(MovementInstance(workout_id=workout_id, movement=Movement(id=seeded["squat"])))
        await repo.create(MovementInstance(workout_id=workout_id, movement=Movement(id=seeded["bench"])))
        newer = await repo.create(MovementInstance(workout_id=workout_id, movement=Movement(id=seeded["squat"])))

        instances = await repo.list_by_movement_for_user(seeded["user"], seeded["squat"])
        assert [mi.id for mi in instances] == [newer, older]
        assert await repo.list_by_movement_for_user(seeded["user"] + 1, seeded["squat"]) == []

    @pytest.mark.asyncio
    async def test_list_by_user(self, db_path, seeded):
        """Instances across all of a user's workouts."""
        repo = MovementInstanceRepository(db_path)
        first_workout = await _workout(db_path, seeded["user"], date(2024, 1, 1))
        second_workout = await _workout(db_path, seeded["user"], date(2024, 1, 2))

        await repo.create(MovementInstance(workout_id=first_workout, movement=Movement(id=seeded["squat"])))
        await repo.create(MovementInstance(workout_id=second_workout, movement=Movement(id=seeded["bench"])))

        instances = await repo.list_by_user(seeded["user"])
        assert {mi.workout_id for mi in instances} == {first_workout, second_workout}
        assert await repo.list_by_user(seeded["user"] + 1) == []

    @pytest.mark.asyncio
    async def test_unknown_movement_type_reads_without_log(self, db_path, seeded):
        """Rows whose movement type is unknown load with no log."""
        repo = MovementInstanceRepository(db_path)
        workout_id = await _workout(db_path, seeded["user"])
        async with aiosqlite.connect(db_path) as db:
            cursor = await db.execute(
                "INSERT INTO movements (name, movement_type) VALUES ('Flow', 'mobility')"
            )
            movement_id = cursor.lastrowid
            cursor = await db.execute(
                "INSERT INTO movement_instances (workout_id, movement_id, log_data) VALUES (?, ?, ?)",
                (workout_id, movement_id, '{"poses": 12}'),
            )
            instance_id = cursor.lastrowid
            await db.commit()

        fetched = await repo.get(instance_id)
        assert fetched.movement.movement_type == "mobility"
        assert fetched.log is None


class TestUpdateAndDelete:
    """Tests for updating and deleting movement instances."""

    @pytest.mark.asyncio
    async def test_update(self, db_path, seeded):
        """Update replaces the mutable fields, including the log variant."""
        repo = MovementInstanceRepository(db_path)
        run_id = await MovementRepository(db_path).create(Movement(name="Run", movement_type=MovementType.CARDIO))
        workout_id = await _workout(db_path, seeded["user"])
        instance_id = await repo.create(
            MovementInstance(
                workout_id=workout_id,
                movement=Movement(id=seeded["squat"]),
                strength=StrengthLog(sets=[StrengthSet(5, 100.0)]),
            )
        )

        instance = await repo.get(instance_id)
        instance.movement = Movement(id=run_id)
        instance.set_log(CardioLog(distance=3.1, duration=timedelta(minutes=24)))
        instance.notes = "switched to a run"
        instance.rpe = None
        await repo.update(instance)

        fetched = await repo.get(instance_id)
        assert fetched.movement.name == "Run"
        assert fetched.cardio == CardioLog(distance=3.1, duration=timedelta(minutes=24))
        assert fetched.strength is None
        assert fetched.notes == "switched to a run"
        assert fetched.rpe is None

    @pytest.mark.asyncio
    async def test_update_rejects_log_for_other_movement_type(self, db_path, seeded):
        """A mismatched variant is refused on update and the stored log is kept."""
        repo = MovementInstanceRepository(db_path)
        workout_id = await _workout(db_path, seeded["user"])
        instance_id = await repo.create(
            MovementInstance(
                workout_id=workout_id,
                movement=Movement(id=seeded["squat"]),
                strength=StrengthLog(sets=[StrengthSet(5, 225.0)]),
            )
        )

        instance = await repo.get(instance_id)
        instance.set_log(EmomLog(duration=timedelta(minutes=10), work_per_minute="3 cleans"))
        with pytest.raises(ValidationError):
            await repo.update(instance)

        fetched = await repo.get(instance_id)
        assert fetched.strength == StrengthLog(sets=[StrengthSet(5, 225.0)])
        assert fetched.emom is None

    @pytest.mark.asyncio
    async def test_update_missing(self, db_path, seeded):
        """Updating a row that does not exist raises NotFoundError."""
        repo = MovementInstanceRepository(db_path)

        with pytest.raises(NotFoundError):
            await repo.update(MovementInstance(id=99, workout_id=1, movement=Movement(id=seeded["squat"])))

        with pytest.raises(ValidationError):
            await repo.update(MovementInstance(id=99, workout_id=1))

    @pytest.mark.asyncio
    async def test_delete(self, db_path, seeded):
        """Delete removes the row; a second delete raises NotFoundError."""
        repo = MovementInstanceRepository(db_path)
        workout_id = await _workout(db_path, seeded["user"])
        instance_id = await repo.create(MovementInstance(workout_id=workout_id, movement=Movement(id=seeded["squat"])))

        await repo.delete(instance_id)

        with pytest.raises(NotFoundError):
            await repo.get(instance_id)
        with pytest.raises(NotFoundError):
            await repo.delete(instance_id)


class TestTransactionBinding:
    """Tests for running against a caller's transaction."""

    @pytest.mark.asyncio
    async def test_runs_inside_caller_transaction(self, db_path, seeded):
        """Bound to a transaction, writes are discarded when it rolls back."""
        workout_id = await _workout(db_path, seeded["user"])

        async with connect(db_path) as db:
            await db.execute("BEGIN")
            repo = MovementInstanceRepository(querier=Transaction(db))
            instance_id = await repo.create(
                MovementInstance(workout_id=workout_id, movement=Movement(id=seeded["squat"]))
            )
            assert (await repo.get(instance_id)).workout_id == workout_id
            await db.rollback()

        assert await MovementInstanceRepository(db_path).list_by_workout(workout_id) == []
