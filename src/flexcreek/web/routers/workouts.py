"""Workout routes.

The caller's user id is resolved upstream; these routes take it as given.
"""

from datetime import date

from fastapi import APIRouter, Body, Request, Response

from ...db.workouts import WorkoutRepository
from ...errors import ValidationError
from ...models.workout import Workout
from .common import get_db_path, parse_body

router = APIRouter(prefix="/api/workouts", tags=["workouts"])


@router.get("")
async def list_workouts(
    request: Request,
    user_id: int,
    on: date | None = None,
    start: date | None = None,
    end: date | None = None,
):
    """List a user's workouts, optionally on one day or within a range."""
    repo = WorkoutRepository(get_db_path(request))
    if on is not None:
        workouts = await repo.list_by_date(user_id, on)
    elif start is not None or end is not None:
        if start is None or end is None:
            raise ValidationError("Both start and end are required for a date range")
        workouts = await repo.list_by_date_range(user_id, start, end)
    else:
        workouts = await repo.list_by_user(user_id)
    return [w.to_dict() for w in workouts]


@router.post("", status_code=201)
async def create_workout(request: Request, payload: dict = Body(...)):
    """Create a workout together with its movement instances."""
    workout = parse_body(Workout.from_dict, payload)
    workout_id = await WorkoutRepository(get_db_path(request)).create(workout)
    return {"id": workout_id}


@router.get("/{workout_id}")
async def get_workout(request: Request, workout_id: int):
    """Get a workout with its movement instances."""
    return (await WorkoutRepository(get_db_path(request)).get(workout_id)).to_dict()


@router.put("/{workout_id}")
async def update_workout(request: Request, workout_id: int, payload: dict = Body(...)):
    """Replace a workout, including its full set of movement instances."""
    workout = parse_body(Workout.from_dict, payload)
    workout.id = workout_id
    repo = WorkoutRepository(get_db_path(request))
    await repo.update(workout)
    return (await repo.get(workout_id)).to_dict()


@router.delete("/{workout_id}", status_code=204)
async def delete_workout(request: Request, workout_id: int):
    """Delete a workout and its movement instances."""
    await WorkoutRepository(get_db_path(request)).delete(workout_id)
    return Response(status_code=204)
