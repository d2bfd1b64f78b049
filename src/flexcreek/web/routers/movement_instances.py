"""Movement instance routes."""

from fastapi import APIRouter, Body, Request, Response

from ...db.movement_instances import MovementInstanceRepository
from ...errors import ValidationError
from ...models.movement_instance import MovementInstance
from .common import get_db_path, parse_body

router = APIRouter(prefix="/api/movement-instances", tags=["movement-instances"])


@router.get("")
async def list_movement_instances(
    request: Request,
    workout_id: int | None = None,
    user_id: int | None = None,
    movement_id: int | None = None,
):
    """List instances of a workout, of a user, or of one movement for a user."""
    repo = MovementInstanceRepository(get_db_path(request))
    if workout_id is not None:
        instances = await repo.list_by_workout(workout_id)
    elif user_id is not None and movement_id is not None:
        instances = await repo.list_by_movement_for_user(user_id, movement_id)
    elif user_id is not None:
        instances = await repo.list_by_user(user_id)
    else:
        raise ValidationError("One of workout_id or user_id is required")
    return [mi.to_dict() for mi in instances]


@router.post("", status_code=201)
async def create_movement_instance(request: Request, payload: dict = Body(...)):
    """Add a movement instance to an existing workout."""
    instance = parse_body(MovementInstance.from_dict, payload)
    instance_id = await MovementInstanceRepository(get_db_path(request)).create(instance)
    return {"id": instance_id}


@router.get("/{instance_id}")
async def get_movement_instance(request: Request, instance_id: int):
    """Get a movement instance by ID."""
    return (await MovementInstanceRepository(get_db_path(request)).get(instance_id)).to_dict()


@router.put("/{instance_id}")
async def update_movement_instance(request: Request, instance_id: int, payload: dict = Body(...)):
    """Replace a movement instance."""
    instance = parse_body(MovementInstance.from_dict, payload)
    instance.id = instance_id
    repo = MovementInstanceRepository(get_db_path(request))
    await repo.update(instance)
    return (await repo.get(instance_id)).to_dict()


@router.delete("/{instance_id}", status_code=204)
async def delete_movement_instance(request: Request, instance_id: int):
    """Delete a movement instance."""
    await MovementInstanceRepository(get_db_path(request)).delete(instance_id)
    return Response(status_code=204)
