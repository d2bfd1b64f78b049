"""Movement routes."""

from fastapi import APIRouter, Body, Request, Response

from ...db.repositories import MovementRepository
from ...models.movement import Movement
from .common import get_db_path, parse_body

router = APIRouter(prefix="/api/movements", tags=["movements"])


@router.get("")
async def list_movements(request: Request):
    """List all movements."""
    repo = MovementRepository(get_db_path(request))
    return [m.to_dict() for m in await repo.list_all()]


@router.post("", status_code=201)
async def create_movement(request: Request, payload: dict = Body(...)):
    """Create a movement."""
    movement = parse_body(Movement.from_dict, payload)
    movement_id = await MovementRepository(get_db_path(request)).create(movement)
    return {"id": movement_id}


@router.get("/{movement_id}")
async def get_movement(request: Request, movement_id: int):
    """Get a movement by ID."""
    movement = await MovementRepository(get_db_path(request)).get(movement_id)
    return movement.to_dict()


@router.put("/{movement_id}")
async def update_movement(request: Request, movement_id: int, payload: dict = Body(...)):
    """Replace a movement's name, type and description."""
    movement = parse_body(Movement.from_dict, payload)
    movement.id = movement_id
    repo = MovementRepository(get_db_path(request))
    await repo.update(movement)
    return (await repo.get(movement_id)).to_dict()


@router.delete("/{movement_id}", status_code=204)
async def delete_movement(request: Request, movement_id: int):
    """Delete a movement."""
    await MovementRepository(get_db_path(request)).delete(movement_id)
    return Response(status_code=204)
