"""Muscle routes."""

from fastapi import APIRouter, Body, Request, Response

from ...db.repositories import MuscleRepository
from ...models.user import Muscle
from .common import get_db_path, parse_body

router = APIRouter(prefix="/api/muscles", tags=["muscles"])


@router.get("")
async def list_muscles(request: Request):
    """List all muscles."""
    return [m.to_dict() for m in await MuscleRepository(get_db_path(request)).list_all()]


@router.post("", status_code=201)
async def create_muscle(request: Request, payload: dict = Body(...)):
    """Create a muscle."""
    muscle = parse_body(lambda data: Muscle(name=data["name"]), payload)
    return {"id": await MuscleRepository(get_db_path(request)).create(muscle)}


@router.get("/{muscle_id}")
async def get_muscle(request: Request, muscle_id: int):
    """Get a muscle by ID."""
    return (await MuscleRepository(get_db_path(request)).get(muscle_id)).to_dict()


@router.delete("/{muscle_id}", status_code=204)
async def delete_muscle(request: Request, muscle_id: int):
    """Delete a muscle."""
    await MuscleRepository(get_db_path(request)).delete(muscle_id)
    return Response(status_code=204)
