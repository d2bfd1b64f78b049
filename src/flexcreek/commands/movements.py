"""Movement management commands."""

import click

from ..db import MovementRepository, get_db_path
from ..errors import FlexCreekError
from ..models import Movement, MovementType
from .base import async_command, echo_error, echo_info, echo_success, ensure_initialized, format_table


@click.group()
@click.pass_context
def movements(ctx):
    """Manage movement definitions."""
    ensure_initialized(ctx)


@movements.command(name="list")
@async_command
async def list_movements():
    """List all movements."""
    repo = MovementRepository(get_db_path())
    all_movements = await repo.list_all()

    if not all_movements:
        echo_info("No movements found. Add one with 'flexcreek movements add'")
        return

    rows = [
        [str(m.id), m.name, m.type_value, m.description or ""]
        for m in all_movements
    ]
    click.echo(format_table(["ID", "Name", "Type", "Description"], rows))


@movements.command()
@click.argument("name")
@click.option(
    "--type",
    "movement_type",
    type=click.Choice([t.value for t in MovementType]),
    default=MovementType.STRENGTH.value,
    show_default=True,
    help="Performance type, decides what gets logged per instance",
)
@click.option("--description", "-d", default=None, help="Optional description")
@click.pass_context
@async_command
async def add(ctx, name: str, movement_type: str, description: str | None):
    """Add a movement."""
    repo = MovementRepository(get_db_path())
    movement = Movement(
        name=name,
        movement_type=MovementType(movement_type),
        description=description,
    )
    try:
        movement_id = await repo.create(movement)
    except FlexCreekError as e:
        echo_error(str(e))
        ctx.exit(1)
    echo_success(f"Added movement {name} (ID: {movement_id})")


@movements.command()
@click.argument("movement_id", type=int)
@click.pass_context
@async_command
async def delete(ctx, movement_id: int):
    """Delete a movement that no workout references."""
    repo = MovementRepository(get_db_path())
    try:
        await repo.delete(movement_id)
    except FlexCreekError as e:
        echo_error(str(e))
        ctx.exit(1)
    echo_success(f"Deleted movement {movement_id}")
