"""Initialize database command."""

import click

from ..db import get_db_path, init_db
from .base import async_command, echo_info, echo_success


@click.command()
@async_command
async def init():
    """Initialize the flexcreek database.

    Creates the data directory and the SQLite schema. Safe to run again on
    an existing database.
    """
    db_path = get_db_path()

    echo_info(f"Initializing flexcreek database at {db_path}")
    await init_db(db_path)
    echo_success("Database initialized")

    click.echo()
    click.echo("Next steps:")
    click.echo('  flexcreek movements add "Back Squat" --type strength')
    click.echo("  flexcreek serve")
