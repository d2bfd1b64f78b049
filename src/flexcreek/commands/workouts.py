"""Workout browsing commands."""

import click

from ..db import WorkoutRepository, get_db_path
from ..errors import NotFoundError
from ..models import MovementInstance
from .base import async_command, echo_error, echo_info, echo_success, ensure_initialized, format_table


def _describe_log(instance: MovementInstance) -> str:
    """One-line summary of an instance's log."""
    if instance.strength is not None:
        return ", ".join(f"{s.reps}x{s.weight:g}" for s in instance.strength.sets)
    if instance.cardio is not None:
        parts = []
        if instance.cardio.distance is not None:
            parts.append(f"{instance.cardio.distance:g} distance")
        if instance.cardio.duration is not None:
            parts.append(str(instance.cardio.duration))
        return ", ".join(parts)
    if instance.amrap is not None:
        return f"{instance.amrap.rounds_completed} rounds + {instance.amrap.extra_reps} reps"
    if instance.emom is not None:
        return f"{instance.emom.work_per_minute} for {instance.emom.duration}"
    return "-"


@click.group()
@click.pass_context
def workouts(ctx):
    """Browse and delete workouts."""
    ensure_initialized(ctx)


@workouts.command(name="list")
@click.option("--user", "user_id", type=int, required=True, help="User ID")
@async_command
async def list_workouts(user_id: int):
    """List a user's workouts, most recent first."""
    repo = WorkoutRepository(get_db_path())
    all_workouts = await repo.list_by_user(user_id)

    if not all_workouts:
        echo_info(f"No workouts found for user {user_id}")
        return

    rows = [
        [
            str(w.id),
            w.date.isoformat(),
            str(len(w.movement_instances)),
            str(w.duration),
            w.notes[:30] + "..." if len(w.notes) > 30 else w.notes,
        ]
        for w in all_workouts
    ]
    click.echo(format_table(["ID", "Date", "Movements", "Duration", "Notes"], rows))
    click.echo()
    click.echo(f"Total: {len(all_workouts)} workout(s)")


@workouts.command()
@click.argument("workout_id", type=int)
@click.pass_context
@async_command
async def show(ctx, workout_id: int):
    """Show a workout and its movements."""
    repo = WorkoutRepository(get_db_path())
    try:
        workout = await repo.get(workout_id)
    except NotFoundError:
        echo_error(f"Workout ID {workout_id} not found")
        ctx.exit(1)

    click.echo(f"Workout {workout.id} on {workout.date.isoformat()} (user {workout.user_id})")
    if workout.notes:
        click.echo(f"Notes: {workout.notes}")
    click.echo(f"Duration: {workout.duration}")
    click.echo()

    rows = [
        [
            mi.movement.name if mi.movement else "?",
            str(mi.rpe) if mi.rpe is not None else "-",
            _describe_log(mi),
        ]
        for mi in workout.movement_instances
    ]
    if rows:
        click.echo(format_table(["Movement", "RPE", "Log"], rows))
    else:
        echo_info("No movements recorded")


@workouts.command()
@click.argument("workout_id", type=int)
@click.confirmation_option(prompt="Delete this workout and all of its movements?")
@click.pass_context
@async_command
async def delete(ctx, workout_id: int):
    """Delete a workout."""
    repo = WorkoutRepository(get_db_path())
    try:
        await repo.delete(workout_id)
    except NotFoundError:
        echo_error(f"Workout ID {workout_id} not found")
        ctx.exit(1)
    echo_success(f"Deleted workout {workout_id}")
