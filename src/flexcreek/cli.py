"""CLI entry point for flexcreek."""

import click

from .commands import init, movements, serve, workouts


@click.group()
@click.version_option(version="0.1.0", prog_name="flexcreek")
def main():
    """flexcreek: workout and movement tracking.

    Example usage:

        # Create the database
        flexcreek init

        # Define movements
        flexcreek movements add "Back Squat" --type strength

        # Browse workouts
        flexcreek workouts list --user 1
        flexcreek workouts show 3

        # Serve the JSON API
        flexcreek serve
    """
    pass


main.add_command(init)
main.add_command(movements)
main.add_command(serve)
main.add_command(workouts)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
