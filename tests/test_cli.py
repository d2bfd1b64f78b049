"""Tests for the command line interface."""

import pytest
from click.testing import CliRunner

from flexcreek.cli import main


@pytest.fixture
def runner(tmp_path, monkeypatch):
    """CLI runner with the data directory pointed at a temp dir."""
    monkeypatch.setenv("FLEXCREEK_DATA_DIR", str(tmp_path))
    return CliRunner()


class TestInit:
    """Tests for database initialization."""

    def test_requires_init(self, runner):
        """Commands refuse to run before the database exists."""
        result = runner.invoke(main, ["movements", "list"])

        assert result.exit_code == 1
        assert "flexcreek init" in result.output

    def test_init_and_movements(self, runner, tmp_path):
        """Init creates the database; movements can then be added and listed."""
        result = runner.invoke(main, ["init"])
        assert result.exit_code == 0
        assert (tmp_path / "flexcreek.db").exists()

        result = runner.invoke(main, ["movements", "add", "Back Squat", "--type", "strength"])
        assert result.exit_code == 0
        assert "Added movement Back Squat" in result.output

        result = runner.invoke(main, ["movements", "add", "Back Squat"])
        assert result.exit_code == 1
        assert "[ERROR]" in result.output

        result = runner.invoke(main, ["movements", "list"])
        assert "Back Squat" in result.output
        assert "strength" in result.output


class TestWorkoutCommands:
    """Tests for the workout commands."""

    def test_workouts_show_missing(self, runner):
        """Showing an unknown workout reports it and exits non-zero."""
        runner.invoke(main, ["init"])

        result = runner.invoke(main, ["workouts", "show", "12"])

        assert result.exit_code == 1
        assert "Workout ID 12 not found" in result.output

    def test_workouts_list_empty(self, runner):
        """Users without workouts get an informative message."""
        runner.invoke(main, ["init"])

        result = runner.invoke(main, ["workouts", "list", "--user", "1"])

        assert result.exit_code == 0
        assert "No workouts found for user 1" in result.output
