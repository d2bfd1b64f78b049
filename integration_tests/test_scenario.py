"""End-to-end scenario: seed movements, log a workout over the API, read it back.

Runs the FastAPI app against a real SQLite file and checks the stored rows
directly as well as through the API.
"""

import sqlite3
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from flexcreek.web import create_app


@pytest.fixture
def db_file():
    """A database file in a throwaway directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "scenario.db"


def _count(db_file: Path, sql: str) -> int:
    db = sqlite3.connect(db_file)
    try:
        return db.execute(sql).fetchone()[0]
    finally:
        db.close()


class TestWorkoutScenario:
    """Squat and bench press logged for user 7."""

    def test_log_and_fetch_workout(self, db_file):
        """The workout reads back with both lifts in order and correct weights."""
        with TestClient(create_app(db_file)) as client:
            squat = client.post("/api/movements", json={"name": "Squat", "movement_type": "strength"})
            bench = client.post("/api/movements", json={"name": "Bench Press", "movement_type": "strength"})
            assert squat.json()["id"] == 1
            assert bench.json()["id"] == 2

            db = sqlite3.connect(db_file)
            try:
                db.execute("INSERT INTO users (id, email) VALUES (7, 'lifter@example.com')")
                db.commit()
            finally:
                db.close()

            created = client.post(
                "/api/workouts",
                json={
                    "user_id": 7,
                    "date": "2024-09-14",
                    "movement_instances": [
                        {"movement_id": 1, "strength": {"sets": [{"reps": 5, "weight": 225}]}},
                        {"movement_id": 2, "strength": {"sets": [{"reps": 8, "weight": 135}]}},
                    ],
                },
            )
            workout_id = created.json()["id"]

            workout = client.get(f"/api/workouts/{workout_id}").json()
            instances = workout["movement_instances"]
            assert [mi["movement"]["name"] for mi in instances] == ["Squat", "Bench Press"]
            assert instances[0]["strength"]["sets"][0]["weight"] == 225
            assert instances[1]["strength"]["sets"][0]["weight"] == 135
            assert instances[1]["strength"]["sets"][0]["reps"] == 8

            assert client.get("/api/workouts/9999").status_code == 404

            assert client.delete(f"/api/workouts/{workout_id}").status_code == 204

        assert _count(db_file, "SELECT COUNT(*) FROM workouts") == 0
        assert _count(db_file, "SELECT COUNT(*) FROM movement_instances") == 0
        assert _count(db_file, "SELECT COUNT(*) FROM movements") == 2
