"""Pytest configuration and fixtures."""

import tempfile
from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio

from flexcreek.db import init_db


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest_asyncio.fixture
async def db_path(temp_db_path):
    """A temporary database with the full schema."""
    await init_db(temp_db_path)
    return temp_db_path


@pytest_asyncio.fixture
async def seeded(db_path):
    """Seed one user and the Squat / Bench Press strength movements.

    Returns a dict of ids: ``user``, ``squat``, ``bench``.
    """
    async with aiosqlite.connect(db_path) as db:
        user = await db.execute("INSERT INTO users (email) VALUES ('test@user.com')")
        squat = await db.execute(
            "INSERT INTO movements (name, movement_type) VALUES ('Squat', 'strength')"
        )
        bench = await db.execute(
            "INSERT INTO movements (name, movement_type) VALUES ('Bench Press', 'strength')"
        )
        await db.commit()
        return {"user": user.lastrowid, "squat": squat.lastrowid, "bench": bench.lastrowid}


@pytest.fixture
def count_rows(temp_db_path):
    """Run a COUNT query directly against the test database."""

    async def _count(sql: str, params: tuple = ()) -> int:
        async with aiosqlite.connect(temp_db_path) as db:
            cursor = await db.execute(sql, params)
            (count,) = await cursor.fetchone()
            return count

    return _count
