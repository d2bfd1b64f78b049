"""Database engine setup, query surfaces and transactions."""

import logging
import os
from collections.abc import AsyncIterator, Iterator, Sequence
from contextlib import asynccontextmanager, contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

import aiosqlite

from ..errors import ConstraintViolation, StoreUnavailable

logger = logging.getLogger(__name__)

# Default data directory
DATA_DIR = Path(__file__).parent.parent.parent.parent / "data"

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    first_name TEXT NOT NULL DEFAULT '',
    last_name TEXT NOT NULL DEFAULT '',
    email TEXT NOT NULL UNIQUE,
    hashed_password TEXT NOT NULL DEFAULT '',
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS muscles (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS movements (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    movement_type TEXT NOT NULL,
    description TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS workouts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    workout_date DATE NOT NULL,
    notes TEXT NOT NULL DEFAULT '',
    duration_seconds INTEGER NOT NULL DEFAULT 0,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS movement_instances (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    workout_id INTEGER NOT NULL,
    movement_id INTEGER NOT NULL,
    notes TEXT NOT NULL DEFAULT '',
    rpe INTEGER,
    log_data TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (workout_id) REFERENCES workouts(id) ON DELETE CASCADE,
    FOREIGN KEY (movement_id) REFERENCES movements(id)
);

CREATE INDEX IF NOT EXISTS idx_workouts_user_date
ON workouts(user_id, workout_date);

CREATE INDEX IF NOT EXISTS idx_movement_instances_workout
ON movement_instances(workout_id);

CREATE INDEX IF NOT EXISTS idx_movement_instances_movement
ON movement_instances(movement_id);
"""


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path.

    Resolution order: ``data_dir``, the ``FLEXCREEK_DATA_DIR`` environment
    variable, then the project's ``data/`` directory.
    """
    if data_dir is None:
        env_dir = os.environ.get("FLEXCREEK_DATA_DIR")
        data_dir = Path(env_dir) if env_dir else DATA_DIR
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / "flexcreek.db"


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a SQLite CURRENT_TIMESTAMP value."""
    return datetime.fromisoformat(value) if value else None


@contextmanager
def store_errors(operation: str, entity_id: int | None = None) -> Iterator[None]:
    """Translate sqlite errors raised inside the block into store errors."""
    try:
        yield
    except aiosqlite.IntegrityError as e:
        raise ConstraintViolation(operation, str(e), entity_id) from e
    except aiosqlite.Error as e:
        raise StoreUnavailable(operation, str(e), entity_id) from e


@asynccontextmanager
async def connect(db_path: Path) -> AsyncIterator[aiosqlite.Connection]:
    """Open a connection with row access by name and foreign keys enforced.

    The connection runs in autocommit mode; transactions are explicit.
    """
    db = await aiosqlite.connect(db_path, isolation_level=None)
    try:
        db.row_factory = aiosqlite.Row
        await db.execute("PRAGMA foreign_keys = ON")
        yield db
    finally:
        await db.close()


@dataclass
class ExecResult:
    """Outcome of a write statement."""

    lastrowid: int | None
    rowcount: int


class Querier(Protocol):
    """Statement surface shared by a plain connection and a transaction.

    Stores take a Querier so they can run standalone or inside a larger
    transaction owned by someone else.
    """

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecResult: ...

    async def query(self, sql: str, params: Sequence[Any] = ()) -> list[aiosqlite.Row]: ...

    async def query_row(
        self, sql: str, params: Sequence[Any] = ()
    ) -> aiosqlite.Row | None: ...


class Database:
    """Querier that opens a fresh autocommit connection for each statement."""

    def __init__(self, db_path: Path):
        self.db_path = db_path

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecResult:
        async with connect(self.db_path) as db:
            cursor = await db.execute(sql, params)
            return ExecResult(cursor.lastrowid, cursor.rowcount)

    async def query(self, sql: str, params: Sequence[Any] = ()) -> list[aiosqlite.Row]:
        async with connect(self.db_path) as db:
            cursor = await db.execute(sql, params)
            return list(await cursor.fetchall())

    async def query_row(
        self, sql: str, params: Sequence[Any] = ()
    ) -> aiosqlite.Row | None:
        async with connect(self.db_path) as db:
            cursor = await db.execute(sql, params)
            return await cursor.fetchone()


class Transaction:
    """Querier bound to a connection with an open transaction."""

    def __init__(self, db: aiosqlite.Connection):
        self._db = db

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecResult:
        cursor = await self._db.execute(sql, params)
        result = ExecResult(cursor.lastrowid, cursor.rowcount)
        await cursor.close()
        return result

    async def query(self, sql: str, params: Sequence[Any] = ()) -> list[aiosqlite.Row]:
        async with self._db.execute(sql, params) as cursor:
            return list(await cursor.fetchall())

    async def query_row(
        self, sql: str, params: Sequence[Any] = ()
    ) -> aiosqlite.Row | None:
        async with self._db.execute(sql, params) as cursor:
            return await cursor.fetchone()


@asynccontextmanager
async def transaction(db_path: Path) -> AsyncIterator[Transaction]:
    """Run the block in one transaction.

    Commits when the block exits normally. Any exception, including task
    cancellation, rolls back before propagating.
    """
    async with connect(db_path) as db:
        await db.execute("BEGIN")
        try:
            yield Transaction(db)
        except BaseException as e:
            logger.warning(f"Rolling back transaction: {type(e).__name__}: {e}")
            await db.rollback()
            raise
        await db.commit()


async def init_db(db_path: Path | None = None) -> None:
    """Initialize the database schema."""
    if db_path is None:
        db_path = get_db_path()

    with store_errors("initialize schema"):
        async with connect(db_path) as db:
            await db.executescript(SCHEMA)
    logger.info(f"Database schema ready at {db_path}")
