"""Data access for reference data: movements, users and muscles."""

import logging
from pathlib import Path

import aiosqlite

from ..errors import NotFoundError, ValidationError
from ..models.movement import Movement, MovementType
from ..models.user import Muscle, User
from .engine import Database, get_db_path, parse_timestamp, store_errors, transaction

logger = logging.getLogger(__name__)


class MovementRepository:
    """Repository for movement definitions."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()
        self.db = Database(self.db_path)

    async def create(self, movement: Movement) -> int:
        """Create a new movement."""
        if not movement.name:
            raise ValidationError("Movement name is required")

        with store_errors("create movement"):
            result = await self.db.execute(
                """
                INSERT INTO movements (name, movement_type, description)
                VALUES (?, ?, ?)
                """,
                (movement.name, movement.type_value, movement.description),
            )
        logger.debug(f"Created movement {result.lastrowid} ({movement.name})")
        return result.lastrowid

    async def get(self, movement_id: int) -> Movement:
        """Get a movement by ID."""
        with store_errors("get movement", movement_id):
            row = await self.db.query_row(
                "SELECT * FROM movements WHERE id = ?", (movement_id,)
            )
        if row is None:
            raise NotFoundError("movement", movement_id)
        return self._row_to_movement(row)

    async def get_by_name(self, name: str) -> Movement:
        """Get a movement by its unique name."""
        with store_errors("get movement by name"):
            row = await self.db.query_row(
                "SELECT * FROM movements WHERE name = ?", (name,)
            )
        if row is None:
            raise NotFoundError("movement", name)
        return self._row_to_movement(row)

    async def list_all(self) -> list[Movement]:
        """List all movements by name."""
        with store_errors("list movements"):
            rows = await self.db.query("SELECT * FROM movements ORDER BY name")
        return [self._row_to_movement(row) for row in rows]

    async def update(self, movement: Movement) -> None:
        """Update an existing movement.

        The type is fixed once instances reference the movement, since their
        stored logs are decoded by it.
        """
        if movement.id is None:
            raise ValidationError("Movement must have an ID to update")

        with store_errors("update movement", movement.id):
            async with transaction(self.db_path) as tx:
                current = await tx.query_row(
                    "SELECT movement_type FROM movements WHERE id = ?", (movement.id,)
                )
                if current is None:
                    raise NotFoundError("movement", movement.id)

                if current["movement_type"] != movement.type_value:
                    in_use = await tx.query_row(
                        "SELECT 1 FROM movement_instances WHERE movement_id = ? LIMIT 1",
                        (movement.id,),
                    )
                    if in_use is not None:
                        raise ValidationError(
                            f"Cannot change the type of movement {movement.id} "
                            f"from {current['movement_type']} to {movement.type_value}: "
                            "it has recorded instances"
                        )

                await tx.execute(
                    """
                    UPDATE movements SET
                        name = ?, movement_type = ?, description = ?,
                        updated_at = CURRENT_TIMESTAMP
                    WHERE id = ?
                    """,
                    (movement.name, movement.type_value, movement.description, movement.id),
                )

    async def delete(self, movement_id: int) -> None:
        """Delete a movement.

        Movements still referenced by instances cannot be deleted.
        """
        with store_errors("delete movement", movement_id):
            result = await self.db.execute(
                "DELETE FROM movements WHERE id = ?", (movement_id,)
            )
        if result.rowcount == 0:
            raise NotFoundError("movement", movement_id)

    def _row_to_movement(self, row: aiosqlite.Row) -> Movement:
        """Convert a database row to a Movement."""
        raw_type = row["movement_type"]
        return Movement(
            id=row["id"],
            name=row["name"],
            movement_type=MovementType.parse(raw_type) or raw_type,
            description=row["description"],
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
        )


class UserRepository:
    """Repository for users."""

    def __init__(self, db_path: Path | None = None):
        self.db = Database(db_path or get_db_path())

    async def create(self, user: User) -> int:
        """Create a new user."""
        if not user.email:
            raise ValidationError("User email is required")

        with store_errors("create user"):
            result = await self.db.execute(
                """
                INSERT INTO users (first_name, last_name, email, hashed_password)
                VALUES (?, ?, ?, ?)
                """,
                (user.first_name, user.last_name, user.email, user.hashed_pw),
            )
        logger.debug(f"Created user {result.lastrowid}")
        return result.lastrowid

    async def get(self, user_id: int) -> User:
        """Get a user by ID."""
        with store_errors("get user", user_id):
            row = await self.db.query_row("SELECT * FROM users WHERE id = ?", (user_id,))
        if row is None:
            raise NotFoundError("user", user_id)
        return self._row_to_user(row)

    async def get_by_email(self, email: str) -> User:
        """Get a user by email."""
        with store_errors("get user by email"):
            row = await self.db.query_row("SELECT * FROM users WHERE email = ?", (email,))
        if row is None:
            raise NotFoundError("user", email)
        return self._row_to_user(row)

    async def list_all(self) -> list[User]:
        """List all users."""
        with store_errors("list users"):
            rows = await self.db.query("SELECT * FROM users ORDER BY id")
        return [self._row_to_user(row) for row in rows]

    async def update(self, user: User) -> None:
        """Update an existing user."""
        if user.id is None:
            raise ValidationError("User must have an ID to update")

        with store_errors("update user", user.id):
            result = await self.db.execute(
                """
                UPDATE users SET
                    first_name = ?, last_name = ?, email = ?, hashed_password = ?,
                    updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
                """,
                (user.first_name, user.last_name, user.email, user.hashed_pw, user.id),
            )
        if result.rowcount == 0:
            raise NotFoundError("user", user.id)

    async def delete(self, user_id: int) -> None:
        """Delete a user along with their workouts."""
        with store_errors("delete user", user_id):
            result = await self.db.execute("DELETE FROM users WHERE id = ?", (user_id,))
        if result.rowcount == 0:
            raise NotFoundError("user", user_id)
        logger.info(f"Deleted user {user_id}")

    def _row_to_user(self, row: aiosqlite.Row) -> User:
        """Convert a database row to a User."""
        return User(
            id=row["id"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            email=row["email"],
            hashed_pw=row["hashed_password"],
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
        )


class MuscleRepository:
    """Repository for muscles."""

    def __init__(self, db_path: Path | None = None):
        self.db = Database(db_path or get_db_path())

    async def create(self, muscle: Muscle) -> int:
        """Create a new muscle."""
        with store_errors("create muscle"):
            result = await self.db.execute(
                "INSERT INTO muscles (name) VALUES (?)", (muscle.name,)
            )
        return result.lastrowid

    async def get(self, muscle_id: int) -> Muscle:
        """Get a muscle by ID."""
        with store_errors("get muscle", muscle_id):
            row = await self.db.query_row("SELECT * FROM muscles WHERE id = ?", (muscle_id,))
        if row is None:
            raise NotFoundError("muscle", muscle_id)
        return self._row_to_muscle(row)

    async def get_by_name(self, name: str) -> Muscle:
        """Get a muscle by name."""
        with store_errors("get muscle by name"):
            row = await self.db.query_row("SELECT * FROM muscles WHERE name = ?", (name,))
        if row is None:
            raise NotFoundError("muscle", name)
        return self._row_to_muscle(row)

    async def list_all(self) -> list[Muscle]:
        """List all muscles by name."""
        with store_errors("list muscles"):
            rows = await self.db.query("SELECT * FROM muscles ORDER BY name")
        return [self._row_to_muscle(row) for row in rows]

    async def delete(self, muscle_id: int) -> None:
        """Delete a muscle."""
        with store_errors("delete muscle", muscle_id):
            result = await self.db.execute("DELETE FROM muscles WHERE id = ?", (muscle_id,))
        if result.rowcount == 0:
            raise NotFoundError("muscle", muscle_id)

    def _row_to_muscle(self, row: aiosqlite.Row) -> Muscle:
        """Convert a database row to a Muscle."""
        return Muscle(
            id=row["id"],
            name=row["name"],
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
        )
