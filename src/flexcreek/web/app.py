"""FastAPI application for the flexcreek JSON API."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..db.engine import get_db_path, init_db
from ..errors import (
    ConstraintViolation,
    FlexCreekError,
    LogDecodeError,
    NotFoundError,
    StoreUnavailable,
    ValidationError,
)
from .routers import movement_instances, movements, muscles, workouts

logger = logging.getLogger(__name__)

# Most specific first; the first matching class wins.
ERROR_STATUS: list[tuple[type[FlexCreekError], int]] = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConstraintViolation, 409),
    (StoreUnavailable, 503),
    (LogDecodeError, 500),
]


def status_for(error: FlexCreekError) -> int:
    """HTTP status for a flexcreek error."""
    for error_cls, status in ERROR_STATUS:
        if isinstance(error, error_cls):
            return status
    return 500


async def handle_flexcreek_error(request: Request, exc: FlexCreekError) -> JSONResponse:
    """Render store errors as JSON with a matching status code."""
    status = status_for(exc)
    if status >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=status, content={"error": str(exc)})


def create_app(db_path: Path | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    db_path = db_path or get_db_path()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create the schema on startup if the database is new."""
        if not db_path.exists():
            await init_db(db_path)
        yield

    app = FastAPI(
        title="flexcreek",
        description="Workout and movement tracking API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.db_path = db_path

    app.add_exception_handler(FlexCreekError, handle_flexcreek_error)

    app.include_router(movements.router)
    app.include_router(muscles.router)
    app.include_router(workouts.router)
    app.include_router(movement_instances.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": "0.1.0"}

    return app
