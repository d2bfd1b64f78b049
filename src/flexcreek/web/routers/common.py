"""Helpers shared by the API routers."""

from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from fastapi import Request

from ...errors import ValidationError

T = TypeVar("T")


def get_db_path(request: Request) -> Path:
    """Database path configured on the application."""
    return request.app.state.db_path


def parse_body(factory: Callable[[dict], T], payload: dict) -> T:
    """Build a model from a request body, reporting bad input as a ValidationError."""
    try:
        return factory(payload)
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid request body: {e!r}") from e
