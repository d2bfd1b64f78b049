"""CLI commands for flexcreek."""

from .init import init
from .movements import movements
from .serve import serve
from .workouts import workouts

__all__ = [
    "init",
    "movements",
    "serve",
    "workouts",
]
