"""JSON API for flexcreek."""

from .app import create_app

__all__ = ["create_app"]
