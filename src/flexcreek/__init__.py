"""flexcreek: persistence core for fitness tracking."""

__version__ = "0.1.0"
