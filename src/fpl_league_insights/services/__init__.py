"""Service layer for interacting with external data sources."""

from . import fpl

__all__ = [
    "fpl",
]
