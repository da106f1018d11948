"""FPL classic-league insights: season metrics and what-if transfer branches."""

from .cli import main

__all__ = ["main"]
