"""League reports built on the FPL collaborators and the simulation engine."""

from .season import get_season_data, summarize_season
from .standings import get_live_standings, rank_live_standings
from .what_if import build_what_if_payload, get_what_if, load_season_data

__all__ = [
    "build_what_if_payload",
    "get_live_standings",
    "get_season_data",
    "get_what_if",
    "load_season_data",
    "rank_live_standings",
    "summarize_season",
]
