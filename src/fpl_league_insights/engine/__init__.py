"""Lineup resolution, gameweek scoring and what-if branch simulation."""

from .branches import (
    compute_what_if_branches,
    freeze_points,
    normalize_frozen_picks,
    simulate_branch,
    simulate_branches,
)
from .errors import MissingDataError, UnavailableFreezePointError
from .lineup import compute_effective_lineup, resolve_auto_subs
from .scoring import player_contributions, score_gameweek

__all__ = [
    "MissingDataError",
    "UnavailableFreezePointError",
    "compute_effective_lineup",
    "compute_what_if_branches",
    "freeze_points",
    "normalize_frozen_picks",
    "player_contributions",
    "resolve_auto_subs",
    "score_gameweek",
    "simulate_branch",
    "simulate_branches",
]
