"""FPL API integration modules for gameweeks, leagues, picks and live stats."""

from .get_current_gameweek import find_current_gameweek, get_current_gameweek_id
from .get_league_standings import LeagueNotFoundError, fetch_league_standings
from .get_live_stats import fetch_gameweek_stats
from .get_manager_picks import fetch_squad, fetch_transfer_gameweeks
from .utils import FPLRequestError, RetryPolicy, batch_fetch, create_fpl_session

__all__ = [
    "FPLRequestError",
    "LeagueNotFoundError",
    "RetryPolicy",
    "batch_fetch",
    "create_fpl_session",
    "fetch_gameweek_stats",
    "fetch_league_standings",
    "fetch_squad",
    "fetch_transfer_gameweeks",
    "find_current_gameweek",
    "get_current_gameweek_id",
]
