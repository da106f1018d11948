"""Retrieve the managers in a classic league."""

from __future__ import annotations

import logging
from typing import Any

from ..types import LeagueManager
from .utils import FPLClient, FPLRequestError

logger = logging.getLogger(__name__)

MAX_STANDINGS_PAGES = 20


class LeagueNotFoundError(FPLRequestError):
    """Raised when the FPL API does not know the requested league."""

    def __init__(self, league_id: int) -> None:
        super().__init__(f"League {league_id} not found. Please check the League ID.")
        self.league_id = league_id


def parse_standings(payload: dict[str, Any]) -> list[LeagueManager]:
    results = (payload.get("standings") or {}).get("results") or []
    return [
        LeagueManager(
            manager_id=row["entry"],
            manager_name=row.get("player_name", ""),
            team_name=row.get("entry_name", ""),
            total_points=row.get("total", 0),
        )
        for row in results
    ]


async def fetch_league_standings(fpl: FPLClient, league_id: int) -> list[LeagueManager]:
    """Return every manager in the league, following standings pagination."""
    managers: list[LeagueManager] = []
    for page in range(1, MAX_STANDINGS_PAGES + 1):
        path = f"leagues-classic/{league_id}/standings/"
        if page > 1:
            path = f"{path}?page_standings={page}"
        payload = await fpl.get_json(path, tolerate_missing=True)
        if payload is None or payload.get("detail") == "Not found.":
            if page == 1:
                raise LeagueNotFoundError(league_id)
            break

        managers.extend(parse_standings(payload))
        if not (payload.get("standings") or {}).get("has_next", False):
            break
    else:
        logger.warning(
            "League %s has more than %d standings pages; truncating",
            league_id,
            MAX_STANDINGS_PAGES,
        )

    logger.info("League %s: %d managers", league_id, len(managers))
    return managers


__all__ = ["LeagueNotFoundError", "fetch_league_standings", "parse_standings"]
