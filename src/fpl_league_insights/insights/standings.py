"""Live league standings for the current gameweek."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from functools import partial
from typing import Any

from ..config import Settings
from ..fpl.get_current_gameweek import fetch_bootstrap, find_current_gameweek
from ..fpl.get_league_standings import fetch_league_standings
from ..fpl.get_live_stats import fetch_gameweek_stats
from ..fpl.get_manager_picks import fetch_squad
from ..fpl.utils import (
    FPL_TIMEZONE,
    FPLClient,
    FPLRequestError,
    create_fpl_session,
    safe_close_session,
)
from ..types import LeagueManager, LiveStandingRow, Pick

logger = logging.getLogger(__name__)


def live_gameweek_points(picks: Iterable[Pick], live_points: Mapping[int, int]) -> int:
    return sum(live_points.get(pick.player_id, 0) * pick.multiplier for pick in picks)


def _fallback_row(manager: LeagueManager) -> LiveStandingRow:
    return {
        "managerId": manager.manager_id,
        "managerName": manager.manager_name,
        "teamName": manager.team_name,
        "livePoints": manager.total_points,
        "pointsThisWeek": 0,
        "lastGameweekTotalPoints": manager.total_points,
        "lastWeekPoints": manager.total_points,
    }


async def _manager_row(
    fpl: FPLClient,
    manager: LeagueManager,
    gameweek: int,
    live_points: Mapping[int, int],
) -> LiveStandingRow:
    try:
        current = await fetch_squad(fpl, manager.manager_id, gameweek)
    except FPLRequestError as exc:
        logger.warning(
            "Using league totals for manager %s: %s", manager.manager_id, exc
        )
        return _fallback_row(manager)
    if current is None:
        return _fallback_row(manager)

    history = current.history
    static_gw_points = history.points if history is not None else 0
    static_total = history.total_points if history is not None else manager.total_points

    previous_total = 0
    if gameweek > 1:
        try:
            previous = await fetch_squad(fpl, manager.manager_id, gameweek - 1)
        except FPLRequestError as exc:
            logger.warning(
                "Could not fetch GW%s for manager %s: %s",
                gameweek - 1,
                manager.manager_id,
                exc,
            )
            previous = None
        if previous is not None and previous.history is not None:
            previous_total = previous.history.total_points
        else:
            previous_total = static_total - static_gw_points

    live_gw_points = static_gw_points
    if live_points and current.picks:
        live_gw_points = live_gameweek_points(current.picks, live_points)

    return {
        "managerId": manager.manager_id,
        "managerName": manager.manager_name,
        "teamName": manager.team_name,
        "livePoints": static_total - static_gw_points + live_gw_points,
        "pointsThisWeek": live_gw_points,
        "lastGameweekTotalPoints": previous_total,
        "lastWeekPoints": manager.total_points,
    }


def _direction(change: int) -> str:
    if change > 0:
        return "up"
    if change < 0:
        return "down"
    return "same"


def rank_live_standings(rows: list[LiveStandingRow]) -> list[LiveStandingRow]:
    """Order by live points and compare against last gameweek's positions."""
    previous_order = sorted(
        rows, key=lambda row: row["lastGameweekTotalPoints"], reverse=True
    )
    previous_positions = {
        row["managerId"]: position
        for position, row in enumerate(previous_order, start=1)
    }

    ranked: list[LiveStandingRow] = []
    for position, row in enumerate(
        sorted(rows, key=lambda row: row["livePoints"], reverse=True), start=1
    ):
        last_position = previous_positions.get(row["managerId"], position)
        change = last_position - position
        result = row.copy()
        result["currentPosition"] = position
        result["lastGameweekPosition"] = last_position
        result["positionChange"] = change
        result["changeDirection"] = _direction(change)
        ranked.append(result)
    return ranked


async def _live_points(fpl: FPLClient, gameweek: int) -> dict[int, int]:
    try:
        table = await fetch_gameweek_stats(fpl, gameweek)
    except FPLRequestError as exc:
        logger.warning("Could not fetch live data, using static points: %s", exc)
        return {}
    if table is None:
        return {}
    return {player_id: stat.points for player_id, stat in table.items()}


async def get_live_standings(
    league_id: int,
    settings: Settings | None = None,
    reference_time: datetime | None = None,
) -> dict[str, Any]:
    fpl, session = await create_fpl_session(settings)
    try:
        bootstrap, managers = await asyncio.gather(
            fetch_bootstrap(fpl), fetch_league_standings(fpl, league_id)
        )
        reference = reference_time or datetime.now(FPL_TIMEZONE)
        events = bootstrap.get("events") or []
        gameweek = int(find_current_gameweek(events, reference)["id"])
        live_points = await _live_points(fpl, gameweek)
        logger.info(
            "Live standings for league %s GW%s (%d live players)",
            league_id,
            gameweek,
            len(live_points),
        )

        rows = await fpl.gather(
            [
                partial(_manager_row, fpl, manager, gameweek, live_points)
                for manager in managers
            ]
        )
        return {"gameweek": gameweek, "results": rank_live_standings(rows)}
    finally:
        await safe_close_session(session)


__all__ = ["get_live_standings", "live_gameweek_points", "rank_live_standings"]
