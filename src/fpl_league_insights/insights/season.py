"""League season metrics: auto-sub points, transfer costs and player contributions.

All three metrics come from one shared fetch of live stats and every
manager's picks for every finished gameweek.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from functools import partial
from typing import Any

from ..config import Settings
from ..engine import compute_effective_lineup, player_contributions
from ..fpl.get_current_gameweek import (
    fetch_bootstrap,
    find_current_gameweek,
    finished_gameweeks,
)
from ..fpl.get_league_standings import fetch_league_standings
from ..fpl.get_live_stats import fetch_gameweek_stats
from ..fpl.get_manager_picks import fetch_squad
from ..fpl.utils import (
    FPL_TIMEZONE,
    FPLClient,
    create_fpl_session,
    map_position,
    safe_close_session,
)
from ..types import (
    AutoSubRow,
    Chip,
    LeagueManager,
    ManagerContributions,
    ManagerGameweek,
    PlayerContribution,
    SeasonDataPayload,
    StatsTable,
    TransferCostRow,
)

logger = logging.getLogger(__name__)

PlayerInfo = dict[int, tuple[str, int]]
EntriesByManager = Mapping[int, Mapping[int, ManagerGameweek | None]]


def build_player_info(bootstrap: dict[str, Any]) -> PlayerInfo:
    """Map player id to ``(web_name, element_type)``."""
    return {
        element["id"]: (element.get("web_name", ""), element.get("element_type", 0))
        for element in bootstrap.get("elements") or []
    }


def auto_sub_points(entry: ManagerGameweek, stats: StatsTable) -> int:
    """Points scored by the players the game itself subbed in."""
    if entry.history is None:
        return 0
    total = 0
    for sub in entry.history.automatic_subs:
        stat = stats.get(sub.player_in)
        if stat is not None:
            total += stat.points
    return total


def summarize_season(
    managers: Sequence[LeagueManager],
    gameweeks: Sequence[int],
    stats_by_gw: Mapping[int, StatsTable],
    entries: EntriesByManager,
    player_info: PlayerInfo,
    current_gameweek: int,
) -> SeasonDataPayload:
    auto_sub_totals: dict[int, int] = {}
    transfer_cost_totals: dict[int, int] = {}
    player_totals: dict[int, dict[int, int]] = {}

    for manager in managers:
        auto_subs = 0
        transfer_costs = 0
        totals: dict[int, int] = {}
        manager_entries = entries.get(manager.manager_id) or {}

        for gw in gameweeks:
            entry = manager_entries.get(gw)
            if entry is None:
                continue
            stats = stats_by_gw.get(gw) or {}

            auto_subs += auto_sub_points(entry, stats)
            if entry.history is not None:
                transfer_costs += entry.history.event_transfers_cost

            if not entry.picks:
                continue
            chip = entry.history.active_chip if entry.history is not None else Chip.NONE
            lineup = compute_effective_lineup(entry.picks, stats, chip)
            for player_id, points in player_contributions(lineup, stats).items():
                totals[player_id] = totals.get(player_id, 0) + points

        auto_sub_totals[manager.manager_id] = auto_subs
        transfer_cost_totals[manager.manager_id] = transfer_costs
        player_totals[manager.manager_id] = totals

    auto_sub_rows: list[AutoSubRow] = [
        {
            "managerName": manager.manager_name,
            "teamName": manager.team_name,
            "totalAutoSubPoints": auto_sub_totals[manager.manager_id],
        }
        for manager in managers
    ]
    auto_sub_rows.sort(key=lambda row: row["totalAutoSubPoints"], reverse=True)

    transfer_cost_rows: list[TransferCostRow] = [
        {
            "managerName": manager.manager_name,
            "teamName": manager.team_name,
            "totalTransferCost": transfer_cost_totals[manager.manager_id],
        }
        for manager in managers
    ]
    transfer_cost_rows.sort(key=lambda row: row["totalTransferCost"], reverse=True)

    contributions: list[ManagerContributions] = []
    for manager in managers:
        players: list[PlayerContribution] = []
        for player_id, points in player_totals[manager.manager_id].items():
            name, position = player_info.get(player_id, (f"Player {player_id}", 0))
            players.append(
                {
                    "id": player_id,
                    "name": name,
                    "position": position,
                    "positionName": map_position(position),
                    "points": points,
                }
            )
        players.sort(key=lambda player: player["points"], reverse=True)
        contributions.append(
            {
                "managerId": manager.manager_id,
                "managerName": manager.manager_name,
                "teamName": manager.team_name,
                "totalPoints": manager.total_points,
                "players": players,
            }
        )
    contributions.sort(key=lambda row: row["totalPoints"], reverse=True)

    return {
        "gameweek": current_gameweek,
        "autoSubs": auto_sub_rows,
        "transferCosts": transfer_cost_rows,
        "playerContributions": {"managers": contributions},
    }


async def _fetch_entries(
    fpl: FPLClient, managers: Sequence[LeagueManager], gameweeks: Sequence[int]
) -> dict[int, dict[int, ManagerGameweek | None]]:
    keys = [(manager.manager_id, gw) for manager in managers for gw in gameweeks]
    results = await fpl.gather(
        [partial(fetch_squad, fpl, manager_id, gw) for manager_id, gw in keys]
    )
    entries: dict[int, dict[int, ManagerGameweek | None]] = {}
    for (manager_id, gw), entry in zip(keys, results, strict=True):
        entries.setdefault(manager_id, {})[gw] = entry
    return entries


async def get_season_data(
    league_id: int,
    settings: Settings | None = None,
    reference_time: datetime | None = None,
) -> SeasonDataPayload:
    fpl, session = await create_fpl_session(settings)
    try:
        bootstrap, managers = await asyncio.gather(
            fetch_bootstrap(fpl), fetch_league_standings(fpl, league_id)
        )
        events = bootstrap.get("events") or []
        reference = reference_time or datetime.now(FPL_TIMEZONE)
        current_gw = int(find_current_gameweek(events, reference)["id"])
        gameweeks = finished_gameweeks(events)
        logger.info(
            "Season data for league %s: current GW%s, %d finished gameweeks",
            league_id,
            current_gw,
            len(gameweeks),
        )

        tables = await fpl.gather(
            [partial(fetch_gameweek_stats, fpl, gw) for gw in gameweeks]
        )
        stats_by_gw = {
            gw: table
            for gw, table in zip(gameweeks, tables, strict=True)
            if table is not None
        }
        entries = await _fetch_entries(fpl, managers, gameweeks)

        return summarize_season(
            managers,
            gameweeks,
            stats_by_gw,
            entries,
            build_player_info(bootstrap),
            current_gw,
        )
    finally:
        await safe_close_session(session)


__all__ = [
    "auto_sub_points",
    "build_player_info",
    "get_season_data",
    "summarize_season",
]
