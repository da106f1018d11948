"""What-if report: how a manager would have fared without further transfers."""

from __future__ import annotations

import logging
from datetime import datetime
from functools import partial
from typing import cast

from ..config import Settings
from ..engine import compute_what_if_branches
from ..fpl.get_current_gameweek import get_current_gameweek_id
from ..fpl.get_live_stats import fetch_gameweek_stats
from ..fpl.get_manager_picks import fetch_squad, fetch_transfer_gameweeks
from ..fpl.utils import FPLClient, create_fpl_session, safe_close_session
from ..types import ActualPoint, Branch, BranchPayload, SeasonData, WhatIfPayload

logger = logging.getLogger(__name__)


async def load_season_data(
    fpl: FPLClient, manager_id: int, last_gameweek: int
) -> SeasonData:
    """Fetch picks, history, transfers and live stats for GW1..``last_gameweek``."""
    gameweeks = list(range(1, last_gameweek + 1))
    transfer_gameweeks = await fetch_transfer_gameweeks(fpl, manager_id)
    logger.info("Manager %s transfer gameweeks: %s", manager_id, transfer_gameweeks)

    entries = await fpl.gather(
        [partial(fetch_squad, fpl, manager_id, gw) for gw in gameweeks]
    )
    tables = await fpl.gather(
        [partial(fetch_gameweek_stats, fpl, gw) for gw in gameweeks]
    )

    season = SeasonData(
        last_gameweek=last_gameweek, transfer_gameweeks=transfer_gameweeks
    )
    for gw, entry, table in zip(gameweeks, entries, tables, strict=True):
        if entry is not None and entry.picks:
            season.picks_by_gw[gw] = entry.picks
        if entry is not None and entry.history is not None:
            season.history_by_gw[gw] = entry.history
        if table is not None:
            season.stats_by_gw[gw] = table

    logger.debug(
        "Loaded %d squads and %d stat tables for manager %s",
        len(season.picks_by_gw),
        len(season.stats_by_gw),
        manager_id,
    )
    return season


def actual_series(season: SeasonData) -> list[ActualPoint]:
    series: list[ActualPoint] = []
    for gw in range(1, season.last_gameweek + 1):
        history = season.history_by_gw.get(gw)
        series.append(
            {"gw": gw, "points": history.total_points if history is not None else None}
        )
    return series


def build_what_if_payload(
    manager_id: int,
    season: SeasonData,
    branches: list[Branch],
) -> WhatIfPayload:
    return {
        "managerId": manager_id,
        "currentGW": season.last_gameweek,
        "actual": actual_series(season),
        "branches": [cast("BranchPayload", branch.to_payload()) for branch in branches],
    }


async def get_what_if(
    manager_id: int,
    settings: Settings | None = None,
    reference_time: datetime | None = None,
) -> WhatIfPayload:
    fpl, session = await create_fpl_session(settings)
    try:
        current_gw = await get_current_gameweek_id(fpl, reference_time)
        logger.info("What-if for manager %s through GW%s", manager_id, current_gw)
        season = await load_season_data(fpl, manager_id, current_gw)
        branches = compute_what_if_branches(
            manager_id, season, max_workers=fpl.settings.branch_workers
        )
        return build_what_if_payload(manager_id, season, branches)
    finally:
        await safe_close_session(session)


__all__ = ["actual_series", "build_what_if_payload", "get_what_if", "load_season_data"]
