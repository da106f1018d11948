"""Retrieve per-player points and minutes for a gameweek."""

from __future__ import annotations

from typing import Any

from ..types import PlayerGameweekStat, StatsTable
from .utils import FPLClient


def parse_live_elements(payload: dict[str, Any]) -> StatsTable:
    table: StatsTable = {}
    for element in payload.get("elements") or []:
        stats = element.get("stats") or {}
        table[element["id"]] = PlayerGameweekStat(
            points=stats.get("total_points", 0),
            minutes=stats.get("minutes", 0),
        )
    return table


async def fetch_gameweek_stats(fpl: FPLClient, gameweek: int) -> StatsTable | None:
    """Stats keyed by player id, or ``None`` when the gameweek has no data yet."""
    payload = await fpl.get_json(f"event/{gameweek}/live/", tolerate_missing=True)
    if not isinstance(payload, dict):
        return None
    return parse_live_elements(payload)


__all__ = ["fetch_gameweek_stats", "parse_live_elements"]
