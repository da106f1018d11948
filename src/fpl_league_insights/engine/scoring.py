"""Gameweek scoring over an effective lineup."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from ..types import LineupEntry, PlayerGameweekStat


def player_points(stats: Mapping[int, PlayerGameweekStat], player_id: int) -> int:
    stat = stats.get(player_id)
    return stat.points if stat is not None else 0


def score_gameweek(
    lineup: Iterable[LineupEntry], stats: Mapping[int, PlayerGameweekStat]
) -> int:
    """Sum ``points * multiplier`` over the lineup; negative scores count."""
    return sum(
        player_points(stats, entry.player_id) * entry.multiplier for entry in lineup
    )


def player_contributions(
    lineup: Iterable[LineupEntry], stats: Mapping[int, PlayerGameweekStat]
) -> dict[int, int]:
    """Per-player contributions, keeping only strictly positive ones."""
    contributions: dict[int, int] = {}
    for entry in lineup:
        if entry.multiplier == 0:
            continue
        contributed = player_points(stats, entry.player_id) * entry.multiplier
        if contributed <= 0:
            continue
        contributions[entry.player_id] = (
            contributions.get(entry.player_id, 0) + contributed
        )
    return contributions


__all__ = ["player_contributions", "player_points", "score_gameweek"]
