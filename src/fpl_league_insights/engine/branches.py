"""Counterfactual "no more transfers" branches for a manager's season."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor

from ..types import (
    Branch,
    BranchPoint,
    Chip,
    ManagerGameweekHistory,
    Pick,
    SeasonData,
    StatsTable,
)
from .errors import MissingDataError, UnavailableFreezePointError
from .lineup import compute_effective_lineup
from .scoring import score_gameweek

logger = logging.getLogger(__name__)


def freeze_points(
    transfer_gameweeks: Iterable[int],
    history_by_gw: Mapping[int, ManagerGameweekHistory],
) -> list[int]:
    """GW1 plus every transfer gameweek, minus free-hit gameweeks, ascending."""
    free_hits = {
        gw
        for gw, history in history_by_gw.items()
        if history.active_chip is Chip.FREE_HIT
    }
    candidates = {1, *(gw for gw in transfer_gameweeks if gw >= 1)}
    return sorted(candidates - free_hits)


def normalize_frozen_picks(picks: Sequence[Pick]) -> list[Pick]:
    """Strip one-week chip effects: triple captain drops to x2, the bench to x0."""
    normalized: list[Pick] = []
    for pick in picks:
        if pick.is_bench:
            multiplier = 0
        elif pick.multiplier == 3:
            multiplier = 2
        else:
            multiplier = pick.multiplier
        normalized.append(pick.model_copy(update={"multiplier": multiplier}))
    return normalized


def _frozen_picks(season: SeasonData, freeze_gw: int) -> list[Pick]:
    picks = season.picks_by_gw.get(freeze_gw)
    if not picks:
        raise UnavailableFreezePointError(freeze_gw)
    return picks


def _stats_for(season: SeasonData, gw: int) -> StatsTable:
    stats = season.stats_by_gw.get(gw)
    if stats is None:
        raise MissingDataError("stats", gw)
    return stats


def _history_for(season: SeasonData, gw: int) -> ManagerGameweekHistory:
    history = season.history_by_gw.get(gw)
    if history is None:
        raise MissingDataError("history", gw)
    return history


def chip_for(season: SeasonData, gw: int) -> Chip:
    try:
        return _history_for(season, gw).active_chip
    except MissingDataError:
        return Chip.NONE


def base_points(season: SeasonData, freeze_gw: int) -> int:
    """The manager's real total going into ``freeze_gw``."""
    if freeze_gw <= 1:
        return 0
    try:
        return _history_for(season, freeze_gw - 1).total_points
    except MissingDataError as exc:
        logger.debug("%s; branch GW%s starts from 0", exc, freeze_gw)
        return 0


def simulate_branch(freeze_gw: int, season: SeasonData) -> Branch | None:
    """Replay the squad held at ``freeze_gw`` through ``season.last_gameweek``.

    Returns ``None`` when the frozen squad itself is unavailable.
    """
    try:
        frozen = _frozen_picks(season, freeze_gw)
    except UnavailableFreezePointError as exc:
        logger.info("Skipping freeze point: %s", exc)
        return None

    normalized = normalize_frozen_picks(frozen)
    freeze_chip = chip_for(season, freeze_gw)
    running_total = base_points(season, freeze_gw)
    data: list[BranchPoint] = []

    for gw in range(freeze_gw, season.last_gameweek + 1):
        try:
            stats = _stats_for(season, gw)
        except MissingDataError as exc:
            logger.debug("%s; carrying GW%s branch total forward", exc, freeze_gw)
        else:
            if gw == freeze_gw:
                lineup = compute_effective_lineup(frozen, stats, freeze_chip)
            else:
                lineup = compute_effective_lineup(normalized, stats)
            running_total += score_gameweek(lineup, stats)
        data.append(BranchPoint(gw=gw, points=running_total))

    return Branch(freeze_gw=freeze_gw, label=f"GW{freeze_gw} freeze", data=tuple(data))


def simulate_branches(
    points: Sequence[int],
    season: SeasonData,
    max_workers: int | None = None,
) -> list[Branch]:
    """Simulate every freeze point, returning branches in freeze-point order."""
    if max_workers and max_workers > 1 and len(points) > 1:
        with ThreadPoolExecutor(max_workers=min(max_workers, len(points))) as executor:
            results = list(executor.map(lambda gw: simulate_branch(gw, season), points))
    else:
        results = [simulate_branch(gw, season) for gw in points]
    return [branch for branch in results if branch is not None]


def compute_what_if_branches(
    manager_id: int,
    season: SeasonData,
    max_workers: int | None = None,
) -> list[Branch]:
    points = freeze_points(season.transfer_gameweeks, season.history_by_gw)
    logger.info("Manager %s freeze points: %s", manager_id, points)
    branches = simulate_branches(points, season, max_workers=max_workers)
    logger.info("Manager %s: computed %d branches", manager_id, len(branches))
    return branches


__all__ = [
    "base_points",
    "chip_for",
    "compute_what_if_branches",
    "freeze_points",
    "normalize_frozen_picks",
    "simulate_branch",
    "simulate_branches",
]
