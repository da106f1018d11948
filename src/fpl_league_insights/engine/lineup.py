"""Effective lineup resolution after automatic substitutions."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from ..types import (
    BENCH_SLOTS,
    STARTING_SLOTS,
    Chip,
    EffectiveLineup,
    LineupEntry,
    Pick,
    PlayerGameweekStat,
)


def minutes_played(stats: Mapping[int, PlayerGameweekStat], player_id: int) -> int:
    stat = stats.get(player_id)
    return stat.minutes if stat is not None else 0


def split_squad(picks: Iterable[Pick]) -> tuple[list[Pick], list[Pick]]:
    """Return ``(starters, bench)``, each ordered by slot position.

    Bench order is substitution priority: slot 12 is tried first.
    """
    ordered = sorted(picks, key=lambda pick: pick.slot_position)
    starters = [pick for pick in ordered if pick.slot_position in STARTING_SLOTS]
    bench = [pick for pick in ordered if pick.slot_position in BENCH_SLOTS]
    return starters, bench


def _first_eligible_substitute(
    bench: list[Pick],
    stats: Mapping[int, PlayerGameweekStat],
    used: set[int],
) -> Pick | None:
    for candidate in bench:
        if candidate.player_id in used:
            continue
        if minutes_played(stats, candidate.player_id) > 0:
            return candidate
    return None


def resolve_auto_subs(
    picks: Iterable[Pick], stats: Mapping[int, PlayerGameweekStat]
) -> EffectiveLineup:
    """Swap each non-playing starter for the first unused bench player who played.

    The substitute inherits the starter's multiplier. When no bench player
    qualifies the starter stays in the lineup and scores whatever they scored.
    """
    starters, bench = split_squad(picks)
    used: set[int] = set()
    lineup: EffectiveLineup = []

    for starter in starters:
        if minutes_played(stats, starter.player_id) > 0:
            lineup.append(LineupEntry(starter.player_id, starter.multiplier))
            continue

        substitute = _first_eligible_substitute(bench, stats, used)
        if substitute is None:
            lineup.append(LineupEntry(starter.player_id, starter.multiplier))
            continue

        used.add(substitute.player_id)
        lineup.append(LineupEntry(substitute.player_id, starter.multiplier))

    return lineup


def compute_effective_lineup(
    picks: Iterable[Pick],
    stats: Mapping[int, PlayerGameweekStat],
    chip: Chip = Chip.NONE,
) -> EffectiveLineup:
    """Resolve who scored for a squad in one gameweek.

    Under bench boost every pick counts at its stored multiplier and no
    substitutions are made.
    """
    if chip is Chip.BENCH_BOOST:
        return [
            LineupEntry(pick.player_id, pick.multiplier)
            for pick in sorted(picks, key=lambda pick: pick.slot_position)
        ]
    return resolve_auto_subs(picks, stats)


__all__ = [
    "compute_effective_lineup",
    "minutes_played",
    "resolve_auto_subs",
    "split_squad",
]
