"""Shared fixtures: an in-memory FPL client and squad builders."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from fpl_league_insights import config
from fpl_league_insights.config import Settings
from fpl_league_insights.fpl.utils import FPLRequestError, batch_fetch
from fpl_league_insights.types import Pick, PlayerGameweekStat


class FakeClient:
    """Serves canned JSON keyed by endpoint path."""

    def __init__(self, payloads: dict[str, Any]) -> None:
        self.payloads = payloads
        self.settings = Settings(batch_size=3, batch_delay=0.0)
        self.requested: list[str] = []

    async def get_json(self, path: str, *, tolerate_missing: bool = False) -> Any:
        self.requested.append(path)
        if path not in self.payloads:
            if tolerate_missing:
                return None
            raise FPLRequestError(f"{path} returned HTTP 404")
        value = self.payloads[path]
        if isinstance(value, Exception):
            raise value
        return value

    async def gather(self, tasks):
        return await batch_fetch(tasks, self.settings.batch_size, 0.0)


@pytest.fixture
def make_client() -> Callable[[dict[str, Any]], FakeClient]:
    return FakeClient


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "_ENV_LOADED", True)
    for name in (
        "FPL_BASE_URL",
        "FPL_USER_AGENT",
        "FPL_REQUEST_TIMEOUT",
        "FPL_RETRY_ATTEMPTS",
        "FPL_RETRY_BASE_DELAY",
        "FPL_BATCH_SIZE",
        "FPL_BATCH_DELAY",
        "FPL_BRANCH_WORKERS",
    ):
        monkeypatch.delenv(name, raising=False)


def squad(
    base_id: int = 100,
    multipliers: dict[int, int] | None = None,
) -> list[Pick]:
    """Fifteen picks with player ids ``base_id + slot``; slot 1 is captain."""
    overrides = {1: 2, **(multipliers or {})}
    return [
        Pick(
            player_id=base_id + slot,
            slot_position=slot,
            multiplier=overrides.get(slot, 1 if slot <= 11 else 0),
        )
        for slot in range(1, 16)
    ]


def stats_for(
    picks: list[Pick],
    points: int = 2,
    minutes: int = 90,
    overrides: dict[int, tuple[int, int]] | None = None,
) -> dict[int, PlayerGameweekStat]:
    """Uniform stats per pick; ``overrides`` maps player id to (points, minutes)."""
    table = {
        pick.player_id: PlayerGameweekStat(points=points, minutes=minutes)
        for pick in picks
    }
    for player_id, (player_points, player_minutes) in (overrides or {}).items():
        table[player_id] = PlayerGameweekStat(
            points=player_points, minutes=player_minutes
        )
    return table


@pytest.fixture
def make_squad() -> Callable[..., list[Pick]]:
    return squad


@pytest.fixture
def make_stats() -> Callable[..., dict[int, PlayerGameweekStat]]:
    return stats_for
