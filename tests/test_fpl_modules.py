"""Unit tests for the internal FPL helper modules."""

from __future__ import annotations

from datetime import UTC, datetime

import aiohttp
import pytest

from fpl_league_insights.fpl import get_current_gameweek as gw
from fpl_league_insights.fpl import utils
from fpl_league_insights.fpl.get_league_standings import (
    LeagueNotFoundError,
    fetch_league_standings,
)
from fpl_league_insights.fpl.get_live_stats import fetch_gameweek_stats
from fpl_league_insights.fpl.get_manager_picks import (
    fetch_squad,
    fetch_transfer_gameweeks,
)
from fpl_league_insights.types import Chip


class FakeResponse:
    def __init__(self, status: int, payload: object = None) -> None:
        self.status = status
        self.payload = payload

    async def __aenter__(self) -> FakeResponse:
        return self

    async def __aexit__(self, *_exc: object) -> bool:
        return False

    async def json(self) -> object:
        return self.payload


class FakeSession:
    def __init__(self, responses: list[object]) -> None:
        self.responses = list(responses)
        self.calls: list[str] = []

    def get(self, url: str) -> FakeResponse:
        self.calls.append(url)
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        assert isinstance(item, FakeResponse)
        return item


NO_WAIT = utils.RetryPolicy(max_attempts=3, base_delay=0.0)


def test_find_current_gameweek_prefers_api_flag() -> None:
    reference = datetime(2025, 1, 1, tzinfo=UTC)
    events = [
        {"id": 5, "name": "GW5", "is_current": True},
        {"id": 6, "name": "GW6", "is_current": False},
    ]
    result = gw.find_current_gameweek(events, reference)
    assert result["id"] == 5
    assert result["method"] == "api_is_current_flag"


def test_find_current_gameweek_uses_deadline_when_flag_missing() -> None:
    reference = datetime(2025, 1, 6, tzinfo=UTC)
    events = [
        {"id": 5, "name": "GW5", "deadline_time": "2025-01-05T11:00:00Z"},
        {"id": 6, "name": "GW6", "deadline_time": "2025-01-12T11:00:00Z"},
    ]
    result = gw.find_current_gameweek(events, reference)
    assert result["id"] == 5
    assert result["method"] == "deadline_calculation_current"


def test_find_current_gameweek_requires_events() -> None:
    with pytest.raises(ValueError):
        gw.find_current_gameweek([], datetime(2025, 1, 1, tzinfo=UTC))


def test_finished_gameweeks_sorted() -> None:
    events = [
        {"id": 3, "finished": False},
        {"id": 2, "finished": True},
        {"id": 1, "finished": True},
    ]
    assert gw.finished_gameweeks(events) == [1, 2]


def test_utils_helpers() -> None:
    assert utils.map_position(3) == "MID"
    assert utils.map_position(9) == "UNK"
    parsed = utils.parse_fpl_datetime("2025-01-05T11:00:00")
    assert parsed.tzinfo is not None


def test_chip_from_api() -> None:
    assert Chip.from_api(None) is Chip.NONE
    assert Chip.from_api("bboost") is Chip.BENCH_BOOST
    assert Chip.from_api("3xc") is Chip.TRIPLE_CAPTAIN
    assert Chip.from_api("manager") is Chip.NONE


@pytest.mark.asyncio
async def test_fetch_json_retries_until_success() -> None:
    session = FakeSession([FakeResponse(503), FakeResponse(200, {"ok": True})])

    data = await utils.fetch_json(session, "https://fpl/x", NO_WAIT)  # type: ignore[arg-type]

    assert data == {"ok": True}
    assert len(session.calls) == 2


@pytest.mark.asyncio
async def test_fetch_json_tolerates_404_when_asked() -> None:
    session = FakeSession([FakeResponse(404)])

    data = await utils.fetch_json(session, "https://fpl/x", NO_WAIT.missing_tolerant())  # type: ignore[arg-type]

    assert data is None
    assert len(session.calls) == 1


@pytest.mark.asyncio
async def test_fetch_json_gives_up_after_max_attempts() -> None:
    session = FakeSession([FakeResponse(404), FakeResponse(404), FakeResponse(404)])

    with pytest.raises(utils.UpstreamStatusError) as excinfo:
        await utils.fetch_json(session, "https://fpl/x", NO_WAIT)  # type: ignore[arg-type]

    assert excinfo.value.status == 404
    assert len(session.calls) == 3


@pytest.mark.asyncio
async def test_fetch_json_wraps_connection_errors() -> None:
    session = FakeSession([aiohttp.ClientConnectionError("boom")] * 3)

    with pytest.raises(utils.FPLRequestError) as excinfo:
        await utils.fetch_json(session, "https://fpl/x", NO_WAIT)  # type: ignore[arg-type]

    assert not isinstance(excinfo.value, utils.UpstreamStatusError)
    assert len(session.calls) == 3


@pytest.mark.asyncio
async def test_batch_fetch_preserves_task_order() -> None:
    started: list[int] = []

    def make_task(value: int):
        async def task() -> int:
            started.append(value)
            return value * 10

        return task

    results = await utils.batch_fetch([make_task(i) for i in range(7)], 3, 0.0)

    assert results == [0, 10, 20, 30, 40, 50, 60]
    assert sorted(started) == list(range(7))


def test_client_builds_urls_from_settings() -> None:
    settings = utils.Settings(base_url="https://example.test/api")
    client = utils.FPLClient(object(), settings)  # type: ignore[arg-type]

    assert client.url("/event/3/live/") == "https://example.test/api/event/3/live/"
    assert client.policy.max_attempts == settings.retry_attempts


@pytest.mark.asyncio
async def test_fetch_squad_parses_picks_and_history(make_client) -> None:
    client = make_client(
        {
            "entry/7/event/3/picks/": {
                "active_chip": "3xc",
                "automatic_subs": [{"element_in": 12, "element_out": 4, "event": 3}],
                "entry_history": {
                    "event": 3,
                    "points": 71,
                    "total_points": 180,
                    "event_transfers_cost": 4,
                },
                "picks": [
                    {"element": 4, "position": 1, "multiplier": 3, "is_captain": True},
                    {"element": 12, "position": 12, "multiplier": 0},
                ],
            }
        }
    )

    entry = await fetch_squad(client, 7, 3)

    assert entry is not None
    assert entry.picks is not None
    assert [(p.player_id, p.slot_position, p.multiplier) for p in entry.picks] == [
        (4, 1, 3),
        (12, 12, 0),
    ]
    assert entry.history is not None
    assert entry.history.active_chip is Chip.TRIPLE_CAPTAIN
    assert entry.history.total_points == 180
    assert entry.history.automatic_subs[0].player_in == 12


@pytest.mark.asyncio
async def test_fetch_squad_returns_none_for_missing_entry(make_client) -> None:
    client = make_client({})

    assert await fetch_squad(client, 7, 1) is None


@pytest.mark.asyncio
async def test_fetch_transfer_gameweeks_deduplicates(make_client) -> None:
    client = make_client(
        {"entry/7/transfers/": [{"event": 9}, {"event": 3}, {"event": 9}, {"event": 4}]}
    )

    assert await fetch_transfer_gameweeks(client, 7) == [3, 4, 9]


@pytest.mark.asyncio
async def test_fetch_gameweek_stats(make_client) -> None:
    client = make_client(
        {
            "event/2/live/": {
                "elements": [
                    {"id": 1, "stats": {"total_points": -2, "minutes": 90}},
                    {"id": 2, "stats": {"total_points": 0, "minutes": 0}},
                ]
            }
        }
    )

    table = await fetch_gameweek_stats(client, 2)

    assert table is not None
    assert table[1].points == -2
    assert table[2].minutes == 0
    assert await fetch_gameweek_stats(client, 3) is None


@pytest.mark.asyncio
async def test_fetch_league_standings_follows_pages(make_client) -> None:
    row = {"entry": 1, "player_name": "Alex", "entry_name": "Alpha", "total": 100}
    client = make_client(
        {
            "leagues-classic/9/standings/": {
                "standings": {"has_next": True, "results": [row]}
            },
            "leagues-classic/9/standings/?page_standings=2": {
                "standings": {
                    "has_next": False,
                    "results": [{**row, "entry": 2, "player_name": "Sam"}],
                }
            },
        }
    )

    managers = await fetch_league_standings(client, 9)

    assert [m.manager_id for m in managers] == [1, 2]
    assert managers[1].manager_name == "Sam"


@pytest.mark.asyncio
async def test_fetch_league_standings_not_found(make_client) -> None:
    client = make_client({"leagues-classic/9/standings/": {"detail": "Not found."}})

    with pytest.raises(LeagueNotFoundError):
        await fetch_league_standings(client, 9)
