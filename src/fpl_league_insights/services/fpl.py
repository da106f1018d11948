"""Synchronous entry points over the async FPL reports."""

from __future__ import annotations

import asyncio
from typing import Any

import aiohttp

from ..config import Settings
from ..fpl.utils import FPLRequestError
from ..insights import season as _season_module
from ..insights import standings as _standings_module
from ..insights import what_if as _what_if_module


class FPLServiceError(RuntimeError):
    """Raised when FPL data cannot be retrieved."""


def _run(coro: Any) -> Any:
    return asyncio.run(coro)


async def _call(func: Any, *args: Any, **kwargs: Any) -> Any:
    try:
        return await func(*args, **kwargs)
    except (FPLRequestError, aiohttp.ClientError) as exc:
        raise FPLServiceError(str(exc)) from exc


def get_what_if(manager_id: int, settings: Settings | None = None) -> dict[str, Any]:
    return _run(_call(_what_if_module.get_what_if, manager_id, settings))


def get_season_data(league_id: int, settings: Settings | None = None) -> dict[str, Any]:
    return _run(_call(_season_module.get_season_data, league_id, settings))


def get_live_standings(
    league_id: int, settings: Settings | None = None
) -> dict[str, Any]:
    return _run(_call(_standings_module.get_live_standings, league_id, settings))


__all__ = [
    "FPLServiceError",
    "get_live_standings",
    "get_season_data",
    "get_what_if",
]
