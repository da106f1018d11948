"""Locate the current and finished gameweeks from bootstrap data."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from .utils import FPL_TIMEZONE, FPLClient, FPLRequestError, parse_fpl_datetime

BOOTSTRAP_PATH = "bootstrap-static/"


def _summarize(event: dict[str, Any], method: str) -> dict[str, Any]:
    return {
        "id": event["id"],
        "name": event.get("name", f"Gameweek {event['id']}"),
        "deadline_time": event.get("deadline_time"),
        "finished": event.get("finished", False),
        "method": method,
    }


def find_current_gameweek(
    events: list[dict[str, Any]], reference_time: datetime
) -> dict[str, Any]:
    """Prefer the API's ``is_current`` flag, otherwise work it out from deadlines.

    Before the first deadline the first gameweek is returned.
    """
    if not events:
        raise ValueError("No gameweek data found in FPL bootstrap response")

    current_events = [event for event in events if event.get("is_current", False)]
    if len(current_events) == 1:
        return _summarize(current_events[0], "api_is_current_flag")

    reference_time_utc = reference_time.astimezone(FPL_TIMEZONE)
    sorted_events = sorted(events, key=lambda item: item.get("id", 0))

    for index, event in enumerate(sorted_events):
        deadline_raw = event.get("deadline_time")
        if not deadline_raw:
            continue
        if reference_time_utc < parse_fpl_datetime(deadline_raw):
            if index == 0:
                return _summarize(event, "deadline_calculation_next")
            return _summarize(sorted_events[index - 1], "deadline_calculation_current")

    return _summarize(sorted_events[-1], "deadline_calculation_last")


def finished_gameweeks(events: list[dict[str, Any]]) -> list[int]:
    return sorted(event["id"] for event in events if event.get("finished", False))


async def fetch_bootstrap(fpl: FPLClient) -> dict[str, Any]:
    data = await fpl.get_json(BOOTSTRAP_PATH)
    if not isinstance(data, dict):
        raise FPLRequestError("Unexpected bootstrap payload")
    return data


async def get_current_gameweek_id(
    fpl: FPLClient, reference_time: datetime | None = None
) -> int:
    bootstrap = await fetch_bootstrap(fpl)
    reference = reference_time or datetime.now(FPL_TIMEZONE)
    return int(find_current_gameweek(bootstrap.get("events") or [], reference)["id"])


__all__ = [
    "fetch_bootstrap",
    "find_current_gameweek",
    "finished_gameweeks",
    "get_current_gameweek_id",
]
