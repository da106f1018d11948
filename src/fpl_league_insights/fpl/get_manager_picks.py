"""Retrieve a manager's picks, entry history and transfer gameweeks."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ..types import ManagerGameweek, ManagerGameweekHistory, Pick
from .utils import FPLClient

logger = logging.getLogger(__name__)


def parse_manager_gameweek(payload: dict[str, Any], gameweek: int) -> ManagerGameweek:
    """Turn a raw picks payload into typed picks and history.

    Either half is ``None`` when the payload lacks it or fails validation.
    """
    picks: list[Pick] | None = None
    raw_picks = payload.get("picks")
    if isinstance(raw_picks, list):
        try:
            picks = [Pick.model_validate(raw) for raw in raw_picks]
        except ValidationError as exc:
            logger.warning("Ignoring malformed picks for GW%s: %s", gameweek, exc)

    history: ManagerGameweekHistory | None = None
    raw_history = payload.get("entry_history")
    if isinstance(raw_history, dict):
        try:
            history = ManagerGameweekHistory.model_validate(
                {
                    "event": gameweek,
                    **raw_history,
                    "active_chip": payload.get("active_chip"),
                    "automatic_subs": payload.get("automatic_subs") or [],
                }
            )
        except ValidationError as exc:
            logger.warning(
                "Ignoring malformed entry history for GW%s: %s", gameweek, exc
            )

    return ManagerGameweek(picks=picks, history=history)


async def fetch_squad(
    fpl: FPLClient, manager_id: int, gameweek: int
) -> ManagerGameweek | None:
    """Return picks and history, or ``None`` when the manager had no entry (404)."""
    payload = await fpl.get_json(
        f"entry/{manager_id}/event/{gameweek}/picks/", tolerate_missing=True
    )
    if not isinstance(payload, dict):
        return None
    return parse_manager_gameweek(payload, gameweek)


async def fetch_transfer_gameweeks(fpl: FPLClient, manager_id: int) -> list[int]:
    """Sorted, de-duplicated gameweeks in which the manager made a transfer."""
    payload = await fpl.get_json(
        f"entry/{manager_id}/transfers/", tolerate_missing=True
    )
    if not isinstance(payload, list):
        return []
    return sorted({int(item["event"]) for item in payload if item.get("event")})


__all__ = ["fetch_squad", "fetch_transfer_gameweeks", "parse_manager_gameweek"]
