"""Shared type definitions for league insights and what-if simulation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, NotRequired, TypedDict

from pydantic import BaseModel, ConfigDict, Field, field_validator

STARTING_SLOTS = range(1, 12)
BENCH_SLOTS = range(12, 16)
SQUAD_SIZE = 15


class Chip(StrEnum):
    """Chip played in a gameweek, keyed by the upstream ``active_chip`` value."""

    NONE = "none"
    TRIPLE_CAPTAIN = "3xc"
    BENCH_BOOST = "bboost"
    FREE_HIT = "freehit"
    WILDCARD = "wildcard"

    @classmethod
    def from_api(cls, value: str | None) -> Chip:
        if not value:
            return cls.NONE
        try:
            return cls(value)
        except ValueError:
            return cls.NONE


# =============================================================================
# Upstream records (Pydantic)
# =============================================================================


class Pick(BaseModel):
    """One squad slot for one gameweek."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    player_id: int = Field(alias="element")
    slot_position: int = Field(alias="position", ge=1, le=SQUAD_SIZE)
    multiplier: int = Field(default=1, ge=0)

    @property
    def is_starter(self) -> bool:
        return self.slot_position in STARTING_SLOTS

    @property
    def is_bench(self) -> bool:
        return self.slot_position in BENCH_SLOTS


class PlayerGameweekStat(BaseModel):
    """Points and minutes for one player in one gameweek."""

    model_config = ConfigDict(frozen=True)

    points: int = 0
    minutes: int = Field(default=0, ge=0)


class AutomaticSub(BaseModel):
    """Substitution applied by the upstream game."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    player_out: int = Field(alias="element_out")
    player_in: int = Field(alias="element_in")


class ManagerGameweekHistory(BaseModel):
    """A manager's entry-history record for one gameweek."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    event: int
    total_points: int = 0
    points: int = 0
    event_transfers_cost: int = 0
    active_chip: Chip = Chip.NONE
    automatic_subs: tuple[AutomaticSub, ...] = ()

    @field_validator("active_chip", mode="before")
    @classmethod
    def _parse_chip(cls, value: Any) -> Chip:
        if isinstance(value, Chip):
            return value
        return Chip.from_api(value)


# =============================================================================
# Engine values
# =============================================================================


@dataclass(slots=True, frozen=True)
class LineupEntry:
    """A player counted towards a gameweek score and the multiplier applied."""

    player_id: int
    multiplier: int


EffectiveLineup = list[LineupEntry]
StatsTable = dict[int, PlayerGameweekStat]


class BranchPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    gw: int
    points: int


class Branch(BaseModel):
    """Cumulative points had the squad been frozen at ``freeze_gw``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    freeze_gw: int = Field(alias="freezeGW")
    label: str
    data: tuple[BranchPoint, ...]

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


@dataclass(slots=True)
class ManagerGameweek:
    """Picks plus entry history as returned by the picks endpoint."""

    picks: list[Pick] | None
    history: ManagerGameweekHistory | None


@dataclass(slots=True)
class SeasonData:
    """Everything the branch simulator needs for one manager."""

    last_gameweek: int
    picks_by_gw: dict[int, list[Pick]] = field(default_factory=dict)
    stats_by_gw: dict[int, StatsTable] = field(default_factory=dict)
    history_by_gw: dict[int, ManagerGameweekHistory] = field(default_factory=dict)
    transfer_gameweeks: list[int] = field(default_factory=list)


@dataclass(slots=True)
class LeagueManager:
    """A manager row from classic league standings."""

    manager_id: int
    manager_name: str
    team_name: str
    total_points: int


# =============================================================================
# Response payloads
# =============================================================================


class ActualPoint(TypedDict):
    gw: int
    points: int | None


class BranchPayload(TypedDict):
    freezeGW: int
    label: str
    data: list[dict[str, int]]


class WhatIfPayload(TypedDict):
    """Response of the what-if report."""

    managerId: int
    currentGW: int
    actual: list[ActualPoint]
    branches: list[BranchPayload]


class AutoSubRow(TypedDict):
    managerName: str
    teamName: str
    totalAutoSubPoints: int


class TransferCostRow(TypedDict):
    managerName: str
    teamName: str
    totalTransferCost: int


class PlayerContribution(TypedDict):
    id: int
    name: str
    position: int
    positionName: str
    points: int


class ManagerContributions(TypedDict):
    managerId: int
    managerName: str
    teamName: str
    totalPoints: int
    players: list[PlayerContribution]


class SeasonDataPayload(TypedDict):
    """Auto-sub points, transfer costs and player contributions for a league."""

    gameweek: int
    autoSubs: list[AutoSubRow]
    transferCosts: list[TransferCostRow]
    playerContributions: dict[str, list[ManagerContributions]]


class LiveStandingRow(TypedDict):
    managerId: int
    managerName: str
    teamName: str
    livePoints: int
    pointsThisWeek: int
    lastGameweekTotalPoints: int
    lastWeekPoints: int
    currentPosition: NotRequired[int]
    lastGameweekPosition: NotRequired[int]
    positionChange: NotRequired[int]
    changeDirection: NotRequired[str]


__all__ = [
    "BENCH_SLOTS",
    "SQUAD_SIZE",
    "STARTING_SLOTS",
    "ActualPoint",
    "AutoSubRow",
    "AutomaticSub",
    "Branch",
    "BranchPayload",
    "BranchPoint",
    "Chip",
    "EffectiveLineup",
    "LeagueManager",
    "LineupEntry",
    "LiveStandingRow",
    "ManagerContributions",
    "ManagerGameweek",
    "ManagerGameweekHistory",
    "Pick",
    "PlayerContribution",
    "PlayerGameweekStat",
    "SeasonData",
    "SeasonDataPayload",
    "StatsTable",
    "TransferCostRow",
    "WhatIfPayload",
]
