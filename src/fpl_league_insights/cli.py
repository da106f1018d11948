"""Command-line interface for the FPL league insight reports."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from .config import Settings, get_settings
from .fpl.get_league_standings import LeagueNotFoundError
from .services import fpl as fpl_service
from .services.fpl import FPLServiceError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fpl-league-insights",
        description="Season metrics and what-if branches for FPL classic leagues",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    what_if_parser = subparsers.add_parser(
        "what-if",
        help="Cumulative points had the manager stopped transferring at each transfer week",
    )
    what_if_parser.add_argument(
        "--manager-id", type=int, required=True, help="FPL entry (team) ID"
    )

    season_parser = subparsers.add_parser(
        "season",
        help="Auto-sub points, transfer costs and player contributions for a league",
    )
    season_parser.add_argument(
        "--league-id", type=int, required=True, help="Classic league ID"
    )

    standings_parser = subparsers.add_parser(
        "standings",
        help="Live standings for the current gameweek",
    )
    standings_parser.add_argument(
        "--league-id", type=int, required=True, help="Classic league ID"
    )

    for sub in (what_if_parser, season_parser, standings_parser):
        sub.add_argument(
            "--output",
            type=Path,
            default=None,
            help="Write the JSON report here instead of stdout (unique suffix applied if needed)",
        )

    return parser


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def generate_unique_path(base: Path) -> Path:
    """Return a unique path derived from ``base`` without overwriting existing files."""

    candidate = base
    suffix = 1
    while candidate.exists():
        candidate = base.with_name(f"{base.stem}-{suffix}{base.suffix}")
        suffix += 1
    return candidate


def _emit(payload: dict[str, Any], output: Path | None) -> None:
    text = json.dumps(payload, indent=2)
    if output is None:
        print(text)
        return
    destination = output if output.suffix == ".json" else output.with_suffix(".json")
    destination = generate_unique_path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(text, encoding="utf-8")
    print(f"Report written to {destination}", file=sys.stderr)


def _report(
    args: argparse.Namespace, settings: Settings
) -> Callable[[], dict[str, Any]]:
    if args.command == "what-if":
        return lambda: fpl_service.get_what_if(args.manager_id, settings)
    if args.command == "season":
        return lambda: fpl_service.get_season_data(args.league_id, settings)
    return lambda: fpl_service.get_live_standings(args.league_id, settings)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = get_settings()
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    try:
        payload = _report(args, settings)()
    except FPLServiceError as exc:
        cause = exc.__cause__
        if isinstance(cause, LeagueNotFoundError):
            print(str(cause), file=sys.stderr)
        else:
            print(f"FPL request failed: {exc}", file=sys.stderr)
        return 1

    _emit(payload, args.output)
    return 0


if __name__ == "__main__":  # pragma: no cover - entry point
    raise SystemExit(main())
