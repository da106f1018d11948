"""Runtime settings resolved from the environment and an optional ``.env`` file."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_BASE_URL = "https://fantasy.premierleague.com/api/"
DEFAULT_USER_AGENT = "RoboticsFPL/1.0"
_ENV_LOADED = False


@dataclass(slots=True, frozen=True)
class Settings:
    """Knobs for the FPL retrieval layer and the branch simulator."""

    base_url: str = DEFAULT_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    request_timeout: float = 30.0
    retry_attempts: int = 4
    retry_base_delay: float = 2.0
    batch_size: int = 5
    batch_delay: float = 0.2
    branch_workers: int | None = None


def _load_env_file(path: Path) -> None:
    """Load simple KEY=VALUE pairs from an ``.env`` file into ``os.environ``.

    Variables already present in the environment win over the file.
    """

    try:
        raw_lines = path.read_text(encoding="utf-8").splitlines()
    except FileNotFoundError:
        return

    for raw_line in raw_lines:
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].strip()
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue

        if value and value[0] in {'"', "'"} and value[-1] == value[0]:
            value = value[1:-1]
        else:
            value = value.split(" #", 1)[0].rstrip()

        os.environ.setdefault(key, os.path.expandvars(value))


def _ensure_env_loaded() -> None:
    """Load the project ``.env`` file once per interpreter session."""

    global _ENV_LOADED
    if _ENV_LOADED:
        return
    _load_env_file(PROJECT_ROOT / ".env")
    _ENV_LOADED = True


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got: {raw!r}") from None


def get_settings() -> Settings:
    """Build settings from ``FPL_*`` environment variables."""

    _ensure_env_loaded()
    defaults = Settings()
    retry_attempts = _env_int("FPL_RETRY_ATTEMPTS", defaults.retry_attempts)
    batch_size = _env_int("FPL_BATCH_SIZE", defaults.batch_size)
    return Settings(
        base_url=os.environ.get("FPL_BASE_URL") or defaults.base_url,
        user_agent=os.environ.get("FPL_USER_AGENT") or defaults.user_agent,
        request_timeout=_env_float("FPL_REQUEST_TIMEOUT", defaults.request_timeout),
        retry_attempts=retry_attempts or defaults.retry_attempts,
        retry_base_delay=_env_float("FPL_RETRY_BASE_DELAY", defaults.retry_base_delay),
        batch_size=batch_size or defaults.batch_size,
        batch_delay=_env_float("FPL_BATCH_DELAY", defaults.batch_delay),
        branch_workers=_env_int("FPL_BRANCH_WORKERS", defaults.branch_workers),
    )


__all__ = ["DEFAULT_BASE_URL", "DEFAULT_USER_AGENT", "Settings", "get_settings"]
