"""Shared helpers for interacting with the public FPL API."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, TypeVar
from zoneinfo import ZoneInfo

import aiohttp
from dateutil.parser import parse as parse_datetime
from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)

POSITION_MAPPING = {1: "GKP", 2: "DEF", 3: "MID", 4: "FWD"}
FPL_TIMEZONE = ZoneInfo("UTC")

T = TypeVar("T")


class FPLRequestError(RuntimeError):
    """Raised when an FPL endpoint cannot be read after all retries."""


class UpstreamStatusError(FPLRequestError):
    """Non-success HTTP status from the FPL API."""

    def __init__(self, url: str, status: int) -> None:
        super().__init__(f"{url} returned HTTP {status}")
        self.url = url
        self.status = status


RETRYABLE_ERRORS = (aiohttp.ClientError, TimeoutError, UpstreamStatusError)


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Attempt budget and linear back-off shared by every endpoint.

    The wait before retry ``n`` is ``base_delay * n``. With
    ``tolerate_missing`` a 404 is returned as ``None`` instead of retried.
    """

    max_attempts: int = 4
    base_delay: float = 2.0
    tolerate_missing: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> RetryPolicy:
        return cls(
            max_attempts=max(1, settings.retry_attempts),
            base_delay=settings.retry_base_delay,
        )

    def missing_tolerant(self) -> RetryPolicy:
        return replace(self, tolerate_missing=True)

    def retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_incrementing(start=self.base_delay, increment=self.base_delay),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )


async def fetch_json(
    session: aiohttp.ClientSession, url: str, policy: RetryPolicy
) -> Any:
    """GET ``url`` and decode JSON, retrying according to ``policy``."""
    try:
        async for attempt in policy.retrying():
            with attempt:
                async with session.get(url) as response:
                    if response.status == 404 and policy.tolerate_missing:
                        logger.debug("No data at %s (404)", url)
                        return None
                    if response.status >= 400:
                        raise UpstreamStatusError(url, response.status)
                    return await response.json()
    except UpstreamStatusError:
        raise
    except (aiohttp.ClientError, TimeoutError, RetryError) as exc:
        raise FPLRequestError(
            f"Failed to fetch {url} after {policy.max_attempts} attempts: {exc}"
        ) from exc
    raise FPLRequestError(f"Failed to fetch {url}")  # pragma: no cover - unreachable


async def batch_fetch(
    tasks: Sequence[Callable[[], Awaitable[T]]],
    batch_size: int = 5,
    delay: float = 0.2,
) -> list[T]:
    """Run coroutine factories in fixed-size batches, pausing between batches.

    Results come back in task order.
    """
    results: list[T] = []
    size = max(1, batch_size)
    for start in range(0, len(tasks), size):
        batch = tasks[start : start + size]
        results.extend(await asyncio.gather(*(task() for task in batch)))
        if start + size < len(tasks):
            await asyncio.sleep(delay)
    return results


class FPLClient:
    """JSON access to FPL endpoints relative to the configured base URL."""

    def __init__(self, session: aiohttp.ClientSession, settings: Settings) -> None:
        self.session = session
        self.settings = settings
        self.policy = RetryPolicy.from_settings(settings)

    def url(self, path: str) -> str:
        return f"{self.settings.base_url.rstrip('/')}/{path.lstrip('/')}"

    async def get_json(self, path: str, *, tolerate_missing: bool = False) -> Any:
        policy = self.policy.missing_tolerant() if tolerate_missing else self.policy
        return await fetch_json(self.session, self.url(path), policy)

    async def gather(self, tasks: Sequence[Callable[[], Awaitable[T]]]) -> list[T]:
        return await batch_fetch(
            tasks, self.settings.batch_size, self.settings.batch_delay
        )


async def create_fpl_session(
    settings: Settings | None = None,
) -> tuple[FPLClient, aiohttp.ClientSession]:
    settings = settings or get_settings()
    session = aiohttp.ClientSession(
        headers={"User-Agent": settings.user_agent},
        timeout=aiohttp.ClientTimeout(total=settings.request_timeout),
    )
    return FPLClient(session, settings), session


async def safe_close_session(session: aiohttp.ClientSession) -> None:
    await session.close()


def map_position(element_type: int) -> str:
    return POSITION_MAPPING.get(element_type, "UNK")


def parse_fpl_datetime(value: str) -> datetime:
    parsed = parse_datetime(value)
    if not isinstance(parsed, datetime):
        raise ValueError(f"Expected datetime, got {type(parsed)}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=FPL_TIMEZONE)
    return parsed.astimezone(FPL_TIMEZONE)


__all__ = [
    "FPL_TIMEZONE",
    "FPLClient",
    "FPLRequestError",
    "RetryPolicy",
    "UpstreamStatusError",
    "batch_fetch",
    "create_fpl_session",
    "fetch_json",
    "map_position",
    "parse_fpl_datetime",
    "safe_close_session",
]
