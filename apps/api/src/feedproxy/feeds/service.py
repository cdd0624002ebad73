from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, Protocol

from feedproxy.feeds.cache import InMemoryTTLCache
from feedproxy.feeds.normalize import normalize_feed
from feedproxy.feeds.types import (
    DEFAULT_CHAIN_TYPE,
    DEFAULT_LIMIT,
    FeedRequest,
    InvalidModeError,
    ModeOutcome,
    NoValidModesError,
    UpstreamError,
)

_logger = logging.getLogger("feeds.service")
_MISSING = object()


class FeedFetcher(Protocol):
    async def fetch_raw(self, request: FeedRequest) -> Any: ...


def parse_modes(raw: str | Iterable[str]) -> list[str]:
    """Split a comma list of modes, dropping blanks and repeats."""
    parts = raw.split(",") if isinstance(raw, str) else raw
    modes: list[str] = []
    for part in parts:
        mode = part.strip()
        if mode and mode not in modes:
            modes.append(mode)
    return modes


class FeedService:
    def __init__(
        self,
        upstream: FeedFetcher,
        cache: InMemoryTTLCache,
        *,
        ttl_s: float = 30.0,
        allowed_modes: Iterable[str] | None = None,
    ) -> None:
        self._upstream = upstream
        self._cache = cache
        self._ttl_s = ttl_s
        self._allowed_modes = list(allowed_modes or [])

    @property
    def allowed_modes(self) -> list[str]:
        return list(self._allowed_modes)

    def is_allowed(self, mode: str) -> bool:
        return not self._allowed_modes or mode in self._allowed_modes

    async def get_one(self, request: FeedRequest) -> list[Any]:
        if not self.is_allowed(request.sort_by):
            raise InvalidModeError(request.sort_by, self.allowed_modes)

        key = request.cache_key
        raw = self._cache.get(key, _MISSING)
        if raw is _MISSING:
            _logger.debug("feed_cache_miss", extra={"cache": key})
            raw = await self._upstream.fetch_raw(request)
            self._cache.set(key, raw, self._ttl_s)
        else:
            _logger.debug("feed_cache_hit", extra={"cache": key})
        return normalize_feed(raw)

    async def _get_outcome(self, request: FeedRequest) -> ModeOutcome:
        try:
            items = await self.get_one(request)
        except Exception as exc:
            _logger.warning(
                "batch_mode_failed",
                exc_info=not isinstance(exc, UpstreamError),
                extra={
                    "sort_by": request.sort_by,
                    "upstream_status": exc.status if isinstance(exc, UpstreamError) else None,
                    "error": str(exc),
                },
            )
            return ModeOutcome(mode=request.sort_by, items=[], error=str(exc) or type(exc).__name__)
        return ModeOutcome(mode=request.sort_by, items=items)

    async def get_many(
        self,
        modes: str | Iterable[str],
        limit: int = DEFAULT_LIMIT,
        chain_type: str = DEFAULT_CHAIN_TYPE,
    ) -> dict[str, list[Any]]:
        requested = parse_modes(modes)
        valid = [mode for mode in requested if self.is_allowed(mode)]
        dropped = [mode for mode in requested if mode not in valid]
        if dropped:
            _logger.info("batch_modes_dropped", extra={"modes": dropped})
        if not valid:
            raise NoValidModesError("modes must contain at least one supported sort key")

        outcomes = await asyncio.gather(
            *(
                self._get_outcome(FeedRequest(sort_by=mode, limit=limit, chain_type=chain_type))
                for mode in valid
            )
        )
        return {outcome.mode: outcome.items if outcome.ok else [] for outcome in outcomes}
