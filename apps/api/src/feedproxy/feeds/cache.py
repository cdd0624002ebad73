from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class CacheEntry:
    inserted_at: float
    ttl_s: float
    payload: Any


class InMemoryTTLCache:
    """Raw upstream payloads keyed by request fingerprint.

    Unbounded. Staleness is checked when an entry is read; stale entries are
    dropped then and never returned.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._data: dict[str, CacheEntry] = {}
        self._clock = clock

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._data.get(key)
        if entry is None:
            return default
        if self._clock() - entry.inserted_at >= entry.ttl_s:
            self._data.pop(key, None)
            return default
        return entry.payload

    def set(self, key: str, payload: Any, ttl_s: float) -> None:
        self._data[key] = CacheEntry(inserted_at=self._clock(), ttl_s=ttl_s, payload=payload)

    def __len__(self) -> int:
        return len(self._data)
