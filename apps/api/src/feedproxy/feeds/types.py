from __future__ import annotations

from dataclasses import dataclass
from typing import Any

DEFAULT_LIMIT = 10
DEFAULT_CHAIN_TYPE = "solana"


class InvalidModeError(ValueError):
    def __init__(self, sort_by: str, allowed_modes: list[str]) -> None:
        super().__init__(f"Unsupported sortBy '{sort_by}'")
        self.sort_by = sort_by
        self.allowed_modes = allowed_modes


class NoValidModesError(ValueError):
    pass


class UpstreamError(RuntimeError):
    """Failed upstream call.

    ``reason`` is one of ``status`` (non-2xx response), ``parse`` (body is not
    JSON), ``timeout`` or ``transport``. ``status`` is None when no response
    was received.
    """

    def __init__(self, reason: str, *, status: int | None = None, body: str = "") -> None:
        if reason == "status":
            message = f"Upstream error {status}: {body}"
        elif reason == "parse":
            message = f"Upstream returned invalid JSON (status {status})"
        else:
            message = f"Upstream {reason} error: {body}"
        super().__init__(message)
        self.reason = reason
        self.status = status
        self.body = body


@dataclass(frozen=True)
class FeedRequest:
    sort_by: str
    limit: int = DEFAULT_LIMIT
    chain_type: str = DEFAULT_CHAIN_TYPE

    @property
    def cache_key(self) -> str:
        return f"feed:{self.sort_by}:{self.limit}:{self.chain_type}"


@dataclass(frozen=True)
class ModeOutcome:
    mode: str
    items: list[Any]
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
