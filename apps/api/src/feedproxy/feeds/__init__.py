from __future__ import annotations

from feedproxy.feeds.cache import InMemoryTTLCache
from feedproxy.feeds.normalize import normalize_feed
from feedproxy.feeds.service import FeedService, parse_modes
from feedproxy.feeds.types import (
    FeedRequest,
    InvalidModeError,
    ModeOutcome,
    NoValidModesError,
    UpstreamError,
)
from feedproxy.feeds.upstream import UpstreamClient, build_feed_url

__all__ = [
    "FeedRequest",
    "FeedService",
    "InMemoryTTLCache",
    "InvalidModeError",
    "ModeOutcome",
    "NoValidModesError",
    "UpstreamClient",
    "UpstreamError",
    "build_feed_url",
    "normalize_feed",
    "parse_modes",
]
