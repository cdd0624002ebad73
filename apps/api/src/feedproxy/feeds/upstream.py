from __future__ import annotations

import logging
import urllib.parse
from dataclasses import dataclass
from typing import Any

import httpx

from feedproxy.feeds.types import FeedRequest, UpstreamError

_logger = logging.getLogger("feeds.upstream")


def build_feed_url(base_url: str, request: FeedRequest) -> str:
    params = urllib.parse.urlencode(
        {
            "limit": str(request.limit),
            "sortBy": request.sort_by,
            "chainType": request.chain_type,
        }
    )
    return f"{base_url.rstrip('/')}/feeds?{params}"


@dataclass
class UpstreamClient:
    base_url: str
    http: httpx.AsyncClient
    user_agent: str
    timeout_s: float = 10.0

    def __post_init__(self) -> None:
        self.base_url = self.base_url.strip().rstrip("/")
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError("UPSTREAM_BASE_URL must start with http:// or https://")

    @property
    def headers(self) -> dict[str, str]:
        return {"Accept": "application/json", "User-Agent": self.user_agent}

    async def fetch_raw(self, request: FeedRequest) -> Any:
        url = build_feed_url(self.base_url, request)
        try:
            resp = await self.http.get(url, headers=self.headers, timeout=self.timeout_s)
        except httpx.TimeoutException as exc:
            raise UpstreamError("timeout", body=str(exc)) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError("transport", body=str(exc)) from exc

        if not resp.is_success:
            body = resp.text or ""
            _logger.warning(
                "upstream_error",
                extra={
                    "upstream_status": resp.status_code,
                    "sort_by": request.sort_by,
                    "limit": request.limit,
                    "chain_type": request.chain_type,
                },
            )
            raise UpstreamError("status", status=resp.status_code, body=body)

        try:
            return resp.json()
        except (ValueError, RecursionError) as exc:
            raise UpstreamError("parse", status=resp.status_code) from exc
