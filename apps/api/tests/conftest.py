from __future__ import annotations

from typing import Any

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from feedproxy.deps import get_feed_service
from feedproxy.feeds import FeedService, InMemoryTTLCache, UpstreamClient
from feedproxy.main import app

UPSTREAM_BASE = "https://upstream.test/v1"


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class UpstreamStub:
    """Answers ``/feeds`` calls per ``sortBy`` and records every request."""

    def __init__(self) -> None:
        self.responses: dict[str, tuple[int, dict[str, Any]]] = {}
        self.calls: list[httpx.Request] = []

    def respond(self, sort_by: str, status_code: int = 200, *, json: Any = None, text: str | None = None) -> None:
        body = {"text": text} if text is not None else {"json": json}
        self.responses[sort_by] = (status_code, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        sort_by = request.url.params.get("sortBy", "")
        status_code, body = self.responses.get(sort_by, (200, {"json": {"feeds": []}}))
        return httpx.Response(status_code, **body)

    def calls_for(self, sort_by: str) -> int:
        return sum(1 for call in self.calls if call.url.params.get("sortBy") == sort_by)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def upstream_stub() -> UpstreamStub:
    return UpstreamStub()


@pytest_asyncio.fixture
async def http_client(upstream_stub: UpstreamStub):
    async with httpx.AsyncClient(transport=httpx.MockTransport(upstream_stub.handler)) as http:
        yield http


@pytest.fixture
def upstream_client(http_client: httpx.AsyncClient) -> UpstreamClient:
    return UpstreamClient(
        base_url=UPSTREAM_BASE,
        http=http_client,
        user_agent="DogeAgent-Signals/1.0",
        timeout_s=5.0,
    )


@pytest.fixture
def feed_service(upstream_client: UpstreamClient, clock: FakeClock) -> FeedService:
    return FeedService(upstream_client, InMemoryTTLCache(clock=clock), ttl_s=30.0)


@pytest.fixture
def strict_feed_service(upstream_client: UpstreamClient, clock: FakeClock) -> FeedService:
    return FeedService(
        upstream_client,
        InMemoryTTLCache(clock=clock),
        ttl_s=30.0,
        allowed_modes=["trending", "new", "hot", "volume"],
    )


@pytest_asyncio.fixture
async def client(feed_service: FeedService):
    app.dependency_overrides[get_feed_service] = lambda: feed_service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def strict_client(strict_feed_service: FeedService):
    app.dependency_overrides[get_feed_service] = lambda: strict_feed_service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
