from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ConfigDict, Field

from feedproxy.config import (
    DEFAULT_BATCH_MODES,
    DEFAULT_CHAIN_TYPE,
    DEFAULT_LIMIT,
    DEFAULT_SORT_BY,
    UPSTREAM_SOURCE,
)
from feedproxy.deps import get_feed_service
from feedproxy.feeds import FeedRequest, FeedService

SERVICE_NAME = "dogeagent-signals"

router = APIRouter()


class HealthResponse(BaseModel):
    ok: bool
    service: str
    time: str


class FeedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sort_by: str = Field(alias="sortBy")
    chain_type: str = Field(alias="chainType")
    limit: int
    source: str
    items: list[Any]


class FeedBatchResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chain_type: str = Field(alias="chainType")
    limit: int
    source: str
    feeds: dict[str, list[Any]]


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(ok=True, service=SERVICE_NAME, time=datetime.now(timezone.utc).isoformat())


def _parse_limit(raw: str | None) -> int:
    """Blank means the default; anything else must be an integer."""
    if not raw:
        return DEFAULT_LIMIT
    try:
        return int(raw)
    except ValueError:
        raise RequestValidationError(
            [
                {
                    "type": "int_parsing",
                    "loc": ("query", "limit"),
                    "msg": "Input should be a valid integer",
                    "input": raw,
                }
            ]
        ) from None


@router.get("/anoncoin/feeds", response_model=FeedResponse)
async def get_feed(
    sort_by: str | None = Query(default=None, alias="sortBy"),
    limit: str | None = Query(default=None),
    chain_type: str | None = Query(default=None, alias="chainType"),
    service: FeedService = Depends(get_feed_service),
):
    request = FeedRequest(
        sort_by=sort_by or DEFAULT_SORT_BY,
        limit=_parse_limit(limit),
        chain_type=chain_type or DEFAULT_CHAIN_TYPE,
    )
    items = await service.get_one(request)
    return FeedResponse(
        sort_by=request.sort_by,
        chain_type=request.chain_type,
        limit=request.limit,
        source=UPSTREAM_SOURCE,
        items=items,
    )


@router.get("/anoncoin/feeds/all", response_model=FeedBatchResponse)
async def get_all_feeds(
    modes: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    chain_type: str | None = Query(default=None, alias="chainType"),
    service: FeedService = Depends(get_feed_service),
):
    resolved_limit = _parse_limit(limit)
    resolved_chain = chain_type or DEFAULT_CHAIN_TYPE
    feeds = await service.get_many(
        modes or DEFAULT_BATCH_MODES,
        limit=resolved_limit,
        chain_type=resolved_chain,
    )
    return FeedBatchResponse(chain_type=resolved_chain, limit=resolved_limit, source=UPSTREAM_SOURCE, feeds=feeds)
