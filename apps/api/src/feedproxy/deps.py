from __future__ import annotations

from fastapi import HTTPException, Request

from feedproxy.feeds import FeedService


def get_feed_service(request: Request) -> FeedService:
    service = getattr(request.app.state, "feed_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Feed service is not ready")
    return service
