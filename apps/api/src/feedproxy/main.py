import logging
import random
import time
import uuid
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from feedproxy.config import (
    CACHE_TTL_MS,
    CORS_ORIGINS,
    LOG_REQUEST_SAMPLE_RATE,
    LOG_SLOW_REQUEST_MS,
    SUPPORTED_SORT_MODES,
    UPSTREAM_BASE_URL,
    UPSTREAM_TIMEOUT_S,
    UPSTREAM_USER_AGENT,
)
from feedproxy.feeds import (
    FeedService,
    InMemoryTTLCache,
    InvalidModeError,
    NoValidModesError,
    UpstreamClient,
    UpstreamError,
)
from feedproxy.logging_config import configure_logging
from feedproxy.v1.main import router as v1_router

configure_logging()
_logger = logging.getLogger("http")


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with httpx.AsyncClient(timeout=UPSTREAM_TIMEOUT_S) as http:
        upstream = UpstreamClient(
            base_url=UPSTREAM_BASE_URL,
            http=http,
            user_agent=UPSTREAM_USER_AGENT,
            timeout_s=UPSTREAM_TIMEOUT_S,
        )
        app.state.feed_service = FeedService(
            upstream,
            InMemoryTTLCache(),
            ttl_s=CACHE_TTL_MS / 1000,
            allowed_modes=SUPPORTED_SORT_MODES,
        )
        yield
        app.state.feed_service = None


app = FastAPI(title="DogeAgent Signals API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials="*" not in CORS_ORIGINS,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)


def _error_response(status_code: int, code: str, message: str, **details) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message, **details}},
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
    request.state.request_id = request_id
    start = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        response.headers["X-Request-ID"] = request_id
        return response
    finally:
        _log_request(request, request_id, status_code, (time.perf_counter() - start) * 1000)


def _log_request(request: Request, request_id: str, status_code: int, duration_ms: float) -> None:
    slow = duration_ms >= LOG_SLOW_REQUEST_MS
    sampled = random.random() < LOG_REQUEST_SAMPLE_RATE
    if slow or sampled:
        _logger.info(
            "http_request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "duration_ms": round(duration_ms, 2),
                "request_id": request_id,
                "client": request.client.host if request.client else None,
                "origin": request.headers.get("origin"),
                "slow": slow,
                "sampled": sampled,
            },
        )


@app.exception_handler(InvalidModeError)
async def invalid_mode_handler(request: Request, exc: InvalidModeError):
    return _error_response(400, "INVALID_MODE", str(exc), allowed_modes=exc.allowed_modes)


@app.exception_handler(NoValidModesError)
async def no_valid_modes_handler(request: Request, exc: NoValidModesError):
    return _error_response(400, "NO_VALID_MODES", str(exc))


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    return _error_response(502, "UPSTREAM_ERROR", str(exc), upstream_status=exc.status)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return _error_response(
        422,
        "VALIDATION_ERROR",
        "Invalid request parameters",
        details=jsonable_encoder(exc.errors()),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(exc.status_code, "HTTP_ERROR", str(exc.detail))


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    request_id = getattr(request.state, "request_id", None)
    _logger.error(
        "unhandled_error",
        exc_info=exc,
        extra={"path": request.url.path, "request_id": request_id, "error": str(exc)},
    )
    response = _error_response(500, "INTERNAL_ERROR", str(exc))
    if request_id:
        response.headers["X-Request-ID"] = request_id
    return response


app.include_router(v1_router)
app.include_router(v1_router, prefix="/v1")
