import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path.cwd() / ".env")


def _list_env(name: str, default: str) -> list[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


UPSTREAM_BASE_URL = os.getenv("UPSTREAM_BASE_URL", os.getenv("DUBDUB_BASE", "https://api.dubdub.tv/v1"))
UPSTREAM_SOURCE = os.getenv("UPSTREAM_SOURCE", "dubdub.tv")
UPSTREAM_USER_AGENT = os.getenv("UPSTREAM_USER_AGENT", "DogeAgent-Signals/1.0")
UPSTREAM_TIMEOUT_S = float(os.getenv("UPSTREAM_TIMEOUT_S", "10"))
CACHE_TTL_MS = int(os.getenv("CACHE_TTL_MS", "30000"))
SUPPORTED_SORT_MODES = _list_env("SUPPORTED_SORT_MODES", "")
DEFAULT_SORT_BY = os.getenv("DEFAULT_SORT_BY", "marketCap")
DEFAULT_LIMIT = int(os.getenv("DEFAULT_LIMIT", "10"))
DEFAULT_CHAIN_TYPE = os.getenv("DEFAULT_CHAIN_TYPE", "solana")
DEFAULT_BATCH_MODES = _list_env("DEFAULT_BATCH_MODES", "marketCap,volume24h,topToday,mostFollowed,new")
CORS_ORIGINS = _list_env("CORS_ORIGINS", "*")
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_REQUEST_SAMPLE_RATE = float(os.getenv("LOG_REQUEST_SAMPLE_RATE", "1"))
LOG_SLOW_REQUEST_MS = float(os.getenv("LOG_SLOW_REQUEST_MS", "500"))

if CACHE_TTL_MS < 0:
    raise ValueError("CACHE_TTL_MS must be >= 0")
if UPSTREAM_TIMEOUT_S <= 0:
    raise ValueError("UPSTREAM_TIMEOUT_S must be > 0")
if not 0 <= LOG_REQUEST_SAMPLE_RATE <= 1:
    raise ValueError("LOG_REQUEST_SAMPLE_RATE must be between 0 and 1")
