from __future__ import annotations

from typing import Any

PREFERRED_KEYS = ("feeds", "items", "data", "docs", "results", "tokens", "coins")
MAX_SEARCH_DEPTH = 5


def _is_object_list(value: Any) -> bool:
    return isinstance(value, list) and bool(value) and all(isinstance(item, dict) for item in value)


def _first_list(values) -> list | None:
    for value in values:
        if isinstance(value, list):
            return value
    return None


def _largest_object_list(value: Any, depth: int = 0) -> list | None:
    """Largest non-empty list of objects anywhere under ``value``.

    Ties keep the first list found in document order.
    """
    if depth > MAX_SEARCH_DEPTH:
        return None

    best: list | None = None
    if isinstance(value, list):
        if _is_object_list(value):
            best = value
        children = value
    elif isinstance(value, dict):
        children = value.values()
    else:
        return None

    for child in children:
        found = _largest_object_list(child, depth + 1)
        if found is not None and (best is None or len(found) > len(best)):
            best = found
    return best


def normalize_feed(raw: Any) -> list[Any]:
    """Extract the list of entries from an upstream payload.

    Never raises; payloads with no recognizable list yield ``[]``.
    """
    if raw is None:
        return []
    if isinstance(raw, list):
        return raw
    if not isinstance(raw, dict):
        return []

    for key in PREFERRED_KEYS:
        if _is_object_list(raw.get(key)):
            return raw[key]

    feeds = raw.get("feeds")
    if isinstance(feeds, dict):
        found = _first_list(feeds.values())
        if found is not None:
            return found

    found = _first_list(raw.values())
    if found is not None:
        return found

    return _largest_object_list(raw) or []
