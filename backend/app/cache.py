"""In-memory TTL cache for built case series, keyed by input snapshot."""

import hashlib
import time
from datetime import date
from typing import Any

from backend.app.config import get_settings

_store: dict[str, tuple[float, Any]] = {}


def snapshot_key(prefix: str, payload: str, cutoff_day: date) -> str:
    """Key for one input snapshot as seen on ``cutoff_day``.

    Series only depend on the calendar day of the cutoff, so requests made
    later on the same day share an entry.
    """
    digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()
    return f"{prefix}:{cutoff_day.isoformat()}:{digest}"


def get(key: str) -> Any | None:
    """Return cached value if still valid, else None."""
    entry = _store.get(key)
    if entry is None:
        return None
    expires_at, value = entry
    if time.monotonic() > expires_at:
        del _store[key]
        return None
    return value


def put(key: str, value: Any, ttl: int | None = None) -> None:
    """Store a value with TTL (defaults to settings.cache_ttl seconds).

    Expired entries are swept on every write; snapshot keys are client
    driven and would otherwise pile up.
    """
    if ttl is None:
        ttl = get_settings().cache_ttl
    now = time.monotonic()
    expired = [k for k, (expires_at, _) in _store.items() if now > expires_at]
    for k in expired:
        del _store[k]
    _store[key] = (now + ttl, value)


def invalidate(prefix: str = "") -> None:
    """Remove all entries matching a key prefix (or all if empty)."""
    if not prefix:
        _store.clear()
    else:
        keys = [k for k in _store if k.startswith(prefix)]
        for k in keys:
            del _store[k]
