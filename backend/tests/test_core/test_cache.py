"""Tests for the in-memory TTL cache."""

from datetime import date
from unittest.mock import patch

from backend.app import cache


def test_put_and_get():
    cache.put("k1", {"dates": []}, ttl=60)
    assert cache.get("k1") == {"dates": []}


def test_get_missing_key():
    assert cache.get("nonexistent") is None


def test_ttl_expiry():
    with patch("backend.app.cache.time") as mock_time:
        mock_time.monotonic.return_value = 1000.0
        cache.put("expiring", "value", ttl=10)

        # Still valid at t+9
        mock_time.monotonic.return_value = 1009.0
        assert cache.get("expiring") == "value"

        # Expired at t+11
        mock_time.monotonic.return_value = 1011.0
        assert cache.get("expiring") is None


def test_invalidate_all():
    cache.put("a", 1, ttl=60)
    cache.put("b", 2, ttl=60)
    cache.invalidate()
    assert cache.get("a") is None
    assert cache.get("b") is None


def test_invalidate_prefix():
    cache.put("series:2024-01-10:aa", [1], ttl=60)
    cache.put("series:2024-01-11:bb", [2], ttl=60)
    cache.put("modes", [], ttl=60)
    cache.invalidate("series")
    assert cache.get("series:2024-01-10:aa") is None
    assert cache.get("series:2024-01-11:bb") is None
    assert cache.get("modes") == []


def test_default_ttl_from_settings():
    """put() without explicit TTL uses settings.cache_ttl (900s)."""
    with patch("backend.app.cache.time") as mock_time, patch("backend.app.cache.get_settings") as mock_settings:
        mock_settings.return_value.cache_ttl = 900
        mock_time.monotonic.return_value = 0.0
        cache.put("default_ttl", "val")

        # Should still be alive at 899s
        mock_time.monotonic.return_value = 899.0
        assert cache.get("default_ttl") == "val"

        # Should be expired at 901s
        mock_time.monotonic.return_value = 901.0
        assert cache.get("default_ttl") is None


def test_snapshot_key_includes_cutoff_day():
    key = cache.snapshot_key("series", '{"daily":[]}', date(2024, 1, 11))
    assert key.startswith("series:2024-01-11:")
    assert key == cache.snapshot_key("series", '{"daily":[]}', date(2024, 1, 11))


def test_snapshot_key_differs_per_payload_and_day():
    a = cache.snapshot_key("series", '{"daily":[]}', date(2024, 1, 11))
    b = cache.snapshot_key("series", '{"daily":[1]}', date(2024, 1, 11))
    c = cache.snapshot_key("series", '{"daily":[]}', date(2024, 1, 12))
    assert len({a, b, c}) == 3


def test_put_sweeps_expired_entries():
    with patch("backend.app.cache.time") as mock_time:
        mock_time.monotonic.return_value = 1000.0
        cache.put("series:2024-01-10:aa", "old", ttl=10)
        cache.put("series:2024-01-10:bb", "fresh", ttl=100)

        # Never read again, but swept by the next write
        mock_time.monotonic.return_value = 1011.0
        cache.put("series:2024-01-11:cc", "new", ttl=10)

        assert "series:2024-01-10:aa" not in cache._store
        assert cache.get("series:2024-01-10:bb") == "fresh"
        assert cache.get("series:2024-01-11:cc") == "new"
