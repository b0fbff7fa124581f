"""Pytest configuration and shared fixtures."""

from contextlib import asynccontextmanager
from datetime import date, timedelta
from typing import Any

import pytest
import asyncio
import httpx

from backend.app.main import app
from backend.app.schemas import DailyRecord, WeeklyRecord


# No-op lifespan so the test client skips startup logging and cache teardown
@asynccontextmanager
async def _noop_lifespan(app):
    yield


app.router.lifespan_context = _noop_lifespan


START = date(2024, 1, 1)


def _make_daily(subtotals: list[int | None], start: date = START) -> list[DailyRecord]:
    """Consecutive daily records starting at ``start``."""
    return [
        DailyRecord(date=start + timedelta(days=i), subtotal=value)
        for i, value in enumerate(subtotals)
    ]


@pytest.fixture
def make_daily():
    """Factory for consecutive daily records."""
    return _make_daily


@pytest.fixture
def daily_records() -> list[DailyRecord]:
    """Ten days of reports, 2024-01-01 .. 2024-01-10, with one gap."""
    return _make_daily([10, 20, 30, None, 50, 60, 70, 80, 90, 100])


@pytest.fixture
def weekly_records() -> list[WeeklyRecord]:
    return [
        WeeklyRecord(start_date=date(2024, 1, 1), end_date=date(2024, 1, 7), subtotal=280),
        WeeklyRecord(start_date=date(2024, 1, 8), end_date=date(2024, 1, 14), subtotal=350),
    ]


class SyncASGIClient:
    """Synchronous wrapper driving the ASGI app through httpx."""

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        async def _send():
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
                return await c.request(method, path, **kwargs)

        return asyncio.run(_send())

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return self._request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return self._request("POST", path, **kwargs)


@pytest.fixture
def client():
    """Test client for the FastAPI app."""
    yield SyncASGIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    """Clear the in-memory cache before each test."""
    from backend.app import cache

    cache.invalidate()
    yield
    cache.invalidate()
