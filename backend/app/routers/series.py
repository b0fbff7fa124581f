from datetime import datetime

import structlog
from fastapi import APIRouter, Query

from backend.app import cache
from backend.app.schemas import SeriesOut, SnapshotIn
from backend.app.services.aggregation import calendar_day
from backend.app.services.selector import SeriesMode, SeriesSelector, build_series

router = APIRouter(tags=["series"])
logger = structlog.get_logger()


def _get_selector(snapshot: SnapshotIn, now: datetime) -> SeriesSelector:
    """Return a fresh selector over this snapshot's series.

    Only the read-only series mapping is cached; every request gets its own
    selector, so modes never leak between requests.
    """
    payload = snapshot.model_dump_json(include={"daily", "weekly"})
    key = cache.snapshot_key("series", payload, calendar_day(now))
    series = cache.get(key)
    if series is None:
        logger.debug("Series cache miss", key=key)
        series = build_series(snapshot.daily, snapshot.weekly, now)
        cache.put(key, series)
    return SeriesSelector.from_series(series)


@router.get("/series/modes", response_model=list[str])
async def list_modes():
    return SeriesMode.values()


@router.post("/series", response_model=SeriesOut)
async def get_series(
    snapshot: SnapshotIn,
    mode: str | None = Query(None, description="daily-transition, weekly-transition or daily-cumulative"),
):
    """Return the chart series and summary metrics for one mode."""
    now = snapshot.now or datetime.utcnow()
    selector = _get_selector(snapshot, now)
    if mode is not None:
        selector.set_mode(mode)

    return SeriesOut(
        mode=selector.mode,
        series=selector.active_series(),
        summary=selector.summary(),
    )
