"""Aggregation utilities for time-series case data."""

from collections import deque
from datetime import date, datetime
from typing import Iterable

from backend.app.schemas import (
    ChartSeries,
    CumulativePoint,
    DailyRecord,
    Dataset,
    SeriesPoint,
    WeeklyRecord,
)

AVERAGE_WINDOW_DAYS = 7

# Lower draw order is layered in front.
FRONT_DRAW_ORDER = 1
BACK_DRAW_ORDER = 2


def calendar_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def is_before_cutoff(day: date, now: date | datetime) -> bool:
    """True if ``day`` lies strictly before the calendar day of ``now``.

    The cutoff day itself is the current, still incomplete reporting day and
    is excluded, as is anything dated after it.
    """
    return calendar_day(day) < calendar_day(now)


def get_daily_transition(
    records: Iterable[DailyRecord],
    now: date | datetime,
    window_days: int = AVERAGE_WINDOW_DAYS,
) -> list[SeriesPoint]:
    """Get per-day counts with a trailing moving average.

    The average for a day covers that day and the ``window_days - 1``
    records before it. It is left undefined until a full window is
    available and when none of the windowed subtotals are reported.
    Missing subtotals are excluded from both the sum and the divisor.
    """
    ordered = sorted(records, key=lambda r: r.date)

    window: deque[int | None] = deque()
    window_sum = 0
    window_defined = 0
    points = []
    for record in ordered:
        window.append(record.subtotal)
        if record.subtotal is not None:
            window_sum += record.subtotal
            window_defined += 1
        if len(window) > window_days:
            dropped = window.popleft()
            if dropped is not None:
                window_sum -= dropped
                window_defined -= 1

        average = None
        if len(window) == window_days and window_defined > 0:
            average = window_sum / window_defined

        if is_before_cutoff(record.date, now):
            points.append(SeriesPoint(date=record.date, count=record.subtotal, average=average))

    return points


def build_daily_transition_series(
    records: Iterable[DailyRecord],
    now: date | datetime,
    window_days: int = AVERAGE_WINDOW_DAYS,
    unit: str = "cases",
) -> ChartSeries:
    points = get_daily_transition(records, now, window_days)
    return ChartSeries(
        dates=[p.date for p in points],
        datasets=[
            Dataset(
                kind="bar",
                title="Daily cases",
                unit=unit,
                values=[p.count for p in points],
                draw_order=BACK_DRAW_ORDER,
            ),
            Dataset(
                kind="line",
                title=f"{window_days}-day moving average",
                unit=unit,
                values=[p.average for p in points],
                draw_order=FRONT_DRAW_ORDER,
            ),
        ],
    )


def build_weekly_transition_series(
    records: Iterable[WeeklyRecord],
    now: date | datetime,
    unit: str = "cases",
) -> ChartSeries:
    """Build the weekly series from pre-bucketed weeks.

    Input order is kept as given; bucketing and ordering the weeks is up to
    whoever produced them.
    """
    weeks = [r for r in records if is_before_cutoff(r.start_date, now)]
    return ChartSeries(
        dates=[(r.start_date, r.end_date) for r in weeks],
        datasets=[
            Dataset(
                kind="bar",
                title="Weekly cases",
                unit=unit,
                values=[r.subtotal for r in weeks],
                draw_order=FRONT_DRAW_ORDER,
            ),
        ],
    )


def get_cumulative_totals(
    records: Iterable[DailyRecord],
    now: date | datetime,
) -> list[CumulativePoint]:
    """Get the running total of cases, in input order.

    Records are expected in ascending date order. Missing subtotals add 0.
    """
    total = 0
    points = []
    for record in records:
        if not is_before_cutoff(record.date, now):
            continue
        total += record.subtotal or 0
        points.append(CumulativePoint(date=record.date, total=total))
    return points


def build_cumulative_series(
    records: Iterable[DailyRecord],
    now: date | datetime,
    unit: str = "cases",
) -> ChartSeries:
    points = get_cumulative_totals(records, now)
    return ChartSeries(
        dates=[p.date for p in points],
        datasets=[
            Dataset(
                kind="bar",
                title="Cumulative cases",
                unit=unit,
                values=[p.total for p in points],
                draw_order=FRONT_DRAW_ORDER,
            ),
        ],
    )
