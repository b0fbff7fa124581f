"""Mode-based access to the precomputed case series."""

from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

import structlog

from backend.app.config import Settings, get_settings
from backend.app.schemas import ChartSeries, DailyRecord, SummaryOut, WeeklyRecord
from backend.app.services.aggregation import (
    build_cumulative_series,
    build_daily_transition_series,
    build_weekly_transition_series,
)
from backend.app.services.formatting import (
    format_count,
    format_date_label,
    format_signed_difference,
)

logger = structlog.get_logger()


class SeriesMode(str, Enum):
    DAILY_TRANSITION = "daily-transition"
    WEEKLY_TRANSITION = "weekly-transition"
    DAILY_CUMULATIVE = "daily-cumulative"

    @classmethod
    def values(cls) -> list[str]:
        return [m.value for m in cls]


def build_series(
    daily_records: Iterable[DailyRecord],
    weekly_records: Iterable[WeeklyRecord],
    now: date | datetime,
    settings: Settings | None = None,
) -> Mapping[str, ChartSeries]:
    """Aggregate one input snapshot into a read-only mode -> series mapping."""
    settings = settings or get_settings()
    daily_records = list(daily_records)
    unit = settings.case_unit
    series = {
        SeriesMode.DAILY_TRANSITION.value: build_daily_transition_series(
            daily_records, now, window_days=settings.average_window_days, unit=unit,
        ),
        SeriesMode.WEEKLY_TRANSITION.value: build_weekly_transition_series(
            weekly_records, now, unit=unit,
        ),
        SeriesMode.DAILY_CUMULATIVE.value: build_cumulative_series(
            daily_records, now, unit=unit,
        ),
    }
    logger.info(
        "Case series built",
        cutoff=str(now),
        points={mode: len(s.dates) for mode, s in series.items()},
    )
    return MappingProxyType(series)


class SeriesSelector:
    """Holds the three series built from one input snapshot.

    All series are aggregated once, at construction. Switching modes only
    changes which of them is exposed; a refreshed snapshot needs a new
    selector. Selectors over an already built mapping come from
    ``from_series`` and share the series without aggregating again.
    """

    def __init__(
        self,
        daily_records: Iterable[DailyRecord],
        weekly_records: Iterable[WeeklyRecord],
        now: date | datetime,
        settings: Settings | None = None,
    ):
        settings = settings or get_settings()
        self._attach(build_series(daily_records, weekly_records, now, settings), settings)

    @classmethod
    def from_series(
        cls,
        series: Mapping[str, ChartSeries],
        settings: Settings | None = None,
    ) -> "SeriesSelector":
        selector = cls.__new__(cls)
        selector._attach(series, settings or get_settings())
        return selector

    def _attach(self, series: Mapping[str, ChartSeries], settings: Settings) -> None:
        self._settings = settings
        self._mode = settings.default_mode
        self._series = series

    @property
    def mode(self) -> str:
        return self._mode

    def set_mode(self, mode: SeriesMode | str) -> None:
        self._mode = mode.value if isinstance(mode, SeriesMode) else mode

    def active_series(self) -> ChartSeries:
        """Return the series for the current mode, or an empty one for unknown modes."""
        return self._series.get(self._mode, ChartSeries())

    def summary(self) -> SummaryOut:
        """Derive the latest value and its change from the active series.

        Always reads the first dataset (the per-period counts), whatever the
        mode. The diff is the latest value minus the one before it.
        """
        placeholder = self._settings.summary_placeholder
        series = self.active_series()
        if not series.datasets or not series.datasets[0].values:
            return SummaryOut(
                latest_value=placeholder,
                latest_label=placeholder,
                diff=placeholder,
                unit="",
            )

        dataset = series.datasets[0]
        latest = dataset.values[-1]
        previous = dataset.values[-2] if len(dataset.values) >= 2 else None

        diff = placeholder
        if latest is not None and previous is not None:
            diff = format_signed_difference(latest - previous)

        return SummaryOut(
            latest_value=format_count(latest) if latest is not None else placeholder,
            latest_label=format_date_label(
                series.dates[-1],
                self._settings.date_format,
                self._settings.date_range_separator,
            ),
            diff=diff,
            unit=dataset.unit,
        )
