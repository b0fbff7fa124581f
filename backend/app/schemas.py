from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, field_validator, model_validator


def _calendar_day(value):
    """Drop the time-of-day part of datetime inputs and ISO timestamp strings.

    Strings that are not ISO timestamps are passed through for the regular
    date validation to accept or reject.
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            return value
    if isinstance(value, datetime):
        return value.date()
    return value


# --- Record schemas ---

class DailyRecord(BaseModel):
    date: date
    subtotal: int | None = None  # None = not reported yet

    model_config = {"frozen": True}

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, value):
        return _calendar_day(value)


class WeeklyRecord(BaseModel):
    start_date: date
    end_date: date
    subtotal: int

    model_config = {"frozen": True}

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _normalize_dates(cls, value):
        return _calendar_day(value)


# --- Point schemas ---

class SeriesPoint(BaseModel):
    date: date
    count: int | None = None
    average: float | None = None


class CumulativePoint(BaseModel):
    date: date
    total: int


# --- Chart schemas ---

class Dataset(BaseModel):
    kind: Literal["bar", "line"]
    title: str
    unit: str
    values: tuple[int | float | None, ...] = ()
    draw_order: int = 0  # lower is drawn in front

    model_config = {"frozen": True}


class ChartSeries(BaseModel):
    dates: tuple[date | tuple[date, date], ...] = ()
    datasets: tuple[Dataset, ...] = ()

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_alignment(self):
        for dataset in self.datasets:
            if len(dataset.values) != len(self.dates):
                raise ValueError(
                    f"dataset '{dataset.title}' has {len(dataset.values)} values "
                    f"for {len(self.dates)} dates"
                )
        return self


# --- API schemas ---

class SnapshotIn(BaseModel):
    daily: list[DailyRecord] = []
    weekly: list[WeeklyRecord] = []
    now: datetime | None = None


class SummaryOut(BaseModel):
    latest_value: str
    latest_label: str
    diff: str
    unit: str


class SeriesOut(BaseModel):
    mode: str
    series: ChartSeries
    summary: SummaryOut
