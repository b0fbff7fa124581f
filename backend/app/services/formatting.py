"""Display formatting for summary metrics."""

from datetime import date


def _as_number(value: int | float) -> int | float:
    """Collapse integral floats (including -0.0) to int."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def format_count(value: int | float) -> str:
    value = _as_number(value)
    if isinstance(value, int):
        return f"{value:,}"
    return f"{value:,.1f}"


def format_signed_difference(value: int | float) -> str:
    """Format a period-over-period difference with an explicit sign.

    Zero and positive values get a leading "+", negative values keep their
    "-": 0 -> "+0", 12 -> "+12", -3 -> "-3", 2.25 -> "+2.2".
    """
    value = _as_number(value)
    if isinstance(value, int):
        return f"{value:+,}"
    return f"{value:+,.1f}"


def format_date_label(
    value: date | tuple[date, date],
    date_format: str = "%Y-%m-%d",
    separator: str = " ~ ",
) -> str:
    if isinstance(value, tuple):
        start, end = value
        return f"{start.strftime(date_format)}{separator}{end.strftime(date_format)}"
    return value.strftime(date_format)
