from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator, Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string (or the date part of an ISO timestamp) into date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()
    except ValueError as e:
        raise ValidationError(f"Invalid date: {value!r}") from e


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now().date()


def month_key(year: int, month: int) -> str:
    """Zero-based month to the YYYY-MM key used by the attendance endpoint."""
    return f"{int(year):04d}-{int(month) + 1:02d}"


def parse_month_key(value: str) -> tuple[int, int]:
    try:
        parsed = datetime.strptime(value, "%Y-%m")
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid month: {value!r}") from e
    return parsed.year, parsed.month - 1


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Inclusive day range; empty when end precedes start."""
    current = start
    while current <= end:
        yield current
        if current == date.max:
            return
        current += timedelta(days=1)


def time_to_decimal(value: Optional[str]) -> float:
    """'19:45' -> 19.75. Empty input is 0."""
    if not value:
        return 0.0
    parts = str(value).strip().split(":")
    try:
        hours = int(parts[0])
        minutes = int(parts[1]) if len(parts) > 1 and parts[1] else 0
    except ValueError as e:
        raise ValidationError(f"Invalid time: {value!r}") from e
    return hours + minutes / 60


def short_time(value) -> Optional[str]:
    """Trim a server TIME value ('08:30:00') to HH:MM."""
    if value is None or value == "":
        return None
    return str(value)[:5]


def format_minutes(minutes) -> str:
    """90 -> '1h 30m', 60 -> '1h', 45 -> '45m', 0 -> ''."""
    if not minutes or minutes <= 0:
        return ""
    minutes = int(minutes)
    hours, mins = divmod(minutes, 60)
    if hours and mins:
        return f"{hours}h {mins}m"
    if hours:
        return f"{hours}h"
    return f"{mins}m"
