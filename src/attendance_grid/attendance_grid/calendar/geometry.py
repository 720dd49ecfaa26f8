"""Month layout for the attendance grid.

Weekdays follow the grid convention: 0 = Sunday ... 6 = Saturday. All dates
are naive local dates so generation and lookup keys always agree.
"""

from __future__ import annotations

import math
from calendar import monthrange
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import today_local
from ..core.constants import OFF_SATURDAYS
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class CalendarDay:
    day: int
    iso_date: str
    day_name: str
    weekday: int
    week_number: int
    is_sunday: bool
    is_saturday: bool
    is_today: bool

    def to_dict(self) -> dict:
        return {
            "date": self.day,
            "fullDate": self.iso_date,
            "dayName": self.day_name,
            "dayOfWeek": self.weekday,
            "weekNumber": self.week_number,
            "isSunday": self.is_sunday,
            "isSaturday": self.is_saturday,
            "isToday": self.is_today,
        }


def grid_weekday(d: date) -> int:
    return d.isoweekday() % 7


def days_in_month(year: int, month: int) -> int:
    _check_month(month)
    return monthrange(int(year), int(month) + 1)[1]


def build_month(year: int, month: int, *, today: Optional[date] = None) -> list[CalendarDay]:
    """Every day of the zero-based ``month`` annotated for rendering."""
    _check_month(month)
    today = today or today_local()
    first_offset = grid_weekday(date(year, month + 1, 1))

    days = []
    for d in range(1, days_in_month(year, month) + 1):
        current = date(year, month + 1, d)
        weekday = grid_weekday(current)
        days.append(
            CalendarDay(
                day=d,
                iso_date=current.isoformat(),
                day_name=current.strftime("%a"),
                weekday=weekday,
                week_number=math.ceil((d + first_offset) / 7),
                is_sunday=weekday == 0,
                is_saturday=weekday == 6,
                is_today=current == today,
            )
        )
    return days


def group_by_week(days: Iterable[CalendarDay]) -> dict[int, list[CalendarDay]]:
    weeks: dict[int, list[CalendarDay]] = {}
    for day in days:
        weeks.setdefault(day.week_number, []).append(day)
    return weeks


def saturday_of_month(day: CalendarDay) -> int:
    return math.ceil(day.day / 7)


def is_default_off_saturday(day: CalendarDay) -> bool:
    return day.is_saturday and saturday_of_month(day) in OFF_SATURDAYS


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move a zero-based (year, month) by ``delta`` months."""
    total = int(year) * 12 + int(month) + int(delta)
    return total // 12, total % 12


def month_label(year: int, month: int) -> str:
    return date(year, month + 1, 1).strftime("%B %Y")


def _check_month(month: int) -> None:
    if not 0 <= int(month) <= 11:
        raise ValidationError(f"Month must be 0-11, got {month}")
