from datetime import date

import pytest

from src.attendance_grid.attendance_grid.calendar.geometry import (
    build_month,
    days_in_month,
    group_by_week,
    is_default_off_saturday,
    month_label,
    shift_month,
)
from src.attendance_grid.attendance_grid.core.exceptions import ValidationError


def test_leap_february_has_29_days_with_week_numbers():
    days = build_month(2024, 1, today=date(2024, 2, 15))

    assert len(days) == 29
    assert days[0].iso_date == "2024-02-01"
    assert days[0].day_name == "Thu"
    assert days[0].weekday == 4
    # Feb 1 2024 is a Thursday: first week is Thu..Sat
    assert [d.week_number for d in days[:4]] == [1, 1, 1, 2]
    assert days[-1].iso_date == "2024-02-29"
    assert days[-1].week_number == 5


def test_weekday_flags_and_today():
    days = build_month(2024, 1, today=date(2024, 2, 15))

    sundays = [d.day for d in days if d.is_sunday]
    saturdays = [d.day for d in days if d.is_saturday]
    assert sundays == [4, 11, 18, 25]
    assert saturdays == [3, 10, 17, 24]
    assert [d.day for d in days if d.is_today] == [15]


def test_second_and_fourth_saturdays_are_default_off():
    days = build_month(2024, 1, today=date(2024, 2, 15))

    off = [d.day for d in days if is_default_off_saturday(d)]
    assert off == [10, 24]


def test_group_by_week_keeps_order():
    weeks = group_by_week(build_month(2024, 1, today=date(2024, 2, 15)))

    assert list(weeks) == [1, 2, 3, 4, 5]
    assert [d.day for d in weeks[1]] == [1, 2, 3]
    assert [d.day for d in weeks[5]] == [25, 26, 27, 28, 29]


def test_month_rollover_and_navigation():
    assert days_in_month(2023, 1) == 28
    assert days_in_month(2024, 11) == 31
    assert shift_month(2024, 0, -1) == (2023, 11)
    assert shift_month(2024, 11, 1) == (2025, 0)
    assert month_label(2024, 1) == "February 2024"


def test_month_out_of_range_is_rejected():
    with pytest.raises(ValidationError):
        build_month(2024, 12)
