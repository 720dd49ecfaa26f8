"""Grid state construction and the ``(state, action) -> state`` reducer."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence, Union

from ..calendar.geometry import build_month, is_default_off_saturday
from ..common.datetime_utils import iter_dates, parse_iso_date
from ..core.enums import AttendanceStatus
from .model import Counters, DayDetail, Employee, EmployeeAttendanceRecord, GridState, Holiday
from .reconciliation import contribution, recompute, set_status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SavedDay:
    status: AttendanceStatus
    in_time: Optional[str] = None
    out_time: Optional[str] = None
    late_by: Optional[int] = None
    early_by: Optional[int] = None
    work_minutes: Optional[int] = None
    total_punches: Optional[int] = None


@dataclass(frozen=True)
class EmployeeDays:
    """Server-reported statuses for one employee."""

    employee_id: int
    days: Mapping[str, SavedDay] = field(default_factory=dict)


@dataclass(frozen=True)
class SetStatus:
    employee_id: int
    date: str
    status: AttendanceStatus
    detail: Optional[DayDetail] = None


@dataclass(frozen=True)
class SetStatusRange:
    employee_id: int
    start: str
    end: str
    status: AttendanceStatus
    detail: Optional[DayDetail] = None


@dataclass(frozen=True)
class MergeSavedSummary:
    month_key: str
    employees: Sequence[EmployeeDays] = ()


@dataclass(frozen=True)
class MergeComputedAttendance:
    month_key: str
    employees: Sequence[EmployeeDays] = ()


Action = Union[SetStatus, SetStatusRange, MergeSavedSummary, MergeComputedAttendance]


def initialize_month(
    year: int,
    month: int,
    employees: Iterable[Employee],
    holidays: Iterable[Holiday] = (),
    *,
    today: Optional[date] = None,
) -> GridState:
    """Fresh grid: holiday > Sunday > 2nd/4th Saturday > present."""
    days = tuple(build_month(year, month, today=today))
    prefix = f"{year:04d}-{month + 1:02d}-"
    holiday_dates = {h.date[:10] for h in holidays if h.date and h.date[:10].startswith(prefix)}

    defaults: dict[str, AttendanceStatus] = {}
    for day in days:
        if day.iso_date in holiday_dates:
            defaults[day.iso_date] = AttendanceStatus.HOLIDAY
        elif day.is_sunday or is_default_off_saturday(day):
            defaults[day.iso_date] = AttendanceStatus.WEEKLY_OFF
        else:
            defaults[day.iso_date] = AttendanceStatus.PRESENT

    counters = Counters()
    for status in defaults.values():
        counters = counters + contribution(status)

    records = {}
    for emp in employees:
        records[emp.employee_id] = EmployeeAttendanceRecord(
            employee=emp,
            days=dict(defaults),
            day_details={},
            counters=counters,
        )
    return GridState(year=year, month=month, days=days, records=records)


def failed_state(year: int, month: int, message: str, *, today: Optional[date] = None) -> GridState:
    return GridState(year=year, month=month, days=tuple(build_month(year, month, today=today)), error=message)


def reduce(state: GridState, action: Action) -> GridState:
    if isinstance(action, SetStatus):
        return _set_one(state, action.employee_id, action.date, action.status, action.detail)
    if isinstance(action, SetStatusRange):
        return _set_range(state, action)
    if isinstance(action, (MergeSavedSummary, MergeComputedAttendance)):
        return _merge(state, action.month_key, action.employees)
    raise TypeError(f"Unsupported action: {action!r}")


def _set_one(state: GridState, employee_id: int, iso_date: str, status, detail) -> GridState:
    record = state.records.get(employee_id)
    if record is None or not state.has_date(iso_date):
        return state
    return state.with_record(set_status(record, iso_date, status, detail))


def _set_range(state: GridState, action: SetStatusRange) -> GridState:
    record = state.records.get(action.employee_id)
    if record is None or not state.days:
        return state

    # Dates outside the displayed month are dropped, not deferred.
    start = max(parse_iso_date(action.start), parse_iso_date(state.days[0].iso_date))
    end = min(parse_iso_date(action.end), parse_iso_date(state.days[-1].iso_date))
    changed = False
    for d in iter_dates(start, end):
        record = set_status(record, d.isoformat(), action.status, action.detail)
        changed = True
    return state.with_record(record) if changed else state


def _merge(state: GridState, key: str, employees: Sequence[EmployeeDays]) -> GridState:
    if key != state.month_key:
        logger.warning("Dropping attendance for %s: grid shows %s", key, state.month_key)
        return state

    visible = {d.iso_date for d in state.days}
    records = dict(state.records)
    for emp_days in employees:
        record = records.get(emp_days.employee_id)
        if record is None:
            continue

        days = dict(record.days)
        day_details = dict(record.day_details)
        for iso_date, saved in emp_days.days.items():
            if iso_date not in visible:
                continue
            days[iso_date] = saved.status
            previous = day_details.get(iso_date) or DayDetail()
            # Times are server-authoritative; the reason and biometric figures
            # survive a merge that does not report them.
            detail = replace(
                previous.merged(
                    DayDetail(
                        late_by=saved.late_by,
                        early_by=saved.early_by,
                        work_minutes=saved.work_minutes,
                        total_punches=saved.total_punches,
                    )
                ),
                in_time=saved.in_time,
                out_time=saved.out_time,
            )
            if detail.is_empty():
                day_details.pop(iso_date, None)
            else:
                day_details[iso_date] = detail

        records[emp_days.employee_id] = recompute(replace(record, days=days, day_details=day_details))

    return replace(state, records=records, version=state.version + 1)
