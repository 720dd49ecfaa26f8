"""Counter bookkeeping for attendance records.

Every status change goes through :func:`set_status`, which removes the old
day's contribution before adding the new one, so counters never drift from
the ``days`` map. Server merges use :func:`recompute` instead.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Union

from ..common.datetime_utils import time_to_decimal
from ..core.constants import OVERTIME_DAY_HOURS, STANDARD_SHIFT_END_HOURS
from ..core.enums import AttendanceStatus
from .model import COUNTER_FIELDS, Counters, DayDetail, EmployeeAttendanceRecord

StatusLike = Union[AttendanceStatus, str, None]


def overtime_hours(status: StatusLike, out_time: Optional[str]) -> float:
    status = AttendanceStatus.parse(status)
    if status == AttendanceStatus.OVERTIME:
        return OVERTIME_DAY_HOURS
    if status == AttendanceStatus.PRESENT and out_time:
        extra = time_to_decimal(out_time) - STANDARD_SHIFT_END_HOURS
        if extra > 0:
            return round(extra, 2)
    return 0.0


WORKED_STATUSES = (AttendanceStatus.PRESENT, AttendanceStatus.HALF_DAY, AttendanceStatus.OVERTIME)


def monthly_hours(record: EmployeeAttendanceRecord) -> float:
    """Hours worked over the month on P, HD and OT days.

    Days without recorded times fall back to the record's standard shift.
    Half days count half, and a day whose out time is not after its in
    time adds nothing.
    """
    total = 0.0
    for iso_date, status in record.days.items():
        if status not in WORKED_STATUSES:
            continue
        detail = record.day_details.get(iso_date) or DayDetail()
        start = time_to_decimal(detail.in_time or record.std_in_time)
        end = time_to_decimal(detail.out_time or record.std_out_time)
        if end <= start:
            continue
        hours = end - start
        if status == AttendanceStatus.HALF_DAY:
            hours /= 2
        total += hours
    return round(total, 2)


def contribution(status: StatusLike, detail: Optional[DayDetail] = None) -> Counters:
    """Counters produced by a single day."""
    status = AttendanceStatus.parse(status)
    values: dict = {"overtime": overtime_hours(status, detail.out_time if detail else None)}
    name = COUNTER_FIELDS.get(status)
    if name:
        values[name] = 1
    return Counters(**values)


def set_status(
    record: EmployeeAttendanceRecord,
    iso_date: str,
    status: StatusLike,
    detail: Optional[DayDetail] = None,
) -> EmployeeAttendanceRecord:
    status = AttendanceStatus.parse(status)
    old_status = record.days.get(iso_date, AttendanceStatus.UNSET)
    old_detail = record.day_details.get(iso_date)
    new_detail = (old_detail or DayDetail()).merged(detail)

    counters = record.counters - contribution(old_status, old_detail) + contribution(status, new_detail)

    days = dict(record.days)
    days[iso_date] = status
    day_details = dict(record.day_details)
    if new_detail.is_empty():
        day_details.pop(iso_date, None)
    else:
        day_details[iso_date] = new_detail

    return replace(record, days=days, day_details=day_details, counters=counters)


def recompute(record: EmployeeAttendanceRecord) -> EmployeeAttendanceRecord:
    """Rebuild counters from scratch by scanning ``days``."""
    counters = Counters()
    for iso_date, status in record.days.items():
        counters = counters + contribution(status, record.day_details.get(iso_date))
    return replace(record, counters=counters)


def counters_consistent(record: EmployeeAttendanceRecord) -> bool:
    return recompute(record).counters == record.counters
