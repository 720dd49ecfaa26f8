"""Moves grid state to and from the attendance endpoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence

from ..api.schemas import (
    AttendanceSummaryResponse,
    ComputeAttendanceResponse,
    ComputedAttendanceRecord,
    FlatRecord,
    SaveResult,
)
from ..calendar.geometry import days_in_month
from ..core.constants import OVERTIME_WORK_MINUTES
from ..core.enums import AttendanceStatus
from ..core.exceptions import EmptySubmissionError
from .model import GridState
from .reconciliation import overtime_hours
from .store import EmployeeDays, MergeComputedAttendance, MergeSavedSummary, SavedDay

logger = logging.getLogger(__name__)


class AttendanceApi(Protocol):
    def get_attendance(self, month_key: str) -> AttendanceSummaryResponse:
        raise NotImplementedError

    def save_attendance(self, records: Sequence[FlatRecord], month_key: str) -> SaveResult:
        raise NotImplementedError

    def compute_attendance(self, start_date: str, end_date: str, *, overwrite: bool = True) -> ComputeAttendanceResponse:
        raise NotImplementedError

    def get_computed_attendance(self, start_date: str, end_date: str) -> list[ComputedAttendanceRecord]:
        raise NotImplementedError


# Biometric status -> grid code. Late and early-out days still count as present.
COMPUTED_STATUS_MAP: dict[str, AttendanceStatus] = {
    "Present": AttendanceStatus.PRESENT,
    "Late": AttendanceStatus.PRESENT,
    "Early Out": AttendanceStatus.PRESENT,
    "Late & Early Out": AttendanceStatus.PRESENT,
    "Half Day": AttendanceStatus.HALF_DAY,
    "Absent": AttendanceStatus.ABSENT,
}


def flatten(state: GridState) -> list[FlatRecord]:
    records = []
    for record in state.records.values():
        for iso_date, status in record.days.items():
            if status == AttendanceStatus.UNSET:
                continue
            detail = record.day_details.get(iso_date)
            out_time = detail.out_time if detail else None
            records.append(
                FlatRecord(
                    employee_id=record.employee_id,
                    attendance_date=iso_date,
                    status=status.value,
                    overtime_hours=overtime_hours(status, out_time),
                    is_weekly_off=status == AttendanceStatus.WEEKLY_OFF,
                    in_time=detail.in_time if detail else None,
                    out_time=out_time,
                )
            )
    return records


def map_computed_status(record: ComputedAttendanceRecord) -> AttendanceStatus:
    if record.work_duration_minutes > OVERTIME_WORK_MINUTES:
        return AttendanceStatus.OVERTIME
    return COMPUTED_STATUS_MAP.get(record.status, AttendanceStatus.PRESENT)


def month_range(state: GridState) -> tuple[str, str]:
    prefix = state.month_key
    return f"{prefix}-01", f"{prefix}-{days_in_month(state.year, state.month):02d}"


@dataclass(frozen=True)
class SyncOutcome:
    action: MergeComputedAttendance
    raw_punches: int
    records_computed: int


class AttendanceBridge:
    def __init__(self, api: AttendanceApi):
        self._api = api

    def save(self, state: GridState) -> SaveResult:
        records = flatten(state)
        if not records:
            raise EmptySubmissionError("No attendance records to save.")
        logger.info("Saving %d attendance records for %s", len(records), state.month_key)
        return self._api.save_attendance(records, state.month_key)

    def load(self, state: GridState) -> MergeSavedSummary:
        response = self._api.get_attendance(state.month_key)
        employees = [
            EmployeeDays(
                employee_id=summary.employee_id,
                days={
                    iso_date[:10]: SavedDay(
                        status=AttendanceStatus.parse(day.status),
                        in_time=day.in_time,
                        out_time=day.out_time,
                    )
                    for iso_date, day in summary.days.items()
                },
            )
            for summary in response.summary
        ]
        return MergeSavedSummary(month_key=state.month_key, employees=employees)

    def load_computed(self, state: GridState) -> MergeComputedAttendance:
        """Biometric days already computed on the server for the displayed month."""
        start, end = month_range(state)
        computed = self._api.get_computed_attendance(start, end)
        return MergeComputedAttendance(month_key=state.month_key, employees=group_computed(computed))

    def sync_biometric(self, state: GridState) -> SyncOutcome:
        start, end = month_range(state)
        stats = self._api.compute_attendance(start, end, overwrite=True).stats
        return SyncOutcome(
            action=self.load_computed(state),
            raw_punches=stats.raw_punches_found,
            records_computed=stats.records_computed,
        )


def group_computed(records: Iterable[ComputedAttendanceRecord]) -> list[EmployeeDays]:
    by_employee: dict[int, dict[str, SavedDay]] = {}
    for r in records:
        by_employee.setdefault(r.employee_id, {})[r.attendance_date] = SavedDay(
            status=map_computed_status(r),
            in_time=r.first_in,
            out_time=r.last_out,
            late_by=r.late_by_minutes,
            early_by=r.early_out_minutes,
            work_minutes=r.work_duration_minutes or None,
            total_punches=r.total_punches,
        )
    return [EmployeeDays(employee_id=emp_id, days=days) for emp_id, days in by_employee.items()]
