from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, fields
from datetime import date
from typing import Callable, Optional, Protocol

from ..calendar.geometry import days_in_month, group_by_week, month_label, shift_month
from ..common.datetime_utils import format_minutes, parse_iso_date, today_local
from ..common.outcome import Outcome
from ..common.validators import optional_hhmm, require_non_empty
from ..core.constants import DEFAULT_EMPLOYEE_FETCH_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import ApiError, ValidationError
from .bridge import AttendanceApi, AttendanceBridge
from .model import Counters, DayDetail, Employee, EmployeeAttendanceRecord, GridState, Holiday
from .reconciliation import monthly_hours
from .store import Action, SetStatusRange, failed_state, initialize_month, reduce
from .vocabulary import LEGEND, legend, style_of

logger = logging.getLogger(__name__)

SELECTABLE = {item.code for item in LEGEND}


class RosterApi(AttendanceApi, Protocol):
    def get_employees(self, *, limit: int = ..., status: str = ...) -> list[Employee]:
        raise NotImplementedError

    def get_holidays(self, year: int) -> list[Holiday]:
        raise NotImplementedError


@dataclass(frozen=True)
class LoadToken:
    """Identifies the view a request was issued for."""

    sequence: int
    month_key: str


class AttendanceGridService:
    """Owns the grid snapshot of one rendering context.

    State is only ever replaced, never mutated. Network results are applied
    only if the view they were requested for is still the current one.
    """

    def __init__(
        self,
        api: RosterApi,
        *,
        bridge: Optional[AttendanceBridge] = None,
        employee_limit: int = DEFAULT_EMPLOYEE_FETCH_LIMIT,
        today: Callable[[], date] = today_local,
    ):
        self._api = api
        self._bridge = bridge or AttendanceBridge(api)
        self._employee_limit = int(employee_limit)
        self._today = today
        self._lock = threading.Lock()
        self._sequence = 0
        current = self._today()
        self._token = LoadToken(0, f"{current.year:04d}-{current.month:02d}")
        self._state = GridState(year=current.year, month=current.month - 1)

    @property
    def state(self) -> GridState:
        return self._state

    @property
    def token(self) -> LoadToken:
        return self._token

    # Navigation

    def open_month(self, year: int, month: int) -> Outcome:
        days_in_month(year, month)
        with self._lock:
            self._sequence += 1
            token = LoadToken(self._sequence, f"{int(year):04d}-{int(month) + 1:02d}")
            self._token = token

        try:
            holidays = self._api.get_holidays(year)
            employees = self._api.get_employees(limit=self._employee_limit, status="active")
        except ApiError as e:
            logger.error("Loading roster for %s failed: %s", token.month_key, e)
            self._commit(token, failed_state(year, month, str(e), today=self._today()))
            return Outcome(False, str(e))

        state = initialize_month(year, month, employees, holidays, today=self._today())
        if not self._commit(token, state):
            return Outcome(False, "Discarded result for a month no longer displayed")
        self._load_computed(token, state)
        return self._load_saved(token, state)

    def previous_month(self) -> Outcome:
        return self.open_month(*shift_month(self._state.year, self._state.month, -1))

    def next_month(self) -> Outcome:
        return self.open_month(*shift_month(self._state.year, self._state.month, 1))

    def current_month(self) -> Outcome:
        today = self._today()
        return self.open_month(today.year, today.month - 1)

    # Server data

    def reload_saved(self) -> Outcome:
        token, state = self._snapshot()
        return self._load_saved(token, state)

    def _load_saved(self, token: LoadToken, state: GridState) -> Outcome:
        try:
            action = self._bridge.load(state)
        except ApiError as e:
            logger.error("Loading saved attendance for %s failed: %s", state.month_key, e)
            return Outcome(False, str(e))
        if not self._dispatch(token, action):
            return Outcome(False, "Discarded result for a month no longer displayed")
        return Outcome(True)

    def sync_biometric(self) -> Outcome:
        token, state = self._snapshot()
        try:
            result = self._bridge.sync_biometric(state)
        except ApiError as e:
            logger.error("Biometric sync for %s failed: %s", state.month_key, e)
            return Outcome(False, f"Sync failed: {e}")
        if not self._dispatch(token, result.action):
            return Outcome(False, "Discarded result for a month no longer displayed")
        return Outcome(
            True,
            f"Biometric sync complete! {result.raw_punches} punches -> "
            f"{result.records_computed} attendance records computed.",
        )

    def save(self) -> Outcome:
        state = self._state
        try:
            result = self._bridge.save(state)
        except (ValidationError, ApiError) as e:
            logger.error("Saving attendance for %s failed: %s", state.month_key, e)
            return Outcome(False, str(e))
        return Outcome(True, f"Saved successfully! {result.success_count} records updated.")

    # Editing

    def mark(
        self,
        employee_id: int,
        start: str,
        end: Optional[str] = None,
        status: str = AttendanceStatus.PRESENT.value,
        *,
        in_time: Optional[str] = None,
        out_time: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> Outcome:
        record = self._state.records.get(int(employee_id))
        if record is None:
            raise ValidationError("Employee not found in the displayed month")

        code = AttendanceStatus.parse(require_non_empty(status, "Attendance type"))
        if code not in SELECTABLE:
            raise ValidationError(f"Unknown attendance type: {status}")

        start_date = parse_iso_date(require_non_empty(start, "Start date"))
        end_date = parse_iso_date(end) if end else start_date
        if end_date < start_date:
            raise ValidationError("End date must not be before start date")

        detail = DayDetail(
            in_time=optional_hhmm(in_time, "In time"),
            out_time=optional_hhmm(out_time, "Out time"),
            reason=(reason or "").strip() or None,
        )
        self.dispatch(SetStatusRange(record.employee_id, start_date.isoformat(), end_date.isoformat(), code, detail))
        return Outcome(True, f"Attendance updated for {record.employee.name}")

    def dispatch(self, action: Action) -> GridState:
        with self._lock:
            self._state = reduce(self._state, action)
            return self._state

    # Read side

    def search(self, query: Optional[str] = None) -> list[EmployeeAttendanceRecord]:
        records = list(self._state.records.values())
        q = (query or "").strip().lower()
        if not q:
            return records
        return [
            r
            for r in records
            if q in r.employee.name.lower()
            or q in (r.employee.employee_code or "").lower()
            or q in (r.employee.biometric_code or "").lower()
        ]

    def summary_stats(self) -> dict:
        records = self._state.records.values()
        return {
            "total_employees": len(self._state.records),
            "with_biometric": sum(1 for r in records if r.employee.biometric_code),
            "total_present": sum(r.counters.present for r in records),
            "total_absent": sum(r.counters.absent for r in records),
            "days": len(self._state.days),
        }

    def grid(self, query: Optional[str] = None) -> dict:
        state = self._state
        rows = self.search(query)
        return {
            "month": state.month_key,
            "label": month_label(state.year, state.month),
            "version": state.version,
            "error": state.error,
            "days": [d.to_dict() for d in state.days],
            "weeks": {n: [d.iso_date for d in days] for n, days in group_by_week(state.days).items()},
            "legend": legend(),
            "stats": self.summary_stats(),
            "shown": len(rows),
            "employees": [
                {
                    **r.to_dict(),
                    "totalHours": monthly_hours(r),
                    "overtimeLabel": format_minutes(round(r.counters.overtime * 60)),
                    "cells": {k: _cell(v, r.day_details.get(k)) for k, v in r.days.items()},
                }
                for r in rows
            ],
        }

    def export_rows(self) -> tuple[list[str], list[dict]]:
        state = self._state
        counter_names = [f.name for f in fields(Counters)]
        fieldnames = ["employee_code", "name"] + [d.iso_date for d in state.days] + counter_names + ["total_hours"]
        rows = []
        for r in state.records.values():
            row = {"employee_code": r.employee.employee_code, "name": r.employee.name}
            row.update({d.iso_date: r.days.get(d.iso_date, AttendanceStatus.UNSET).value for d in state.days})
            row.update(r.counters.to_dict())
            row["total_hours"] = monthly_hours(r)
            rows.append(row)
        return fieldnames, rows

    # Internals

    def _snapshot(self) -> tuple[LoadToken, GridState]:
        with self._lock:
            return self._token, self._state

    def _commit(self, token: LoadToken, state: GridState) -> bool:
        with self._lock:
            if token != self._token:
                logger.info("Discarding grid for %s: view moved to %s", token.month_key, self._token.month_key)
                return False
            self._state = state
            return True

    def _dispatch(self, token: LoadToken, action: Action) -> bool:
        with self._lock:
            if token != self._token:
                logger.info("Discarding server data for %s: view moved to %s", token.month_key, self._token.month_key)
                return False
            self._state = reduce(self._state, action)
            return True

    def _load_computed(self, token: LoadToken, state: GridState) -> None:
        # Months without biometric data keep their defaults.
        try:
            action = self._bridge.load_computed(state)
        except ApiError as e:
            logger.warning("Loading computed attendance for %s failed: %s", state.month_key, e)
            return
        self._dispatch(token, action)


def _cell(status: AttendanceStatus, detail: Optional[DayDetail]) -> dict:
    cell = style_of(status).to_dict()
    if detail is not None:
        cell["lateByLabel"] = format_minutes(detail.late_by)
        cell["earlyByLabel"] = format_minutes(detail.early_by)
        cell["workLabel"] = format_minutes(detail.work_minutes)
    return cell
