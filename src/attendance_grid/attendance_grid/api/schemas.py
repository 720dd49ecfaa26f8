"""Response/request shapes of the CRM REST endpoints.

Payloads are validated here once so business code never sees the loose
``employees | data`` style shapes the backend returns.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator

from ..attendance.model import Employee, Holiday
from ..common.datetime_utils import short_time
from ..core.exceptions import ApiError


class _Schema(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class EmployeeRecord(_Schema):
    id: int
    employee_id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    name: Optional[str] = None
    biometric_code: Optional[str] = None

    @field_validator("employee_id", "biometric_code", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)

    def to_domain(self) -> Employee:
        full_name = " ".join(p for p in (self.first_name, self.last_name) if p) or (self.name or "")
        return Employee(
            employee_id=self.id,
            employee_code=self.employee_id or "",
            name=full_name,
            biometric_code=self.biometric_code or None,
        )


class HolidayRecord(_Schema):
    date: str
    name: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def _date_part(cls, value: Any) -> str:
        return str(value)[:10]

    def to_domain(self) -> Holiday:
        return Holiday(date=self.date, name=self.name or "")


class SavedDayRecord(_Schema):
    status: Optional[str] = None
    in_time: Optional[str] = None
    out_time: Optional[str] = None

    @field_validator("in_time", "out_time", mode="before")
    @classmethod
    def _hhmm(cls, value: Any) -> Optional[str]:
        return short_time(value)


class EmployeeSummaryRecord(_Schema):
    employee_id: int
    days: dict[str, SavedDayRecord] = Field(default_factory=dict)


class AttendanceSummaryResponse(_Schema):
    summary: list[EmployeeSummaryRecord] = Field(default_factory=list)


class FlatRecord(_Schema):
    employee_id: int
    attendance_date: str
    status: str
    overtime_hours: float = 0.0
    is_weekly_off: bool = False
    in_time: Optional[str] = None
    out_time: Optional[str] = None


class SaveResult(_Schema):
    success_count: int = Field(default=0, alias="successCount")
    error_count: int = Field(default=0, alias="errorCount")
    message: Optional[str] = None


class ComputedAttendanceRecord(_Schema):
    employee_id: int
    attendance_date: str
    status: Optional[str] = None
    first_in: Optional[str] = None
    last_out: Optional[str] = None
    work_duration_minutes: int = 0
    late_by_minutes: Optional[int] = None
    early_out_minutes: Optional[int] = None
    total_punches: Optional[int] = None

    @field_validator("attendance_date", mode="before")
    @classmethod
    def _date_part(cls, value: Any) -> str:
        return str(value)[:10]

    @field_validator("first_in", "last_out", mode="before")
    @classmethod
    def _hhmm(cls, value: Any) -> Optional[str]:
        return short_time(value)

    @field_validator("work_duration_minutes", mode="before")
    @classmethod
    def _minutes(cls, value: Any) -> int:
        return int(value or 0)

    @field_validator("late_by_minutes", "early_out_minutes", "total_punches", mode="before")
    @classmethod
    def _optional_count(cls, value: Any) -> Optional[int]:
        return None if value is None or value == "" else int(value)


class ComputeStats(_Schema):
    raw_punches_found: int = Field(default=0, alias="rawPunchesFound")
    records_computed: int = Field(default=0, alias="recordsComputed")


class ComputeAttendanceResponse(_Schema):
    stats: ComputeStats = Field(default_factory=ComputeStats)


class PayrollItemError(_Schema):
    employee_id: Optional[int] = None
    error: str = ""


class PayrollResults(_Schema):
    success: int = 0
    failed: int = 0
    skipped: int = 0
    errors: list[PayrollItemError] = Field(default_factory=list)


class PayrollGenerationResponse(_Schema):
    success: bool = False
    results: Optional[PayrollResults] = None
    error: Optional[str] = None
    suggestion: Optional[str] = None


def parse(model: type[_Schema], payload: Any) -> Any:
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise ApiError(f"Unexpected response from server: {e.error_count()} invalid field(s)") from e


def parse_list(model: type[_Schema], items: Any) -> list:
    if not isinstance(items, list):
        raise ApiError("Unexpected response from server: expected a list")
    return [parse(model, item) for item in items]


def parse_employees(payload: dict) -> list[Employee]:
    items = payload.get("employees")
    if items is None:
        items = payload.get("data") or []
    return [r.to_domain() for r in parse_list(EmployeeRecord, items)]


def parse_holidays(payload: dict) -> list[Holiday]:
    return [r.to_domain() for r in parse_list(HolidayRecord, payload.get("data") or [])]


class ProjectRecord(_Schema):
    id: int
    project_id: Optional[str] = None
    name: Optional[str] = None
    client_name: Optional[str] = None
    status: Optional[str] = None

    @field_validator("project_id", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)


def parse_projects(payload: dict) -> list[ProjectRecord]:
    items = payload.get("data")
    if items is None:
        items = payload.get("projects") or []
    return parse_list(ProjectRecord, items)
