from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields, replace
from typing import Mapping, Optional

from ..calendar.geometry import CalendarDay
from ..common.datetime_utils import month_key
from ..core.constants import STANDARD_IN_TIME, STANDARD_OUT_TIME
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class DayDetail:
    """In/out time and reason the user (or the server) recorded for a day.

    Biometric days also carry the minutes late, minutes left early, minutes
    worked and the punch count reported by the attendance device.
    """

    in_time: Optional[str] = None
    out_time: Optional[str] = None
    reason: Optional[str] = None
    late_by: Optional[int] = None
    early_by: Optional[int] = None
    work_minutes: Optional[int] = None
    total_punches: Optional[int] = None

    def merged(self, other: Optional["DayDetail"]) -> "DayDetail":
        """Fields set on ``other`` win; unset ones keep the current value."""
        if other is None:
            return self
        values = {}
        for f in fields(self):
            value = getattr(other, f.name)
            values[f.name] = value if value is not None else getattr(self, f.name)
        return DayDetail(**values)

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def to_dict(self) -> dict:
        return {
            "inTime": self.in_time,
            "outTime": self.out_time,
            "reason": self.reason,
            "lateBy": self.late_by,
            "earlyBy": self.early_by,
            "workDuration": self.work_minutes,
            "totalPunches": self.total_punches,
        }


@dataclass(frozen=True)
class Counters:
    """Per-status day tallies; ``overtime`` is in hours."""

    present: int = 0
    absent: int = 0
    privileged_leave: int = 0
    casual_leave: int = 0
    sick_leave: int = 0
    lwp: int = 0
    half_day: int = 0
    overtime: float = 0.0
    weekly_off: int = 0
    holiday: int = 0

    def __add__(self, other: "Counters") -> "Counters":
        return self._combine(other, 1)

    def __sub__(self, other: "Counters") -> "Counters":
        return self._combine(other, -1)

    def _combine(self, other: "Counters", sign: int) -> "Counters":
        values = {}
        for f in fields(self):
            value = getattr(self, f.name) + sign * getattr(other, f.name)
            values[f.name] = round(value, 2) if f.name == "overtime" else value
        return Counters(**values)

    def to_dict(self) -> dict:
        return asdict(self)


# Status -> counter field. OT days only feed ``overtime`` hours.
COUNTER_FIELDS: dict[AttendanceStatus, str] = {
    AttendanceStatus.PRESENT: "present",
    AttendanceStatus.ABSENT: "absent",
    AttendanceStatus.PRIVILEGE_LEAVE: "privileged_leave",
    AttendanceStatus.CASUAL_LEAVE: "casual_leave",
    AttendanceStatus.SICK_LEAVE: "sick_leave",
    AttendanceStatus.LEAVE_WITHOUT_PAY: "lwp",
    AttendanceStatus.HALF_DAY: "half_day",
    AttendanceStatus.WEEKLY_OFF: "weekly_off",
    AttendanceStatus.HOLIDAY: "holiday",
}


@dataclass(frozen=True)
class Employee:
    employee_id: int
    employee_code: str = ""
    name: str = ""
    biometric_code: Optional[str] = None


@dataclass(frozen=True)
class Holiday:
    date: str
    name: str = ""


@dataclass(frozen=True)
class EmployeeAttendanceRecord:
    """One employee's month. Replaced as a whole on every change."""

    employee: Employee
    days: Mapping[str, AttendanceStatus]
    day_details: Mapping[str, DayDetail] = field(default_factory=dict)
    counters: Counters = field(default_factory=Counters)
    std_in_time: str = STANDARD_IN_TIME
    std_out_time: str = STANDARD_OUT_TIME

    @property
    def employee_id(self) -> int:
        return self.employee.employee_id

    def to_dict(self) -> dict:
        return {
            "id": self.employee.employee_id,
            "employee_code": self.employee.employee_code,
            "name": self.employee.name,
            "biometric_code": self.employee.biometric_code,
            "days": {k: v.value for k, v in self.days.items()},
            "dayDetails": {
                k: d.to_dict() for k, d in self.day_details.items()
            },
            "stdInTime": self.std_in_time,
            "stdOutTime": self.std_out_time,
            **self.counters.to_dict(),
        }


@dataclass(frozen=True)
class GridState:
    """Snapshot of the attendance grid for one displayed month."""

    year: int
    month: int
    days: tuple[CalendarDay, ...] = ()
    records: Mapping[int, EmployeeAttendanceRecord] = field(default_factory=dict)
    version: int = 0
    error: Optional[str] = None

    @property
    def month_key(self) -> str:
        return month_key(self.year, self.month)

    def has_date(self, iso_date: str) -> bool:
        return any(d.iso_date == iso_date for d in self.days)

    def with_record(self, record: EmployeeAttendanceRecord) -> "GridState":
        records = dict(self.records)
        records[record.employee_id] = record
        return replace(self, records=records, version=self.version + 1)
