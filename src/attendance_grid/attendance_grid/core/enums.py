from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance code of one employee on one day."""

    PRESENT = "P"
    ABSENT = "A"
    PRIVILEGE_LEAVE = "PL"
    CASUAL_LEAVE = "CL"
    SICK_LEAVE = "SL"
    LEAVE_WITHOUT_PAY = "LWP"
    HALF_DAY = "HD"
    OVERTIME = "OT"
    WEEKLY_OFF = "WO"
    HOLIDAY = "H"
    UNSET = "-"

    @classmethod
    def parse(cls, value) -> "AttendanceStatus":
        """Map a raw code to a member; empty or unknown codes become UNSET."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper()) if value else cls.UNSET
        except ValueError:
            return cls.UNSET


class BoardColumn(str, Enum):
    """Kanban lanes, one per project status."""

    PLANNING = "planning"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    ON_HOLD = "on-hold"


class DropPosition(str, Enum):
    BEFORE = "before"
    AFTER = "after"
