from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusStyle:
    label: str
    full_label: str
    bg: str
    text: str
    border: str

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "fullLabel": self.full_label,
            "bg": self.bg,
            "text": self.text,
            "border": self.border,
        }


@dataclass(frozen=True)
class LegendItem:
    code: AttendanceStatus
    label: str


S = AttendanceStatus

STATUS_STYLES: dict[AttendanceStatus, StatusStyle] = {
    S.PRESENT: StatusStyle("P", "Present", "bg-emerald-50", "text-emerald-700", "border-emerald-200"),
    S.ABSENT: StatusStyle("A", "Absent", "bg-red-50", "text-red-700", "border-red-200"),
    S.PRIVILEGE_LEAVE: StatusStyle("PL", "Privilege Leave", "bg-blue-50", "text-blue-700", "border-blue-200"),
    S.OVERTIME: StatusStyle("OT", "Overtime", "bg-violet-50", "text-violet-700", "border-violet-200"),
    S.WEEKLY_OFF: StatusStyle("WO", "Weekly Off", "bg-gray-100", "text-gray-500", "border-gray-200"),
    S.HOLIDAY: StatusStyle("H", "Holiday", "bg-amber-50", "text-amber-700", "border-amber-200"),
    S.HALF_DAY: StatusStyle("HD", "Half Day", "bg-yellow-50", "text-yellow-700", "border-yellow-200"),
    S.CASUAL_LEAVE: StatusStyle("CL", "Casual Leave", "bg-cyan-50", "text-cyan-700", "border-cyan-200"),
    S.SICK_LEAVE: StatusStyle("SL", "Sick Leave", "bg-pink-50", "text-pink-700", "border-pink-200"),
    S.LEAVE_WITHOUT_PAY: StatusStyle("LWP", "Leave Without Pay", "bg-rose-50", "text-rose-700", "border-rose-200"),
}

NOT_MARKED = StatusStyle("-", "Not Marked", "bg-gray-50", "text-gray-400", "border-gray-200")

# Order of the mark-attendance selector and the legend bar.
LEGEND: tuple[LegendItem, ...] = (
    LegendItem(S.PRESENT, "Present"),
    LegendItem(S.ABSENT, "Absent"),
    LegendItem(S.HOLIDAY, "Holiday"),
    LegendItem(S.WEEKLY_OFF, "Weekly Off"),
    LegendItem(S.PRIVILEGE_LEAVE, "Priv. Leave"),
    LegendItem(S.CASUAL_LEAVE, "Casual"),
    LegendItem(S.SICK_LEAVE, "Sick"),
    LegendItem(S.HALF_DAY, "Half Day"),
    LegendItem(S.OVERTIME, "Overtime"),
    LegendItem(S.LEAVE_WITHOUT_PAY, "LWP"),
)


def style_of(status: Union[AttendanceStatus, str, None]) -> StatusStyle:
    return STATUS_STYLES.get(AttendanceStatus.parse(status), NOT_MARKED)


def legend() -> list[dict]:
    out = []
    for item in LEGEND:
        style = STATUS_STYLES[item.code]
        out.append({"code": item.code.value, "label": item.label, "bg": style.bg, "text": style.text, "border": style.border})
    return out
