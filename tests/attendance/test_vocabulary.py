from src.attendance_grid.attendance_grid.attendance.vocabulary import LEGEND, style_of
from src.attendance_grid.attendance_grid.core.enums import AttendanceStatus


def test_style_lookup_for_known_codes():
    assert style_of("OT").full_label == "Overtime"
    assert style_of(AttendanceStatus.LEAVE_WITHOUT_PAY).full_label == "Leave Without Pay"
    assert style_of("wo").label == "WO"


def test_unknown_and_unset_map_to_placeholder():
    for value in (None, "", "-", "XYZ", AttendanceStatus.UNSET):
        style = style_of(value)
        assert style.label == "-"
        assert style.full_label == "Not Marked"


def test_legend_lists_each_selectable_code_once():
    codes = [item.code for item in LEGEND]

    assert len(codes) == len(set(codes)) == 10
    assert AttendanceStatus.UNSET not in codes
