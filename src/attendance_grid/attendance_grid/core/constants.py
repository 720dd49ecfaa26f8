"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

STANDARD_IN_TIME = "09:00"
STANDARD_OUT_TIME = "17:30"
STANDARD_SHIFT_END_HOURS = 17.5
OVERTIME_DAY_HOURS = 8.0

# Biometric days longer than this are marked as overtime.
OVERTIME_WORK_MINUTES = 540

DEFAULT_EMPLOYEE_FETCH_LIMIT = 1000
DEFAULT_REQUEST_TIMEOUT = 15

OFF_SATURDAYS = (2, 4)
