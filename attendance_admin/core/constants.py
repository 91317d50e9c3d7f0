"""
Attendance statuses, leave enumerations and the fixed office slot times.
"""

from __future__ import annotations

from datetime import time
from enum import Enum


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY_MORNING = "half_day_morning"
    HALF_DAY_AFTERNOON = "half_day_afternoon"
    ON_LEAVE = "on_leave"


class LeaveDuration(str, Enum):
    FULL_DAY = "full_day"
    HALF_DAY_MORNING = "half_day_morning"
    HALF_DAY_AFTERNOON = "half_day_afternoon"


class LeaveType(str, Enum):
    SICK = "sick"
    CASUAL = "casual"
    EMERGENCY = "emergency"
    PERSONAL = "personal"
    OTHER = "other"


class LeaveStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


# ── Slot times ──────────────────────────────────────────────────────
DEFAULT_CHECK_IN = time(10, 30)
DEFAULT_CHECK_OUT = time(18, 30)
HALF_DAY_MORNING_IN = time(10, 30)
HALF_DAY_MORNING_OUT = time(14, 30)
HALF_DAY_AFTERNOON_IN = time(14, 30)
HALF_DAY_AFTERNOON_OUT = time(18, 30)

DEFAULT_TIMES: dict[AttendanceStatus, tuple[time | None, time | None]] = {
    AttendanceStatus.PRESENT: (DEFAULT_CHECK_IN, DEFAULT_CHECK_OUT),
    AttendanceStatus.HALF_DAY_MORNING: (HALF_DAY_MORNING_IN, HALF_DAY_MORNING_OUT),
    AttendanceStatus.HALF_DAY_AFTERNOON: (HALF_DAY_AFTERNOON_IN, HALF_DAY_AFTERNOON_OUT),
    AttendanceStatus.ABSENT: (None, None),
    AttendanceStatus.ON_LEAVE: (None, None),
}

# Statuses the dashboard offers for "apply to all"
BULK_STATUSES = (
    AttendanceStatus.PRESENT,
    AttendanceStatus.ABSENT,
    AttendanceStatus.HALF_DAY_MORNING,
    AttendanceStatus.HALF_DAY_AFTERNOON,
)

LEAVE_STATUS_BY_DURATION: dict[LeaveDuration, AttendanceStatus] = {
    LeaveDuration.FULL_DAY: AttendanceStatus.ON_LEAVE,
    LeaveDuration.HALF_DAY_MORNING: AttendanceStatus.HALF_DAY_MORNING,
    LeaveDuration.HALF_DAY_AFTERNOON: AttendanceStatus.HALF_DAY_AFTERNOON,
}


def default_times(status: AttendanceStatus) -> tuple[time | None, time | None]:
    """Expected (check-in, check-out) for *status*."""
    return DEFAULT_TIMES.get(status, (DEFAULT_CHECK_IN, DEFAULT_CHECK_OUT))
