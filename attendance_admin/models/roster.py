"""
Roster display rows — one per employee for the selected date.

Rows are derived on every load by merging stored attendance with active
leave; they are never written back as-is.
"""

from __future__ import annotations

from datetime import date, time

from pydantic import BaseModel, computed_field

from attendance_admin.core.constants import AttendanceStatus, default_times
from attendance_admin.models.leave import LeaveRecord

_UNTIMED = (AttendanceStatus.ABSENT, AttendanceStatus.ON_LEAVE)


def _minutes(t: time) -> tuple[int, int]:
    return (t.hour, t.minute)


def is_late_arrival(check_in: time | None, status: AttendanceStatus) -> bool:
    """Check-in after the status's expected start (minute precision)."""
    if check_in is None or status in _UNTIMED:
        return False
    expected, _ = default_times(status)
    return expected is not None and _minutes(check_in) > _minutes(expected)


def is_early_departure(check_out: time | None, status: AttendanceStatus) -> bool:
    """Check-out before the status's expected end (minute precision)."""
    if check_out is None or status in _UNTIMED:
        return False
    _, expected = default_times(status)
    return expected is not None and _minutes(check_out) < _minutes(expected)


class RosterRow(BaseModel):
    employee_id: int
    employee_name: str
    designation: str = "NA"
    attendance_date: date
    status: AttendanceStatus = AttendanceStatus.PRESENT
    check_in_time: time | None = None
    check_out_time: time | None = None
    notes: str = ""
    is_on_leave: bool = False
    leave: LeaveRecord | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_late(self) -> bool:
        return is_late_arrival(self.check_in_time, self.status)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_early(self) -> bool:
        return is_early_departure(self.check_out_time, self.status)


class AttendanceStats(BaseModel):
    present: int = 0
    absent: int = 0
    half_day_morning: int = 0
    half_day_afternoon: int = 0
    on_leave: int = 0
    late: int = 0
    early: int = 0
