"""
Leave arithmetic: interval overlap, inclusive day counts and the
attendance rows a leave period stamps onto the calendar.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, time, timedelta

from attendance_admin.core.constants import (
    LEAVE_STATUS_BY_DURATION,
    AttendanceStatus,
    LeaveDuration,
    LeaveStatus,
    default_times,
)
from attendance_admin.models.employee import AttendanceRecord
from attendance_admin.models.leave import LeaveRecord


def calculate_date_difference(start: date, end: date) -> int:
    """Number of calendar days in [start, end], both ends included."""
    return abs((end - start).days) + 1


def leaves_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    return a_start <= b_end and b_start <= a_end


def find_overlapping_leave(
    existing: Iterable[LeaveRecord], start: date, end: date
) -> LeaveRecord | None:
    """First active leave in *existing* that intersects [start, end]."""
    for leave in existing:
        if leave.status != LeaveStatus.ACTIVE:
            continue
        if leaves_overlap(start, end, leave.start_date, leave.end_date):
            return leave
    return None


def find_covering_leave(
    leaves: Iterable[LeaveRecord], employee_id: int, day: date
) -> LeaveRecord | None:
    for leave in leaves:
        if leave.employee_id == employee_id and leave.covers(day):
            return leave
    return None


def leave_slot(duration: LeaveDuration) -> tuple[AttendanceStatus, time | None, time | None]:
    """Attendance status and check-in/out imposed by a leave of *duration*."""
    status = LEAVE_STATUS_BY_DURATION.get(duration, AttendanceStatus.ON_LEAVE)
    if status == AttendanceStatus.ON_LEAVE:
        return status, None, None
    check_in, check_out = default_times(status)
    return status, check_in, check_out


def iter_days(start: date, end: date):
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def generate_leave_attendance(leave: LeaveRecord) -> list[AttendanceRecord]:
    """One attendance row per day of *leave*, ready for upsert."""
    status, check_in, check_out = leave_slot(leave.duration)
    return [
        AttendanceRecord(
            employee_id=leave.employee_id,
            attendance_date=day,
            status=status,
            check_in_time=check_in,
            check_out_time=check_out,
            notes=f"On leave: {leave.reason}",
        )
        for day in iter_days(leave.start_date, leave.end_date)
    ]
