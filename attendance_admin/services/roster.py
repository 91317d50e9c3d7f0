"""
Roster logic for the daily attendance view.

Everything here is pure: the endpoints fetch rows from the backend, hand
them to these functions and persist whatever comes back.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from datetime import date, time

from attendance_admin.core.constants import AttendanceStatus, default_times
from attendance_admin.core.exceptions import RowLockedError
from attendance_admin.models.employee import AttendanceRecord, Employee
from attendance_admin.models.leave import LeaveRecord
from attendance_admin.models.roster import AttendanceStats, RosterRow
from attendance_admin.schemas.attendance import AttendanceUpdate
from attendance_admin.services.leave import find_covering_leave, leave_slot

CSV_HEADERS = ["Employee Name", "Status", "Check In", "Check Out", "Notes"]

_STAT_FIELDS = {
    AttendanceStatus.PRESENT: "present",
    AttendanceStatus.ABSENT: "absent",
    AttendanceStatus.HALF_DAY_MORNING: "half_day_morning",
    AttendanceStatus.HALF_DAY_AFTERNOON: "half_day_afternoon",
    AttendanceStatus.ON_LEAVE: "on_leave",
}


def format_time_for_display(t: time | None) -> str:
    """``HH:MM`` or an empty string."""
    return t.strftime("%H:%M") if t else ""


def _leave_row(employee: Employee, day: date, leave: LeaveRecord) -> RosterRow:
    status, check_in, check_out = leave_slot(leave.duration)
    return RosterRow(
        employee_id=employee.id,
        employee_name=employee.name,
        designation=employee.designation,
        attendance_date=day,
        status=status,
        check_in_time=check_in,
        check_out_time=check_out,
        notes=leave.reason or "On leave",
        is_on_leave=True,
        leave=leave,
    )


def merge_roster(
    employees: Iterable[Employee],
    attendance: Iterable[AttendanceRecord],
    leaves: Iterable[LeaveRecord],
    day: date,
) -> list[RosterRow]:
    """Build one display row per employee for *day*.

    A leave covering *day* wins over any stored attendance row; otherwise
    the stored row is used, falling back to a default "present" day.
    """
    leaves = list(leaves)
    stored = {r.employee_id: r for r in attendance if r.attendance_date == day}

    rows: list[RosterRow] = []
    for emp in sorted(employees, key=lambda e: e.name.casefold()):
        leave = find_covering_leave(leaves, emp.id, day)
        if leave is not None:
            rows.append(_leave_row(emp, day, leave))
            continue

        record = stored.get(emp.id)
        if record is not None:
            rows.append(
                RosterRow(
                    employee_id=emp.id,
                    employee_name=emp.name,
                    designation=emp.designation,
                    attendance_date=day,
                    status=record.status,
                    check_in_time=record.check_in_time,
                    check_out_time=record.check_out_time,
                    notes=record.notes or "",
                )
            )
        else:
            check_in, check_out = default_times(AttendanceStatus.PRESENT)
            rows.append(
                RosterRow(
                    employee_id=emp.id,
                    employee_name=emp.name,
                    designation=emp.designation,
                    attendance_date=day,
                    check_in_time=check_in,
                    check_out_time=check_out,
                )
            )
    return rows


def attendance_stats(rows: Iterable[RosterRow]) -> AttendanceStats:
    stats = AttendanceStats()
    for row in rows:
        field = _STAT_FIELDS.get(row.status)
        if field:
            setattr(stats, field, getattr(stats, field) + 1)
        if row.is_late:
            stats.late += 1
        if row.is_early:
            stats.early += 1
    return stats


def apply_bulk_status(rows: Iterable[RosterRow], status: AttendanceStatus) -> list[RosterRow]:
    """Set every non-leave row to *status* with that status's default times."""
    check_in, check_out = default_times(status)
    return [
        row
        if row.is_on_leave
        else row.model_copy(
            update={"status": status, "check_in_time": check_in, "check_out_time": check_out}
        )
        for row in rows
    ]


def apply_row_update(row: RosterRow, update: AttendanceUpdate) -> RosterRow:
    """Apply an admin edit to one row.

    Leave rows accept notes only. A status change resets the times to the
    new status's defaults before any explicit times in the same edit.
    """
    changes = update.model_dump(exclude_unset=True)
    if row.is_on_leave and set(changes) - {"notes"}:
        raise RowLockedError()

    values: dict = {}
    if "status" in changes and changes["status"] is not None:
        status = AttendanceStatus(changes["status"])
        values["status"] = status
        values["check_in_time"], values["check_out_time"] = default_times(status)
    for field in ("check_in_time", "check_out_time"):
        if field in changes:
            values[field] = changes[field]
    if "notes" in changes:
        values["notes"] = changes["notes"] or ""
    return row.model_copy(update=values)


def build_save_payload(rows: Iterable[RosterRow]) -> list[AttendanceRecord]:
    """Attendance records to upsert; leave rows are never saved."""
    return [
        AttendanceRecord(
            employee_id=row.employee_id,
            attendance_date=row.attendance_date,
            status=row.status,
            check_in_time=None if row.status == AttendanceStatus.ABSENT else row.check_in_time,
            check_out_time=None if row.status == AttendanceStatus.ABSENT else row.check_out_time,
            notes=row.notes or None,
        )
        for row in rows
        if not row.is_on_leave
    ]


def roster_csv(rows: Iterable[RosterRow]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for row in rows:
        writer.writerow(
            [
                row.employee_name,
                row.status.value,
                format_time_for_display(row.check_in_time),
                format_time_for_display(row.check_out_time),
                row.notes,
            ]
        )
    return buf.getvalue()
