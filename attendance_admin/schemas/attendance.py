"""Pydantic schemas for Roster / Employee / Leave requests and responses."""

from __future__ import annotations

from datetime import date, time

from pydantic import BaseModel, Field, field_validator, model_validator

from attendance_admin.core.constants import (
    BULK_STATUSES,
    AttendanceStatus,
    LeaveDuration,
    LeaveType,
)
from attendance_admin.models.leave import LeaveRecord
from attendance_admin.models.roster import AttendanceStats, RosterRow


# ── Roster ──────────────────────────────────────────────────────────
class RosterResponse(BaseModel):
    attendance_date: date
    previous_date: date
    next_date: date
    rows: list[RosterRow]
    stats: AttendanceStats
    warnings: list[str] = Field(default_factory=list)


class RosterRowIn(BaseModel):
    """A roster row as held (and possibly edited) by the dashboard."""

    employee_id: int
    status: AttendanceStatus = AttendanceStatus.PRESENT
    check_in_time: time | None = None
    check_out_time: time | None = None
    notes: str | None = None
    is_on_leave: bool = False


class SaveAttendanceRequest(BaseModel):
    attendance_date: date
    rows: list[RosterRowIn]

    @model_validator(mode="after")
    def _one_row_per_employee(self) -> "SaveAttendanceRequest":
        seen: set[int] = set()
        for row in self.rows:
            if row.employee_id in seen:
                raise ValueError(f"Duplicate row for employee {row.employee_id}")
            seen.add(row.employee_id)
        return self


class SaveResponse(BaseModel):
    success: bool
    saved: int
    message: str


class AttendanceUpdate(BaseModel):
    status: AttendanceStatus | None = None
    check_in_time: time | None = None
    check_out_time: time | None = None
    notes: str | None = None


class RowUpdateResponse(BaseModel):
    success: bool
    saved: bool
    row: RosterRow
    message: str


class BulkStatusRequest(BaseModel):
    status: AttendanceStatus

    @field_validator("status")
    @classmethod
    def _bulk_status(cls, v: AttendanceStatus) -> AttendanceStatus:
        if v not in BULK_STATUSES:
            raise ValueError(
                f"Bulk status must be one of: {', '.join(s.value for s in BULK_STATUSES)}"
            )
        return v


class BulkStatusResponse(RosterResponse):
    message: str
    saved: int


# ── Employee ────────────────────────────────────────────────────────
class EmployeeCreate(BaseModel):
    name: str
    designation: str = ""

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Employee name cannot be empty.")
        if len(v) > 200:
            raise ValueError("Name must not exceed 200 characters")
        return v

    @field_validator("designation")
    @classmethod
    def _designation(cls, v: str) -> str:
        return v.strip() or "NA"


class EmployeeRead(BaseModel):
    id: int
    name: str
    designation: str

    model_config = {"from_attributes": True}


# ── Leave ───────────────────────────────────────────────────────────
class LeaveCreate(BaseModel):
    employee_id: int
    leave_type: LeaveType = LeaveType.SICK
    duration: LeaveDuration = LeaveDuration.FULL_DAY
    reason: str
    start_date: date
    end_date: date

    @field_validator("reason")
    @classmethod
    def _reason(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please enter a leave reason.")
        return v

    @model_validator(mode="after")
    def _date_order(self) -> "LeaveCreate":
        if self.start_date > self.end_date:
            raise ValueError("End date cannot be before start date.")
        return self


class LeaveCreateResponse(BaseModel):
    success: bool
    message: str
    leave: LeaveRecord
    attendance_days: int
    warnings: list[str] = Field(default_factory=list)


# ── Health ─────────────────────────────────────────────────────────
class HealthResponse(BaseModel):
    backend: bool


# ── Generic ────────────────────────────────────────────────────────
class LogoutResponse(BaseModel):
    message: str


class DeleteResponse(BaseModel):
    success: bool
    message: str
    warnings: list[str] = Field(default_factory=list)
