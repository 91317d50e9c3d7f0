"""
Employee & AttendanceRecord models — normalised backend rows.

Column names of the remote tables (``employee_id``, ``employee_name``,
``attendance_date``) are accepted as aliases; rows written back use the
same names through ``to_row``.
"""

from __future__ import annotations

import re
from datetime import date, time

from pydantic import BaseModel, ConfigDict, Field, field_validator

from attendance_admin.core.constants import AttendanceStatus

_TZ_OFFSET = re.compile(r"(?:Z|[+-]\d{2}(?::?\d{2})?)$")


class Employee(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(alias="employee_id")
    name: str = Field(alias="employee_name")
    designation: str = "NA"

    @field_validator("designation", mode="before")
    @classmethod
    def _designation(cls, v: object) -> object:
        if v is None or (isinstance(v, str) and not v.strip()):
            return "NA"
        return v


class AttendanceRecord(BaseModel):
    """Stored attendance for one (employee, date); unique on that pair."""

    employee_id: int
    attendance_date: date
    status: AttendanceStatus = AttendanceStatus.PRESENT
    check_in_time: time | None = None
    check_out_time: time | None = None
    notes: str | None = None

    @field_validator("check_in_time", "check_out_time", mode="before")
    @classmethod
    def _blank_time(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return None
            # Postgres "timetz" columns come back as "10:30:00+00" or "10:30:00-05:30"
            v = _TZ_OFFSET.sub("", v)
        return v

    def to_row(self) -> dict:
        """Payload for an upsert keyed by (employee_id, attendance_date)."""
        absent = self.status == AttendanceStatus.ABSENT
        return {
            "employee_id": self.employee_id,
            "attendance_date": self.attendance_date.isoformat(),
            "status": self.status.value,
            "check_in_time": None if absent or self.check_in_time is None else self.check_in_time.isoformat(),
            "check_out_time": None if absent or self.check_out_time is None else self.check_out_time.isoformat(),
            "notes": self.notes or None,
        }
