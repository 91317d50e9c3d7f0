"""
LeaveRecord model — rows of ``leave_records`` and the
``current_active_leaves`` view.

Older rows only carry a single ``leave_date``; ``start_date`` and
``end_date`` fall back to it here so the rest of the code never has to.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator

from attendance_admin.core.constants import LeaveDuration, LeaveStatus, LeaveType


class LeaveRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int | None = Field(default=None, alias="leave_id")
    employee_id: int
    start_date: date
    end_date: date
    leave_type: LeaveType = LeaveType.SICK
    duration: LeaveDuration = LeaveDuration.FULL_DAY
    reason: str = Field(default="", alias="leave_reason")
    status: LeaveStatus = LeaveStatus.ACTIVE
    total_days: int = 1
    employee_name: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalise_row(cls, data: object) -> object:
        if not isinstance(data, dict):
            return data
        row = {k: v for k, v in data.items() if v is not None}
        single = row.get("leave_date")
        row.setdefault("start_date", single)
        row.setdefault("end_date", row.get("start_date"))
        if "total_days" not in row and row.get("start_date") and row.get("end_date"):
            start = date.fromisoformat(str(row["start_date"])[:10])
            end = date.fromisoformat(str(row["end_date"])[:10])
            row["total_days"] = abs((end - start).days) + 1
        return row

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_row(self) -> dict:
        """Insert payload for ``leave_records``."""
        return {
            "employee_id": self.employee_id,
            "leave_date": self.start_date.isoformat(),
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "leave_reason": self.reason,
            "leave_type": self.leave_type.value,
            "duration": self.duration.value,
            "total_days": self.total_days,
            "status": self.status.value,
        }
