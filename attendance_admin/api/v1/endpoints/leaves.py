"""
Leave endpoints — list active leaves, record a leave period, complete one.

A new leave stamps one attendance row per day of its period so that
stored attendance agrees with what the roster derives from the leave.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from attendance_admin.api.v1.deps import get_backend, require_admin
from attendance_admin.db.backend import SupabaseBackend
from attendance_admin.models.admin import AdminRecord
from attendance_admin.models.leave import LeaveRecord
from attendance_admin.schemas.attendance import DeleteResponse, LeaveCreate, LeaveCreateResponse
from attendance_admin.services.leave import (
    calculate_date_difference,
    find_overlapping_leave,
    generate_leave_attendance,
)

router = APIRouter(prefix="/leaves", tags=["leaves"])
logger = logging.getLogger(__name__)


@router.get("", response_model=list[LeaveRecord])
async def list_active_leaves(
    backend: SupabaseBackend = Depends(get_backend),
    _admin: AdminRecord = Depends(require_admin),
) -> list[LeaveRecord]:
    return await backend.list_active_leaves()


@router.post("", response_model=LeaveCreateResponse, status_code=201)
async def create_leave(
    body: LeaveCreate,
    backend: SupabaseBackend = Depends(get_backend),
    _admin: AdminRecord = Depends(require_admin),
) -> LeaveCreateResponse:
    """Record a leave period and generate its attendance rows.

    Rejected with 409 when the employee already has an active leave that
    intersects the requested period.
    """
    if await backend.get_employee(body.employee_id) is None:
        raise HTTPException(status_code=404, detail="Employee not found")

    existing = await backend.list_employee_leaves(body.employee_id)
    clash = find_overlapping_leave(existing, body.start_date, body.end_date)
    if clash is not None:
        raise HTTPException(
            status_code=409,
            detail="This employee already has active leave during this period.",
        )

    leave = LeaveRecord(
        employee_id=body.employee_id,
        start_date=body.start_date,
        end_date=body.end_date,
        leave_type=body.leave_type,
        duration=body.duration,
        reason=body.reason,
        total_days=calculate_date_difference(body.start_date, body.end_date),
    )
    attendance = generate_leave_attendance(leave)
    result = await backend.create_leave(leave, attendance)

    logger.info(
        "Leave recorded for employee %d: %s..%s (%s)",
        body.employee_id,
        body.start_date,
        body.end_date,
        body.duration.value,
    )
    return LeaveCreateResponse(
        success=True,
        message="Leave record added successfully!",
        leave=result.leave,
        attendance_days=len(attendance),
        warnings=result.warnings,
    )


@router.delete("/{leave_id}", response_model=DeleteResponse)
async def delete_leave(
    leave_id: int,
    backend: SupabaseBackend = Depends(get_backend),
    _admin: AdminRecord = Depends(require_admin),
) -> DeleteResponse:
    """Soft-delete: the leave is marked completed and stops overriding attendance."""
    if not await backend.complete_leave(leave_id):
        raise HTTPException(status_code=404, detail="Leave record not found")
    logger.info("Leave %d marked completed", leave_id)
    return DeleteResponse(success=True, message="Leave record deleted successfully")
