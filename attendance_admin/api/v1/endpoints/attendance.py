"""
Daily roster endpoints — view, edit, bulk status, save and CSV export.

Every request rebuilds the roster from the backend: employees, the
stored attendance for the date and the active leaves are fetched and
merged, so leave coverage is always re-derived server side.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse

from attendance_admin.api.v1.deps import get_backend, require_admin
from attendance_admin.core.exceptions import BackendError
from attendance_admin.db.backend import SupabaseBackend
from attendance_admin.models.admin import AdminRecord
from attendance_admin.models.roster import RosterRow
from attendance_admin.schemas.attendance import (
    AttendanceUpdate,
    BulkStatusRequest,
    BulkStatusResponse,
    RosterResponse,
    RowUpdateResponse,
    SaveAttendanceRequest,
    SaveResponse,
)
from attendance_admin.services.leave import find_covering_leave
from attendance_admin.services.roster import (
    apply_bulk_status,
    apply_row_update,
    attendance_stats,
    build_save_payload,
    merge_roster,
    roster_csv,
)

router = APIRouter(prefix="/attendance", tags=["attendance"])
logger = logging.getLogger(__name__)


# ── Helpers ─────────────────────────────────────────────────────────
async def _load_roster(backend: SupabaseBackend, day: date) -> tuple[list[RosterRow], list[str]]:
    """Fetch and merge the roster for *day*.

    Employees are mandatory; attendance and leave failures degrade to an
    empty list plus a warning.
    """
    employees = await backend.list_employees()
    warnings: list[str] = []

    try:
        attendance = await backend.list_attendance(day)
    except BackendError as exc:
        logger.error("Attendance fetch failed for %s: %s", day, exc.message)
        warnings.append("Failed to fetch attendance records")
        attendance = []

    try:
        leaves = await backend.list_active_leaves()
    except BackendError as exc:
        logger.error("Leave fetch failed: %s", exc.message)
        warnings.append("Failed to fetch leave records")
        leaves = []

    return merge_roster(employees, attendance, leaves, day), warnings


def _roster_response(day: date, rows: list[RosterRow], warnings: list[str]) -> dict:
    return {
        "attendance_date": day,
        "previous_date": day - timedelta(days=1),
        "next_date": day + timedelta(days=1),
        "rows": rows,
        "stats": attendance_stats(rows),
        "warnings": warnings,
    }


# ── Roster ──────────────────────────────────────────────────────────
@router.get("", response_model=RosterResponse)
async def get_roster(
    day: date | None = Query(default=None, alias="date", description="YYYY-MM-DD, defaults to today"),
    backend: SupabaseBackend = Depends(get_backend),
    _admin: AdminRecord = Depends(require_admin),
) -> RosterResponse:
    """Merged attendance for one date with its statistics."""
    day = day or date.today()
    rows, warnings = await _load_roster(backend, day)
    return RosterResponse(**_roster_response(day, rows, warnings))


@router.post("/save", response_model=SaveResponse)
async def save_attendance(
    body: SaveAttendanceRequest,
    backend: SupabaseBackend = Depends(get_backend),
    _admin: AdminRecord = Depends(require_admin),
) -> SaveResponse:
    """Upsert the submitted rows; rows covered by leave are skipped."""
    day = body.attendance_date
    leaves = await backend.list_active_leaves()

    rows = [
        RosterRow(
            employee_id=r.employee_id,
            employee_name="",
            attendance_date=day,
            status=r.status,
            check_in_time=r.check_in_time,
            check_out_time=r.check_out_time,
            notes=r.notes or "",
            is_on_leave=r.is_on_leave
            or find_covering_leave(leaves, r.employee_id, day) is not None,
        )
        for r in body.rows
    ]
    records = build_save_payload(rows)
    if not records:
        return SaveResponse(success=True, saved=0, message="No attendance records to save")

    await backend.upsert_attendance(records)
    logger.info("Saved %d attendance records for %s", len(records), day)
    return SaveResponse(success=True, saved=len(records), message="Attendance saved successfully!")


@router.patch("/{day}/{employee_id}", response_model=RowUpdateResponse)
async def update_row(
    day: date,
    employee_id: int,
    body: AttendanceUpdate,
    backend: SupabaseBackend = Depends(get_backend),
    _admin: AdminRecord = Depends(require_admin),
) -> RowUpdateResponse:
    """Edit one employee's row. Leave rows accept notes only and are not stored."""
    rows, _ = await _load_roster(backend, day)
    row = next((r for r in rows if r.employee_id == employee_id), None)
    if row is None:
        raise HTTPException(status_code=404, detail="Employee not found")

    updated = apply_row_update(row, body)
    if updated.is_on_leave:
        return RowUpdateResponse(
            success=True,
            saved=False,
            row=updated,
            message="Employee is on leave; attendance is derived from the leave record",
        )

    await backend.upsert_attendance(build_save_payload([updated]))
    logger.info("Updated attendance for employee %d on %s", employee_id, day)
    return RowUpdateResponse(success=True, saved=True, row=updated, message="Attendance updated")


@router.post("/{day}/bulk", response_model=BulkStatusResponse)
async def bulk_status(
    day: date,
    body: BulkStatusRequest,
    backend: SupabaseBackend = Depends(get_backend),
    _admin: AdminRecord = Depends(require_admin),
) -> BulkStatusResponse:
    """Mark every employee not on leave with one status and save."""
    rows, warnings = await _load_roster(backend, day)
    rows = apply_bulk_status(rows, body.status)

    records = build_save_payload(rows)
    await backend.upsert_attendance(records)
    logger.info("Bulk status %s applied to %d rows on %s", body.status.value, len(records), day)

    return BulkStatusResponse(
        **_roster_response(day, rows, warnings),
        message=f"All employees marked as {body.status.value}",
        saved=len(records),
    )


@router.get("/{day}/export")
async def export_csv(
    day: date,
    backend: SupabaseBackend = Depends(get_backend),
    _admin: AdminRecord = Depends(require_admin),
) -> StreamingResponse:
    """Download the roster for *day* as CSV."""
    rows, _ = await _load_roster(backend, day)
    return StreamingResponse(
        iter([roster_csv(rows)]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=attendance-{day.isoformat()}.csv"},
    )
