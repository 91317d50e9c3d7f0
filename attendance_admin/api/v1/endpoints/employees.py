"""
Employee endpoints — list, add, delete. All require an admin session.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from attendance_admin.api.v1.deps import get_backend, require_admin
from attendance_admin.db.backend import SupabaseBackend
from attendance_admin.models.admin import AdminRecord
from attendance_admin.schemas.attendance import DeleteResponse, EmployeeCreate, EmployeeRead

router = APIRouter(tags=["employees"])
logger = logging.getLogger(__name__)


@router.get("/employees", response_model=list[EmployeeRead])
async def list_employees(
    backend: SupabaseBackend = Depends(get_backend),
    _admin: AdminRecord = Depends(require_admin),
) -> list[EmployeeRead]:
    """All employees ordered by name."""
    return [EmployeeRead.model_validate(e) for e in await backend.list_employees()]


@router.post("/employees", response_model=EmployeeRead, status_code=201)
async def create_employee(
    body: EmployeeCreate,
    backend: SupabaseBackend = Depends(get_backend),
    _admin: AdminRecord = Depends(require_admin),
) -> EmployeeRead:
    employee = await backend.insert_employee(body.name, body.designation)
    logger.info("Created employee %d (%s)", employee.id, employee.name)
    return EmployeeRead.model_validate(employee)


@router.delete("/employees/{employee_id}", response_model=DeleteResponse)
async def delete_employee(
    employee_id: int,
    backend: SupabaseBackend = Depends(get_backend),
    _admin: AdminRecord = Depends(require_admin),
) -> DeleteResponse:
    """Delete an employee with all of its attendance and leave records."""
    employee = await backend.get_employee(employee_id)
    if employee is None:
        raise HTTPException(status_code=404, detail="Employee not found")

    await backend.delete_employee(employee_id)
    logger.info("Deleted employee %d (%s)", employee_id, employee.name)
    return DeleteResponse(success=True, message="Employee deleted successfully!")
