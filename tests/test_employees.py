"""Tests for employee endpoints."""

from datetime import date

import pytest
from httpx import AsyncClient

from attendance_admin.models.employee import AttendanceRecord


@pytest.mark.asyncio
async def test_create_employee(async_client: AsyncClient):
    """POST /employees should create a new employee."""
    resp = await async_client.post(
        "/api/v1/employees", json={"name": "  Bob Jones ", "designation": "Developer"}
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["name"] == "Bob Jones"
    assert data["designation"] == "Developer"
    assert data["id"] is not None


@pytest.mark.asyncio
async def test_create_employee_blank_designation_defaults(async_client: AsyncClient):
    """A missing or blank designation is stored as NA."""
    resp = await async_client.post("/api/v1/employees", json={"name": "Cara", "designation": "  "})
    assert resp.status_code == 201
    assert resp.json()["designation"] == "NA"

    resp = await async_client.post("/api/v1/employees", json={"name": "Dan"})
    assert resp.json()["designation"] == "NA"


@pytest.mark.asyncio
async def test_create_employee_blank_name_rejected(async_client: AsyncClient, backend):
    """Whitespace-only names never reach the backend."""
    resp = await async_client.post("/api/v1/employees", json={"name": "   "})
    assert resp.status_code == 422
    assert "Employee name cannot be empty." in str(resp.json()["detail"])
    assert backend.employees == {}


@pytest.mark.asyncio
async def test_list_employees_sorted_by_name(async_client: AsyncClient, backend):
    """GET /employees should return all employees ordered by name."""
    backend.add_employee("Zoe")
    backend.add_employee("Adam")
    backend.add_employee("Mia")
    resp = await async_client.get("/api/v1/employees")
    assert resp.status_code == 200
    assert [e["name"] for e in resp.json()] == ["Adam", "Mia", "Zoe"]


@pytest.mark.asyncio
async def test_list_employees_backend_failure(async_client: AsyncClient, backend):
    """Backend failures surface as 502 with the failure message."""
    backend.failing.add("fetch employees")
    resp = await async_client.get("/api/v1/employees")
    assert resp.status_code == 502
    body = resp.json()
    assert body["success"] is False
    assert body["detail"].startswith("Failed to fetch employees")


@pytest.mark.asyncio
async def test_delete_employee_cascades(async_client: AsyncClient, backend):
    """Deleting an employee removes their attendance and leave rows."""
    emp = backend.add_employee("Gone")
    keep = backend.add_employee("Stays")
    day = date(2024, 3, 4)
    backend.attendance[(emp.id, day)] = AttendanceRecord(employee_id=emp.id, attendance_date=day)
    backend.attendance[(keep.id, day)] = AttendanceRecord(employee_id=keep.id, attendance_date=day)
    backend.add_leave(emp.id, day, day, reason="Flu")

    resp = await async_client.delete(f"/api/v1/employees/{emp.id}")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Employee deleted successfully!"
    assert emp.id not in backend.employees
    assert list(backend.attendance) == [(keep.id, day)]
    assert backend.leaves == {}


@pytest.mark.asyncio
async def test_delete_employee_not_found(async_client: AsyncClient):
    """Deleting a non-existent employee should return 404."""
    resp = await async_client.delete("/api/v1/employees/9999")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Employee not found"


@pytest.mark.asyncio
async def test_employees_require_login(anon_client: AsyncClient):
    resp = await anon_client.get("/api/v1/employees")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "You are not logged in."
