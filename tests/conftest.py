"""
Shared test fixtures for the Attendance Admin test suite.

The Supabase gateway is replaced by ``InMemoryBackend`` through
``app.dependency_overrides``; it mirrors the gateway's method surface and
can be told to fail individual operations.
"""

import itertools
import os
import sys
from collections.abc import AsyncGenerator
from datetime import date

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["SUPABASE_URL"] = "https://test-project.supabase.co"
os.environ["SUPABASE_KEY"] = "test-service-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from httpx import ASGITransport, AsyncClient

from attendance_admin.api.v1.deps import get_backend
from attendance_admin.core.constants import LeaveStatus
from attendance_admin.core.exceptions import BackendAuthError, BackendError
from attendance_admin.db.backend import LeaveCreation
from attendance_admin.main import app
from attendance_admin.models.admin import AdminRecord, AuthSession, AuthUser
from attendance_admin.models.employee import AttendanceRecord, Employee
from attendance_admin.models.leave import LeaveRecord

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse"
ADMIN_ID = "admin-uid-1"


class InMemoryBackend:
    """Dict-backed stand-in for ``SupabaseBackend``."""

    def __init__(self) -> None:
        self.atomic = True
        self.failing: set[str] = set()
        self.signed_out: list[str] = []
        self._users: dict[str, tuple[str, str]] = {}  # email -> (password, user_id)
        self._emails: dict[str, str] = {}  # user_id -> email
        self._tokens: dict[str, str] = {}  # access token -> user_id
        self._refresh: dict[str, str] = {}  # refresh token -> user_id
        self.admins: dict[str, AdminRecord] = {}
        self.employees: dict[int, Employee] = {}
        self.attendance: dict[tuple[int, date], AttendanceRecord] = {}
        self.leaves: dict[int, LeaveRecord] = {}
        self._ids = itertools.count(1)
        self._token_ids = itertools.count(1)

    def _check(self, action: str) -> None:
        if action in self.failing:
            raise BackendError(f"Failed to {action}: simulated outage")

    # ── Seeding ─────────────────────────────────────────────────────
    def add_user(self, email: str, password: str, user_id: str, *, admin: bool = True) -> None:
        self._users[email] = (password, user_id)
        self._emails[user_id] = email
        if admin:
            self.admins[user_id] = AdminRecord(user_id=user_id, admin_email=email)

    def issue_token(self, user_id: str) -> str:
        token = f"access-{next(self._token_ids)}"
        self._tokens[token] = user_id
        return token

    def add_employee(self, name: str, designation: str = "Engineer") -> Employee:
        emp = Employee(id=next(self._ids), name=name, designation=designation)
        self.employees[emp.id] = emp
        return emp

    def add_leave(self, employee_id: int, start: date, end: date, **kwargs) -> LeaveRecord:
        leave = LeaveRecord(
            id=next(self._ids),
            employee_id=employee_id,
            start_date=start,
            end_date=end,
            **kwargs,
        )
        self.leaves[leave.id] = leave
        return leave

    # ── Auth ────────────────────────────────────────────────────────
    def _session(self, user_id: str) -> AuthSession:
        token = self.issue_token(user_id)
        refresh = f"refresh-{token}"
        self._refresh[refresh] = user_id
        return AuthSession(
            access_token=token,
            refresh_token=refresh,
            expires_in=3600,
            user_id=user_id,
            email=self._emails.get(user_id),
        )

    async def sign_in(self, email: str, password: str) -> AuthSession:
        self._check("sign in")
        stored = self._users.get(email)
        if stored is None or stored[0] != password:
            raise BackendAuthError("Invalid login credentials")
        return self._session(stored[1])

    async def refresh(self, refresh_token: str) -> AuthSession:
        user_id = self._refresh.pop(refresh_token, None)
        if user_id is None:
            raise BackendAuthError("Invalid Refresh Token")
        return self._session(user_id)

    async def get_user(self, access_token: str) -> AuthUser | None:
        user_id = self._tokens.get(access_token)
        if user_id is None:
            return None
        return AuthUser(id=user_id, email=self._emails.get(user_id))

    async def sign_out(self, access_token: str) -> None:
        self._check("sign out")
        self._tokens.pop(access_token, None)
        self.signed_out.append(access_token)

    async def find_admin(self, user_id: str) -> AdminRecord | None:
        self._check("check admin record")
        return self.admins.get(user_id)

    async def ping(self) -> bool:
        self._check("reach backend")
        return True

    # ── Employees ───────────────────────────────────────────────────
    async def list_employees(self) -> list[Employee]:
        self._check("fetch employees")
        return sorted(self.employees.values(), key=lambda e: e.name.casefold())

    async def get_employee(self, employee_id: int) -> Employee | None:
        self._check("fetch employee")
        return self.employees.get(employee_id)

    async def insert_employee(self, name: str, designation: str) -> Employee:
        self._check("add employee")
        return self.add_employee(name, designation)

    async def delete_employee(self, employee_id: int) -> None:
        self._check("delete employee")
        self.attendance = {k: v for k, v in self.attendance.items() if k[0] != employee_id}
        self.leaves = {k: v for k, v in self.leaves.items() if v.employee_id != employee_id}
        self.employees.pop(employee_id, None)

    # ── Attendance ──────────────────────────────────────────────────
    async def list_attendance(self, day: date) -> list[AttendanceRecord]:
        self._check("fetch attendance records")
        return [r for (_, d), r in self.attendance.items() if d == day]

    async def upsert_attendance(self, records: list[AttendanceRecord]) -> None:
        self._check("save attendance")
        keys = [(r.employee_id, r.attendance_date) for r in records]
        if len(keys) != len(set(keys)):
            raise BackendError(
                "Failed to save attendance: ON CONFLICT DO UPDATE command cannot affect row a second time"
            )
        for r in records:
            self.attendance[(r.employee_id, r.attendance_date)] = r

    # ── Leaves ──────────────────────────────────────────────────────
    async def list_active_leaves(self) -> list[LeaveRecord]:
        self._check("fetch active leaves")
        return [
            leave.model_copy(update={"employee_name": self.employees[leave.employee_id].name})
            for leave in self.leaves.values()
            if leave.status == LeaveStatus.ACTIVE and leave.employee_id in self.employees
        ]

    async def list_employee_leaves(
        self, employee_id: int, status: LeaveStatus = LeaveStatus.ACTIVE
    ) -> list[LeaveRecord]:
        self._check("check existing leaves")
        return [
            leave
            for leave in self.leaves.values()
            if leave.employee_id == employee_id and leave.status == status
        ]

    async def create_leave(
        self, leave: LeaveRecord, attendance: list[AttendanceRecord]
    ) -> LeaveCreation:
        self._check("add leave record")
        if self.atomic and "save attendance" in self.failing:
            raise BackendError("Failed to add leave record: attendance insert rejected")
        created = leave.model_copy(update={"id": next(self._ids)})
        self.leaves[created.id] = created
        try:
            await self.upsert_attendance(attendance)
        except BackendError as exc:
            return LeaveCreation(
                created, [f"Leave added but failed to create attendance: {exc.message}"]
            )
        return LeaveCreation(created)

    async def complete_leave(self, leave_id: int) -> bool:
        self._check("delete leave record")
        leave = self.leaves.get(leave_id)
        if leave is None:
            return False
        self.leaves[leave_id] = leave.model_copy(update={"status": LeaveStatus.COMPLETED})
        return True


@pytest.fixture
def backend():
    """Fresh fake backend with one admin user, wired into the app."""
    fake = InMemoryBackend()
    fake.add_user(ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_ID)
    app.dependency_overrides[get_backend] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_backend, None)


@pytest.fixture
async def anon_client(backend: InMemoryBackend) -> AsyncGenerator[AsyncClient, None]:
    """Client without credentials."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def async_client(backend: InMemoryBackend) -> AsyncGenerator[AsyncClient, None]:
    """Client carrying a valid admin bearer token."""
    token = backend.issue_token(ADMIN_ID)
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"Authorization": f"Bearer {token}"},
    ) as client:
        yield client


