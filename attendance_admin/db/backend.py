"""
Supabase backend gateway — the only module that talks to the hosted
auth service and the PostgREST tables.

Every remote failure (PostgREST ``APIError``, auth ``AuthError``, transport
``httpx.HTTPError``) leaves this module as a ``BackendError`` carrying a
user-facing message. Rows are normalised into ``attendance_admin.models``
before they are returned.
"""

from __future__ import annotations

import logging
from datetime import date

import httpx
from supabase import AsyncClient, AuthError, PostgrestAPIError, acreate_client

from attendance_admin.core.config import Settings
from attendance_admin.core.constants import LeaveStatus
from attendance_admin.core.exceptions import BackendAuthError, BackendError
from attendance_admin.models.admin import AdminRecord, AuthSession, AuthUser
from attendance_admin.models.employee import AttendanceRecord, Employee
from attendance_admin.models.leave import LeaveRecord

logger = logging.getLogger(__name__)

ADMINS = "admins"
EMPLOYEES = "employees"
ATTENDANCE = "attendance_records"
LEAVES = "leave_records"
ACTIVE_LEAVES_VIEW = "current_active_leaves"
ATTENDANCE_CONFLICT = "employee_id,attendance_date"

_REMOTE_ERRORS = (PostgrestAPIError, AuthError, httpx.HTTPError)


def _error_text(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc) or exc.__class__.__name__


def _session_from(response) -> AuthSession:
    session, user = response.session, response.user
    if session is None or user is None:
        raise BackendAuthError("Sign-in did not return a session")
    return AuthSession(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=session.expires_in,
        user_id=str(user.id),
        email=user.email,
    )


class LeaveCreation:
    """Outcome of a leave insert plus its generated attendance rows."""

    def __init__(self, leave: LeaveRecord, warnings: list[str] | None = None) -> None:
        self.leave = leave
        self.warnings = warnings or []


class SupabaseBackend:
    """Gateway over two client handles.

    ``auth_client`` is used only for password sign-in and refresh, which
    store a user session on the handle. ``client`` keeps the configured API
    key for table access and token checks.
    """

    def __init__(
        self,
        client: AsyncClient,
        auth_client: AsyncClient | None = None,
        *,
        atomic: bool = True,
    ) -> None:
        self._client = client
        self._auth_client = auth_client or client
        self._atomic = atomic

    @classmethod
    async def connect(cls, settings: Settings) -> "SupabaseBackend":
        client = await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
        auth_client = await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
        logger.info("Backend client configured for %s", settings.SUPABASE_URL)
        return cls(client, auth_client, atomic=settings.ATOMIC_BACKEND_OPERATIONS)

    async def _execute(self, query, action: str):
        try:
            return await query.execute()
        except _REMOTE_ERRORS as exc:
            logger.error("Backend call failed (%s): %s", action, exc)
            raise BackendError(f"Failed to {action}: {_error_text(exc)}") from exc

    # ── Auth ────────────────────────────────────────────────────────
    async def sign_in(self, email: str, password: str) -> AuthSession:
        try:
            response = await self._auth_client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as exc:
            raise BackendAuthError(_error_text(exc)) from exc
        except httpx.HTTPError as exc:
            raise BackendError(f"Failed to sign in: {_error_text(exc)}") from exc
        return _session_from(response)

    async def refresh(self, refresh_token: str) -> AuthSession:
        try:
            response = await self._auth_client.auth.refresh_session(refresh_token)
        except AuthError as exc:
            raise BackendAuthError(_error_text(exc)) from exc
        except httpx.HTTPError as exc:
            raise BackendError(f"Failed to refresh session: {_error_text(exc)}") from exc
        return _session_from(response)

    async def get_user(self, access_token: str) -> AuthUser | None:
        """Identity behind *access_token*, or ``None`` if it is not valid."""
        try:
            response = await self._client.auth.get_user(access_token)
        except AuthError as exc:
            logger.info("Rejected session token: %s", _error_text(exc))
            return None
        except httpx.HTTPError as exc:
            raise BackendError(f"Failed to verify session: {_error_text(exc)}") from exc
        if response is None or response.user is None:
            return None
        return AuthUser(id=str(response.user.id), email=response.user.email)

    async def sign_out(self, access_token: str) -> None:
        try:
            await self._client.auth.admin.sign_out(access_token)
        except _REMOTE_ERRORS as exc:
            raise BackendError(f"Logout failed: {_error_text(exc)}") from exc

    async def find_admin(self, user_id: str) -> AdminRecord | None:
        result = await self._execute(
            self._client.table(ADMINS)
            .select("admin_email, user_id")
            .eq("user_id", user_id)
            .limit(1),
            "check admin record",
        )
        return AdminRecord.model_validate(result.data[0]) if result.data else None

    async def ping(self) -> bool:
        await self._execute(
            self._client.table(EMPLOYEES).select("employee_id").limit(1),
            "reach backend",
        )
        return True

    # ── Employees ───────────────────────────────────────────────────
    async def list_employees(self) -> list[Employee]:
        result = await self._execute(
            self._client.table(EMPLOYEES).select("*").order("employee_name"),
            "fetch employees",
        )
        return [Employee.model_validate(row) for row in result.data or []]

    async def get_employee(self, employee_id: int) -> Employee | None:
        result = await self._execute(
            self._client.table(EMPLOYEES).select("*").eq("employee_id", employee_id).limit(1),
            "fetch employee",
        )
        return Employee.model_validate(result.data[0]) if result.data else None

    async def insert_employee(self, name: str, designation: str) -> Employee:
        result = await self._execute(
            self._client.table(EMPLOYEES).insert(
                {"employee_name": name, "designation": designation}
            ),
            "add employee",
        )
        if not result.data:
            raise BackendError("Failed to add employee: no row returned")
        return Employee.model_validate(result.data[0])

    async def delete_employee(self, employee_id: int) -> None:
        """Remove the employee together with its attendance and leave rows."""
        if self._atomic:
            await self._execute(
                self._client.rpc("delete_employee_cascade", {"p_employee_id": employee_id}),
                "delete employee",
            )
            return

        steps = [
            (ATTENDANCE, "attendance records"),
            (LEAVES, "leave records"),
            (EMPLOYEES, "employee"),
        ]
        done: list[str] = []
        for table, label in steps:
            try:
                await self._execute(
                    self._client.table(table).delete().eq("employee_id", employee_id),
                    f"delete {label}",
                )
            except BackendError as exc:
                if done:
                    logger.warning(
                        "Employee %d partially deleted (%s removed)", employee_id, ", ".join(done)
                    )
                    raise BackendError(
                        f"{exc.message} ({', '.join(done)} already deleted)"
                    ) from exc
                raise
            done.append(label)

    # ── Attendance ──────────────────────────────────────────────────
    async def list_attendance(self, day: date) -> list[AttendanceRecord]:
        result = await self._execute(
            self._client.table(ATTENDANCE).select("*").eq("attendance_date", day.isoformat()),
            "fetch attendance records",
        )
        return [AttendanceRecord.model_validate(row) for row in result.data or []]

    async def upsert_attendance(self, records: list[AttendanceRecord]) -> None:
        if not records:
            return
        await self._execute(
            self._client.table(ATTENDANCE).upsert(
                [r.to_row() for r in records], on_conflict=ATTENDANCE_CONFLICT
            ),
            "save attendance",
        )

    # ── Leaves ──────────────────────────────────────────────────────
    async def list_active_leaves(self) -> list[LeaveRecord]:
        result = await self._execute(
            self._client.table(ACTIVE_LEAVES_VIEW).select("*"),
            "fetch active leaves",
        )
        return [LeaveRecord.model_validate(row) for row in result.data or []]

    async def list_employee_leaves(
        self, employee_id: int, status: LeaveStatus = LeaveStatus.ACTIVE
    ) -> list[LeaveRecord]:
        result = await self._execute(
            self._client.table(LEAVES)
            .select("*")
            .eq("employee_id", employee_id)
            .eq("status", status.value),
            "check existing leaves",
        )
        return [LeaveRecord.model_validate(row) for row in result.data or []]

    async def create_leave(
        self, leave: LeaveRecord, attendance: list[AttendanceRecord]
    ) -> LeaveCreation:
        """Insert *leave* and upsert its attendance rows.

        In atomic mode both writes happen inside one stored procedure.
        Otherwise an attendance failure is returned as a warning and the
        leave row stays in place.
        """
        if self._atomic:
            result = await self._execute(
                self._client.rpc(
                    "create_leave_with_attendance",
                    {
                        "p_leave": leave.to_row(),
                        "p_attendance": [r.to_row() for r in attendance],
                    },
                ),
                "add leave record",
            )
            return LeaveCreation(self._created_leave(result.data, leave))

        result = await self._execute(
            self._client.table(LEAVES).insert(leave.to_row()),
            "add leave record",
        )
        created = self._created_leave(result.data, leave)
        try:
            await self.upsert_attendance(attendance)
        except BackendError as exc:
            logger.warning("Leave %s added without attendance rows: %s", created.id, exc.message)
            return LeaveCreation(
                created, [f"Leave added but failed to create attendance: {exc.message}"]
            )
        return LeaveCreation(created)

    @staticmethod
    def _created_leave(data, fallback: LeaveRecord) -> LeaveRecord:
        if isinstance(data, list):
            data = data[0] if data else None
        if isinstance(data, dict):
            return LeaveRecord.model_validate(data)
        return fallback

    async def complete_leave(self, leave_id: int) -> bool:
        """Mark a leave completed. ``False`` when no such leave exists."""
        result = await self._execute(
            self._client.table(LEAVES)
            .update({"status": LeaveStatus.COMPLETED.value})
            .eq("leave_id", leave_id),
            "delete leave record",
        )
        return bool(result.data)
