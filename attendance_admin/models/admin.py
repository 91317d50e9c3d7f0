"""
Admin & auth session records — identities issued by the hosted auth service.
"""

from __future__ import annotations

from pydantic import BaseModel


class AuthSession(BaseModel):
    access_token: str
    refresh_token: str
    expires_in: int | None = None
    user_id: str
    email: str | None = None


class AuthUser(BaseModel):
    id: str
    email: str | None = None


class AdminRecord(BaseModel):
    """Row of the ``admins`` table; its presence grants dashboard access."""

    user_id: str
    admin_email: str | None = None
