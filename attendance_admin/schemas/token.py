"""Pydantic schemas for backend-issued session tokens."""

from __future__ import annotations

from pydantic import BaseModel


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    admin_email: str | None = None


class RefreshRequest(BaseModel):
    refresh_token: str
