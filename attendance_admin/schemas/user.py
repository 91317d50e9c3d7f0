"""Pydantic schemas for the signed-in admin."""

from __future__ import annotations

from pydantic import BaseModel


class AdminRead(BaseModel):
    user_id: str
    admin_email: str | None

    model_config = {"from_attributes": True}
