"""
Session cookie handling for backend-issued tokens.

Tokens are minted and verified by the hosted auth service; this module
only moves them between the HTTP layer and the backend gateway.
"""

from __future__ import annotations

from fastapi import Response

from attendance_admin.core.config import settings
from attendance_admin.models.admin import AuthSession

ACCESS_COOKIE = "access_token"
REFRESH_COOKIE = "refresh_token"


def set_session_cookies(response: Response, session: AuthSession) -> None:
    """Store the session as HttpOnly cookies."""
    response.set_cookie(
        key=ACCESS_COOKIE,
        value=f"Bearer {session.access_token}",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=session.expires_in or settings.ACCESS_COOKIE_MAX_AGE,
    )
    response.set_cookie(
        key=REFRESH_COOKIE,
        value=session.refresh_token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.REFRESH_COOKIE_MAX_AGE,
    )


def clear_session_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_COOKIE)
    response.delete_cookie(REFRESH_COOKIE)


def resolve_token(header_token: str | None, cookie_value: str | None) -> str | None:
    """Pick the access token: Authorization header first, then cookie."""
    if header_token:
        return header_token
    if not cookie_value:
        return None
    # Cookie is written as "Bearer <token>"
    if cookie_value.startswith("Bearer "):
        return cookie_value.split(" ", 1)[1] or None
    return cookie_value
