"""
FastAPI dependencies — backend gateway and admin session guard.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Cookie, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from attendance_admin.core.exceptions import BackendError
from attendance_admin.core.security import resolve_token
from attendance_admin.db.backend import SupabaseBackend
from attendance_admin.models.admin import AdminRecord

logger = logging.getLogger(__name__)

# auto_error=False so the cookie can be used when the header is missing
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


# ── Backend ─────────────────────────────────────────────────────────
def get_backend(request: Request) -> SupabaseBackend:
    """The gateway built at start-up (see ``main.lifespan``)."""
    backend = getattr(request.app.state, "backend", None)
    if backend is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Backend client is not configured",
        )
    return backend


def get_access_token(
    token: Optional[str] = Depends(oauth2_scheme),
    access_token: Optional[str] = Cookie(default=None),  # HttpOnly cookie
) -> Optional[str]:
    return resolve_token(token, access_token)


# ── Auth ────────────────────────────────────────────────────────────
async def require_admin(
    token: Optional[str] = Depends(get_access_token),
    backend: SupabaseBackend = Depends(get_backend),
) -> AdminRecord:
    """Verify the session and the admin role on every dashboard call.

    A valid user without an ``admins`` row is signed out remotely.
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="You are not logged in.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await backend.get_user(token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired. Please log in again.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        admin = await backend.find_admin(user.id)
    except BackendError as exc:
        logger.error("Admin check failed for %s: %s", user.id, exc.message)
        admin = None

    if admin is None:
        try:
            await backend.sign_out(token)
        except BackendError as exc:
            logger.warning("Sign-out of non-admin %s failed: %s", user.id, exc.message)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Admin privileges required.",
        )
    return admin
