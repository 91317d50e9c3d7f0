"""
Auth endpoints — login (OAuth2 password flow), refresh, logout, me.

Credentials are checked by the hosted auth service; this layer adds the
admin-role gate and moves the tokens into HttpOnly cookies.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Cookie, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordRequestForm
from slowapi import Limiter
from slowapi.util import get_remote_address

from attendance_admin.api.v1.deps import get_access_token, get_backend, require_admin
from attendance_admin.core.config import settings
from attendance_admin.core.exceptions import BackendError
from attendance_admin.core.security import clear_session_cookies, set_session_cookies
from attendance_admin.db.backend import SupabaseBackend
from attendance_admin.models.admin import AdminRecord
from attendance_admin.schemas.attendance import LogoutResponse
from attendance_admin.schemas.token import RefreshRequest, Token
from attendance_admin.schemas.user import AdminRead

# Rate limiter — keyed by client IP
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


async def _revoke_session(backend: SupabaseBackend, access_token: str, user_id: str) -> None:
    """Sign out a session that was issued to a user without an admin record."""
    logger.warning("No admin record found for user %s", user_id)
    try:
        await backend.sign_out(access_token)
    except BackendError as exc:
        logger.warning("Sign-out of non-admin %s failed: %s", user_id, exc.message)


@router.post("/login", response_model=Token)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    backend: SupabaseBackend = Depends(get_backend),
) -> Token:
    """Sign in with email/password. Only users with an admin record get a session."""
    email = form_data.username.strip().lower()
    session = await backend.sign_in(email, form_data.password)
    logger.info("Auth successful for user %s", session.user_id)

    try:
        admin = await backend.find_admin(session.user_id)
    except BackendError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Database error: {exc.message}",
        ) from exc

    if admin is None:
        await _revoke_session(backend, session.access_token, session.user_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. No admin record found for this user.",
        )

    set_session_cookies(response, session)
    return Token(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        admin_email=admin.admin_email,
    )


@router.post("/refresh", response_model=Token)
async def refresh_session(
    response: Response,
    body: RefreshRequest | None = None,
    refresh_token_cookie: str | None = Cookie(None, alias="refresh_token"),
    backend: SupabaseBackend = Depends(get_backend),
) -> Token | JSONResponse:
    # Priority: Body > Cookie
    token_str = body.refresh_token if body and body.refresh_token else refresh_token_cookie
    if not token_str:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token missing",
        )

    session = await backend.refresh(token_str)
    admin = await backend.find_admin(session.user_id)
    if admin is None:
        await _revoke_session(backend, session.access_token, session.user_id)
        denied = JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"detail": "Access denied. Admin privileges required.", "success": False},
        )
        clear_session_cookies(denied)
        return denied

    set_session_cookies(response, session)
    return Token(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        admin_email=admin.admin_email,
    )


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    response: Response,
    token: str | None = Depends(get_access_token),
    backend: SupabaseBackend = Depends(get_backend),
) -> LogoutResponse:
    """End the remote session and clear auth cookies."""
    if token:
        await backend.sign_out(token)
    clear_session_cookies(response)
    return LogoutResponse(message="Logged out successfully")


@router.get("/me", response_model=AdminRead)
async def read_current_admin(
    admin: AdminRecord = Depends(require_admin),
) -> AdminRecord:
    """Return the signed-in admin."""
    return admin
