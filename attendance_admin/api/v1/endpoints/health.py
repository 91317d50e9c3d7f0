"""
Health check — backend reachability.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from attendance_admin.api.v1.deps import get_backend
from attendance_admin.core.exceptions import BackendError
from attendance_admin.db.backend import SupabaseBackend
from attendance_admin.schemas.attendance import HealthResponse

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health(backend: SupabaseBackend = Depends(get_backend)) -> HealthResponse:
    """Public health check."""
    try:
        return HealthResponse(backend=await backend.ping())
    except BackendError as exc:
        logger.error("Health check backend failure: %s", exc.message)
        return HealthResponse(backend=False)
