"""
Application errors and global exception handlers — prevents stack-trace
leakage to clients and turns backend failures into notification bodies.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """A call to the remote backend failed."""

    status_code = 502

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BackendAuthError(BackendError):
    """The backend rejected the supplied credentials or token."""

    status_code = 401


class RowLockedError(Exception):
    """Attempt to change a leave-derived attendance row."""

    def __init__(self, message: str = "Cannot modify attendance for employees on leave") -> None:
        super().__init__(message)
        self.message = message


async def _http_exception_handler(_request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "success": False},
        headers=getattr(exc, "headers", None),
    )


async def _backend_error_handler(_request: Request, exc: BackendError) -> JSONResponse:
    logger.error("Backend error: %s", exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "success": False},
    )


async def _row_locked_handler(_request: Request, exc: RowLockedError) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={"detail": exc.message, "success": False},
    )


async def _generic_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "success": False},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the FastAPI app."""
    app.add_exception_handler(HTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(BackendError, _backend_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RowLockedError, _row_locked_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
