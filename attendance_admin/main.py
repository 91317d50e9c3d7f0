"""
Attendance Admin — Application entry point.

This is the **only** file that assembles the app. Business logic lives in
the `api/`, `services/`, `models/` and `core/` packages; every remote
call goes through `db.backend`.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from attendance_admin.api.v1.api import api_router
from attendance_admin.api.v1.endpoints.auth import limiter
from attendance_admin.core.config import settings
from attendance_admin.core.exceptions import register_exception_handlers
from attendance_admin.db.backend import SupabaseBackend

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.backend = await SupabaseBackend.connect(settings)
    logger.info(
        "Attendance Admin v%s started (atomic backend operations: %s)",
        settings.VERSION,
        settings.ATOMIC_BACKEND_OPERATIONS,
    )
    yield
    app.state.backend = None
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Employee attendance and leave dashboard",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    # Login rate limiting
    application.state.limiter = limiter
    application.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

    # Mount API v1
    application.include_router(api_router, prefix=settings.API_V1_PREFIX)

    # Serve frontend static files (must be last — catch-all mount)
    frontend_dir = Path(__file__).resolve().parent.parent / "frontend"
    if frontend_dir.is_dir():
        application.mount(
            "/",
            StaticFiles(directory=str(frontend_dir), html=True),
            name="frontend",
        )
        logger.info("Frontend mounted from %s", frontend_dir)

    return application


app = create_app()
