"""
Centralised application settings loaded from environment / .env file.

Uses pydantic-settings so every value can be overridden via env vars
or the .env file at the project root. The two backend credentials are
required and read once at process start.
"""

from __future__ import annotations

import json
import logging
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode


class Settings(BaseSettings):
    # ── Project ──────────────────────────────────────────────────────
    PROJECT_NAME: str = "Attendance Admin"
    VERSION: str = "1.0.0"
    API_V1_PREFIX: str = "/api/v1"

    # ── Backend (Supabase) ───────────────────────────────────────────
    SUPABASE_URL: str
    SUPABASE_KEY: str
    # Run cascading delete / leave creation as single stored procedures
    ATOMIC_BACKEND_OPERATIONS: bool = True

    # ── Session cookies ──────────────────────────────────────────────
    COOKIE_SECURE: bool = False  # Set True in HTTPS production
    ACCESS_COOKIE_MAX_AGE: int = 60 * 60
    REFRESH_COOKIE_MAX_AGE: int = 7 * 24 * 60 * 60

    # ── Rate limiting ────────────────────────────────────────────────
    RATE_LIMIT_ENABLED: bool = True
    LOGIN_RATE_LIMIT: str = "5/minute"

    # ── CORS ─────────────────────────────────────────────────────────
    # Comma-separated or JSON list
    CORS_ORIGINS: Annotated[list[str], NoDecode] = [
        "http://localhost",
        "http://localhost:3000",
        "http://localhost:8000",
        "http://127.0.0.1",
        "http://127.0.0.1:8000",
    ]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors(cls, v: object) -> list[str]:
        if isinstance(v, str):
            if v.lstrip().startswith("["):
                return json.loads(v)
            return [o.strip() for o in v.split(",") if o.strip()]
        return v  # type: ignore[return-value]

    @field_validator("SUPABASE_URL")
    @classmethod
    def _strip_url(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("SUPABASE_URL must not be empty")
        return v

    # ── Logging ──────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }


settings = Settings()

if not settings.SUPABASE_URL.startswith("https://"):
    logging.getLogger("attendance_admin.core.config").warning(
        "SUPABASE_URL is not HTTPS (%s); credentials will travel in clear text.",
        settings.SUPABASE_URL,
    )
