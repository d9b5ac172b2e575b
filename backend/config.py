"""
Canvasflow configuration — all environment variables in one place.

Read from environment at runtime. Never hardcode secrets.
"""

from __future__ import annotations

import os


class Settings:
    """Application settings from environment variables."""

    # Storage
    STORAGE_BACKEND: str = os.environ.get("STORAGE_BACKEND", "memory")  # memory | postgres
    DATABASE_URL: str = os.environ.get("DATABASE_URL", "")
    DB_POOL_MIN_SIZE: int = int(os.environ.get("DB_POOL_MIN_SIZE", "2"))
    DB_POOL_MAX_SIZE: int = int(os.environ.get("DB_POOL_MAX_SIZE", "10"))

    # Logging
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")

    @property
    def uses_postgres(self) -> bool:
        return self.STORAGE_BACKEND == "postgres"


# Singleton instance
settings = Settings()

if settings.STORAGE_BACKEND not in ("memory", "postgres"):
    raise RuntimeError(f"STORAGE_BACKEND must be 'memory' or 'postgres', got {settings.STORAGE_BACKEND!r}")
if settings.uses_postgres and not settings.DATABASE_URL:
    raise RuntimeError("DATABASE_URL environment variable is required when STORAGE_BACKEND=postgres")
