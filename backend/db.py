"""
Database connection pool.

Only used when STORAGE_BACKEND=postgres. Project documents are written as
text and cast to jsonb in SQL, so no JSON codecs are registered here.
"""

from __future__ import annotations

import asyncpg

from backend.config import settings

pool: asyncpg.Pool | None = None


async def init_pool() -> asyncpg.Pool:
    """
    Initialize the connection pool.
    Called once at application startup.
    """
    global pool
    pool = await asyncpg.create_pool(
        dsn=settings.DATABASE_URL,
        min_size=settings.DB_POOL_MIN_SIZE,
        max_size=settings.DB_POOL_MAX_SIZE,
        command_timeout=60,
    )
    return pool


async def close_pool() -> None:
    """
    Close the connection pool.
    Called at application shutdown.
    """
    global pool
    if pool is not None:
        await pool.close()
        pool = None
