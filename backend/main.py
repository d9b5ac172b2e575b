"""
Canvasflow FastAPI application.

Entry point for the API server.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend import db
from backend.config import settings
from backend.routes import editor as editor_routes
from backend.routes import projects as project_routes
from backend.services import sessions
from canvas.kernel.postgres_storage import PostgresStorage
from canvas.kernel.storage import MemoryStorage

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Handles startup and shutdown logic:
    - Pick the storage backend and install the session registry
    - Initialize the database pool when Postgres is selected
    - Close open sessions and the pool on shutdown
    """
    # Startup
    if settings.uses_postgres:
        pool = await db.init_pool()
        registry = sessions.configure(PostgresStorage(pool))
        logger.info("Database pool initialized")
    else:
        registry = sessions.configure(MemoryStorage())
        logger.info("Using in-memory storage (%s)", settings.ENVIRONMENT)

    yield

    # Shutdown
    await registry.close_all()
    if settings.uses_postgres:
        await db.close_pool()
        logger.info("Database pool closed")


app = FastAPI(
    title="Canvasflow",
    lifespan=lifespan,
)

# Register routes
app.include_router(project_routes.router)
app.include_router(editor_routes.router)


@app.get("/health")
async def health():
    """Health check endpoint for uptime monitoring."""
    return {"status": "ok"}
