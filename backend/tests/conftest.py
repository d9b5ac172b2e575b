"""
Pytest configuration and fixtures for Canvasflow API tests.

API tests run against in-memory storage; no database is needed.
"""

from __future__ import annotations

import os

# Set test environment variables before importing config
os.environ["STORAGE_BACKEND"] = "memory"
os.environ.setdefault("ENVIRONMENT", "test")

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from backend.main import app  # noqa: E402
from backend.services import sessions  # noqa: E402
from canvas.kernel.storage import MemoryStorage  # noqa: E402


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture(autouse=True)
def registry(storage):
    """Fresh session registry per test, backed by in-memory storage."""
    return sessions.configure(storage)


@pytest_asyncio.fixture
async def async_client():
    """Async HTTP client against the ASGI app."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest_asyncio.fixture
async def project(async_client) -> dict:
    """A project with one empty view file named ContentView."""
    res = await async_client.post("/api/projects", json={"name": "Fixture"})
    assert res.status_code == 201
    data = res.json()
    res = await async_client.post(
        f"/api/projects/{data['id']}/commands",
        json={"type": "view_file.create", "payload": {"name": "ContentView"}},
    )
    assert res.status_code == 200
    return {"id": data["id"], "file_id": res.json()["created"][0]}
