"""
Tests for PostgresStorage adapter.

Requires a running Postgres instance with the project_documents table
(alembic upgrade head).
"""

import os

import asyncpg
import pytest

from canvas.kernel.postgres_storage import PostgresStorage
from canvas.kernel.session import EditorSession
from canvas.kernel.types import Project


@pytest.fixture
async def db_pool():
    """Create a connection pool for tests."""
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        pytest.skip("DATABASE_URL not set")

    pool = await asyncpg.create_pool(database_url)
    yield pool
    await pool.close()


@pytest.fixture
async def storage(db_pool):
    """Create a PostgresStorage instance."""
    return PostgresStorage(db_pool)


class TestPostgresStorage:
    """Test PostgresStorage CRUD operations."""

    async def test_save_and_load(self, storage, sample):
        await storage.save(sample.project)
        try:
            loaded = await storage.load(sample.project.id)
            assert loaded.to_dict() == sample.project.to_dict()
        finally:
            await storage.remove(sample.project.id)

    async def test_load_nonexistent(self, storage):
        assert await storage.load("no-such-project") is None

    async def test_save_overwrites(self, storage):
        project = Project(name="Version 1")
        await storage.save(project)
        project.name = "Version 2"
        await storage.save(project)
        try:
            loaded = await storage.load(project.id)
            assert loaded.name == "Version 2"
        finally:
            await storage.remove(project.id)

    async def test_remove(self, storage):
        project = Project(name="Doomed")
        await storage.save(project)
        await storage.remove(project.id)
        assert await storage.load(project.id) is None
        assert project.id not in await storage.list_ids()


class TestPostgresSession:
    """EditorSession end-to-end against Postgres."""

    async def test_edits_survive_reopen(self, storage):
        session = await EditorSession.create(storage, "Persisted")
        try:
            await session.run("view_file.create", name="ContentView")
            file_id = session.project.view_files[0].id
            await session.run("component.create", kind="vstack", target={"file": file_id})

            reopened = await EditorSession.open(storage, session.project.id)
            assert reopened.project.to_dict() == session.project.to_dict()
        finally:
            await storage.remove(session.project.id)
