"""
PostgresStorage adapter for the Canvasflow kernel.

Implements the DocumentStorage protocol using Postgres as the backend.
Stores each project as a JSONB document in the project_documents table.
"""

from __future__ import annotations

import asyncpg

from canvas.kernel.storage import DocumentStorage, deserialize, serialize
from canvas.kernel.types import Project


class PostgresStorage(DocumentStorage):
    """
    Postgres-based storage for project documents.

    Table project_documents:
    - project_id: primary key
    - name: denormalized for listing
    - document: JSONB from Project.to_dict()
    """

    def __init__(self, pool: asyncpg.Pool):
        super().__init__()
        self.pool = pool

    async def save(self, project: Project) -> None:
        """Upsert the whole project document."""
        async with self.pool.acquire() as conn:
            await conn.execute(
                """
                INSERT INTO project_documents (project_id, name, document, updated_at)
                VALUES ($1, $2, $3::jsonb, now())
                ON CONFLICT (project_id)
                DO UPDATE SET name = EXCLUDED.name, document = EXCLUDED.document, updated_at = now()
                """,
                project.id,
                project.name,
                serialize(project),
            )
        self._flush_pending()

    async def load(self, project_id: str) -> Project | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT document::text AS document FROM project_documents WHERE project_id = $1",
                project_id,
            )
            return deserialize(row["document"]) if row else None

    async def list_ids(self) -> list[str]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch("SELECT project_id FROM project_documents ORDER BY name")
            return [row["project_id"] for row in rows]

    async def remove(self, project_id: str) -> None:
        async with self.pool.acquire() as conn:
            await conn.execute(
                "DELETE FROM project_documents WHERE project_id = $1",
                project_id,
            )
