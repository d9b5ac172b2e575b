"""
Canvasflow Kernel — Storage Protocol

The persistence collaborator. The session tells storage which entities
were inserted or deleted by a mutation, then asks it to save the project.

Projects are stored whole, as the JSON document from Project.to_dict().
insert/delete are bookkeeping for adapters that track changes; save is
what makes them durable.
"""

from __future__ import annotations

import json
from typing import Any

from canvas.kernel.types import Project


class StorageError(Exception):
    """Raised by adapters when a save or load cannot complete."""


class DocumentStorage:
    """
    Abstract storage interface.
    Implement with Postgres for production, or in-memory for tests.
    """

    def __init__(self) -> None:
        self.pending_inserts: list[str] = []
        self.pending_deletes: list[str] = []

    def insert(self, entity_id: str) -> None:
        """Record a newly created entity until the next save."""
        self.pending_inserts.append(entity_id)

    def delete(self, entity_id: str) -> None:
        """Record a destroyed entity until the next save."""
        self.pending_deletes.append(entity_id)

    async def save(self, project: Project) -> None:
        """Persist the whole project. Raises on failure."""
        raise NotImplementedError

    async def load(self, project_id: str) -> Project | None:
        """Fetch a project. Returns None if not found."""
        raise NotImplementedError

    async def list_ids(self) -> list[str]:
        raise NotImplementedError

    async def remove(self, project_id: str) -> None:
        """Delete a stored project."""
        raise NotImplementedError

    def _flush_pending(self) -> None:
        self.pending_inserts.clear()
        self.pending_deletes.clear()


class MemoryStorage(DocumentStorage):
    """In-memory storage for testing. Documents are kept as JSON strings."""

    def __init__(self) -> None:
        super().__init__()
        self.documents: dict[str, str] = {}
        self.save_count = 0

    async def save(self, project: Project) -> None:
        self.documents[project.id] = serialize(project)
        self.save_count += 1
        self._flush_pending()

    async def load(self, project_id: str) -> Project | None:
        raw = self.documents.get(project_id)
        if raw is None:
            return None
        return deserialize(raw)

    async def list_ids(self) -> list[str]:
        return list(self.documents)

    async def remove(self, project_id: str) -> None:
        self.documents.pop(project_id, None)


def serialize(project: Project) -> str:
    return json.dumps(project.to_dict(), sort_keys=True)


def deserialize(raw: str | dict[str, Any]) -> Project:
    try:
        data = json.loads(raw) if isinstance(raw, str) else raw
        return Project.from_dict(data)
    except (json.JSONDecodeError, KeyError, TypeError) as e:
        raise StorageError(f"Malformed project document: {e}") from e
