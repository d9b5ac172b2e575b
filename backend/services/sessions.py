"""
Session registry — one EditorSession per open project.

Projects are opened lazily from storage on first access and stay open
until deleted or the app shuts down. The open projects are also held in a
Workspace so deletion reports every identity it destroys.
"""

from __future__ import annotations

import asyncio
import logging

from canvas.kernel.session import EditorSession
from canvas.kernel.storage import DocumentStorage, MemoryStorage, StorageError
from canvas.kernel.types import Project
from canvas.kernel.workspace import ProjectNotFound, Workspace

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Opens, caches and closes editor sessions over one storage adapter."""

    def __init__(self, storage: DocumentStorage):
        self.storage = storage
        self.workspace = Workspace()
        self._sessions: dict[str, EditorSession] = {}
        self._lock = asyncio.Lock()

    async def get(self, project_id: str) -> EditorSession:
        """Return the open session for a project, opening it if needed. Raises ProjectNotFound."""
        async with self._lock:
            session = self._sessions.get(project_id)
            if session is None:
                session = await EditorSession.open(self.storage, project_id)
                self._register(session)
                logger.info("Opened project %s", project_id)
            return session

    async def create(self, name: str, icon: str = "star.fill", color: str = "blue") -> EditorSession:
        """Unknown colors fall back to blue."""
        project = self.workspace.create_project(name, icon=icon, color=color)
        session = await EditorSession.start(self.storage, project)
        async with self._lock:
            self._register(session)
        logger.info("Created project %s (%s)", session.project.id, name)
        return session

    async def list_projects(self) -> list[Project]:
        """Every stored project; open sessions win over stored copies."""
        projects: list[Project] = []
        for project_id in await self.storage.list_ids():
            open_project = self.workspace.find(project_id)
            if open_project is not None:
                projects.append(open_project)
                continue
            try:
                project = await self.storage.load(project_id)
            except StorageError:
                logger.exception("Skipping unreadable project %s", project_id)
                continue
            if project is not None:
                projects.append(project)
        return sorted(projects, key=lambda p: p.name.lower())

    async def delete(self, project_id: str) -> list[str]:
        """Close and remove a project. Returns the destroyed identities."""
        session = await self.get(project_id)
        async with self._lock:
            await session.close()
            self._sessions.pop(project_id, None)
            destroyed = self.workspace.delete_project(project_id)
        for entity_id in destroyed:
            self.storage.delete(entity_id)
        await self.storage.remove(project_id)
        logger.info("Deleted project %s (%d entities)", project_id, len(destroyed))
        return destroyed

    async def close_all(self) -> None:
        async with self._lock:
            for session in self._sessions.values():
                await session.close()
            self._sessions.clear()

    def _register(self, session: EditorSession) -> None:
        self._sessions[session.project.id] = session
        self.workspace.add(session.project)


# ---------------------------------------------------------------------------
# App-wide registry
# ---------------------------------------------------------------------------

_registry: SessionRegistry | None = None


def configure(storage: DocumentStorage) -> SessionRegistry:
    """Install the registry for the running app. Called from lifespan and tests."""
    global _registry
    _registry = SessionRegistry(storage)
    return _registry


def get_registry() -> SessionRegistry:
    """FastAPI dependency. Falls back to in-memory storage if nothing was configured."""
    global _registry
    if _registry is None:
        _registry = SessionRegistry(MemoryStorage())
    return _registry


__all__ = ["SessionRegistry", "ProjectNotFound", "configure", "get_registry"]
