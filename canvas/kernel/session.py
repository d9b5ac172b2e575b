"""
Canvasflow Kernel — Editor Session

Sits between the pure-ish kernel (editor, projector) and the outside world
(storage, the drag transfer mechanism, the HTTP layer). One session per
open project.

Operations: open, create, start, apply, drop, preview, integrity, close

Mutations are serialized by one asyncio lock per session. A drop awaits
payload resolution first; once resolved, the relocation runs to completion
without another mutation interleaving.

Save-on-every-edit: storage is saved after each committed mutation. A failed
save is logged and discarded; the in-memory project stays authoritative.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from canvas.kernel import editor, tree
from canvas.kernel.commands import make_command
from canvas.kernel.projector import project_component, project_view_file
from canvas.kernel.relocation import (
    DropTarget,
    PalettePayload,
    PayloadError,
    PayloadResolver,
)
from canvas.kernel.renderer import render_page
from canvas.kernel.selection import Selection
from canvas.kernel.storage import DocumentStorage
from canvas.kernel.types import Command, MutationResult, Project, Warning
from canvas.kernel.workspace import ProjectNotFound

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class FileNotFound(Exception):
    """View file is not part of the session's project."""


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class EditorSession:
    """
    Owns one open project, its selection, and its storage collaborator.
    """

    def __init__(
        self,
        project: Project,
        storage: DocumentStorage,
        resolver: PayloadResolver | None = None,
    ):
        self.project = project
        self.selection = Selection()
        self.selection.select_project(project.id)
        self._storage = storage
        self._resolver = resolver or PayloadResolver()
        self._lock = asyncio.Lock()
        self.closed = False

    # -- lifecycle --

    @classmethod
    async def open(
        cls,
        storage: DocumentStorage,
        project_id: str,
        resolver: PayloadResolver | None = None,
    ) -> EditorSession:
        """Load a project from storage and start a session on it."""
        project = await storage.load(project_id)
        if project is None:
            raise ProjectNotFound(project_id)
        session = cls(project, storage, resolver)
        for warning in tree.check_integrity(project):
            logger.warning("Project %s: %s %s", project_id, warning.code, warning.message)
        return session

    @classmethod
    async def create(
        cls,
        storage: DocumentStorage,
        name: str,
        icon: str = "star.fill",
        color: str = "blue",
        resolver: PayloadResolver | None = None,
    ) -> EditorSession:
        """Start a session on a brand-new project and save it once."""
        return await cls.start(storage, Project(name=name, icon=icon, color=color), resolver)

    @classmethod
    async def start(
        cls,
        storage: DocumentStorage,
        project: Project,
        resolver: PayloadResolver | None = None,
    ) -> EditorSession:
        """Start a session on a project that storage has not seen yet."""
        session = cls(project, storage, resolver)
        storage.insert(project.id)
        await session._persist()
        return session

    async def close(self) -> None:
        """
        End the session. Waits for an in-flight mutation to finish; after
        that every command is rejected and nothing is saved again.
        """
        async with self._lock:
            self.closed = True
            self.selection.clear()

    # -- apply --

    async def apply(self, command: Command) -> MutationResult:
        """Apply one command under the session lock, then persist."""
        async with self._lock:
            return await self._apply_locked(command)

    async def apply_many(self, commands: list[Command]) -> list[MutationResult]:
        """Apply commands in order. Each one commits (or not) on its own."""
        async with self._lock:
            return [await self._apply_locked(c) for c in commands]

    async def run(self, type: str, **payload: Any) -> MutationResult:
        return await self.apply(make_command(type, payload))

    # -- drag & drop --

    async def drop(self, raw_payload: Any, target: DropTarget) -> MutationResult:
        """
        Resolve a drag payload, then place it on target.
        Resolution failure or cancellation means no mutation at all.
        """
        try:
            payload = await self._resolver.resolve(raw_payload)
        except PayloadError as e:
            logger.info("Drop ignored: %s", e)
            return MutationResult(applied=False, error=f"INVALID_PAYLOAD: {e}")

        target_spec: dict[str, str] = (
            {"component": target.component_id} if target.component_id is not None else {"file": target.file_id}
        )
        if isinstance(payload, PalettePayload):
            command = make_command("component.create", kind=payload.kind, target=target_spec)
        else:
            command = make_command("component.drop", component=payload.component_id, target=target_spec)
        return await self.apply(command)

    # -- preview --

    def preview(self, file_id: str) -> dict[str, Any]:
        """Visual description of a whole view file."""
        file = self.project.view_file(file_id)
        if file is None:
            raise FileNotFound(file_id)
        return project_view_file(file, self.project)

    def preview_component(self, component_id: str) -> dict[str, Any] | None:
        found = tree.locate_in_project(self.project, component_id)
        if found is None:
            return None
        return project_component(found[1], self.project)

    def preview_html(self, file_id: str) -> str:
        file = self.project.view_file(file_id)
        if file is None:
            raise FileNotFound(file_id)
        return render_page(self.preview(file_id), title=f"{self.project.name} · {file.name}")

    def integrity(self) -> list[Warning]:
        return tree.check_integrity(self.project)

    # -- internals --

    async def _apply_locked(self, command: Command) -> MutationResult:
        if self.closed:
            return MutationResult(applied=False, error=f"NOT_FOUND: Project '{self.project.id}' is closed")
        result = editor.apply(self.project, self.selection, command)
        if not result.applied:
            logger.debug("Rejected %s: %s", command.type, result.error)
            return result

        for warning in result.warnings:
            logger.info("%s: %s", warning.code, warning.message)
        for entity_id in result.created:
            self._storage.insert(entity_id)
        for entity_id in result.destroyed:
            self._storage.delete(entity_id)
        await self._persist()
        return result

    async def _persist(self) -> None:
        try:
            await self._storage.save(self.project)
        except Exception:
            # In-memory state stays authoritative until the next good save
            logger.exception("Failed to save project %s", self.project.id)
