"""Project CRUD routes — list, create, get, update, delete."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from backend.models.editor import (
    CreateProjectRequest,
    ProjectResponse,
    ProjectSummary,
    UpdateProjectRequest,
)
from backend.routes.editor import open_session, raise_for_rejection
from backend.services.sessions import SessionRegistry, get_registry

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("", status_code=200)
async def list_projects(registry: SessionRegistry = Depends(get_registry)) -> list[ProjectSummary]:
    """List all stored projects, sorted by name."""
    projects = await registry.list_projects()
    return [ProjectSummary.from_project(p) for p in projects]


@router.post("", status_code=201)
async def create_project(
    req: CreateProjectRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> ProjectResponse:
    """Create a new, empty project."""
    session = await registry.create(req.name, icon=req.icon, color=req.color)
    return ProjectResponse.from_project(session.project, session.selection)


@router.get("/{project_id}", status_code=200)
async def get_project(
    project_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> ProjectResponse:
    """Get the full project document."""
    session = await open_session(project_id, registry)
    return ProjectResponse.from_project(session.project, session.selection)


@router.patch("/{project_id}", status_code=200)
async def update_project(
    project_id: str,
    req: UpdateProjectRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> ProjectResponse:
    """Update a project's name, icon or color."""
    session = await open_session(project_id, registry)
    result = await session.run("project.update", **req.model_dump(exclude_none=True))
    raise_for_rejection(result)
    return ProjectResponse.from_project(session.project, session.selection)


@router.delete("/{project_id}", status_code=200)
async def delete_project(
    project_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> dict[str, str]:
    """Permanently delete a project and everything in it."""
    await open_session(project_id, registry)
    await registry.delete(project_id)
    return {"message": "Project deleted."}
