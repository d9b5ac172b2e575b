"""Editor routes — commands, drag/drop, selection, preview, integrity, palette."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import HTMLResponse

from backend.models.editor import (
    CommandRequest,
    DropRequest,
    MutationResponse,
    PaletteCategory,
    PaletteItem,
    SelectionRequest,
    WarningModel,
)
from backend.services.sessions import ProjectNotFound, SessionRegistry, get_registry
from canvas.kernel import tree
from canvas.kernel.commands import make_command
from canvas.kernel.relocation import DropTarget
from canvas.kernel.session import EditorSession, FileNotFound
from canvas.kernel.types import KINDS, PALETTE, MutationResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["editor"])

# Rejection code → HTTP status
_REJECTION_STATUS: dict[str, int] = {
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "STRUCTURAL_VIOLATION": status.HTTP_409_CONFLICT,
    "INVALID_PAYLOAD": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "UNKNOWN_COMMAND": status.HTTP_422_UNPROCESSABLE_ENTITY,
}


async def open_session(project_id: str, registry: SessionRegistry) -> EditorSession:
    """Fetch the project's session or 404."""
    try:
        return await registry.get(project_id)
    except ProjectNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found.") from None


def raise_for_rejection(result: MutationResult) -> None:
    """Turn a rejected command into an HTTP error. The project is unchanged either way."""
    if result.applied:
        return
    code = result.error_code or ""
    logger.info("Rejected: %s", result.error)
    raise HTTPException(
        status_code=_REJECTION_STATUS.get(code, status.HTTP_400_BAD_REQUEST),
        detail=result.error,
    )


# ── commands ────────────────────────────────────────────────────────────────


@router.post("/projects/{project_id}/commands", status_code=200)
async def apply_command(
    project_id: str,
    req: CommandRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> MutationResponse:
    """Apply one editor command to a project."""
    session = await open_session(project_id, registry)
    result = await session.apply(make_command(req.type, req.payload))
    raise_for_rejection(result)
    return MutationResponse.from_result(result, session.selection)


@router.post("/projects/{project_id}/drop", status_code=200)
async def drop(
    project_id: str,
    req: DropRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> MutationResponse:
    """
    Drop a palette item or an existing component onto a target.

    Palette items are created with their default properties. Existing
    components are moved. Either way the dropped component ends up selected.
    """
    session = await open_session(project_id, registry)
    if req.target.component is not None:
        target = DropTarget.component(req.target.component)
    else:
        target = DropTarget.root(req.target.file)
    result = await session.drop(req.payload, target)
    raise_for_rejection(result)
    return MutationResponse.from_result(result, session.selection)


# ── selection ───────────────────────────────────────────────────────────────


@router.get("/projects/{project_id}/selection", status_code=200)
async def get_selection(
    project_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> dict:
    session = await open_session(project_id, registry)
    return session.selection.to_dict()


@router.put("/projects/{project_id}/selection", status_code=200)
async def put_selection(
    project_id: str,
    req: SelectionRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> dict:
    """Replace the selection. Every id must exist in the project."""
    session = await open_session(project_id, registry)
    project = session.project

    if req.view_file_id is not None and req.model_file_id is not None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Select a view file or a model file, not both.",
        )
    if req.view_file_id is not None and project.view_file(req.view_file_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="View file not found.")
    if req.model_file_id is not None and project.model_file(req.model_file_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Model file not found.")

    file_id = req.view_file_id
    if req.component_id is not None:
        found = tree.locate_in_project(project, req.component_id)
        if found is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Component not found.")
        if file_id is not None and found[0].id != file_id:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Component is not in the selected view file.",
            )
        file_id = found[0].id

    selection = session.selection
    selection.select_project(project.id)
    if req.model_file_id is not None:
        selection.select_model_file(req.model_file_id)
    else:
        selection.select_view_file(file_id)
        selection.select_component(req.component_id, file_id)
    return selection.to_dict()


# ── preview ─────────────────────────────────────────────────────────────────


@router.get("/projects/{project_id}/files/{file_id}/preview", status_code=200)
async def preview_file(
    project_id: str,
    file_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> dict:
    """Visual description of a view file."""
    session = await open_session(project_id, registry)
    try:
        return session.preview(file_id)
    except FileNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="View file not found.") from None


@router.get("/projects/{project_id}/files/{file_id}/preview.html", status_code=200)
async def preview_file_html(
    project_id: str,
    file_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> HTMLResponse:
    """Rendered HTML preview of a view file."""
    session = await open_session(project_id, registry)
    try:
        html_content = session.preview_html(file_id)
    except FileNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="View file not found.") from None
    return HTMLResponse(content=html_content)


@router.get("/projects/{project_id}/components/{component_id}/preview", status_code=200)
async def preview_component(
    project_id: str,
    component_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> dict:
    """Visual description of one component and its subtree."""
    session = await open_session(project_id, registry)
    description = session.preview_component(component_id)
    if description is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Component not found.")
    return description


@router.get("/projects/{project_id}/integrity", status_code=200)
async def check_integrity(
    project_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> list[WarningModel]:
    """Invariant breaks in the project document. Empty when the document is sound."""
    session = await open_session(project_id, registry)
    return [WarningModel(code=w.code, message=w.message, details=w.details) for w in session.integrity()]


# ── palette ─────────────────────────────────────────────────────────────────


@router.get("/palette", status_code=200)
async def get_palette() -> list[PaletteCategory]:
    """Component kinds grouped the way the library panel shows them."""
    return [
        PaletteCategory(
            name=name,
            items=[
                PaletteItem(
                    kind=kind,
                    display_name=KINDS[kind].display_name,
                    icon=KINDS[kind].icon,
                    is_container=KINDS[kind].is_container,
                )
                for kind in kinds
            ],
        )
        for name, kinds in PALETTE
    ]
