"""
Pydantic models for Canvasflow.

All API data shapes defined here. No imports from db, services, or routes.
"""

from backend.models.editor import (
    CommandRequest,
    CreateProjectRequest,
    DropRequest,
    DropTargetModel,
    MutationResponse,
    PaletteCategory,
    PaletteItem,
    ProjectResponse,
    ProjectSummary,
    SelectionRequest,
    UpdateProjectRequest,
    WarningModel,
)

__all__ = [
    # Project models
    "CreateProjectRequest",
    "UpdateProjectRequest",
    "ProjectSummary",
    "ProjectResponse",
    # Editing models
    "CommandRequest",
    "DropRequest",
    "DropTargetModel",
    "MutationResponse",
    "WarningModel",
    "SelectionRequest",
    # Palette models
    "PaletteItem",
    "PaletteCategory",
]
