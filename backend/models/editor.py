"""Editor models for projects, commands, drops and selection."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

from canvas.kernel.selection import Selection
from canvas.kernel.types import MutationResult, Project


class CreateProjectRequest(BaseModel):
    """What the client sends to create a project."""

    model_config = {"extra": "forbid"}

    name: str = Field(default="Untitled", min_length=1, max_length=200)
    icon: str = Field(default="star.fill", max_length=100)
    color: str = Field(default="blue", max_length=20)


class UpdateProjectRequest(BaseModel):
    """What the client sends to update a project. All fields optional."""

    model_config = {"extra": "forbid"}

    name: str | None = Field(default=None, min_length=1, max_length=200)
    icon: str | None = Field(default=None, max_length=100)
    color: str | None = Field(default=None, max_length=20)


class ProjectSummary(BaseModel):
    """One row in the project list."""

    id: str
    name: str
    icon: str
    color: str
    view_file_count: int
    model_file_count: int

    @classmethod
    def from_project(cls, project: Project) -> ProjectSummary:
        return cls(
            id=project.id,
            name=project.name,
            icon=project.icon,
            color=project.color,
            view_file_count=len(project.view_files),
            model_file_count=len(project.model_files),
        )


class ProjectResponse(BaseModel):
    """A full project document plus the session's current selection."""

    id: str
    name: str
    document: dict[str, Any]
    selection: dict[str, Any]

    @classmethod
    def from_project(cls, project: Project, selection: Selection) -> ProjectResponse:
        return cls(
            id=project.id,
            name=project.name,
            document=project.to_dict(),
            selection=selection.to_dict(),
        )


class CommandRequest(BaseModel):
    """One editor command."""

    model_config = {"extra": "forbid"}

    type: str = Field(min_length=1, max_length=64)
    payload: dict[str, Any] = Field(default_factory=dict)


class DropTargetModel(BaseModel):
    """Drop onto a component, or onto a view file's root zone."""

    model_config = {"extra": "forbid"}

    component: str | None = None
    file: str | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> DropTargetModel:
        if (self.component is None) == (self.file is None):
            raise ValueError("target needs exactly one of 'component' or 'file'")
        return self


class DropRequest(BaseModel):
    """
    Raw drag data plus where it landed.
    payload is handed to the payload resolver as-is.
    """

    model_config = {"extra": "forbid"}

    payload: dict[str, Any] | str
    target: DropTargetModel


class WarningModel(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None


class MutationResponse(BaseModel):
    """What a committed command returns."""

    applied: bool
    warnings: list[WarningModel] = Field(default_factory=list)
    created: list[str] = Field(default_factory=list)
    destroyed: list[str] = Field(default_factory=list)
    selected: str | None = None
    selection: dict[str, Any]

    @classmethod
    def from_result(cls, result: MutationResult, selection: Selection) -> MutationResponse:
        return cls(
            applied=result.applied,
            warnings=[WarningModel(code=w.code, message=w.message, details=w.details) for w in result.warnings],
            created=result.created,
            destroyed=result.destroyed,
            selected=result.selected,
            selection=selection.to_dict(),
        )


class SelectionRequest(BaseModel):
    """Replace the session selection. Unset fields are cleared."""

    model_config = {"extra": "forbid"}

    view_file_id: str | None = None
    model_file_id: str | None = None
    component_id: str | None = None


class PaletteItem(BaseModel):
    kind: str
    display_name: str
    icon: str
    is_container: bool


class PaletteCategory(BaseModel):
    name: str
    items: list[PaletteItem]
