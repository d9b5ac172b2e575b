"""
Canvasflow Kernel — Identity & Entity Store

The Workspace is canonical storage for open projects. It also owns the
file lifecycle inside a project, where deletion cascades:

  Project   → every ViewFile and ModelFile
  ViewFile  → every root Component (and subtree) and Variable
  ModelFile → every ModelField

Deleting a ViewFile also nulls out every customView reference to it, so
no component is left pointing at a file that no longer exists.
"""

from __future__ import annotations

from canvas.kernel.tree import subtree_ids, walk
from canvas.kernel.types import (
    CUSTOM_VIEW,
    PROJECT_COLORS,
    ModelFile,
    Project,
    ViewFile,
    Warning,
)


class ProjectNotFound(Exception):
    """Project id is not in the workspace."""


class Workspace:
    """In-memory registry of projects, keyed by identity."""

    def __init__(self) -> None:
        self._projects: dict[str, Project] = {}

    def create_project(self, name: str, icon: str = "star.fill", color: str = "blue") -> Project:
        project = Project(name=name, icon=icon, color=color if color in PROJECT_COLORS else "blue")
        self._projects[project.id] = project
        return project

    def add(self, project: Project) -> Project:
        self._projects[project.id] = project
        return project

    def find(self, project_id: str) -> Project | None:
        return self._projects.get(project_id)

    def projects(self) -> list[Project]:
        return sorted(self._projects.values(), key=lambda p: p.name.lower())

    def delete_project(self, project_id: str) -> list[str]:
        """Drop a project and report every identity destroyed with it."""
        project = self._projects.pop(project_id, None)
        if project is None:
            raise ProjectNotFound(project_id)
        return project_ids(project)


# ---------------------------------------------------------------------------
# File lifecycle
# ---------------------------------------------------------------------------


def create_view_file(project: Project, name: str) -> ViewFile:
    file = ViewFile(name=name)
    project.view_files.append(file)
    return file


def create_model_file(project: Project, name: str) -> ModelFile:
    file = ModelFile(name=name)
    project.model_files.append(file)
    return file


def delete_view_file(project: Project, file_id: str) -> tuple[list[str], list[Warning]] | None:
    """
    Remove a ViewFile, destroying its contents.
    Returns (destroyed ids, warnings) or None if the file is not in the project.
    """
    for i, file in enumerate(project.view_files):
        if file.id == file_id:
            project.view_files.pop(i)
            break
    else:
        return None

    destroyed = view_file_ids(file)
    warnings: list[Warning] = []
    for other in project.view_files:
        for component in walk(other.components):
            if component.kind == CUSTOM_VIEW and component.referenced_view == file_id:
                component.referenced_view = None
                warnings.append(
                    Warning(
                        code="VIEW_REFERENCE_CLEARED",
                        message=f"Component '{component.id}' no longer references '{file.name}'",
                        details={"component": component.id, "file": other.id},
                    )
                )
    return destroyed, warnings


def delete_model_file(project: Project, file_id: str) -> list[str] | None:
    for i, file in enumerate(project.model_files):
        if file.id == file_id:
            project.model_files.pop(i)
            return [file.id] + [f.id for f in file.fields]
    return None


# ---------------------------------------------------------------------------
# Identity listings
# ---------------------------------------------------------------------------


def view_file_ids(file: ViewFile) -> list[str]:
    ids = [file.id]
    ids.extend(v.id for v in file.variables)
    for root in file.components:
        ids.extend(subtree_ids(root))
    return ids


def project_ids(project: Project) -> list[str]:
    ids = [project.id]
    for file in project.view_files:
        ids.extend(view_file_ids(file))
    for model in project.model_files:
        ids.append(model.id)
        ids.extend(f.id for f in model.fields)
    return ids
