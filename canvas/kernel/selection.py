"""
Canvasflow Kernel — Selection & Navigation State

Exactly one active selection per open document. The Selection object is
owned by the editor session and handed to every consumer by reference;
it lives and dies with the session.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any


@dataclass
class Selection:
    project_id: str | None = None
    view_file_id: str | None = None
    model_file_id: str | None = None
    component_id: str | None = None

    def select_project(self, project_id: str | None) -> None:
        if project_id != self.project_id:
            self.view_file_id = None
            self.model_file_id = None
            self.component_id = None
        self.project_id = project_id

    def select_view_file(self, file_id: str | None) -> None:
        # View and model files are mutually exclusive in the canvas
        if file_id != self.view_file_id:
            self.component_id = None
        self.view_file_id = file_id
        if file_id is not None:
            self.model_file_id = None

    def select_model_file(self, file_id: str | None) -> None:
        self.model_file_id = file_id
        if file_id is not None:
            self.view_file_id = None
            self.component_id = None

    def select_component(self, component_id: str | None, file_id: str | None = None) -> None:
        if file_id is not None:
            self.view_file_id = file_id
            self.model_file_id = None
        self.component_id = component_id

    def forget(self, ids: Iterable[str]) -> None:
        """Drop any selected identity that no longer exists."""
        gone = set(ids)
        if self.project_id in gone:
            self.clear()
            return
        if self.view_file_id in gone:
            self.view_file_id = None
            self.component_id = None
        if self.model_file_id in gone:
            self.model_file_id = None
        if self.component_id in gone:
            self.component_id = None

    def clear(self) -> None:
        self.project_id = None
        self.view_file_id = None
        self.model_file_id = None
        self.component_id = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_id": self.project_id,
            "view_file_id": self.view_file_id,
            "model_file_id": self.model_file_id,
            "component_id": self.component_id,
        }
