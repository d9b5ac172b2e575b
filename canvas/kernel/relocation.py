"""
Canvasflow Kernel — Drag/Drop Relocation Protocol

Turns a resolved drag payload plus a drop target into one placement:

  container target  → become its last child
  leaf target       → become the sibling right after it
  file root zone    → append to the file's roots

Existing components are detached and re-attached; palette items are created
with their kind's default properties first. Every check runs before the
source is detached, so a rejected drop leaves the project exactly as it was.

Payload decoding lives here too: the transfer collaborator hands over raw
JSON and PayloadResolver turns it into one of the two payload types.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from canvas.kernel import tree
from canvas.kernel.properties import create_component
from canvas.kernel.tree import ComponentNotFound, StructuralViolation
from canvas.kernel.types import KINDS, Component, Project, ViewFile, is_container

PALETTE_CONTENT_TYPE = "application/x-canvasflow-component"
EXISTING_CONTENT_TYPE = "application/x-canvasflow-existing-component"

# ---------------------------------------------------------------------------
# Payloads and targets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PalettePayload:
    """A palette tile being dragged in. Dropping it creates a component."""

    kind: str


@dataclass(frozen=True)
class ExistingComponentPayload:
    """A node already in the tree being dragged somewhere else."""

    component_id: str


DragPayload = PalettePayload | ExistingComponentPayload


@dataclass(frozen=True)
class DropTarget:
    """
    Where the payload landed: onto a component, or onto a file's root zone.
    Exactly one of component_id / file_id is set.
    """

    component_id: str | None = None
    file_id: str | None = None

    @classmethod
    def component(cls, component_id: str) -> DropTarget:
        return cls(component_id=component_id)

    @classmethod
    def root(cls, file_id: str) -> DropTarget:
        return cls(file_id=file_id)


class PayloadError(Exception):
    """Raw drag data could not be decoded into a payload."""


class PayloadResolver:
    """
    Decodes raw drag data from the transfer mechanism.
    Async because platform transfer resolution is; this is the only
    suspension point in a drop.
    """

    async def resolve(self, raw: Any) -> DragPayload:
        return decode_payload(raw)


def decode_payload(raw: Any) -> DragPayload:
    """
    Accepts a dict or JSON string:
      {"content_type": "...-component", "kind": "text"}
      {"content_type": "...-existing-component", "component_id": "..."}
    content_type may be omitted; the present key decides.
    """
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise PayloadError(f"Malformed drag payload: {e}") from e
    if not isinstance(raw, dict):
        raise PayloadError("Drag payload must be an object")

    content_type = raw.get("content_type")
    if content_type == EXISTING_CONTENT_TYPE or (content_type is None and "component_id" in raw):
        component_id = raw.get("component_id")
        if not isinstance(component_id, str) or not component_id:
            raise PayloadError("Existing-component payload requires 'component_id'")
        return ExistingComponentPayload(component_id=component_id)

    if content_type == PALETTE_CONTENT_TYPE or (content_type is None and "kind" in raw):
        kind = raw.get("kind")
        if kind not in KINDS:
            raise PayloadError(f"Unknown component kind: {kind}")
        return PalettePayload(kind=kind)

    raise PayloadError(f"Unsupported drag content type: {content_type}")


# ---------------------------------------------------------------------------
# Relocation
# ---------------------------------------------------------------------------


def relocate(project: Project, component_id: str, target: DropTarget) -> Component:
    """
    Move an existing component onto target.
    Raises ComponentNotFound / StructuralViolation with the project untouched.
    """
    found = tree.locate_in_project(project, component_id)
    if found is None:
        raise ComponentNotFound(component_id)
    source_file, source = found

    if target.component_id is not None:
        if target.component_id == component_id:
            raise StructuralViolation("Cannot drop a component onto itself")
        if tree.is_descendant(source, target.component_id):
            raise StructuralViolation("Cannot drop a component into its own subtree")

    target_file = _resolve_target_file(project, target)
    if target_file is not source_file:
        tree.check_view_references(project, source, target_file)

    origin = tree.find_location(source_file, component_id)
    tree.remove(source_file, component_id)
    try:
        _place(target_file, source, target)
    except tree.TreeError:
        origin.siblings.insert(origin.index, source)
        raise
    return source


def drop_new(project: Project, kind: str, target: DropTarget) -> Component:
    """Create a palette component and place it on target."""
    if kind not in KINDS:
        raise StructuralViolation(f"Unknown component kind: {kind}")
    target_file = _resolve_target_file(project, target)
    component = create_component(kind)
    _place(target_file, component, target)
    return component


def drop(project: Project, payload: DragPayload, target: DropTarget) -> tuple[Component, bool]:
    """Apply a resolved payload. Returns (placed component, created?)."""
    if isinstance(payload, PalettePayload):
        return drop_new(project, payload.kind, target), True
    return relocate(project, payload.component_id, target), False


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _resolve_target_file(project: Project, target: DropTarget) -> ViewFile:
    if target.component_id is not None:
        found = tree.locate_in_project(project, target.component_id)
        if found is None:
            raise ComponentNotFound(target.component_id)
        return found[0]
    if target.file_id is not None:
        file = project.view_file(target.file_id)
        if file is None:
            raise ComponentNotFound(target.file_id)
        return file
    raise ComponentNotFound("drop target")


def _place(file: ViewFile, component: Component, target: DropTarget) -> None:
    """Container → last child, leaf → next sibling, root zone → last root."""
    if target.component_id is None:
        tree.insert_root(file, component)
        return

    anchor = tree.find_by_id(file, target.component_id)
    if anchor is None:
        raise ComponentNotFound(target.component_id)
    if is_container(anchor.kind):
        tree.insert_child(file, anchor, component)
    else:
        tree.insert_after(file, anchor.id, component)
