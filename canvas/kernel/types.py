"""
Canvasflow Kernel — Shared Types

Data classes used across the tree engine, projector, command layer and session.
These are the contracts that bind the kernel together.

Ownership is strictly tree-shaped:
- Project owns its ViewFiles and ModelFiles
- ViewFile owns its root Components and Variables
- Component owns its Properties, Modifiers and direct children

The only non-owning edge is Component.referenced_view (a ViewFile id).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

# ---------------------------------------------------------------------------
# Component kinds
# ---------------------------------------------------------------------------

TEXT = "text"
IMAGE = "image"
VSTACK = "vstack"
HSTACK = "hstack"
ZSTACK = "zstack"
SPACER = "spacer"
BUTTON = "button"
TEXT_FIELD = "textField"
CUSTOM_VIEW = "customView"


@dataclass(frozen=True)
class KindInfo:
    """Everything the editor knows about one component kind."""

    display_name: str
    icon: str
    default_properties: tuple[tuple[str, str], ...] = ()
    axis: str | None = None  # set only for container kinds

    @property
    def is_container(self) -> bool:
        return self.axis is not None


KINDS: dict[str, KindInfo] = {
    TEXT: KindInfo("Text", "textformat", (("text", '"Hello, World!"'),)),
    IMAGE: KindInfo("Image", "photo", (("systemName", '"photo"'),)),
    VSTACK: KindInfo("VStack", "rectangle.split.1x3", (("spacing", "10"),), axis="vertical"),
    HSTACK: KindInfo("HStack", "rectangle.split.3x1", (("spacing", "10"),), axis="horizontal"),
    ZSTACK: KindInfo("ZStack", "square.stack.3d.up", (("spacing", "10"),), axis="layered"),
    SPACER: KindInfo("Spacer", "arrow.left.and.right"),
    BUTTON: KindInfo("Button", "button.programmable", (("action", "{}"), ("label", '"Button"'))),
    TEXT_FIELD: KindInfo(
        "TextField",
        "character.textbox",
        (("placeholder", '"Enter text..."'), ("text", '.constant("")')),
    ),
    CUSTOM_VIEW: KindInfo("Custom View", "doc.badge.plus"),
}

PALETTE: list[tuple[str, list[str]]] = [
    ("Layout", [VSTACK, HSTACK, ZSTACK, SPACER]),
    ("Controls", [BUTTON, TEXT_FIELD]),
    ("Display", [TEXT, IMAGE]),
    ("Custom", [CUSTOM_VIEW]),
]


def is_container(kind: str) -> bool:
    info = KINDS.get(kind)
    return info is not None and info.is_container


# ---------------------------------------------------------------------------
# Modifiers
# ---------------------------------------------------------------------------

MODIFIER_NAMES: list[str] = [
    "padding",
    "frame",
    "background",
    "foregroundStyle",
    "font",
    "cornerRadius",
    "shadow",
    "opacity",
    "scaleEffect",
    "rotationEffect",
    "offset",
    "clipShape",
]

# Arguments attached when a modifier is added without any.
# Each entry is (argument name or None, value).
MODIFIER_ARGUMENT_SEEDS: dict[str, list[tuple[str | None, str]]] = {
    "padding": [(None, "16")],
    "frame": [("width", "100"), ("height", "50")],
    "background": [(None, ".blue")],
    "foregroundColor": [(None, ".primary")],
    "foregroundStyle": [(None, ".primary")],
    "font": [(None, ".title")],
    "cornerRadius": [(None, "8")],
    "shadow": [("radius", "5")],
    "opacity": [(None, "0.5")],
    "scaleEffect": [(None, "1.2")],
    "rotationEffect": [(None, "45")],
    "offset": [("x", "0"), ("y", "0")],
}

# ---------------------------------------------------------------------------
# Variables, projects
# ---------------------------------------------------------------------------

VARIABLE_KINDS: dict[str, str] = {
    "state": "@State",
    "binding": "@Binding",
    "constant": "let",
    "environment": "@Environment",
    "observedObject": "@ObservedObject",
    "environmentObject": "@EnvironmentObject",
}

# Only these kinds carry a meaningful default value
DEFAULTABLE_VARIABLE_KINDS: set[str] = {"state", "constant"}

PROJECT_COLORS: dict[str, str] = {
    "red": "flame.fill",
    "orange": "sun.max.fill",
    "yellow": "lightbulb.fill",
    "green": "leaf.fill",
    "teal": "drop.fill",
    "blue": "cloud.fill",
    "indigo": "moon.fill",
    "purple": "sparkles",
    "pink": "heart.fill",
    "gray": "circle",
}


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


def new_id() -> str:
    """Allocate a fresh, globally unique entity identity."""
    return str(uuid.uuid4())


@dataclass
class Property:
    key: str
    value: str
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "key": self.key, "value": self.value}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Property:
        return cls(id=d["id"], key=d["key"], value=d["value"])


@dataclass
class ModifierArgument:
    value: str
    name: str | None = None
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "value": self.value}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ModifierArgument:
        return cls(id=d["id"], name=d.get("name"), value=d["value"])


@dataclass
class Modifier:
    name: str
    arguments: list[ModifierArgument] = field(default_factory=list)
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "arguments": [a.to_dict() for a in self.arguments],
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Modifier:
        return cls(
            id=d["id"],
            name=d["name"],
            arguments=[ModifierArgument.from_dict(a) for a in d.get("arguments", [])],
        )


@dataclass(eq=False)
class Component:
    """
    One node of the UI document tree.

    Compared by identity, never by value: two components with equal
    contents are still different nodes.
    """

    kind: str
    properties: list[Property] = field(default_factory=list)
    modifiers: list[Modifier] = field(default_factory=list)
    children: list[Component] = field(default_factory=list)
    referenced_view: str | None = None  # ViewFile id, only for customView
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind,
            "properties": [p.to_dict() for p in self.properties],
            "modifiers": [m.to_dict() for m in self.modifiers],
            "children": [c.to_dict() for c in self.children],
            "referenced_view": self.referenced_view,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Component:
        return cls(
            id=d["id"],
            kind=d["kind"],
            properties=[Property.from_dict(p) for p in d.get("properties", [])],
            modifiers=[Modifier.from_dict(m) for m in d.get("modifiers", [])],
            children=[Component.from_dict(c) for c in d.get("children", [])],
            referenced_view=d.get("referenced_view"),
        )


@dataclass
class Variable:
    name: str
    type: str
    kind: str
    default_value: str | None = None
    id: str = field(default_factory=new_id)

    @property
    def declaration_prefix(self) -> str:
        return VARIABLE_KINDS.get(self.kind, "var")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "kind": self.kind,
            "default_value": self.default_value,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Variable:
        return cls(
            id=d["id"],
            name=d["name"],
            type=d["type"],
            kind=d["kind"],
            default_value=d.get("default_value"),
        )


@dataclass(eq=False)
class ViewFile:
    name: str
    components: list[Component] = field(default_factory=list)
    variables: list[Variable] = field(default_factory=list)
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "components": [c.to_dict() for c in self.components],
            "variables": [v.to_dict() for v in self.variables],
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ViewFile:
        return cls(
            id=d["id"],
            name=d["name"],
            components=[Component.from_dict(c) for c in d.get("components", [])],
            variables=[Variable.from_dict(v) for v in d.get("variables", [])],
        )


@dataclass
class ModelField:
    name: str
    type: str
    default_value: str | None = None
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "default_value": self.default_value,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ModelField:
        return cls(id=d["id"], name=d["name"], type=d["type"], default_value=d.get("default_value"))


@dataclass(eq=False)
class ModelFile:
    name: str
    fields: list[ModelField] = field(default_factory=list)
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "fields": [f.to_dict() for f in self.fields]}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ModelFile:
        return cls(
            id=d["id"],
            name=d["name"],
            fields=[ModelField.from_dict(f) for f in d.get("fields", [])],
        )


@dataclass(eq=False)
class Project:
    """Top-level container. Deleting it destroys every file it owns."""

    name: str
    icon: str = "star.fill"
    color: str = "blue"
    view_files: list[ViewFile] = field(default_factory=list)
    model_files: list[ModelFile] = field(default_factory=list)
    id: str = field(default_factory=new_id)

    def view_file(self, file_id: str) -> ViewFile | None:
        for f in self.view_files:
            if f.id == file_id:
                return f
        return None

    def model_file(self, file_id: str) -> ModelFile | None:
        for f in self.model_files:
            if f.id == file_id:
                return f
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": 1,
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "color": self.color,
            "view_files": [f.to_dict() for f in self.view_files],
            "model_files": [f.to_dict() for f in self.model_files],
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Project:
        return cls(
            id=d["id"],
            name=d["name"],
            icon=d.get("icon", "star.fill"),
            color=d.get("color", "blue"),
            view_files=[ViewFile.from_dict(f) for f in d.get("view_files", [])],
            model_files=[ModelFile.from_dict(f) for f in d.get("model_files", [])],
        )


# ---------------------------------------------------------------------------
# Commands and results
# ---------------------------------------------------------------------------


@dataclass
class Command:
    """
    One requested mutation. The command layer reads only `type` and `payload`;
    the rest is metadata for logging.
    """

    type: str
    payload: dict[str, Any]
    id: str = field(default_factory=new_id)
    timestamp: str = field(default_factory=lambda: now_iso())


@dataclass
class Warning:
    """A non-fatal issue encountered while applying a command."""

    code: str
    message: str
    details: dict[str, Any] | None = None


@dataclass
class MutationResult:
    """
    Result of applying one command to a project.
    The command layer never throws; it always returns one of these.
    A rejected command leaves the project untouched.
    """

    applied: bool
    error: str | None = None
    warnings: list[Warning] = field(default_factory=list)
    created: list[str] = field(default_factory=list)  # entity ids
    destroyed: list[str] = field(default_factory=list)
    selected: str | None = None  # component id to select after commit

    @property
    def error_code(self) -> str | None:
        if self.error is None:
            return None
        return self.error.split(":", 1)[0]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def now_iso() -> str:
    """Current UTC time as ISO 8601 string with Z suffix."""
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
