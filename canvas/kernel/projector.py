"""
Canvasflow Kernel — Render Projector

Pure function: (component, project) → visual description
No side effects. No IO. Deterministic: same input → same output, always.

The visual description is a nested JSON-compatible dict. Primitives carry a
"type" and the id of the component they came from. Modifiers are folded
left to right, each wrapping the accumulated description:

    {"type": "padding", "amount": 16.0, "content": {"type": "text", ...}}

Unknown modifier names are skipped. Unparsable numeric arguments fall back
to the modifier's default and never raise.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from canvas.kernel.properties import get_value, literal_value, modifier_argument
from canvas.kernel.types import (
    BUTTON,
    CUSTOM_VIEW,
    IMAGE,
    KINDS,
    SPACER,
    TEXT,
    TEXT_FIELD,
    Component,
    Modifier,
    Project,
    ViewFile,
)

DEFAULT_SPACING = 10.0
DEFAULT_PADDING = 16.0
DEFAULT_SHADOW_RADIUS = 5.0

COLORS: set[str] = {
    "red",
    "blue",
    "green",
    "yellow",
    "orange",
    "purple",
    "pink",
    "gray",
    "black",
    "white",
    "clear",
    "accentcolor",
}

FONTS: set[str] = {
    "largetitle",
    "title",
    "title2",
    "title3",
    "headline",
    "subheadline",
    "body",
    "callout",
    "footnote",
    "caption",
    "caption2",
}

CLIP_SHAPES: dict[str, str] = {
    "circle": "circle",
    "capsule": "capsule",
    "rectangle": "rectangle",
    "roundedrectangle": "rounded_rectangle",
    "ellipse": "ellipse",
}

Description = dict[str, Any]

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def project_component(component: Component, project: Project | None = None) -> Description:
    """
    Project one component and its subtree.
    project is needed only to resolve custom view references.
    """
    return _project(component, project, visiting=())


def project_view_file(file: ViewFile, project: Project | None = None) -> Description:
    """Whole-file preview: the roots stacked vertically, or an empty canvas."""
    return _project_file(file, project, visiting=(file.id,))


def parse_number(raw: str | None, default: float | None) -> float | None:
    """Parse a string-encoded numeric literal, falling back to default."""
    if raw is None:
        return default
    try:
        value = float(literal_value(raw).strip())
    except ValueError:
        return default
    if value != value or value in (float("inf"), float("-inf")):
        return default
    return value


def color_from_string(raw: str) -> str:
    name = raw.lower().replace(".", "").replace('"', "").strip()
    if name == "grey":
        name = "gray"
    if name in COLORS:
        return "accent" if name == "accentcolor" else name
    return "primary"


def font_from_string(raw: str) -> str:
    name = raw.lower().replace(".", "").strip()
    return name if name in FONTS else "body"


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------


def _project(component: Component, project: Project | None, visiting: tuple[str, ...]) -> Description:
    info = KINDS.get(component.kind)

    if info is not None and info.is_container:
        base = _project_stack(component, info.axis, project, visiting)
    elif component.kind == CUSTOM_VIEW:
        base = _project_custom_view(component, project, visiting)
    else:
        builder = _LEAF_BUILDERS.get(component.kind, _project_unknown)
        base = builder(component)

    base["component_id"] = component.id
    return apply_modifiers(base, component.modifiers)


def _project_stack(
    component: Component,
    axis: str,
    project: Project | None,
    visiting: tuple[str, ...],
) -> Description:
    """Layered stacks overlap their children, so their spacing property is not projected."""
    spacing = None
    if axis != "layered":
        spacing = parse_number(get_value(component, "spacing"), DEFAULT_SPACING)
    return {
        "type": "stack",
        "axis": axis,
        "spacing": spacing,
        "children": [_project(child, project, visiting) for child in component.children],
    }


def _project_custom_view(
    component: Component,
    project: Project | None,
    visiting: tuple[str, ...],
) -> Description:
    ref = component.referenced_view
    file = project.view_file(ref) if (project is not None and ref is not None) else None
    if file is None:
        return {"type": "placeholder", "text": "Custom View", "style": "secondary"}
    if file.id in visiting:
        return {
            "type": "placeholder",
            "text": f"Recursive reference to '{file.name}'",
            "style": "error",
            "error": "VIEW_CYCLE",
        }
    return {
        "type": "view",
        "view_id": file.id,
        "name": file.name,
        "content": _project_file(file, project, visiting + (file.id,)),
    }


def _project_file(file: ViewFile, project: Project | None, visiting: tuple[str, ...]) -> Description:
    if not file.components:
        return {
            "type": "placeholder",
            "text": "Empty Canvas",
            "detail": "Drag components here to start building",
            "style": "secondary",
        }
    return {
        "type": "stack",
        "axis": "vertical",
        "spacing": DEFAULT_SPACING,
        "children": [_project(c, project, visiting) for c in file.components],
    }


def _project_text(component: Component) -> Description:
    return {"type": "text", "text": _value_or(component, "text", "Text")}


def _project_button(component: Component) -> Description:
    return {
        "type": "button",
        "label": _value_or(component, "label", "Button"),
        "action": _value_or(component, "action", "{}"),
    }


def _project_text_field(component: Component) -> Description:
    return {"type": "text_field", "placeholder": _value_or(component, "placeholder", "")}


def _project_image(component: Component) -> Description:
    return {"type": "image", "system_name": _value_or(component, "systemName", "photo")}


def _project_spacer(component: Component) -> Description:
    return {"type": "spacer"}


def _project_unknown(component: Component) -> Description:
    return {"type": "placeholder", "text": component.kind, "style": "secondary"}


def _value_or(component: Component, key: str, fallback: str) -> str:
    value = get_value(component, key)
    return fallback if value is None else value


_LEAF_BUILDERS: dict[str, Callable[[Component], Description]] = {
    TEXT: _project_text,
    BUTTON: _project_button,
    TEXT_FIELD: _project_text_field,
    IMAGE: _project_image,
    SPACER: _project_spacer,
}


# ---------------------------------------------------------------------------
# Modifier fold
# ---------------------------------------------------------------------------


def apply_modifiers(description: Description, modifiers: list[Modifier]) -> Description:
    """Left-to-right fold. Unknown modifiers leave the description as is."""
    result = description
    for modifier in modifiers:
        handler = _MODIFIERS.get(modifier.name)
        if handler is not None:
            result = handler(result, modifier)
    return result


def _padding(content: Description, m: Modifier) -> Description:
    amount = parse_number(modifier_argument(m), DEFAULT_PADDING)
    return {"type": "padding", "amount": amount, "content": content}


def _frame(content: Description, m: Modifier) -> Description:
    return {
        "type": "frame",
        "width": parse_number(modifier_argument(m, "width"), None),
        "height": parse_number(modifier_argument(m, "height"), None),
        "content": content,
    }


def _background(content: Description, m: Modifier) -> Description:
    raw = modifier_argument(m)
    if raw is None:
        return content
    return {"type": "background", "color": color_from_string(raw), "content": content}


def _foreground(content: Description, m: Modifier) -> Description:
    raw = modifier_argument(m)
    if raw is None:
        return content
    return {"type": "foreground", "color": color_from_string(raw), "content": content}


def _font(content: Description, m: Modifier) -> Description:
    raw = modifier_argument(m)
    if raw is None:
        return content
    return {"type": "font", "style": font_from_string(raw), "content": content}


def _corner_radius(content: Description, m: Modifier) -> Description:
    return {"type": "corner_radius", "radius": parse_number(modifier_argument(m), 0.0), "content": content}


def _shadow(content: Description, m: Modifier) -> Description:
    raw = modifier_argument(m, "radius") or modifier_argument(m)
    return {"type": "shadow", "radius": parse_number(raw, DEFAULT_SHADOW_RADIUS), "content": content}


def _opacity(content: Description, m: Modifier) -> Description:
    value = parse_number(modifier_argument(m), 1.0)
    return {"type": "opacity", "value": max(0.0, min(1.0, value)), "content": content}


def _scale_effect(content: Description, m: Modifier) -> Description:
    return {"type": "scale", "factor": parse_number(modifier_argument(m), 1.0), "content": content}


def _rotation_effect(content: Description, m: Modifier) -> Description:
    return {"type": "rotation", "degrees": parse_number(modifier_argument(m), 0.0), "content": content}


def _offset(content: Description, m: Modifier) -> Description:
    return {
        "type": "offset",
        "x": parse_number(modifier_argument(m, "x"), 0.0),
        "y": parse_number(modifier_argument(m, "y"), 0.0),
        "content": content,
    }


def _clip_shape(content: Description, m: Modifier) -> Description:
    raw = modifier_argument(m) or ""
    name = raw.lower().replace(".", "").replace("()", "").strip()
    return {"type": "clip", "shape": CLIP_SHAPES.get(name, "rectangle"), "content": content}


_MODIFIERS: dict[str, Callable[[Description, Modifier], Description]] = {
    "padding": _padding,
    "frame": _frame,
    "background": _background,
    "foregroundStyle": _foreground,
    "foregroundColor": _foreground,
    "font": _font,
    "cornerRadius": _corner_radius,
    "shadow": _shadow,
    "opacity": _opacity,
    "scaleEffect": _scale_effect,
    "rotationEffect": _rotation_effect,
    "offset": _offset,
    "clipShape": _clip_shape,
}
