"""
Canvasflow Kernel — Preview Renderer

Pure function: visual description → HTML string
No IO. Deterministic: same description → same output, always.

This is one presentation collaborator for the projector's output. It knows
nothing about components or modifiers, only the description vocabulary.
Element templates are mustache (chevron); {{x}} escapes, {{{x}}} is used
only for already-rendered child markup.
"""

from __future__ import annotations

import json
from typing import Any

import chevron

# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{{title}}</title>
  <script type="application/canvasflow-preview+json" id="canvasflow-preview">{{{description_json}}}</script>
  <style>
{{{css}}}
  </style>
</head>
<body>
  <main class="cf-canvas">
{{{body}}}
  </main>
</body>
</html>
"""

CSS = """    body { margin: 0; font-family: -apple-system, system-ui, sans-serif; background: #fff; }
    .cf-canvas { padding: 16px; }
    .cf-stack { display: flex; align-items: center; }
    .cf-vertical { flex-direction: column; }
    .cf-horizontal { flex-direction: row; }
    .cf-layered { display: grid; }
    .cf-layered > * { grid-area: 1 / 1; }
    .cf-spacer { flex: 1 1 auto; }
    .cf-placeholder { color: #8e8e93; text-align: center; }
    .cf-error { color: #ff3b30; }
    .cf-symbol::before { content: attr(data-symbol); font-size: 0.75em; }"""

_TEMPLATES: dict[str, str] = {
    "text": '<span class="cf-text" data-component="{{component_id}}">{{text}}</span>',
    "button": '<button class="cf-button" type="button" data-component="{{component_id}}">{{label}}</button>',
    "text_field": (
        '<input class="cf-text-field" type="text" placeholder="{{placeholder}}" data-component="{{component_id}}">'
    ),
    "image": '<span class="cf-symbol" data-symbol="{{system_name}}" data-component="{{component_id}}"></span>',
    "spacer": '<div class="cf-spacer" data-component="{{component_id}}"></div>',
    "placeholder": (
        '<div class="cf-placeholder cf-{{style}}" data-component="{{component_id}}">'
        "<p>{{text}}</p>{{#detail}}<small>{{.}}</small>{{/detail}}</div>"
    ),
    "stack": (
        '<div class="cf-stack cf-{{axis}}" style="{{style}}" data-component="{{component_id}}">{{{children}}}</div>'
    ),
    "view": '<section class="cf-view" data-view="{{view_id}}" data-component="{{component_id}}">{{{content}}}</section>',
    "wrapper": '<div class="cf-modifier cf-{{type}}" style="{{style}}">{{{content}}}</div>',
}

FONT_SIZES: dict[str, str] = {
    "largetitle": "34px",
    "title": "28px",
    "title2": "22px",
    "title3": "20px",
    "headline": "17px",
    "subheadline": "15px",
    "body": "17px",
    "callout": "16px",
    "footnote": "13px",
    "caption": "12px",
    "caption2": "11px",
}

CSS_COLORS: dict[str, str] = {
    "primary": "#000000",
    "accent": "#007aff",
    "clear": "transparent",
}

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def render_page(description: dict[str, Any], title: str = "Preview") -> str:
    """
    Render a complete preview page.
    The description is embedded as JSON so clients can re-render it natively.
    """
    description_json = json.dumps(description, sort_keys=True, ensure_ascii=False)
    return chevron.render(
        PAGE_TEMPLATE,
        {
            "title": title,
            "description_json": description_json.replace("</", "<\\/"),
            "css": CSS,
            "body": render_node(description),
        },
    )


def render_node(node: dict[str, Any]) -> str:
    """Render one description node (and everything inside it) to HTML."""
    node_type = node.get("type", "")

    if node_type == "stack":
        children = "".join(render_node(child) for child in node.get("children", []))
        style = ""
        if node.get("spacing") is not None:
            style = f"gap: {_px(node['spacing'])};"
        return chevron.render(_TEMPLATES["stack"], {**node, "children": children, "style": style})

    if node_type == "view":
        return chevron.render(_TEMPLATES["view"], {**node, "content": render_node(node["content"])})

    if "content" in node:
        return _render_modifier(node)

    template = _TEMPLATES.get(node_type)
    if template is None:
        return ""
    return chevron.render(template, node)


# ---------------------------------------------------------------------------
# Modifiers
# ---------------------------------------------------------------------------


def _render_modifier(node: dict[str, Any]) -> str:
    content = render_node(node["content"])
    style = _modifier_style(node)
    return chevron.render(_TEMPLATES["wrapper"], {"type": node["type"], "style": style, "content": content})


def _modifier_style(node: dict[str, Any]) -> str:
    t = node["type"]
    if t == "padding":
        return f"padding: {_px(node['amount'])};"
    if t == "frame":
        parts = []
        if node.get("width") is not None:
            parts.append(f"width: {_px(node['width'])};")
        if node.get("height") is not None:
            parts.append(f"height: {_px(node['height'])};")
        return " ".join(parts)
    if t == "background":
        return f"background: {_css_color(node['color'])};"
    if t == "foreground":
        return f"color: {_css_color(node['color'])};"
    if t == "font":
        return f"font-size: {FONT_SIZES.get(node['style'], '17px')};"
    if t == "corner_radius":
        return f"border-radius: {_px(node['radius'])}; overflow: hidden;"
    if t == "shadow":
        return f"box-shadow: 0 0 {_px(node['radius'])} rgba(0, 0, 0, 0.33);"
    if t == "opacity":
        return f"opacity: {node['value']:g};"
    if t == "scale":
        return f"transform: scale({node['factor']:g});"
    if t == "rotation":
        return f"transform: rotate({node['degrees']:g}deg);"
    if t == "offset":
        return f"transform: translate({_px(node['x'])}, {_px(node['y'])});"
    if t == "clip":
        return {
            "circle": "clip-path: circle(50%);",
            "ellipse": "clip-path: ellipse(50% 50%);",
            "capsule": "border-radius: 9999px; overflow: hidden;",
            "rounded_rectangle": "border-radius: 12px; overflow: hidden;",
        }.get(node["shape"], "overflow: hidden;")
    return ""


def _px(value: float) -> str:
    return f"{value:g}px"


def _css_color(name: str) -> str:
    return CSS_COLORS.get(name, name)
