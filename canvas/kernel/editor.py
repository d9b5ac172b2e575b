"""
Canvasflow Kernel — Editor

apply(project, selection, command) → MutationResult

Mutates the project in place. No IO. Every handler checks first and
commits second, so a rejected command leaves the project untouched.
Never raises: structural violations and failed lookups come back as
rejected results with a coded error ("CODE: message").

On commit the selection is updated (dropped/created components become
selected, destroyed entities are forgotten).
"""

from __future__ import annotations

from typing import Any

from canvas.kernel import properties, relocation, schema_store, tree, workspace
from canvas.kernel.commands import KNOWN_MODIFIERS, validate_command
from canvas.kernel.relocation import DropTarget
from canvas.kernel.selection import Selection
from canvas.kernel.tree import ComponentNotFound, TreeError
from canvas.kernel.types import (
    CUSTOM_VIEW,
    Command,
    Component,
    ModelFile,
    MutationResult,
    Project,
    ViewFile,
    Warning,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def apply(project: Project, selection: Selection, command: Command) -> MutationResult:
    """Validate and apply one command."""
    errors = validate_command(command.type, command.payload)
    if errors:
        code = "UNKNOWN_COMMAND" if command.type not in _HANDLERS else "INVALID_PAYLOAD"
        return _reject(code, "; ".join(errors))

    handler = _HANDLERS[command.type]
    try:
        return handler(project, selection, command.payload)
    except TreeError as e:
        return _reject(e.code, str(e))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _reject(code: str, msg: str) -> MutationResult:
    return MutationResult(applied=False, error=f"{code}: {msg}")


def _ok(
    *,
    warnings: list[Warning] | None = None,
    created: list[str] | None = None,
    destroyed: list[str] | None = None,
    selected: str | None = None,
) -> MutationResult:
    return MutationResult(
        applied=True,
        warnings=warnings or [],
        created=created or [],
        destroyed=destroyed or [],
        selected=selected,
    )


def _component(project: Project, component_id: str) -> tuple[ViewFile, Component]:
    found = tree.locate_in_project(project, component_id)
    if found is None:
        raise ComponentNotFound(f"Component '{component_id}' not found")
    return found


def _view_file(project: Project, file_id: str) -> ViewFile:
    file = project.view_file(file_id)
    if file is None:
        raise ComponentNotFound(f"View file '{file_id}' not found")
    return file


def _model_file(project: Project, file_id: str) -> ModelFile:
    file = project.model_file(file_id)
    if file is None:
        raise ComponentNotFound(f"Model file '{file_id}' not found")
    return file


def _target(p: dict) -> DropTarget:
    target = p["target"]
    if target.get("component") is not None:
        return DropTarget.component(target["component"])
    return DropTarget.root(target["file"])


# ---------------------------------------------------------------------------
# Project & file handlers
# ---------------------------------------------------------------------------


def _handle_project_update(project: Project, selection: Selection, p: dict) -> MutationResult:
    if "name" in p:
        project.name = p["name"]
    if "icon" in p:
        project.icon = p["icon"]
    if "color" in p:
        project.color = p["color"]
    return _ok()


def _handle_view_file_create(project: Project, selection: Selection, p: dict) -> MutationResult:
    file = workspace.create_view_file(project, p["name"])
    selection.select_view_file(file.id)
    return _ok(created=[file.id])


def _handle_view_file_rename(project: Project, selection: Selection, p: dict) -> MutationResult:
    _view_file(project, p["file"]).name = p["name"]
    return _ok()


def _handle_view_file_remove(project: Project, selection: Selection, p: dict) -> MutationResult:
    outcome = workspace.delete_view_file(project, p["file"])
    if outcome is None:
        raise ComponentNotFound(f"View file '{p['file']}' not found")
    destroyed, warnings = outcome
    selection.forget(destroyed)
    return _ok(destroyed=destroyed, warnings=warnings)


def _handle_model_file_create(project: Project, selection: Selection, p: dict) -> MutationResult:
    file = workspace.create_model_file(project, p["name"])
    selection.select_model_file(file.id)
    return _ok(created=[file.id])


def _handle_model_file_rename(project: Project, selection: Selection, p: dict) -> MutationResult:
    _model_file(project, p["file"]).name = p["name"]
    return _ok()


def _handle_model_file_remove(project: Project, selection: Selection, p: dict) -> MutationResult:
    destroyed = workspace.delete_model_file(project, p["file"])
    if destroyed is None:
        raise ComponentNotFound(f"Model file '{p['file']}' not found")
    selection.forget(destroyed)
    return _ok(destroyed=destroyed)


# ---------------------------------------------------------------------------
# Tree handlers
# ---------------------------------------------------------------------------


def _handle_component_create(project: Project, selection: Selection, p: dict) -> MutationResult:
    target = _target(p)
    component = relocation.drop_new(project, p["kind"], target)
    file, _ = _component(project, component.id)
    selection.select_component(component.id, file.id)
    return _ok(created=tree.subtree_ids(component), selected=component.id)


def _handle_component_remove(project: Project, selection: Selection, p: dict) -> MutationResult:
    file, _ = _component(project, p["component"])
    destroyed = tree.destroy(file, p["component"])
    selection.forget(destroyed)
    return _ok(destroyed=destroyed)


def _handle_component_move(project: Project, selection: Selection, p: dict) -> MutationResult:
    file = _view_file(project, p["file"])
    component = tree.move_to(file, p["component"], p.get("parent"), p.get("index"))
    selection.select_component(component.id, file.id)
    return _ok(selected=component.id)


def _handle_component_drop(project: Project, selection: Selection, p: dict) -> MutationResult:
    component = relocation.relocate(project, p["component"], _target(p))
    file, _ = _component(project, component.id)
    selection.select_component(component.id, file.id)
    return _ok(selected=component.id)


def _handle_component_reference(project: Project, selection: Selection, p: dict) -> MutationResult:
    file, component = _component(project, p["component"])
    if component.kind != CUSTOM_VIEW:
        return _reject("STRUCTURAL_VIOLATION", f"'{component.kind}' cannot reference a view")

    view_id = p.get("view_file")
    if view_id is not None:
        _view_file(project, view_id)
        if tree.reaches(project, view_id, file.id):
            return _reject("STRUCTURAL_VIOLATION", "View reference would render a view inside itself")

    component.referenced_view = view_id
    return _ok()


# ---------------------------------------------------------------------------
# Property & modifier handlers
# ---------------------------------------------------------------------------


def _handle_property_set(project: Project, selection: Selection, p: dict) -> MutationResult:
    _, component = _component(project, p["component"])
    existed = properties.get_property(component, p["key"]) is not None
    prop = properties.set_property(component, p["key"], p["value"])
    return _ok(created=[] if existed else [prop.id])


def _handle_property_update(project: Project, selection: Selection, p: dict) -> MutationResult:
    _, component = _component(project, p["component"])
    if properties.update_property(component, p["property"], p["value"]) is None:
        return _reject("NOT_FOUND", f"Property '{p['property']}' not found")
    return _ok()


def _handle_property_remove(project: Project, selection: Selection, p: dict) -> MutationResult:
    _, component = _component(project, p["component"])
    removed = properties.remove_property(component, p["property"])
    if removed is None:
        return _reject("NOT_FOUND", f"Property '{p['property']}' not found")
    return _ok(destroyed=[removed.id])


def _handle_modifier_add(project: Project, selection: Selection, p: dict) -> MutationResult:
    _, component = _component(project, p["component"])
    warnings: list[Warning] = []
    if p["name"] not in KNOWN_MODIFIERS:
        warnings.append(Warning(code="UNKNOWN_MODIFIER", message=f"'{p['name']}' is not rendered in preview"))

    arguments: list[tuple[str | None, str]] | None = None
    if p.get("arguments") is not None:
        arguments = [(arg.get("name"), arg["value"]) for arg in p["arguments"]]

    modifier = properties.add_modifier(component, p["name"], arguments)
    created = [modifier.id] + [a.id for a in modifier.arguments]
    return _ok(created=created, warnings=warnings)


def _handle_modifier_remove(project: Project, selection: Selection, p: dict) -> MutationResult:
    _, component = _component(project, p["component"])
    removed = properties.remove_modifier(component, p["modifier"])
    if removed is None:
        return _reject("NOT_FOUND", f"Modifier '{p['modifier']}' not found")
    return _ok(destroyed=[removed.id] + [a.id for a in removed.arguments])


def _handle_modifier_move(project: Project, selection: Selection, p: dict) -> MutationResult:
    _, component = _component(project, p["component"])
    if properties.move_modifier(component, p["modifier"], p["index"]) is None:
        return _reject("NOT_FOUND", f"Modifier '{p['modifier']}' not found")
    return _ok()


# ---------------------------------------------------------------------------
# Schema handlers
# ---------------------------------------------------------------------------


def _handle_variable_add(project: Project, selection: Selection, p: dict) -> MutationResult:
    file = _view_file(project, p["file"])
    variable, warnings = schema_store.add_variable(
        file, p["name"], p["type"], p["kind"], p.get("default_value")
    )
    return _ok(created=[variable.id], warnings=warnings)


def _handle_variable_remove(project: Project, selection: Selection, p: dict) -> MutationResult:
    file = _view_file(project, p["file"])
    removed = schema_store.remove_variable(file, p["variable"])
    if removed is None:
        return _reject("NOT_FOUND", f"Variable '{p['variable']}' not found")
    return _ok(destroyed=[removed.id])


def _handle_field_add(project: Project, selection: Selection, p: dict) -> MutationResult:
    file = _model_file(project, p["file"])
    field = schema_store.add_field(file, p["name"], p["type"], p.get("default_value"))
    return _ok(created=[field.id])


def _handle_field_update(project: Project, selection: Selection, p: dict) -> MutationResult:
    file = _model_file(project, p["file"])
    field = schema_store.update_field(
        file,
        p["field"],
        name=p.get("name"),
        type=p.get("type"),
        default_value=p.get("default_value"),
        clear_default="default_value" in p and p["default_value"] is None,
    )
    if field is None:
        return _reject("NOT_FOUND", f"Field '{p['field']}' not found")
    return _ok()


def _handle_field_remove(project: Project, selection: Selection, p: dict) -> MutationResult:
    file = _model_file(project, p["file"])
    removed = schema_store.remove_field(file, field_id=p.get("field"), index=p.get("index"))
    if removed is None:
        return _reject("NOT_FOUND", "Field not found")
    return _ok(destroyed=[removed.id])


# ---------------------------------------------------------------------------
# Handler dispatch table
# ---------------------------------------------------------------------------

_HANDLERS: dict[str, Any] = {
    "project.update": _handle_project_update,
    "view_file.create": _handle_view_file_create,
    "view_file.rename": _handle_view_file_rename,
    "view_file.remove": _handle_view_file_remove,
    "model_file.create": _handle_model_file_create,
    "model_file.rename": _handle_model_file_rename,
    "model_file.remove": _handle_model_file_remove,
    "component.create": _handle_component_create,
    "component.remove": _handle_component_remove,
    "component.move": _handle_component_move,
    "component.drop": _handle_component_drop,
    "component.reference": _handle_component_reference,
    "property.set": _handle_property_set,
    "property.update": _handle_property_update,
    "property.remove": _handle_property_remove,
    "modifier.add": _handle_modifier_add,
    "modifier.remove": _handle_modifier_remove,
    "modifier.move": _handle_modifier_move,
    "variable.add": _handle_variable_add,
    "variable.remove": _handle_variable_remove,
    "field.add": _handle_field_add,
    "field.update": _handle_field_update,
    "field.remove": _handle_field_remove,
}
