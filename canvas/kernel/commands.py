"""
Canvasflow Kernel — Command Construction & Validation

Every document change is expressed as a command: a type plus a payload.
Validation here is structural (well-formed?) not semantic (will it apply?).
The editor handles semantic checks (does the component exist? would this
create a cycle?).
"""

from __future__ import annotations

from typing import Any

from canvas.kernel.types import KINDS, MODIFIER_NAMES, PROJECT_COLORS, VARIABLE_KINDS, Command

COMMAND_TYPES: set[str] = {
    # Project
    "project.update",
    # Files
    "view_file.create",
    "view_file.rename",
    "view_file.remove",
    "model_file.create",
    "model_file.rename",
    "model_file.remove",
    # Tree
    "component.create",
    "component.remove",
    "component.move",
    "component.drop",
    "component.reference",
    # Properties & modifiers
    "property.set",
    "property.update",
    "property.remove",
    "modifier.add",
    "modifier.remove",
    "modifier.move",
    # Schema
    "variable.add",
    "variable.remove",
    "field.add",
    "field.update",
    "field.remove",
}

# Names outside this set are accepted with a warning; the projector skips them.
KNOWN_MODIFIERS: set[str] = set(MODIFIER_NAMES) | {"foregroundColor"}

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def make_command(type: str, payload: dict[str, Any] | None = None, **fields: Any) -> Command:
    """
    Build a Command from minimal inputs.
    Keyword fields are merged into the payload, so tests can write
    make_command("property.set", component=cid, key="text", value='"Hi"').
    """
    body = dict(payload or {})
    body.update(fields)
    return Command(type=type, payload=body)


def validate_command(type: str, payload: dict[str, Any]) -> list[str]:
    """
    Validate a command's type and payload structure.
    Returns a list of error strings. Empty list = valid.
    """
    errors: list[str] = []

    if type not in COMMAND_TYPES:
        errors.append(f"Unknown command type: {type}")
        return errors

    if not isinstance(payload, dict):
        errors.append("Payload must be a non-null object")
        return errors

    validator = _VALIDATORS.get(type)
    if validator:
        errors.extend(validator(payload))

    return errors


# ---------------------------------------------------------------------------
# Per-command validators
# ---------------------------------------------------------------------------


def _require_str(p: dict, key: str, command: str, errors: list[str], *, allow_empty: bool = False) -> None:
    if key not in p:
        errors.append(f"{command} requires '{key}'")
    elif not isinstance(p[key], str) or (not allow_empty and not p[key]):
        errors.append(f"'{key}' must be a non-empty string")


def _optional_str(p: dict, key: str, errors: list[str]) -> None:
    if p.get(key) is not None and not isinstance(p[key], str):
        errors.append(f"'{key}' must be a string")


def _optional_index(p: dict, key: str, errors: list[str]) -> None:
    value = p.get(key)
    if value is not None and (not isinstance(value, int) or isinstance(value, bool) or value < 0):
        errors.append(f"'{key}' must be a non-negative integer")


def _validate_target(p: dict, command: str, errors: list[str]) -> None:
    target = p.get("target")
    if not isinstance(target, dict):
        errors.append(f"{command} requires 'target' object")
        return
    has_component = isinstance(target.get("component"), str)
    has_file = isinstance(target.get("file"), str)
    if has_component == has_file:
        errors.append("'target' needs exactly one of 'component' or 'file'")


def _validate_project_update(p: dict) -> list[str]:
    errors: list[str] = []
    _optional_str(p, "name", errors)
    _optional_str(p, "icon", errors)
    if "name" in p and p["name"] == "":
        errors.append("'name' must be a non-empty string")
    if "color" in p and p["color"] not in PROJECT_COLORS:
        errors.append(f"Unknown project color: {p['color']}")
    return errors


def _validate_file_create(p: dict) -> list[str]:
    errors: list[str] = []
    _require_str(p, "name", "file create", errors)
    return errors


def _validate_file_rename(p: dict) -> list[str]:
    errors: list[str] = []
    _require_str(p, "file", "file rename", errors)
    _require_str(p, "name", "file rename", errors)
    return errors


def _validate_file_remove(p: dict) -> list[str]:
    errors: list[str] = []
    _require_str(p, "file", "file remove", errors)
    return errors


def _validate_component_create(p: dict) -> list[str]:
    errors: list[str] = []
    if "kind" not in p:
        errors.append("component.create requires 'kind'")
    elif p["kind"] not in KINDS:
        errors.append(f"Unknown component kind: {p['kind']}")
    _validate_target(p, "component.create", errors)
    return errors


def _validate_component_remove(p: dict) -> list[str]:
    errors: list[str] = []
    _require_str(p, "component", "component.remove", errors)
    return errors


def _validate_component_move(p: dict) -> list[str]:
    errors: list[str] = []
    _require_str(p, "component", "component.move", errors)
    _require_str(p, "file", "component.move", errors)
    _optional_str(p, "parent", errors)
    _optional_index(p, "index", errors)
    return errors


def _validate_component_drop(p: dict) -> list[str]:
    errors: list[str] = []
    _require_str(p, "component", "component.drop", errors)
    _validate_target(p, "component.drop", errors)
    return errors


def _validate_component_reference(p: dict) -> list[str]:
    errors: list[str] = []
    _require_str(p, "component", "component.reference", errors)
    _optional_str(p, "view_file", errors)
    return errors


def _validate_property_set(p: dict) -> list[str]:
    errors: list[str] = []
    _require_str(p, "component", "property.set", errors)
    _require_str(p, "key", "property.set", errors)
    _require_str(p, "value", "property.set", errors)
    return errors


def _validate_property_update(p: dict) -> list[str]:
    errors: list[str] = []
    _require_str(p, "component", "property.update", errors)
    _require_str(p, "property", "property.update", errors)
    _require_str(p, "value", "property.update", errors, allow_empty=True)
    return errors


def _validate_property_remove(p: dict) -> list[str]:
    errors: list[str] = []
    _require_str(p, "component", "property.remove", errors)
    _require_str(p, "property", "property.remove", errors)
    return errors


def _validate_modifier_add(p: dict) -> list[str]:
    errors: list[str] = []
    _require_str(p, "component", "modifier.add", errors)
    _require_str(p, "name", "modifier.add", errors)
    args = p.get("arguments")
    if args is not None:
        if not isinstance(args, list):
            errors.append("'arguments' must be a list")
        else:
            for arg in args:
                if not isinstance(arg, dict) or not isinstance(arg.get("value"), str):
                    errors.append("each argument needs a string 'value'")
                elif arg.get("name") is not None and not isinstance(arg["name"], str):
                    errors.append("argument 'name' must be a string")
    return errors


def _validate_modifier_remove(p: dict) -> list[str]:
    errors: list[str] = []
    _require_str(p, "component", "modifier.remove", errors)
    _require_str(p, "modifier", "modifier.remove", errors)
    return errors


def _validate_modifier_move(p: dict) -> list[str]:
    errors: list[str] = []
    _require_str(p, "component", "modifier.move", errors)
    _require_str(p, "modifier", "modifier.move", errors)
    if "index" not in p:
        errors.append("modifier.move requires 'index'")
    else:
        _optional_index(p, "index", errors)
    return errors


def _validate_variable_add(p: dict) -> list[str]:
    errors: list[str] = []
    _require_str(p, "file", "variable.add", errors)
    _require_str(p, "name", "variable.add", errors)
    _require_str(p, "type", "variable.add", errors)
    if "kind" not in p:
        errors.append("variable.add requires 'kind'")
    elif p["kind"] not in VARIABLE_KINDS:
        errors.append(f"Unknown variable kind: {p['kind']}")
    _optional_str(p, "default_value", errors)
    return errors


def _validate_variable_remove(p: dict) -> list[str]:
    errors: list[str] = []
    _require_str(p, "file", "variable.remove", errors)
    _require_str(p, "variable", "variable.remove", errors)
    return errors


def _validate_field_add(p: dict) -> list[str]:
    errors: list[str] = []
    _require_str(p, "file", "field.add", errors)
    _require_str(p, "name", "field.add", errors)
    _require_str(p, "type", "field.add", errors)
    _optional_str(p, "default_value", errors)
    return errors


def _validate_field_update(p: dict) -> list[str]:
    errors: list[str] = []
    _require_str(p, "file", "field.update", errors)
    _require_str(p, "field", "field.update", errors)
    _optional_str(p, "name", errors)
    _optional_str(p, "type", errors)
    _optional_str(p, "default_value", errors)
    return errors


def _validate_field_remove(p: dict) -> list[str]:
    errors: list[str] = []
    _require_str(p, "file", "field.remove", errors)
    if "field" not in p and "index" not in p:
        errors.append("field.remove requires 'field' or 'index'")
    _optional_str(p, "field", errors)
    _optional_index(p, "index", errors)
    return errors


_VALIDATORS: dict[str, Any] = {
    "project.update": _validate_project_update,
    "view_file.create": _validate_file_create,
    "view_file.rename": _validate_file_rename,
    "view_file.remove": _validate_file_remove,
    "model_file.create": _validate_file_create,
    "model_file.rename": _validate_file_rename,
    "model_file.remove": _validate_file_remove,
    "component.create": _validate_component_create,
    "component.remove": _validate_component_remove,
    "component.move": _validate_component_move,
    "component.drop": _validate_component_drop,
    "component.reference": _validate_component_reference,
    "property.set": _validate_property_set,
    "property.update": _validate_property_update,
    "property.remove": _validate_property_remove,
    "modifier.add": _validate_modifier_add,
    "modifier.remove": _validate_modifier_remove,
    "modifier.move": _validate_modifier_move,
    "variable.add": _validate_variable_add,
    "variable.remove": _validate_variable_remove,
    "field.add": _validate_field_add,
    "field.update": _validate_field_update,
    "field.remove": _validate_field_remove,
}
