"""
Canvasflow Kernel — Model-Schema Store

Flat CRUD over ModelFile fields and ViewFile variables.
No recursion, no relocation: plain ordered lists.
"""

from __future__ import annotations

from canvas.kernel.types import (
    DEFAULTABLE_VARIABLE_KINDS,
    ModelField,
    ModelFile,
    Variable,
    ViewFile,
    Warning,
)

# ---------------------------------------------------------------------------
# Model fields
# ---------------------------------------------------------------------------


def add_field(file: ModelFile, name: str, type: str, default_value: str | None = None) -> ModelField:
    # An empty default means "no default"
    field = ModelField(name=name, type=type, default_value=default_value or None)
    file.fields.append(field)
    return field


def update_field(
    file: ModelFile,
    field_id: str,
    *,
    name: str | None = None,
    type: str | None = None,
    default_value: str | None = None,
    clear_default: bool = False,
) -> ModelField | None:
    field = find_field(file, field_id)
    if field is None:
        return None
    if name is not None:
        field.name = name
    if type is not None:
        field.type = type
    if clear_default:
        field.default_value = None
    elif default_value is not None:
        field.default_value = default_value or None
    return field


def remove_field(file: ModelFile, field_id: str | None = None, index: int | None = None) -> ModelField | None:
    """Remove by identity, or by position when only index is given."""
    if field_id is not None:
        for i, field in enumerate(file.fields):
            if field.id == field_id:
                return file.fields.pop(i)
        return None
    if index is not None and 0 <= index < len(file.fields):
        return file.fields.pop(index)
    return None


def find_field(file: ModelFile, field_id: str) -> ModelField | None:
    for field in file.fields:
        if field.id == field_id:
            return field
    return None


# ---------------------------------------------------------------------------
# View variables
# ---------------------------------------------------------------------------


def add_variable(
    file: ViewFile,
    name: str,
    type: str,
    kind: str,
    default_value: str | None = None,
) -> tuple[Variable, list[Warning]]:
    """
    Append a variable. Defaults only mean something for state and constant
    kinds; anything else drops the default and says so.
    """
    warnings: list[Warning] = []
    if default_value is not None and kind not in DEFAULTABLE_VARIABLE_KINDS:
        warnings.append(
            Warning(
                code="DEFAULT_IGNORED",
                message=f"'{kind}' variable '{name}' cannot carry a default value",
            )
        )
        default_value = None
    variable = Variable(name=name, type=type, kind=kind, default_value=default_value)
    file.variables.append(variable)
    return variable, warnings


def remove_variable(file: ViewFile, variable_id: str) -> Variable | None:
    for i, variable in enumerate(file.variables):
        if variable.id == variable_id:
            return file.variables.pop(i)
    return None
