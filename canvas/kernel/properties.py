"""
Canvasflow Kernel — Property & Modifier Model

Properties are an ordered key/value bag; lookup by key returns the first
match in list order. Writes through set_property keep keys unique.

Modifiers are an ordered list; list order is render order.
"""

from __future__ import annotations

from canvas.kernel.types import (
    KINDS,
    MODIFIER_ARGUMENT_SEEDS,
    Component,
    Modifier,
    ModifierArgument,
    Property,
)

# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


def get_property(component: Component, key: str) -> Property | None:
    for prop in component.properties:
        if prop.key == key:
            return prop
    return None


def get_value(component: Component, key: str) -> str | None:
    """Display value of the first property with this key, literal quotes stripped."""
    prop = get_property(component, key)
    if prop is None:
        return None
    return literal_value(prop.value)


def literal_value(raw: str) -> str:
    """'"Hello"' -> 'Hello'. Values are stored as source literals."""
    return raw.replace('"', "")


def set_property(component: Component, key: str, value: str) -> Property:
    """Update the first property with this key, or append a new one."""
    existing = get_property(component, key)
    if existing is not None:
        existing.value = value
        return existing
    prop = Property(key=key, value=value)
    component.properties.append(prop)
    return prop


def update_property(component: Component, property_id: str, value: str) -> Property | None:
    """Direct row edit by identity. Returns None if the property is gone."""
    for prop in component.properties:
        if prop.id == property_id:
            prop.value = value
            return prop
    return None


def remove_property(component: Component, property_id: str) -> Property | None:
    """Remove by identity, not key (loaded documents may hold duplicate keys)."""
    for i, prop in enumerate(component.properties):
        if prop.id == property_id:
            return component.properties.pop(i)
    return None


def seed_default_properties(component: Component) -> None:
    """Attach the kind's default properties. Called once, at palette creation."""
    info = KINDS.get(component.kind)
    if info is None:
        return
    for key, value in info.default_properties:
        component.properties.append(Property(key=key, value=value))


def create_component(kind: str) -> Component:
    """New component as it comes off the palette."""
    component = Component(kind=kind)
    seed_default_properties(component)
    return component


# ---------------------------------------------------------------------------
# Modifiers
# ---------------------------------------------------------------------------


def add_modifier(
    component: Component,
    name: str,
    arguments: list[tuple[str | None, str]] | None = None,
) -> Modifier:
    """
    Append a modifier. When arguments is None the modifier's usual
    arguments are seeded; pass [] for an argument-less modifier.
    """
    if arguments is None:
        arguments = MODIFIER_ARGUMENT_SEEDS.get(name, [])
    modifier = Modifier(
        name=name,
        arguments=[ModifierArgument(name=arg_name, value=value) for arg_name, value in arguments],
    )
    component.modifiers.append(modifier)
    return modifier


def remove_modifier(component: Component, modifier_id: str) -> Modifier | None:
    for i, modifier in enumerate(component.modifiers):
        if modifier.id == modifier_id:
            return component.modifiers.pop(i)
    return None


def move_modifier(component: Component, modifier_id: str, index: int) -> Modifier | None:
    """Reorder a modifier. Index is clamped to the list bounds."""
    modifier = remove_modifier(component, modifier_id)
    if modifier is None:
        return None
    index = max(0, min(index, len(component.modifiers)))
    component.modifiers.insert(index, modifier)
    return modifier


def modifier_argument(modifier: Modifier, name: str | None = None) -> str | None:
    """Value of the named argument, or of the first argument when name is None."""
    if name is None:
        return modifier.arguments[0].value if modifier.arguments else None
    for arg in modifier.arguments:
        if arg.name == name:
            return arg.value
    return None
