"""
Canvas Kernel — Property & Modifier Model Tests
"""

from canvas.kernel.properties import (
    add_modifier,
    create_component,
    get_property,
    get_value,
    literal_value,
    modifier_argument,
    move_modifier,
    remove_modifier,
    remove_property,
    seed_default_properties,
    set_property,
    update_property,
)
from canvas.kernel.types import BUTTON, HSTACK, SPACER, TEXT, TEXT_FIELD, Component, Property


class TestDefaults:
    def test_text_defaults(self):
        c = create_component(TEXT)
        assert [(p.key, p.value) for p in c.properties] == [("text", '"Hello, World!"')]

    def test_button_defaults(self):
        c = create_component(BUTTON)
        assert [(p.key, p.value) for p in c.properties] == [("action", "{}"), ("label", '"Button"')]

    def test_text_field_defaults(self):
        keys = [p.key for p in create_component(TEXT_FIELD).properties]
        assert keys == ["placeholder", "text"]

    def test_stack_spacing(self):
        assert get_value(create_component(HSTACK), "spacing") == "10"

    def test_spacer_has_none(self):
        assert create_component(SPACER).properties == []

    def test_seeding_is_not_reapplied_by_edits(self):
        c = create_component(TEXT)
        set_property(c, "text", '"Changed"')
        assert get_value(c, "text") == "Changed"
        assert len(c.properties) == 1

    def test_seed_unknown_kind_is_noop(self):
        c = Component(kind="mystery")
        seed_default_properties(c)
        assert c.properties == []


class TestProperties:
    def test_set_appends_new_key(self):
        c = Component(kind=TEXT)
        prop = set_property(c, "font", ".body")
        assert c.properties == [prop]

    def test_set_updates_first_match(self):
        c = create_component(TEXT)
        original = c.properties[0]
        prop = set_property(c, "text", '"Bye"')
        assert prop is original
        assert len(c.properties) == 1

    def test_lookup_first_match_wins(self):
        c = Component(kind=TEXT)
        first = Property(key="text", value='"one"')
        c.properties = [first, Property(key="text", value='"two"')]
        assert get_property(c, "text") is first
        set_property(c, "text", '"three"')
        assert [p.value for p in c.properties] == ['"three"', '"two"']

    def test_update_by_identity(self):
        c = create_component(TEXT)
        prop = c.properties[0]
        assert update_property(c, prop.id, '"Edited"') is prop
        assert prop.value == '"Edited"'
        assert update_property(c, "missing", "x") is None

    def test_remove_by_identity_keeps_duplicates(self):
        c = Component(kind=TEXT)
        a = Property(key="text", value='"a"')
        b = Property(key="text", value='"b"')
        c.properties = [a, b]
        assert remove_property(c, b.id) is b
        assert c.properties == [a]
        assert remove_property(c, b.id) is None

    def test_literal_value(self):
        assert literal_value('"Hello"') == "Hello"
        assert literal_value("16") == "16"


class TestModifiers:
    def test_seeded_arguments(self):
        c = Component(kind=TEXT)
        m = add_modifier(c, "frame")
        assert [(a.name, a.value) for a in m.arguments] == [("width", "100"), ("height", "50")]

    def test_explicit_empty_arguments(self):
        m = add_modifier(Component(kind=TEXT), "padding", [])
        assert m.arguments == []

    def test_unknown_modifier_gets_no_seed(self):
        m = add_modifier(Component(kind=TEXT), "blur")
        assert m.arguments == []

    def test_order_is_append_order(self):
        c = Component(kind=TEXT)
        names = ["padding", "background", "cornerRadius"]
        for name in names:
            add_modifier(c, name)
        assert [m.name for m in c.modifiers] == names

    def test_remove(self):
        c = Component(kind=TEXT)
        m = add_modifier(c, "padding")
        assert remove_modifier(c, m.id) is m
        assert c.modifiers == []
        assert remove_modifier(c, m.id) is None

    def test_move_clamps_index(self):
        c = Component(kind=TEXT)
        a = add_modifier(c, "padding")
        b = add_modifier(c, "background")
        move_modifier(c, a.id, 10)
        assert c.modifiers == [b, a]
        move_modifier(c, a.id, 0)
        assert c.modifiers == [a, b]
        assert move_modifier(c, "missing", 0) is None

    def test_modifier_argument(self):
        m = add_modifier(Component(kind=TEXT), "offset")
        assert modifier_argument(m, "y") == "0"
        assert modifier_argument(m) == "0"
        assert modifier_argument(m, "z") is None
