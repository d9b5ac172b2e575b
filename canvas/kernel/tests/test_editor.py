"""
Canvas Kernel — Editor Tests

apply() never raises. A rejected command comes back coded and leaves the
project exactly as it was; a committed one reports what it created,
destroyed and selected.
"""

import json

import pytest

from canvas.kernel import tree
from canvas.kernel.commands import make_command
from canvas.kernel.editor import apply
from canvas.kernel.types import CUSTOM_VIEW, Component


def _snapshot(project):
    return json.dumps(project.to_dict(), sort_keys=True)


def run(sample, selection, type, /, **payload):
    return apply(sample.project, selection, make_command(type, payload))


class TestRejections:
    def test_unknown_command(self, sample, selection):
        result = run(sample, selection, "component.explode")
        assert not result.applied
        assert result.error_code == "UNKNOWN_COMMAND"

    def test_invalid_payload(self, sample, selection):
        result = run(sample, selection, "component.create", kind="text")
        assert result.error_code == "INVALID_PAYLOAD"

    @pytest.mark.parametrize(
        "type, payload, code",
        [
            ("component.remove", {"component": "ghost"}, "NOT_FOUND"),
            ("property.set", {"component": "ghost", "key": "k", "value": "v"}, "NOT_FOUND"),
            ("view_file.rename", {"file": "ghost", "name": "X"}, "NOT_FOUND"),
            ("field.add", {"file": "ghost", "name": "a", "type": "Int"}, "NOT_FOUND"),
        ],
    )
    def test_missing_entities(self, sample, selection, type, payload, code):
        before = _snapshot(sample.project)
        result = apply(sample.project, selection, make_command(type, payload))
        assert result.error_code == code
        assert _snapshot(sample.project) == before

    def test_drop_into_own_subtree(self, sample, selection):
        before = _snapshot(sample.project)
        result = run(sample, selection, "component.drop", component=sample.vstack_id, target={"component": sample.image_id})
        assert result.error_code == "STRUCTURAL_VIOLATION"
        assert _snapshot(sample.project) == before
        assert selection.component_id is None

    def test_move_under_leaf(self, sample, selection):
        before = _snapshot(sample.project)
        result = run(
            sample, selection, "component.move",
            component=sample.footer_id, file=sample.content.id, parent=sample.text_id,
        )
        assert result.error_code == "STRUCTURAL_VIOLATION"
        assert _snapshot(sample.project) == before

    def test_reference_on_non_custom_view(self, sample, selection):
        result = run(sample, selection, "component.reference", component=sample.text_id, view_file=sample.detail.id)
        assert result.error_code == "STRUCTURAL_VIOLATION"


class TestTreeCommands:
    def test_create_selects_new_component(self, sample, selection):
        result = run(sample, selection, "component.create", kind="text", target={"component": sample.hstack_id})
        assert result.applied
        new_id = result.selected
        assert new_id in result.created
        assert selection.component_id == new_id
        assert selection.view_file_id == sample.content.id
        hstack = tree.find_by_id(sample.content, sample.hstack_id)
        assert hstack.children[-1].id == new_id

    def test_create_reports_property_ids(self, sample, selection):
        result = run(sample, selection, "component.create", kind="button", target={"file": sample.detail.id})
        component = sample.detail.components[0]
        assert set(result.created) == {component.id} | {p.id for p in component.properties}

    def test_drop_selects_moved_component(self, sample, selection):
        result = run(sample, selection, "component.drop", component=sample.button_id, target={"component": sample.footer_id})
        assert result.applied
        assert selection.component_id == sample.button_id
        assert [c.id for c in sample.content.components] == [sample.vstack_id, sample.footer_id, sample.button_id]

    def test_remove_forgets_selection(self, sample, selection):
        selection.select_component(sample.button_id, sample.content.id)
        result = run(sample, selection, "component.remove", component=sample.hstack_id)
        assert result.applied
        assert sample.button_id in result.destroyed
        assert selection.component_id is None
        assert selection.view_file_id == sample.content.id

    def test_move_within_file(self, sample, selection):
        result = run(
            sample, selection, "component.move",
            component=sample.footer_id, file=sample.content.id, parent=sample.vstack_id, index=0,
        )
        assert result.applied
        vstack = tree.find_by_id(sample.content, sample.vstack_id)
        assert vstack.children[0].id == sample.footer_id


class TestReferences:
    def _custom_view(self, sample):
        ref = Component(kind=CUSTOM_VIEW)
        tree.insert_root(sample.content, ref)
        return ref

    def test_set_and_clear(self, sample, selection):
        ref = self._custom_view(sample)
        assert run(sample, selection, "component.reference", component=ref.id, view_file=sample.detail.id).applied
        assert ref.referenced_view == sample.detail.id
        assert run(sample, selection, "component.reference", component=ref.id, view_file=None).applied
        assert ref.referenced_view is None

    def test_self_reference_rejected(self, sample, selection):
        ref = self._custom_view(sample)
        result = run(sample, selection, "component.reference", component=ref.id, view_file=sample.content.id)
        assert result.error_code == "STRUCTURAL_VIOLATION"
        assert ref.referenced_view is None

    def test_indirect_cycle_rejected(self, sample, selection):
        ref = self._custom_view(sample)
        back = Component(kind=CUSTOM_VIEW, referenced_view=sample.content.id)
        tree.insert_root(sample.detail, back)
        result = run(sample, selection, "component.reference", component=ref.id, view_file=sample.detail.id)
        assert result.error_code == "STRUCTURAL_VIOLATION"

    def test_drop_into_referenced_view_rejected(self, sample, selection):
        ref = Component(kind=CUSTOM_VIEW)
        tree.insert_root(sample.detail, ref)
        assert run(sample, selection, "component.reference", component=ref.id, view_file=sample.content.id).applied
        before = _snapshot(sample.project)

        result = run(sample, selection, "component.drop", component=ref.id, target={"file": sample.content.id})

        assert result.error_code == "STRUCTURAL_VIOLATION"
        assert _snapshot(sample.project) == before
        assert tree.check_integrity(sample.project) == []

    def test_unknown_file(self, sample, selection):
        ref = self._custom_view(sample)
        result = run(sample, selection, "component.reference", component=ref.id, view_file="ghost")
        assert result.error_code == "NOT_FOUND"

    def test_removing_file_clears_reference(self, sample, selection):
        ref = self._custom_view(sample)
        run(sample, selection, "component.reference", component=ref.id, view_file=sample.detail.id)
        result = run(sample, selection, "view_file.remove", file=sample.detail.id)
        assert result.applied
        assert ref.referenced_view is None
        assert [w.code for w in result.warnings] == ["VIEW_REFERENCE_CLEARED"]


class TestPropertyAndModifierCommands:
    def test_property_set_is_unique_by_key(self, sample, selection):
        first = run(sample, selection, "property.set", component=sample.text_id, key="text", value='"A"')
        second = run(sample, selection, "property.set", component=sample.text_id, key="text", value='"B"')
        text = tree.find_by_id(sample.content, sample.text_id)
        assert first.created == [] and second.created == []
        assert [(p.key, p.value) for p in text.properties] == [("text", '"B"')]

    def test_property_set_new_key_reports_creation(self, sample, selection):
        result = run(sample, selection, "property.set", component=sample.text_id, key="lineLimit", value="2")
        assert len(result.created) == 1

    def test_property_update_and_remove(self, sample, selection):
        text = tree.find_by_id(sample.content, sample.text_id)
        prop_id = text.properties[0].id
        assert run(sample, selection, "property.update", component=text.id, property=prop_id, value='"x"').applied
        assert text.properties[0].value == '"x"'
        result = run(sample, selection, "property.remove", component=text.id, property=prop_id)
        assert result.destroyed == [prop_id]
        missing = run(sample, selection, "property.remove", component=text.id, property=prop_id)
        assert missing.error_code == "NOT_FOUND"

    def test_modifier_add_seeds_arguments(self, sample, selection):
        result = run(sample, selection, "modifier.add", component=sample.text_id, name="padding")
        text = tree.find_by_id(sample.content, sample.text_id)
        modifier = text.modifiers[0]
        assert [a.value for a in modifier.arguments] == ["16"]
        assert result.created == [modifier.id, modifier.arguments[0].id]
        assert result.warnings == []

    def test_modifier_add_explicit_arguments(self, sample, selection):
        run(
            sample, selection, "modifier.add",
            component=sample.text_id, name="frame", arguments=[{"name": "width", "value": "40"}],
        )
        modifier = tree.find_by_id(sample.content, sample.text_id).modifiers[0]
        assert [(a.name, a.value) for a in modifier.arguments] == [("width", "40")]

    def test_unknown_modifier_warns_but_applies(self, sample, selection):
        result = run(sample, selection, "modifier.add", component=sample.text_id, name="blur")
        assert result.applied
        assert [w.code for w in result.warnings] == ["UNKNOWN_MODIFIER"]

    def test_modifier_move_and_remove(self, sample, selection):
        run(sample, selection, "modifier.add", component=sample.text_id, name="padding")
        run(sample, selection, "modifier.add", component=sample.text_id, name="background")
        text = tree.find_by_id(sample.content, sample.text_id)
        padding, background = text.modifiers
        assert run(sample, selection, "modifier.move", component=text.id, modifier=background.id, index=0).applied
        assert text.modifiers == [background, padding]
        result = run(sample, selection, "modifier.remove", component=text.id, modifier=padding.id)
        assert padding.id in result.destroyed
        assert text.modifiers == [background]


class TestFileAndSchemaCommands:
    def test_view_file_create_selects_it(self, sample, selection):
        result = run(sample, selection, "view_file.create", name="Settings")
        new_file = sample.project.view_files[-1]
        assert result.created == [new_file.id]
        assert selection.view_file_id == new_file.id

    def test_view_file_remove_destroys_contents(self, sample, selection):
        selection.select_component(sample.text_id, sample.content.id)
        result = run(sample, selection, "view_file.remove", file=sample.content.id)
        assert sample.text_id in result.destroyed
        assert selection.view_file_id is None
        assert selection.component_id is None

    def test_model_file_and_fields(self, sample, selection):
        run(sample, selection, "model_file.create", name="User")
        model = sample.project.model_files[0]
        assert selection.model_file_id == model.id

        added = run(sample, selection, "field.add", file=model.id, name="age", type="Int", default_value="0")
        field_id = added.created[0]
        assert run(sample, selection, "field.update", file=model.id, field=field_id, default_value=None).applied
        assert model.fields[0].default_value is None
        assert run(sample, selection, "field.remove", file=model.id, index=0).destroyed == [field_id]
        assert run(sample, selection, "model_file.rename", file=model.id, name="Account").applied
        assert model.name == "Account"

    def test_variable_commands(self, sample, selection):
        result = run(
            sample, selection, "variable.add",
            file=sample.content.id, name="isOn", type="Bool", kind="environment", default_value="true",
        )
        assert [w.code for w in result.warnings] == ["DEFAULT_IGNORED"]
        variable_id = result.created[0]
        assert run(sample, selection, "variable.remove", file=sample.content.id, variable=variable_id).applied
        assert sample.content.variables == []

    def test_project_update(self, sample, selection):
        assert run(sample, selection, "project.update", name="Renamed", color="pink", icon="heart.fill").applied
        assert (sample.project.name, sample.project.color, sample.project.icon) == ("Renamed", "pink", "heart.fill")
