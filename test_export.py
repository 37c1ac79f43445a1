"""
Unit tests for the JSON export transform.
"""

import json

import pytest

from schema_builder.export import (
    count_enabled_rules,
    export_field,
    export_workspace,
    to_export,
    to_json_string,
)
from schema_builder.models import ValidationRule, create_schema_field
from schema_builder.schema_tree import (
    insert_field,
    item_schema_path,
    remove_field,
    set_item_schema,
    set_rule,
)
from schema_builder.validation_rules import DataType
from schema_builder.workspace import Workspace

EMAIL_PATTERN = r'^[\w.-]+@[\w.-]+$'


def _compact(value):
    return json.dumps(value, separators=(",", ":"))


def _top_id(forest, index=-1):
    return forest[index].id


class TestExportScenarios:
    """End-to-end editing scenarios checked against their exact JSON output."""

    def test_flat_schema(self):
        forest = insert_field([], None, create_schema_field(DataType.STRING, "Email"))
        email = _top_id(forest)
        forest = set_rule(forest, email, "required", True)
        forest = set_rule(forest, email, "pattern", True, EMAIL_PATTERN)

        assert _compact(to_export(forest)) == (
            r'[{"displayName":"Email","dataType":"string",'
            r'"validationRules":{"required":true,"pattern":"^[\\w.-]+@[\\w.-]+$"}}]'
        )

    def test_nested_object(self):
        forest = insert_field([], None, create_schema_field(DataType.OBJECT, "User"))
        user = _top_id(forest)
        forest = insert_field(forest, user, create_schema_field(DataType.STRING, "Name"))
        name = forest[0].properties[0].id
        forest = set_rule(forest, f"{user}.{name}", "required", True)

        assert _compact(to_export(forest)) == (
            '[{"displayName":"User","dataType":"object","validationRules":{},'
            '"properties":[{"displayName":"Name","dataType":"string","validationRules":{"required":true}}]}]'
        )

        # removal leaves an empty properties list
        forest = remove_field(forest, f"{user}.{name}")
        assert _compact(to_export(forest)) == (
            '[{"displayName":"User","dataType":"object","validationRules":{},"properties":[]}]'
        )

    def test_array_of_objects(self):
        forest = insert_field([], None, create_schema_field(DataType.ARRAY, "Tags"))
        tags = _top_id(forest)
        forest = set_item_schema(forest, tags, DataType.OBJECT)
        item_path = item_schema_path(tags, forest[0].item_schema.id)
        forest = insert_field(forest, item_path, create_schema_field(DataType.STRING, "Label"))
        label = forest[0].item_schema.properties[0].id
        forest = set_rule(forest, f"{item_path}.{label}", "min_length", True, 2)

        exported = _compact(to_export(forest))

        assert (
            '"itemSchema":{"displayName":"","dataType":"object","validationRules":{},'
            '"properties":[{"displayName":"Label","dataType":"string","validationRules":{"min_length":2}}]}'
        ) in exported


class TestExportTransform:
    """Test cases for the cleaned export shape."""

    def test_ui_state_omitted(self):
        field = create_schema_field(DataType.OBJECT, "User")

        exported = export_field(field)

        assert set(exported) == {'displayName', 'dataType', 'validationRules', 'properties'}

    def test_disabled_rules_omitted(self):
        forest = [create_schema_field(DataType.NUMBER, "Age")]
        forest = set_rule(forest, forest[0].id, "min", True, 18)
        forest = set_rule(forest, forest[0].id, "max", True, 99)
        forest = set_rule(forest, forest[0].id, "max", False)

        assert to_export(forest)[0]['validationRules'] == {'min': 18}

    def test_array_without_item_schema(self):
        exported = export_field(create_schema_field(DataType.ARRAY, "List"))

        assert 'itemSchema' not in exported
        assert 'properties' not in exported

    def test_enabled_boolean_rule_without_value_exports_true(self):
        field = create_schema_field(DataType.BOOLEAN, "Agree")
        field = field.model_copy(update={
            'validation_rules': [ValidationRule(name='must_be_true', enabled=True, value=None)]
        })

        assert export_field(field)['validationRules'] == {'must_be_true': True}

    def test_export_is_idempotent(self):
        """Test that exporting twice without edits yields identical output."""
        forest = insert_field([], None, create_schema_field(DataType.OBJECT, "User"))
        forest = insert_field(forest, forest[0].id, create_schema_field(DataType.ARRAY, "Roles"))

        assert to_export(forest) == to_export(forest)
        assert to_json_string(to_export(forest)) == to_json_string(to_export(forest))

    def test_export_does_not_modify_fields(self):
        forest = [create_schema_field(DataType.STRING, "Email")]
        before = forest[0].model_dump()

        to_export(forest)

        assert forest[0].model_dump() == before


class TestJsonHelpers:
    """Test cases for JSON rendering and counts."""

    def test_to_json_string_indent(self):
        text = to_json_string([{'a': 1}], indent=4)
        assert text == '[\n    {\n        "a": 1\n    }\n]'

    def test_to_json_string_keeps_unicode(self):
        assert to_json_string({'displayName': 'Größe'}, indent=None) == '{"displayName": "Größe"}'

    def test_count_enabled_rules(self):
        forest = [create_schema_field(DataType.STRING, "Email")]
        assert count_enabled_rules(forest[0]) == 0

        forest = set_rule(forest, forest[0].id, "required", True)
        forest = set_rule(forest, forest[0].id, "has_numbers", True)

        assert count_enabled_rules(forest[0]) == 2


class TestExportWorkspace:
    """Test cases for export_workspace."""

    def test_schemas_exported_in_order(self):
        workspace = Workspace()
        workspace, first = workspace.create_schema("Users")
        workspace, second = workspace.create_schema("Orders")

        exported = export_workspace(workspace)

        assert [entry['name'] for entry in exported] == ["Users", "Orders"]
        assert all(entry['schema'] == [] for entry in exported)

    @pytest.mark.parametrize("count", [0, 3])
    def test_empty_and_populated(self, count):
        workspace = Workspace()
        for index in range(count):
            workspace, _ = workspace.create_schema(f"Schema {index}")

        assert len(export_workspace(workspace)) == count
