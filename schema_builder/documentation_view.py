"""
Documentation page for the schema builder.
Rule tables and the export example are generated from the catalog and the
engine, so the page cannot drift from what the editor actually does.
"""

import streamlit as st
import pandas as pd
from typing import Any, Dict, List

from .config_loader import get_config_value
from .export import to_export, to_json_string
from .models import SchemaField, create_schema_field
from .schema_tree import (
    ITEM_SCHEMA_SEGMENT,
    PATH_SEPARATOR,
    build_path,
    insert_field,
    item_schema_path,
    set_item_schema,
    set_rule,
)
from .validation_rules import DataType, get_rules_for_type

TYPE_DESCRIPTIONS = {
    DataType.STRING: "Text data with length, pattern and character-class rules.",
    DataType.NUMBER: "Numeric data with range, integer and sign rules.",
    DataType.BOOLEAN: "True/false values.",
    DataType.ARRAY: "A list of items; the item schema describes every element.",
    DataType.OBJECT: "A nested structure with its own properties.",
}


def build_rules_frame(data_type: DataType) -> pd.DataFrame:
    """Catalog rules of a data type as a table."""
    rows = [
        {
            "Rule": descriptor.name,
            "Label": descriptor.label,
            "Value": descriptor.kind.value,
            "Placeholder": descriptor.placeholder or "",
        }
        for descriptor in get_rules_for_type(data_type)
    ]
    return pd.DataFrame(rows, columns=["Rule", "Label", "Value", "Placeholder"])


def build_example_forest() -> List[SchemaField]:
    """A small User schema with an email, a name and a list of tags."""
    user = create_schema_field(DataType.OBJECT, "User")
    email = create_schema_field(DataType.STRING, "Email")
    tags = create_schema_field(DataType.ARRAY, "Tags")

    forest = insert_field([], None, user)
    user_id = forest[0].id
    forest = insert_field(forest, user_id, email)
    email_path = build_path(user_id, forest[0].properties[0].id)
    forest = set_rule(forest, email_path, "required", True)
    forest = set_rule(forest, email_path, "pattern", True, r"^[\w.-]+@[\w.-]+$")

    forest = insert_field(forest, user_id, tags)
    tags_path = build_path(user_id, forest[0].properties[1].id)
    forest = set_rule(forest, tags_path, "max_items", True, 5)
    forest = set_item_schema(forest, tags_path, DataType.STRING)

    item = forest[0].properties[1].item_schema
    forest = set_rule(forest, item_schema_path(tags_path, item.id), "min_length", True, 2)
    return forest


def build_example_export() -> List[Dict[str, Any]]:
    return to_export(build_example_forest())


class DocumentationView:
    """Static help page."""

    @staticmethod
    def render() -> None:
        st.header("📖 Schema Builder Documentation")

        st.subheader("What is a Schema?")
        st.markdown(
            "A schema is a named list of fields. Every field has a display name, a data type "
            "and the validation rules of that type. Objects contain properties and arrays "
            "describe their elements with an item schema, so schemas can nest to any depth."
        )

        st.subheader("Getting Started")
        st.markdown(
            "1. Click **Create Schema** and enter a descriptive name\n"
            "2. Pick a type and click **Add Field**\n"
            "3. Switch on the validation rules each field needs and fill in their values\n"
            "4. Copy or download the JSON from the preview"
        )

        st.subheader("Available Data Types")
        for data_type in DataType:
            st.markdown(f"**{data_type.value}**: {TYPE_DESCRIPTIONS[data_type]}")
            st.dataframe(build_rules_frame(data_type), hide_index=True, width='stretch')

        st.subheader("Field Paths")
        st.markdown(
            "Every field is addressed by the ids on its way down from the top level, joined "
            f"with `{PATH_SEPARATOR}`. A property of an object adds its own id; the item "
            f"schema of an array adds `{ITEM_SCHEMA_SEGMENT}` followed by the item's id:"
        )
        st.code(
            "user\n"
            "user.name\n"
            f"tags.{ITEM_SCHEMA_SEGMENT}.item\n"
            f"tags.{ITEM_SCHEMA_SEGMENT}.item.label",
            language="text"
        )

        st.subheader("Exported JSON")
        st.markdown(
            "The export keeps `displayName`, `dataType` and the **enabled** rules only, "
            "as a mapping from rule name to value. Objects add `properties`, arrays with "
            "an item type add `itemSchema`. Changing a field's type resets its rules and "
            "drops its nested fields."
        )
        indent = get_config_value('export', 'indent', 2)
        st.code(to_json_string(build_example_export(), indent=indent), language="json")

        st.subheader("Tips & Best Practices")
        st.markdown(
            "- Use descriptive display names that clearly indicate the field's purpose\n"
            "- Start with required fields and basic validation, then add more specific rules\n"
            "- For arrays of objects, define the item schema to ensure consistent structure\n"
            "- Collapse large objects to keep complex structures manageable"
        )
