"""
Export transform for schema trees.

Strips UI-only state (id, uiExpanded, uiSelectedTypeToAdd) and rewrites the
rule list into a mapping that holds only the enabled rules.
"""

from typing import Any, Dict, List, Optional
import json
import logging

from .models import SchemaField
from .validation_rules import DataType, RuleKind, get_rule_descriptor

logger = logging.getLogger(__name__)

DEFAULT_INDENT = 2


def _export_rules(field: SchemaField) -> Dict[str, Any]:
    rules: Dict[str, Any] = {}
    for rule in field.validation_rules:
        if not rule.enabled:
            continue
        value = rule.value
        if value is None:
            descriptor = get_rule_descriptor(field.data_type, rule.name)
            if descriptor is not None and descriptor.kind == RuleKind.BOOLEAN:
                value = True
        rules[rule.name] = value
    return rules


def export_field(field: SchemaField) -> Dict[str, Any]:
    """Export a single field and its subtree."""
    cleaned: Dict[str, Any] = {
        'displayName': field.display_name,
        'dataType': field.data_type.value,
        'validationRules': _export_rules(field),
    }

    if field.data_type == DataType.OBJECT and field.properties is not None:
        cleaned['properties'] = to_export(field.properties)
    elif field.data_type == DataType.ARRAY and field.item_schema is not None:
        cleaned['itemSchema'] = export_field(field.item_schema)

    return cleaned


def to_export(fields: List[SchemaField]) -> List[Dict[str, Any]]:
    """
    Clean a forest for JSON export.

    Args:
        fields: Top-level fields of a schema

    Returns:
        JSON-compatible list with UI state removed and disabled rules omitted
    """
    return [export_field(field) for field in fields]


def export_workspace(workspace) -> List[Dict[str, Any]]:
    """Export every schema of a workspace as {name, schema} in workspace order."""
    return [
        {'name': schema.name, 'schema': to_export(schema.fields)}
        for schema in workspace.schemas
    ]


def to_json_string(value: Any, indent: Optional[int] = DEFAULT_INDENT) -> str:
    """Render an exported value as JSON text."""
    return json.dumps(value, indent=indent, ensure_ascii=False)


def count_enabled_rules(field: SchemaField) -> int:
    """Number of enabled rules on a field (the 'rules active' badge)."""
    return sum(1 for rule in field.validation_rules if rule.enabled)
