"""
Pydantic models for the schema builder.

A Schema owns an ordered forest of SchemaField nodes. Fields are frozen:
every edit produces new instances (see schema_builder.schema_tree), so a
forest handed out once is never modified behind the caller's back.
Python attributes are snake_case; JSON and session persistence use the
camelCase aliases (displayName, dataType, itemSchema, ...).
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union
import logging
import uuid

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .validation_rules import (
    CONTAINER_TYPES,
    DataType,
    get_rules_for_type,
    default_rule_value,
)

logger = logging.getLogger(__name__)

RuleValue = Union[bool, int, float, str]


def generate_id() -> str:
    """Generate a new opaque field/schema identifier."""
    return uuid.uuid4().hex


class FrozenModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class ValidationRule(FrozenModel):
    """A named, togglable constraint with an optional configured value."""
    name: str
    enabled: bool = False
    value: Optional[RuleValue] = None


class SchemaField(FrozenModel):
    """One node of a schema tree."""
    id: str = Field(default_factory=generate_id)
    display_name: str = ""
    data_type: DataType
    validation_rules: List[ValidationRule] = Field(default_factory=list)
    properties: Optional[List["SchemaField"]] = None
    item_schema: Optional["SchemaField"] = None
    ui_expanded: bool = True
    ui_selected_type_to_add: Optional[DataType] = None

    @property
    def is_container(self) -> bool:
        return self.data_type in CONTAINER_TYPES

    def get_rule(self, name: str) -> Optional[ValidationRule]:
        for rule in self.validation_rules:
            if rule.name == name:
                return rule
        return None


class Schema(FrozenModel):
    """A named top-level field tree."""
    id: str = Field(default_factory=generate_id)
    name: str
    fields: List[SchemaField] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


def default_rules(data_type: DataType) -> List[ValidationRule]:
    """Full, disabled rule list for a data type with catalog default values."""
    return [
        ValidationRule(name=descriptor.name, enabled=False, value=default_rule_value(descriptor.kind))
        for descriptor in get_rules_for_type(data_type)
    ]


def type_defaults(data_type: DataType) -> Dict[str, Any]:
    """
    Type-dependent attribute values for a freshly created or retyped field.

    Returns:
        Dictionary with validation_rules, properties, item_schema and
        ui_selected_type_to_add set for the given type
    """
    data_type = DataType(data_type)
    return {
        'data_type': data_type,
        'validation_rules': default_rules(data_type),
        'properties': [] if data_type == DataType.OBJECT else None,
        'item_schema': None,
        'ui_selected_type_to_add': DataType.STRING if data_type in CONTAINER_TYPES else None,
    }


def create_schema_field(data_type: DataType, display_name: str = "") -> SchemaField:
    """
    Create a new schema field with default validation rules.

    Args:
        data_type: The data type for the new field
        display_name: Optional initial label

    Returns:
        A new SchemaField with a fresh id, all rules disabled and
        ui_expanded set
    """
    return SchemaField(id=generate_id(), display_name=display_name, ui_expanded=True, **type_defaults(data_type))


def _reconcile_rules(field: SchemaField) -> List[ValidationRule]:
    existing = {rule.name: rule for rule in field.validation_rules}
    reconciled = []
    for descriptor in get_rules_for_type(field.data_type):
        rule = existing.get(descriptor.name)
        if rule is None:
            rule = ValidationRule(name=descriptor.name, enabled=False, value=default_rule_value(descriptor.kind))
        reconciled.append(rule)
    return reconciled


def normalize_field(field: SchemaField) -> SchemaField:
    """
    Repair a field loaded from outside the engine so the tree invariants hold.

    Rules are reconciled against the catalog by name (missing ones added,
    stale ones dropped, catalog order restored); properties exist only on
    objects and item_schema only on arrays. Applied recursively.
    """
    rules = _reconcile_rules(field)
    if [r.name for r in rules] != [r.name for r in field.validation_rules]:
        logger.debug(f"Reconciled validation rules for field {field.id} ({field.data_type.value})")

    properties = None
    if field.data_type == DataType.OBJECT:
        properties = [normalize_field(child) for child in (field.properties or [])]

    item_schema = None
    if field.data_type == DataType.ARRAY and field.item_schema is not None:
        item_schema = normalize_field(field.item_schema)

    selected = field.ui_selected_type_to_add
    if field.data_type in CONTAINER_TYPES and selected is None:
        selected = DataType.STRING
    elif field.data_type not in CONTAINER_TYPES:
        selected = None

    return field.model_copy(update={
        'validation_rules': rules,
        'properties': properties,
        'item_schema': item_schema,
        'ui_selected_type_to_add': selected,
    })
