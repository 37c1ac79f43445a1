"""
Path-addressed, copy-on-write editing of schema field trees.

A forest is an ordered list of SchemaField. A path is a '.'-joined sequence
of segments: the first is the id of a top-level field, each following one is
either the id of a child in the current node's ``properties`` or the literal
token ``itemSchema`` followed by the id of the current array's item schema:

    user                        top-level field
    user.name                   property of an object
    tags.itemSchema.item        item schema of an array
    tags.itemSchema.item.label  property of an object item schema

Every operation returns a new forest and never modifies its input. Ancestors
on the path are copied, untouched siblings are shared. An operation that
does not apply (unknown path, wrong parent type, unknown rule) returns the
very list it was given, so ``result is forest`` detects a no-op.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional, Set, Tuple, Union
import logging

from pydantic import BaseModel

from .models import (
    SchemaField,
    ValidationRule,
    create_schema_field,
    generate_id,
    normalize_field,
    type_defaults,
)
from .validation_rules import (
    CONTAINER_TYPES,
    DataType,
    RuleKind,
    coerce_rule_value,
    default_rule_value,
    get_rule_descriptor,
)

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "."
ITEM_SCHEMA_SEGMENT = "itemSchema"

Forest = List[SchemaField]
FieldUpdater = Callable[[SchemaField], SchemaField]


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

def split_path(path: Optional[str]) -> List[str]:
    """Split a path into segments; an empty or None path has no segments."""
    if not path:
        return []
    return path.split(PATH_SEPARATOR)


def build_path(*segments: Optional[str]) -> str:
    """Join path segments, skipping empty ones."""
    return PATH_SEPARATOR.join(segment for segment in segments if segment)


def item_schema_path(array_path: str, item_id: str) -> str:
    """Path of the item schema field of the array at array_path."""
    return build_path(array_path, ITEM_SCHEMA_SEGMENT, item_id)


def _find_index(nodes: Forest, field_id: str) -> Optional[int]:
    for index, node in enumerate(nodes):
        if node.id == field_id:
            return index
    return None


def _children_for(node: SchemaField, remaining: List[str]) -> Tuple[Optional[Forest], List[str]]:
    """Children list the remaining segments descend into, with the item token consumed."""
    if remaining[0] == ITEM_SCHEMA_SEGMENT:
        if node.item_schema is None or len(remaining) < 2:
            return None, remaining
        return [node.item_schema], remaining[1:]
    if node.properties is None:
        return None, remaining
    return node.properties, remaining


def resolve_path(forest: Forest, path: str) -> Optional[SchemaField]:
    """
    Locate the field addressed by path.

    Args:
        forest: Top-level fields
        path: Dot-separated path

    Returns:
        The field, or None if the path does not resolve
    """
    segments = split_path(path)
    nodes: Optional[Forest] = forest
    while segments and nodes is not None:
        index = _find_index(nodes, segments[0])
        if index is None:
            return None
        node = nodes[index]
        segments = segments[1:]
        if not segments:
            return node
        nodes, segments = _children_for(node, segments)
    return None


def iter_fields(forest: Forest, prefix: str = "") -> Iterator[Tuple[str, SchemaField]]:
    """Walk every field depth-first, yielding (path, field), item schemas included."""
    for field in forest:
        path = build_path(prefix, field.id)
        yield path, field
        if field.properties:
            yield from iter_fields(field.properties, path)
        if field.item_schema is not None:
            yield from iter_fields([field.item_schema], build_path(path, ITEM_SCHEMA_SEGMENT))


def collect_ids(forest: Forest) -> Set[str]:
    """All field ids in the forest."""
    return {field.id for _, field in iter_fields(forest)}


# ---------------------------------------------------------------------------
# Copy-on-write core
# ---------------------------------------------------------------------------

def _update_at(nodes: Forest, segments: List[str], updater: FieldUpdater) -> Forest:
    if not segments:
        return nodes
    index = _find_index(nodes, segments[0])
    if index is None:
        return nodes

    node = nodes[index]
    rest = segments[1:]
    new_node = updater(node) if not rest else _update_below(node, rest, updater)
    if new_node is node:
        return nodes
    return nodes[:index] + [new_node] + nodes[index + 1:]


def _update_below(node: SchemaField, rest: List[str], updater: FieldUpdater) -> SchemaField:
    children, remaining = _children_for(node, rest)
    if children is None:
        return node
    updated = _update_at(children, remaining, updater)
    if updated is children:
        return node
    if rest[0] == ITEM_SCHEMA_SEGMENT:
        return node.model_copy(update={'item_schema': updated[0]})
    return node.model_copy(update={'properties': updated})


def update_nested_field(forest: Forest, path: str, updater: FieldUpdater) -> Forest:
    """
    Replace the field at path with updater(field), copying the spine above it.

    The updater must return the field itself to signal "no change".
    """
    return _update_at(forest, split_path(path), updater)


def is_addressable_id(field_id: Optional[str]) -> bool:
    """An id can appear as a path segment: non-empty, no separator, not the item schema token."""
    return bool(field_id) and PATH_SEPARATOR not in field_id and field_id != ITEM_SCHEMA_SEGMENT


def _with_unique_ids(field: SchemaField, taken: Set[str]) -> SchemaField:
    """Return field with every id in its subtree addressable and distinct from taken; taken is extended."""
    new_id = field.id
    while not is_addressable_id(new_id) or new_id in taken:
        new_id = generate_id()
    taken.add(new_id)

    update: dict = {}
    if new_id != field.id:
        logger.debug(f"Reassigned field id {field.id} -> {new_id}")
        update['id'] = new_id
    if field.properties:
        properties = [_with_unique_ids(child, taken) for child in field.properties]
        if any(new is not old for new, old in zip(properties, field.properties)):
            update['properties'] = properties
    if field.item_schema is not None:
        item_schema = _with_unique_ids(field.item_schema, taken)
        if item_schema is not field.item_schema:
            update['item_schema'] = item_schema
    return field.model_copy(update=update) if update else field


def ensure_unique_ids(forest: Forest, taken: Optional[Set[str]] = None) -> Forest:
    """
    Reassign ids so every field in the forest is addressable and unique.

    Args:
        forest: Fields to check
        taken: Ids already in use elsewhere; extended with the ids of forest

    Returns:
        The forest itself when nothing had to change, otherwise a repaired copy
    """
    taken = set() if taken is None else taken
    repaired = [_with_unique_ids(field, taken) for field in forest]
    if all(new is old for new, old in zip(repaired, forest)):
        return forest
    return repaired


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

class FieldPatch(BaseModel):
    """Attributes update_field may merge into a field; unset ones are left alone."""
    display_name: Optional[str] = None
    ui_expanded: Optional[bool] = None
    ui_selected_type_to_add: Optional[DataType] = None


def insert_field(forest: Forest, parent_path: Optional[str], new_field: SchemaField) -> Forest:
    """
    Insert new_field at the top level (parent_path None) or under a container.

    Objects get the field appended to their properties; arrays without an
    item schema get it installed as the item schema. Any other parent makes
    the insert a no-op. The new field is normalized first, so a bare
    SchemaField gets its full rule set, and its ids are made fresh.
    """
    new_field = _with_unique_ids(normalize_field(new_field), collect_ids(forest))

    if not parent_path:
        return forest + [new_field]

    def add_child(parent: SchemaField) -> SchemaField:
        if parent.data_type == DataType.OBJECT:
            return parent.model_copy(update={'properties': list(parent.properties or []) + [new_field]})
        if parent.data_type == DataType.ARRAY and parent.item_schema is None:
            return parent.model_copy(update={'item_schema': new_field})
        logger.debug(f"insert_field: parent {parent.id} ({parent.data_type.value}) cannot take a child")
        return parent

    result = update_nested_field(forest, parent_path, add_child)
    if result is forest:
        logger.debug(f"insert_field: no-op for parent path {parent_path!r}")
    return result


def update_field(forest: Forest, path: str, patch: FieldPatch) -> Forest:
    """Shallow-merge the explicitly set attributes of patch into the field at path."""
    changes = patch.model_dump(exclude_unset=True)

    def merge(field: SchemaField) -> SchemaField:
        update = {}
        for key, value in changes.items():
            if key == 'ui_selected_type_to_add' and field.data_type not in CONTAINER_TYPES:
                continue
            if value is None and key != 'ui_selected_type_to_add':
                continue
            if getattr(field, key) != value:
                update[key] = value
        return field.model_copy(update=update) if update else field

    return update_nested_field(forest, path, merge)


def remove_field(forest: Forest, path: str) -> Forest:
    """
    Remove the field at path together with its subtree.

    A path ending in ``itemSchema.<id>`` clears that array's item schema.
    """
    segments = split_path(path)
    if not segments:
        return forest

    target_id = segments[-1]
    if len(segments) == 1:
        remaining = [field for field in forest if field.id != target_id]
        return forest if len(remaining) == len(forest) else remaining

    parent_segments = segments[:-1]
    if parent_segments[-1] == ITEM_SCHEMA_SEGMENT:
        def clear_item_schema(array_field: SchemaField) -> SchemaField:
            if array_field.item_schema is None or array_field.item_schema.id != target_id:
                return array_field
            return array_field.model_copy(update={'item_schema': None})

        return _update_at(forest, parent_segments[:-1], clear_item_schema)

    def drop_property(parent: SchemaField) -> SchemaField:
        if parent.properties is None:
            return parent
        remaining = [child for child in parent.properties if child.id != target_id]
        if len(remaining) == len(parent.properties):
            return parent
        return parent.model_copy(update={'properties': remaining})

    result = _update_at(forest, parent_segments, drop_property)
    if result is forest:
        logger.debug(f"remove_field: no-op for path {path!r}")
    return result


def set_rule(
    forest: Forest,
    path: str,
    rule_name: str,
    enabled: bool,
    value: Any = None
) -> Forest:
    """
    Enable/disable a validation rule on the field at path and set its value.

    Without an explicit value, enabling a boolean rule stores True and
    enabling a number/text rule keeps its prior value, falling back to the
    catalog default (0 / "") when there is none.
    """
    def replace_rule(field: SchemaField) -> SchemaField:
        descriptor = get_rule_descriptor(field.data_type, rule_name)
        rule = field.get_rule(rule_name)
        if descriptor is None or rule is None:
            logger.debug(f"set_rule: {field.data_type.value} field has no rule {rule_name!r}")
            return field

        if value is not None:
            try:
                new_value = coerce_rule_value(descriptor.kind, value)
            except ValueError as e:
                logger.debug(f"set_rule: rejected value for {rule_name!r}: {e}")
                return field
        elif enabled and descriptor.kind == RuleKind.BOOLEAN:
            new_value = True
        elif enabled and rule.value is None:
            new_value = default_rule_value(descriptor.kind)
        else:
            new_value = rule.value

        new_rule = ValidationRule(name=rule_name, enabled=enabled, value=new_value)
        if new_rule == rule:
            return field
        rules = [new_rule if r.name == rule_name else r for r in field.validation_rules]
        return field.model_copy(update={'validation_rules': rules})

    return update_nested_field(forest, path, replace_rule)


def change_type(forest: Forest, path: str, new_type: Union[DataType, str]) -> Forest:
    """
    Change the data type of the field at path.

    Rules are regenerated from the catalog (all disabled) and any nested
    structure of the old type is discarded. Retyping to the current type
    is a no-op.
    """
    try:
        new_type = DataType(new_type)
    except ValueError:
        logger.debug(f"change_type: unknown data type {new_type!r}")
        return forest

    def retype(field: SchemaField) -> SchemaField:
        if field.data_type == new_type:
            return field
        return field.model_copy(update=type_defaults(new_type))

    return update_nested_field(forest, path, retype)


def set_item_schema(forest: Forest, path: str, item_type: Union[DataType, str]) -> Forest:
    """Install a fresh field of item_type as the item schema of the array at path."""
    try:
        item_type = DataType(item_type)
    except ValueError:
        logger.debug(f"set_item_schema: unknown data type {item_type!r}")
        return forest

    taken = collect_ids(forest)

    def install(field: SchemaField) -> SchemaField:
        if field.data_type != DataType.ARRAY:
            return field
        item = _with_unique_ids(create_schema_field(item_type), taken)
        return field.model_copy(update={'item_schema': item})

    return update_nested_field(forest, path, install)


def toggle_expanded(forest: Forest, path: str) -> Forest:
    """Flip the ui_expanded flag of the field at path."""
    return update_nested_field(
        forest, path, lambda field: field.model_copy(update={'ui_expanded': not field.ui_expanded})
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InsertField:
    parent_path: Optional[str]
    field: SchemaField


@dataclass(frozen=True)
class UpdateField:
    path: str
    patch: FieldPatch


@dataclass(frozen=True)
class RemoveField:
    path: str


@dataclass(frozen=True)
class SetRule:
    path: str
    rule_name: str
    enabled: bool
    value: Any = None


@dataclass(frozen=True)
class ChangeType:
    path: str
    new_type: DataType


@dataclass(frozen=True)
class SetItemSchema:
    path: str
    item_type: DataType


@dataclass(frozen=True)
class ToggleExpanded:
    path: str


Command = Union[InsertField, UpdateField, RemoveField, SetRule, ChangeType, SetItemSchema, ToggleExpanded]


def apply_command(forest: Forest, command: Command) -> Forest:
    """
    Single entry point for tree edits.

    Raises:
        TypeError: If command is not one of the tree commands
    """
    if isinstance(command, InsertField):
        return insert_field(forest, command.parent_path, command.field)
    if isinstance(command, UpdateField):
        return update_field(forest, command.path, command.patch)
    if isinstance(command, RemoveField):
        return remove_field(forest, command.path)
    if isinstance(command, SetRule):
        return set_rule(forest, command.path, command.rule_name, command.enabled, command.value)
    if isinstance(command, ChangeType):
        return change_type(forest, command.path, command.new_type)
    if isinstance(command, SetItemSchema):
        return set_item_schema(forest, command.path, command.item_type)
    if isinstance(command, ToggleExpanded):
        return toggle_expanded(forest, command.path)
    raise TypeError(f"Unsupported schema tree command: {type(command).__name__}")
