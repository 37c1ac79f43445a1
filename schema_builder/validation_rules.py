"""
Validation rule catalog for the schema builder.

Defines the validation rules available for each data type, together with
their input kind, display label and placeholder. The catalog is static: it
decides which rules a new or retyped field starts with and which rules the
export transform may emit.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class DataType(str, Enum):
    """Supported field data types."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


CONTAINER_TYPES = (DataType.OBJECT, DataType.ARRAY)


class RuleKind(str, Enum):
    """Input kind of a rule value."""
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class RuleDescriptor:
    """Catalog entry describing one validation rule."""
    name: str
    kind: RuleKind
    label: str
    placeholder: Optional[str] = None


VALIDATION_RULES_BY_TYPE: Dict[DataType, List[RuleDescriptor]] = {
    DataType.STRING: [
        RuleDescriptor("required", RuleKind.BOOLEAN, "Required"),
        RuleDescriptor("min_length", RuleKind.NUMBER, "Minimum Length", "0"),
        RuleDescriptor("max_length", RuleKind.NUMBER, "Maximum Length", "100"),
        RuleDescriptor("pattern", RuleKind.TEXT, "Regex Pattern", "^[a-zA-Z]+$"),
        RuleDescriptor("has_symbols", RuleKind.BOOLEAN, "Must Have Symbols"),
        RuleDescriptor("has_numbers", RuleKind.BOOLEAN, "Must Have Numbers"),
        RuleDescriptor("has_uppercase", RuleKind.BOOLEAN, "Must Have Uppercase"),
        RuleDescriptor("has_lowercase", RuleKind.BOOLEAN, "Must Have Lowercase"),
    ],
    DataType.NUMBER: [
        RuleDescriptor("required", RuleKind.BOOLEAN, "Required"),
        RuleDescriptor("min", RuleKind.NUMBER, "Minimum Value", "0"),
        RuleDescriptor("max", RuleKind.NUMBER, "Maximum Value", "100"),
        RuleDescriptor("integer_only", RuleKind.BOOLEAN, "Integer Only"),
        RuleDescriptor("positive_only", RuleKind.BOOLEAN, "Positive Only"),
    ],
    DataType.BOOLEAN: [
        RuleDescriptor("required", RuleKind.BOOLEAN, "Required"),
        RuleDescriptor("must_be_true", RuleKind.BOOLEAN, "Must Be True"),
    ],
    DataType.ARRAY: [
        RuleDescriptor("required", RuleKind.BOOLEAN, "Required"),
        RuleDescriptor("min_items", RuleKind.NUMBER, "Minimum Items", "0"),
        RuleDescriptor("max_items", RuleKind.NUMBER, "Maximum Items", "10"),
        RuleDescriptor("unique_items", RuleKind.BOOLEAN, "Unique Items Only"),
    ],
    DataType.OBJECT: [
        RuleDescriptor("required", RuleKind.BOOLEAN, "Required"),
    ],
}

_TRUE_STRINGS = {"true", "yes", "1", "on"}
_FALSE_STRINGS = {"false", "no", "0", "off", ""}


def get_rules_for_type(data_type: DataType) -> List[RuleDescriptor]:
    """Return the ordered rule descriptors for a data type."""
    return VALIDATION_RULES_BY_TYPE[DataType(data_type)]


def get_rule_descriptor(data_type: DataType, name: str) -> Optional[RuleDescriptor]:
    """Look up a single rule descriptor by name, or None if the type has no such rule."""
    for descriptor in get_rules_for_type(data_type):
        if descriptor.name == name:
            return descriptor
    return None


def rule_names(data_type: DataType) -> List[str]:
    """Return the rule names for a data type in catalog order."""
    return [descriptor.name for descriptor in get_rules_for_type(data_type)]


def default_rule_value(kind: RuleKind) -> Any:
    """Default value a rule of the given kind is created with."""
    if kind == RuleKind.BOOLEAN:
        return False
    if kind == RuleKind.NUMBER:
        return 0
    return ""


def coerce_rule_value(kind: RuleKind, value: Any) -> Any:
    """
    Coerce a raw widget or caller value to the type fixed by the rule kind.

    Args:
        kind: Kind of the rule the value belongs to
        value: Raw value (number input, text input, parsed JSON, ...)

    Returns:
        bool for boolean rules, int/float for number rules (int when the
        number is integral), str for text rules

    Raises:
        ValueError: If the value cannot be represented in the rule's kind
    """
    if kind == RuleKind.BOOLEAN:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
            raise ValueError(f"Cannot interpret {value!r} as a boolean")
        if isinstance(value, (int, float)):
            return bool(value)
        raise ValueError(f"Cannot interpret {value!r} as a boolean")

    if kind == RuleKind.NUMBER:
        if isinstance(value, bool):
            raise ValueError("Boolean is not a valid number value")
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"Cannot interpret {value!r} as a number")
        if number != number or number in (float("inf"), float("-inf")):
            raise ValueError(f"Number value must be finite, got {value!r}")
        if number.is_integer():
            return int(number)
        return number

    if value is None:
        return ""
    return str(value)
