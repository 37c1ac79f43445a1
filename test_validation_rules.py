"""
Unit tests for the validation rule catalog.
"""

import pytest

from schema_builder.validation_rules import (
    DataType,
    RuleKind,
    VALIDATION_RULES_BY_TYPE,
    coerce_rule_value,
    default_rule_value,
    get_rule_descriptor,
    get_rules_for_type,
    rule_names,
)


class TestCatalogContent:
    """Test cases for the static rule catalog."""

    def test_every_type_has_rules(self):
        """Test that each data type is present in the catalog."""
        assert set(VALIDATION_RULES_BY_TYPE) == set(DataType)

    def test_string_rules(self):
        """Test string rule names, order and kinds."""
        assert rule_names(DataType.STRING) == [
            'required', 'min_length', 'max_length', 'pattern',
            'has_symbols', 'has_numbers', 'has_uppercase', 'has_lowercase'
        ]
        assert get_rule_descriptor(DataType.STRING, 'pattern').kind == RuleKind.TEXT
        assert get_rule_descriptor(DataType.STRING, 'min_length').kind == RuleKind.NUMBER
        assert get_rule_descriptor(DataType.STRING, 'has_symbols').kind == RuleKind.BOOLEAN

    def test_number_boolean_array_object_rules(self):
        """Test rule names of the remaining types."""
        assert rule_names(DataType.NUMBER) == ['required', 'min', 'max', 'integer_only', 'positive_only']
        assert rule_names(DataType.BOOLEAN) == ['required', 'must_be_true']
        assert rule_names(DataType.ARRAY) == ['required', 'min_items', 'max_items', 'unique_items']
        assert rule_names(DataType.OBJECT) == ['required']

    def test_labels_and_placeholders(self):
        """Test display metadata carried by descriptors."""
        pattern = get_rule_descriptor(DataType.STRING, 'pattern')
        assert pattern.label == "Regex Pattern"
        assert pattern.placeholder == "^[a-zA-Z]+$"
        assert get_rule_descriptor(DataType.ARRAY, 'max_items').placeholder == "10"
        assert get_rule_descriptor(DataType.OBJECT, 'required').placeholder is None

    def test_lookup_accepts_plain_strings(self):
        """Test that lookups accept the string value of a data type."""
        assert get_rules_for_type("boolean") == VALIDATION_RULES_BY_TYPE[DataType.BOOLEAN]

    def test_unknown_rule_returns_none(self):
        """Test that a rule of another type is not found."""
        assert get_rule_descriptor(DataType.OBJECT, 'min_length') is None


class TestDefaults:
    """Test cases for default rule values."""

    def test_default_values_by_kind(self):
        assert default_rule_value(RuleKind.BOOLEAN) is False
        assert default_rule_value(RuleKind.NUMBER) == 0
        assert default_rule_value(RuleKind.TEXT) == ""


class TestCoerceRuleValue:
    """Test cases for coerce_rule_value."""

    def test_integral_numbers_become_int(self):
        """Test that 2.0 from a number input is stored as 2."""
        value = coerce_rule_value(RuleKind.NUMBER, 2.0)
        assert value == 2
        assert isinstance(value, int)

    def test_fractional_numbers_stay_float(self):
        assert coerce_rule_value(RuleKind.NUMBER, "2.5") == 2.5

    @pytest.mark.parametrize("raw", ["abc", None, True, float("nan"), float("inf")])
    def test_invalid_numbers_rejected(self, raw):
        with pytest.raises(ValueError):
            coerce_rule_value(RuleKind.NUMBER, raw)

    def test_boolean_strings(self):
        assert coerce_rule_value(RuleKind.BOOLEAN, "yes") is True
        assert coerce_rule_value(RuleKind.BOOLEAN, "False") is False
        assert coerce_rule_value(RuleKind.BOOLEAN, 1) is True

    def test_boolean_rejects_unknown_string(self):
        with pytest.raises(ValueError):
            coerce_rule_value(RuleKind.BOOLEAN, "maybe")

    def test_text_values(self):
        assert coerce_rule_value(RuleKind.TEXT, 42) == "42"
        assert coerce_rule_value(RuleKind.TEXT, None) == ""
