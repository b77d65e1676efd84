"""
Tests for operator parsing and comparison semantics.
"""

import math
import pytest

from fieldauth.authz.operators import (
    compare,
    contains,
    evaluate,
    is_truthy,
    loose_equals,
    strict_equals,
    to_number,
)
from fieldauth.authz.types import OperatorKind
from fieldauth.errors import ConfigurationError, ErrorCode


class TestOperatorKind:
    """Test operator token normalization."""

    @pytest.mark.parametrize("token,kind", [
        ("LT", OperatorKind.LESS_THAN),
        ("LESS_THAN", OperatorKind.LESS_THAN),
        ("LTE", OperatorKind.LESS_THAN_EQUAL),
        ("E", OperatorKind.EQUAL),
        ("EQ", OperatorKind.EQUAL),
        ("EQUAL", OperatorKind.EQUAL),
        ("NE", OperatorKind.NOT_EQUAL),
        ("NEQ", OperatorKind.NOT_EQUAL),
        ("GTE", OperatorKind.GREATER_THAN_EQUAL),
        ("GT", OperatorKind.GREATER_THAN),
        ("CONTAINS", OperatorKind.CONTAINS),
        ("NOT_CONTAINS", OperatorKind.NOT_CONTAINS),
    ])
    def test_aliases_normalize(self, token, kind):
        """Test that names and aliases map to the same kind."""
        assert OperatorKind.parse(token) is kind

    def test_kind_passes_through(self):
        """Test parsing an already normalized kind."""
        assert OperatorKind.parse(OperatorKind.EQUAL) is OperatorKind.EQUAL

    @pytest.mark.parametrize("token", ["BETWEEN", "eq", "", None, 3])
    def test_unknown_token(self, token):
        """Test that unknown tokens are configuration errors."""
        with pytest.raises(ConfigurationError) as exc_info:
            OperatorKind.parse(token)
        assert exc_info.value.code == ErrorCode.INVALID_OPERATOR
        assert exc_info.value.token == token
        assert f'"{token}"' in str(exc_info.value)

    def test_tokens(self):
        """Test the full token list."""
        tokens = OperatorKind.tokens()
        assert len(tokens) == 16
        assert tokens[:8] == [kind.name for kind in OperatorKind]
        assert OperatorKind.EQUAL.aliases == ["E", "EQ"]


class TestCoercion:
    """Test the value coercion helpers."""

    @pytest.mark.parametrize("value,expected", [
        ("10", 10),
        (" 2.5 ", 2.5),
        ("", 0),
        ("0x1A", 26),
        ("1e3", 1000),
        (True, 1),
        (False, 0),
        ([7], 7),
        ("Infinity", math.inf),
    ])
    def test_to_number(self, value, expected):
        """Test numeric conversion."""
        assert to_number(value) == expected

    @pytest.mark.parametrize("value", ["abc", "1_000", "inf", None, {"a": 1}, [1, 2]])
    def test_to_number_nan(self, value):
        """Test values without a numeric form."""
        assert math.isnan(to_number(value))

    @pytest.mark.parametrize("value,expected", [
        (None, False),
        (False, False),
        (0, False),
        ("", False),
        (float("nan"), False),
        ({}, True),
        ([], True),
        ("0", True),
        ({"id": 1}, True),
    ])
    def test_is_truthy(self, value, expected):
        """Test that empty containers still count as present."""
        assert is_truthy(value) is expected


class TestComparisons:
    """Test equality and ordering rules."""

    def test_loose_equality(self):
        """Test cross-type loose equality."""
        assert loose_equals(5, "5")
        assert loose_equals("admin", "admin")
        assert loose_equals(True, "1")
        assert loose_equals(["a", "b"], "a,b")
        assert not loose_equals(None, "null")
        assert not loose_equals(5, "five")
        assert loose_equals(None, None)

    def test_strict_equality(self):
        """Test same-kind equality."""
        assert strict_equals("5", "5")
        assert not strict_equals(5, "5")
        assert not strict_equals(True, 1)
        assert strict_equals(1, 1.0)

    def test_numeric_ordering(self):
        """Test that a number against a numeric string compares numerically."""
        assert compare(5, "10") == -1
        assert compare(10, "5") == 1
        assert compare(18, "18") == 0

    def test_string_ordering(self):
        """Test that two strings compare lexically."""
        assert compare("5", "10") == 1
        assert compare("apple", "banana") == -1

    def test_unordered_values(self):
        """Test missing and non-numeric values."""
        assert compare(None, "10") is None
        assert compare(5, "ten") is None
        assert compare([1, 2], 3) is None

    def test_contains(self):
        """Test sequence and scalar containment."""
        assert contains(["x", "y"], "x")
        assert not contains(["x", "y"], "z")
        assert not contains([1, 2], "1")
        assert contains("x", "x")
        assert not contains(1, "1")
        assert not contains(None, "x")


class TestEvaluate:
    """Test every operator against the declared string literal."""

    def test_less_than(self):
        """Test LESS_THAN with numeric context values."""
        assert evaluate(OperatorKind.LESS_THAN, 5, "10")
        assert not evaluate(OperatorKind.LESS_THAN, 10, "5")
        assert not evaluate(OperatorKind.LESS_THAN, 10, "10")

    def test_less_than_equal(self):
        """Test LESS_THAN_EQUAL."""
        assert evaluate(OperatorKind.LESS_THAN_EQUAL, 10, "10")
        assert not evaluate(OperatorKind.LESS_THAN_EQUAL, 11, "10")

    def test_equal_and_not_equal(self):
        """Test loose equality operators."""
        assert evaluate(OperatorKind.EQUAL, 5, "5")
        assert not evaluate(OperatorKind.NOT_EQUAL, 5, "5")
        assert evaluate(OperatorKind.NOT_EQUAL, 6, "5")

    def test_greater_than_equal(self):
        """Test GREATER_THAN_EQUAL."""
        assert evaluate(OperatorKind.GREATER_THAN_EQUAL, 18, "18")
        assert not evaluate(OperatorKind.GREATER_THAN_EQUAL, 15, "18")

    def test_greater_than_is_strict(self):
        """Test that GREATER_THAN fails on equality by default."""
        assert evaluate(OperatorKind.GREATER_THAN, 19, "18")
        assert not evaluate(OperatorKind.GREATER_THAN, 18, "18")

    def test_greater_than_legacy(self):
        """Test the inclusive GREATER_THAN mode."""
        assert evaluate(OperatorKind.GREATER_THAN, 18, "18", strict_greater_than=False)
        assert not evaluate(OperatorKind.GREATER_THAN, 17, "18", strict_greater_than=False)

    def test_contains_and_not_contains(self):
        """Test containment operators."""
        assert evaluate(OperatorKind.CONTAINS, ["x", "y"], "x")
        assert not evaluate(OperatorKind.NOT_CONTAINS, ["x", "y"], "x")
        assert evaluate(OperatorKind.NOT_CONTAINS, ["x", "y"], "z")

    def test_missing_value_never_orders(self):
        """Test that None fails every ordering comparison."""
        for op in (OperatorKind.LESS_THAN, OperatorKind.LESS_THAN_EQUAL,
                   OperatorKind.GREATER_THAN, OperatorKind.GREATER_THAN_EQUAL):
            assert not evaluate(op, None, "0")

    def test_unknown_operator(self):
        """Test that a non-enumerated operator is a configuration error."""
        with pytest.raises(ConfigurationError):
            evaluate("BETWEEN", 1, "2")
