"""
Unit tests for filter evaluation.

Tests cover:
- And/Or semantics and short-circuiting
- Dotted path resolution
- Operator type rules
- Non-finite number ordering
"""

import math

import pytest

from dbaas.docvault.errors import FieldNotFoundError, TypeMismatchError
from dbaas.docvault.query import (
    AndFilter,
    OrFilter,
    and_,
    condition,
    evaluate,
    loads_filter,
    or_,
    resolve_field,
)

ALICE = {"name": "Alice", "age": 25, "city": "New York", "active": True}
BOB = {"name": "Bob", "age": 30, "city": "San Francisco", "active": False}


class TestGroups:
    """Tests for And/Or."""

    def test_empty_and_matches_everything(self):
        assert evaluate(AndFilter(()), ALICE) is True
        assert evaluate(and_(), {}) is True
        assert evaluate(and_(), None) is True

    def test_empty_or_matches_nothing(self):
        assert evaluate(OrFilter(()), ALICE) is False
        assert evaluate(or_(), {}) is False

    def test_and(self):
        flt = and_(condition("age", "gte", 25), condition("city", "contains", "York"))
        assert evaluate(flt, ALICE) is True
        assert evaluate(flt, BOB) is False

    def test_or(self):
        flt = or_(condition("name", "eq", "Bob"), condition("age", "lt", 20))
        assert evaluate(flt, ALICE) is False
        assert evaluate(flt, BOB) is True

    def test_and_short_circuits(self):
        """And stops at the first false child, so later errors never happen."""
        flt = and_(condition("age", "gt", 100), condition("missing", "eq", 1))
        assert evaluate(flt, ALICE) is False

    def test_or_short_circuits(self):
        """Or stops at the first true child."""
        flt = or_(condition("age", "eq", 25), condition("missing", "eq", 1))
        assert evaluate(flt, ALICE) is True

    def test_error_after_passing_child(self):
        """An error in a child that is reached propagates."""
        flt = and_(condition("age", "eq", 25), condition("missing", "eq", 1))
        with pytest.raises(FieldNotFoundError):
            evaluate(flt, ALICE)


class TestFieldResolution:
    """Tests for dotted paths."""

    DOC = {"user": {"address": {"city": "Paris"}, "tags": ["a"]}, "n": None}

    def test_nested(self):
        assert resolve_field(self.DOC, "user.address.city") == "Paris"

    def test_null_value_resolves(self):
        assert resolve_field(self.DOC, "n") is None

    @pytest.mark.parametrize(
        "field,segment",
        [
            ("missing", "missing"),
            ("user.missing", "missing"),
            ("user.address.city.x", "x"),
            ("user.tags.0", "0"),
            ("n.x", "x"),
            ("", ""),
        ],
    )
    def test_missing(self, field, segment):
        """Any unresolved segment raises FieldNotFoundError."""
        with pytest.raises(FieldNotFoundError) as exc_info:
            resolve_field(self.DOC, field)
        assert exc_info.value.field == field
        assert exc_info.value.segment == segment

    def test_non_object_document(self):
        """Data that is not an object has no fields."""
        with pytest.raises(FieldNotFoundError):
            evaluate(condition("a", "eq", 1), [1, 2])

    def test_condition_on_nested_field(self):
        assert evaluate(condition("user.address.city", "eq", "Paris"), self.DOC) is True


class TestEq:
    """Tests for structural equality."""

    def test_scalars(self):
        assert evaluate(condition("name", "eq", "Alice"), ALICE) is True
        assert evaluate(condition("name", "eq", "alice"), ALICE) is False

    def test_int_equals_float(self):
        assert evaluate(condition("age", "eq", 25.0), ALICE) is True

    def test_bool_is_not_number(self):
        assert evaluate(condition("v", "eq", 1), {"v": True}) is False
        assert evaluate(condition("v", "eq", True), {"v": 1}) is False
        assert evaluate(condition("v", "eq", True), {"v": True}) is True

    def test_mixed_types_not_equal(self):
        """Eq never raises on type differences."""
        assert evaluate(condition("age", "eq", "25"), ALICE) is False
        assert evaluate(condition("v", "eq", None), {"v": 0}) is False
        assert evaluate(condition("v", "eq", None), {"v": None}) is True

    def test_structures(self):
        doc = {"v": {"a": [1, {"b": 2}]}}
        assert evaluate(condition("v", "eq", {"a": [1, {"b": 2}]}), doc) is True
        assert evaluate(condition("v", "eq", {"a": [1, {"b": 3}]}), doc) is False
        assert evaluate(condition("v", "eq", {"a": [1]}), doc) is False

    def test_large_integers_compare_exactly(self):
        flt = condition("v", "eq", 9007199254740992)
        assert evaluate(flt, {"v": 9007199254740993}) is False
        assert evaluate(flt, {"v": 9007199254740992}) is True

    def test_integer_beyond_float_range(self):
        huge = int("1" + "0" * 400)
        assert evaluate(condition("v", "eq", huge), {"v": huge}) is True
        assert evaluate(condition("v", "eq", 1.0), {"v": huge}) is False
        assert evaluate(condition("v", "eq", math.inf), {"v": huge}) is False


class TestOrdering:
    """Tests for gt/lt/gte/lte."""

    def test_age_gt_27(self):
        flt = condition("age", "gt", 27)
        assert evaluate(flt, ALICE) is False
        assert evaluate(flt, BOB) is True

    @pytest.mark.parametrize(
        "op,expected",
        [("gt", False), ("lt", False), ("gte", True), ("lte", True)],
    )
    def test_boundaries(self, op, expected):
        assert evaluate(condition("age", op, 25), ALICE) is expected

    def test_float_vs_int(self):
        assert evaluate(condition("age", "lt", 25.5), ALICE) is True

    def test_strings_lexicographic(self):
        assert evaluate(condition("name", "lt", "Bob"), ALICE) is True
        assert evaluate(condition("name", "gt", "B"), BOB) is True
        assert evaluate(condition("name", "gt", "Z"), BOB) is False

    def test_booleans(self):
        assert evaluate(condition("active", "gt", False), ALICE) is True
        assert evaluate(condition("active", "lt", True), BOB) is True
        assert evaluate(condition("active", "gte", True), BOB) is False

    @pytest.mark.parametrize(
        "doc,value",
        [
            ({"v": "30"}, 27),
            ({"v": 30}, "27"),
            ({"v": True}, 1),
            ({"v": 1}, True),
            ({"v": None}, 1),
            ({"v": [1]}, 1),
            ({"v": {"a": 1}}, 1),
        ],
    )
    def test_type_mismatch(self, doc, value):
        with pytest.raises(TypeMismatchError) as exc_info:
            evaluate(condition("v", "gt", value), doc)
        assert exc_info.value.op == "gt"

    @pytest.mark.parametrize(
        "op,expected",
        [("gt", False), ("lt", False), ("gte", True), ("lte", True)],
    )
    def test_nan_orders_as_equal(self, op, expected):
        """Unordered numbers fall back to equal ordering."""
        assert evaluate(condition("v", op, 1), {"v": math.nan}) is expected
        assert evaluate(condition("v", op, math.nan), {"v": 1}) is expected

    def test_infinity_orders(self):
        assert evaluate(condition("v", "gt", 1e308), {"v": math.inf}) is True
        assert evaluate(condition("v", "gte", math.inf), {"v": math.inf}) is True

    def test_integer_beyond_float_range(self):
        huge = int("1" + "0" * 400)
        flt = loads_filter('{"type": "condition", "field": "v", "op": "gt", "value": 1}')
        assert evaluate(flt, {"v": huge}) is True
        assert evaluate(condition("v", "gt", 1e308), {"v": huge}) is True
        assert evaluate(condition("v", "lt", math.inf), {"v": huge}) is True
        assert evaluate(condition("v", "gt", -math.inf), {"v": -huge}) is True
        assert evaluate(condition("v", "lt", huge + 1), {"v": huge}) is True


class TestStringMatching:
    """Tests for contains/startsWith/endsWith."""

    def test_contains(self):
        assert evaluate(condition("city", "contains", "York"), ALICE) is True
        assert evaluate(condition("city", "contains", "York"), BOB) is False

    def test_starts_with(self):
        assert evaluate(condition("city", "startsWith", "San"), BOB) is True
        assert evaluate(condition("city", "startsWith", "York"), ALICE) is False

    def test_ends_with(self):
        assert evaluate(condition("city", "endsWith", "York"), ALICE) is True

    def test_empty_needle(self):
        assert evaluate(condition("name", "contains", ""), ALICE) is True

    @pytest.mark.parametrize("op", ["contains", "startsWith", "endsWith"])
    def test_requires_strings(self, op):
        with pytest.raises(TypeMismatchError):
            evaluate(condition("age", op, "2"), ALICE)
        with pytest.raises(TypeMismatchError):
            evaluate(condition("name", op, 1), ALICE)
