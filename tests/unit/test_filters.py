"""
Unit tests for filter parsing and wire format.

Tests cover:
- Parsing and/or/condition JSON
- Invalid shapes
- Conversion back to wire form
"""

import pytest

from dbaas.docvault.errors import FilterError, InvalidFilterError
from dbaas.docvault.query import (
    AndFilter,
    Condition,
    FilterOp,
    OrFilter,
    and_,
    condition,
    filter_to_dict,
    loads_filter,
    or_,
    parse_filter,
)


class TestParseFilter:
    """Tests for parse_filter."""

    def test_condition(self):
        """Condition objects become Condition nodes."""
        flt = parse_filter({"type": "condition", "field": "age", "op": "gt", "value": 27})
        assert flt == Condition(field="age", op=FilterOp.GT, value=27)

    @pytest.mark.parametrize(
        "name,op",
        [
            ("eq", FilterOp.EQ),
            ("gt", FilterOp.GT),
            ("lt", FilterOp.LT),
            ("gte", FilterOp.GTE),
            ("lte", FilterOp.LTE),
            ("contains", FilterOp.CONTAINS),
            ("startsWith", FilterOp.STARTS_WITH),
            ("endsWith", FilterOp.ENDS_WITH),
        ],
    )
    def test_all_operators(self, name, op):
        """Every wire operator name is recognized."""
        flt = parse_filter({"type": "condition", "field": "f", "op": name, "value": "x"})
        assert flt.op is op

    def test_nested(self):
        """And/Or nest and keep child order."""
        flt = parse_filter(
            {
                "type": "and",
                "conditions": [
                    {"type": "condition", "field": "age", "op": "gte", "value": 25},
                    {
                        "type": "or",
                        "conditions": [
                            {"type": "condition", "field": "city", "op": "contains", "value": "York"},
                            {"type": "condition", "field": "city", "op": "eq", "value": "Boston"},
                        ],
                    },
                ],
            }
        )
        assert isinstance(flt, AndFilter)
        assert flt.children[0] == Condition("age", FilterOp.GTE, 25)
        assert isinstance(flt.children[1], OrFilter)
        assert [c.value for c in flt.children[1].children] == ["York", "Boston"]

    def test_empty_groups(self):
        """Empty condition lists are allowed."""
        assert parse_filter({"type": "and", "conditions": []}) == AndFilter(())
        assert parse_filter({"type": "or", "conditions": []}) == OrFilter(())

    def test_null_value_allowed(self):
        """A null value is present, not missing."""
        flt = parse_filter({"type": "condition", "field": "f", "op": "eq", "value": None})
        assert flt.value is None

    @pytest.mark.parametrize(
        "obj",
        [
            [],
            "and",
            {},
            {"type": "xor", "conditions": []},
            {"type": "and"},
            {"type": "or", "conditions": {}},
            {"type": "condition", "op": "eq", "value": 1},
            {"type": "condition", "field": 3, "op": "eq", "value": 1},
            {"type": "condition", "field": "f", "value": 1},
            {"type": "condition", "field": "f", "op": "like", "value": 1},
            {"type": "condition", "field": "f", "op": "eq"},
            {"type": "and", "conditions": [{"type": "bogus"}]},
        ],
    )
    def test_invalid(self, obj):
        """Malformed filters raise InvalidFilterError."""
        with pytest.raises(InvalidFilterError):
            parse_filter(obj)

    def test_invalid_is_filter_error(self):
        """Parse errors belong to the filter error kind."""
        with pytest.raises(FilterError):
            parse_filter({"type": "nope"})


class TestLoadsFilter:
    """Tests for loads_filter."""

    def test_json_text(self):
        flt = loads_filter('{"type": "condition", "field": "a.b", "op": "startsWith", "value": "x"}')
        assert flt == Condition("a.b", FilterOp.STARTS_WITH, "x")

    def test_bad_json(self):
        """Non-JSON text is an invalid filter."""
        with pytest.raises(InvalidFilterError):
            loads_filter("{not json")


class TestBuilders:
    """Tests for builder helpers and filter_to_dict."""

    def test_builders(self):
        flt = and_(condition("age", "gte", 25), or_(condition("city", FilterOp.EQ, "NYC")))
        assert flt == AndFilter(
            (Condition("age", FilterOp.GTE, 25), OrFilter((Condition("city", FilterOp.EQ, "NYC"),)))
        )

    def test_condition_rejects_unknown_op(self):
        with pytest.raises(InvalidFilterError):
            condition("age", "between", 1)

    def test_to_dict(self):
        """filter_to_dict produces the wire shape."""
        flt = or_(condition("name", "endsWith", "son"), and_())
        assert filter_to_dict(flt) == {
            "type": "or",
            "conditions": [
                {"type": "condition", "field": "name", "op": "endsWith", "value": "son"},
                {"type": "and", "conditions": []},
            ],
        }
