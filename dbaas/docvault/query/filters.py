"""
Filter tree types and their JSON wire format.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from ..errors import InvalidFilterError


class FilterOp(Enum):
    """Comparison operators, valued by their wire names."""

    EQ = "eq"
    GT = "gt"
    LT = "lt"
    GTE = "gte"
    LTE = "lte"
    CONTAINS = "contains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"

    @property
    def is_ordering(self) -> bool:
        return self in (FilterOp.GT, FilterOp.LT, FilterOp.GTE, FilterOp.LTE)

    @property
    def is_string_match(self) -> bool:
        return self in (FilterOp.CONTAINS, FilterOp.STARTS_WITH, FilterOp.ENDS_WITH)


@dataclass(frozen=True)
class Condition:
    """Leaf predicate comparing the value at a dotted path.

    Attributes:
        field: Dotted path into the document data, e.g. "address.city"
        op: Comparison operator
        value: JSON scalar to compare against
    """

    field: str
    op: FilterOp
    value: Any


@dataclass(frozen=True)
class AndFilter:
    """Matches when every child matches."""

    children: tuple[Filter, ...] = ()


@dataclass(frozen=True)
class OrFilter:
    """Matches when at least one child matches."""

    children: tuple[Filter, ...] = ()


Filter = Union[AndFilter, OrFilter, Condition]


def and_(*children: Filter) -> AndFilter:
    return AndFilter(tuple(children))


def or_(*children: Filter) -> OrFilter:
    return OrFilter(tuple(children))


def condition(field: str, op: FilterOp | str, value: Any) -> Condition:
    """Build a Condition, accepting the operator's wire name."""
    if not isinstance(op, FilterOp):
        op = _parse_op(op)
    return Condition(field=field, op=op, value=value)


def _parse_op(name: Any) -> FilterOp:
    try:
        return FilterOp(name)
    except ValueError:
        valid = [op.value for op in FilterOp]
        raise InvalidFilterError(
            f"Invalid or missing 'op' in condition: {name!r}, must be one of {valid}",
            details={"op": name},
        ) from None


def _parse_children(obj: dict[str, Any], kind: str) -> tuple[Filter, ...]:
    conditions = obj.get("conditions")
    if not isinstance(conditions, list):
        raise InvalidFilterError(f"'conditions' array required for {kind.upper()} filter")
    return tuple(parse_filter(child) for child in conditions)


def parse_filter(obj: Any) -> Filter:
    """Build a filter tree from its decoded JSON form.

    Args:
        obj: Decoded filter JSON

    Returns:
        The filter tree

    Raises:
        InvalidFilterError: If the shape is not a valid filter
    """
    if not isinstance(obj, dict):
        raise InvalidFilterError("Filter must be a JSON object")

    kind = obj.get("type")
    if kind == "and":
        return AndFilter(_parse_children(obj, kind))
    if kind == "or":
        return OrFilter(_parse_children(obj, kind))
    if kind == "condition":
        field = obj.get("field")
        if not isinstance(field, str):
            raise InvalidFilterError("'field' string required for condition")
        op = _parse_op(obj.get("op"))
        if "value" not in obj:
            raise InvalidFilterError("'value' required for condition")
        return Condition(field=field, op=op, value=obj["value"])

    raise InvalidFilterError(
        "Invalid filter type. Must be 'and', 'or', or 'condition'",
        details={"type": kind},
    )


def loads_filter(text: str) -> Filter:
    """Parse filter JSON text.

    Raises:
        InvalidFilterError: If the text is not JSON or not a valid filter
    """
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidFilterError(f"Filter is not valid JSON: {e}") from e
    return parse_filter(obj)


def filter_to_dict(flt: Filter) -> dict[str, Any]:
    """Convert a filter tree back to its wire form."""
    if isinstance(flt, Condition):
        return {
            "type": "condition",
            "field": flt.field,
            "op": flt.op.value,
            "value": flt.value,
        }
    kind = "and" if isinstance(flt, AndFilter) else "or"
    return {"type": kind, "conditions": [filter_to_dict(child) for child in flt.children]}
