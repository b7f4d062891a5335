"""
Filter evaluation against a single document's data.

Comparison rules:
    eq                       structural JSON equality (booleans never equal numbers)
    gt, lt, gte, lte         number/number, string/string or boolean/boolean
    contains, startsWith,
    endsWith                 string/string

Invariants:
    - And and Or short-circuit left to right
    - Any unresolvable path raises FieldNotFoundError
    - Incompatible operand types raise TypeMismatchError
    - Numbers that cannot be ordered (NaN) compare as equal

How to change safely:
    - Errors abort the enclosing query; turning them into non-matches
      changes find() results for existing callers
"""

from __future__ import annotations

import logging
from typing import Any

from ..errors import FieldNotFoundError, TypeMismatchError
from .filters import AndFilter, Condition, Filter, FilterOp, OrFilter

logger = logging.getLogger(__name__)


def evaluate(flt: Filter, data: Any) -> bool:
    """Evaluate a filter tree against document data.

    Args:
        flt: Filter tree
        data: Decoded JSON value of the document's data

    Returns:
        True if the document matches

    Raises:
        FieldNotFoundError: If a condition references a missing path
        TypeMismatchError: If a condition compares incompatible types
    """
    if isinstance(flt, AndFilter):
        return all(evaluate(child, data) for child in flt.children)
    if isinstance(flt, OrFilter):
        return any(evaluate(child, data) for child in flt.children)
    if isinstance(flt, Condition):
        return _evaluate_condition(flt, data)
    raise TypeError(f"Not a filter: {flt!r}")


def resolve_field(data: Any, field: str) -> Any:
    """Follow a dotted path through nested JSON objects.

    Raises:
        FieldNotFoundError: If any segment is missing or its parent is not an object
    """
    current = data
    for segment in field.split("."):
        if not isinstance(current, dict) or segment not in current:
            raise FieldNotFoundError(field, segment)
        current = current[segment]
    return current


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def json_equal(left: Any, right: Any) -> bool:
    """Structural equality over decoded JSON values."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if _is_number(left) or _is_number(right):
        return _is_number(left) and _is_number(right) and left == right
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(json_equal(a, b) for a, b in zip(left, right))
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(json_equal(left[k], right[k]) for k in left)
    return type(left) is type(right) and left == right


def _compare(actual: Any, expected: Any, cond: Condition) -> int:
    """Three-way ordering of two JSON scalars of the same type."""
    comparable = (
        (_is_number(actual) and _is_number(expected))
        or (isinstance(actual, str) and isinstance(expected, str))
        or (isinstance(actual, bool) and isinstance(expected, bool))
    )
    if not comparable:
        raise TypeMismatchError(cond.field, cond.op.value, actual, expected)

    # Python compares int with float exactly, so huge integers never overflow
    if actual < expected:
        return -1
    if actual > expected:
        return 1
    # Equal, or unordered (NaN)
    return 0


def _evaluate_condition(cond: Condition, data: Any) -> bool:
    actual = resolve_field(data, cond.field)
    expected = cond.value
    op = cond.op

    if op is FilterOp.EQ:
        return json_equal(actual, expected)

    if op.is_ordering:
        ordering = _compare(actual, expected, cond)
        if op is FilterOp.GT:
            return ordering > 0
        if op is FilterOp.LT:
            return ordering < 0
        if op is FilterOp.GTE:
            return ordering >= 0
        return ordering <= 0

    if not (isinstance(actual, str) and isinstance(expected, str)):
        raise TypeMismatchError(cond.field, op.value, actual, expected)
    if op is FilterOp.CONTAINS:
        return expected in actual
    if op is FilterOp.STARTS_WITH:
        return actual.startswith(expected)
    return actual.endswith(expected)
