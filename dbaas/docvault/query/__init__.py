"""
Query module for DocVault - structured filters over document data.

A filter is a small predicate tree:
- AndFilter(children): all children match (empty And matches everything)
- OrFilter(children): any child matches (empty Or matches nothing)
- Condition(field, op, value): compare the value at a dotted path

Filters arrive as JSON:
    {"type": "and" | "or", "conditions": [...]}
    {"type": "condition", "field": "a.b", "op": "gte", "value": 25}

Invariants:
    - Filters are immutable and built fresh per query
    - A missing field or a type mismatch is an error, not a non-match

How to change safely:
    - New operators must be added to FilterOp, the parser and the evaluator
    - Keep wire names stable; they are part of the command surface
"""

from .evaluator import evaluate, resolve_field
from .filters import (
    AndFilter,
    Condition,
    Filter,
    FilterOp,
    OrFilter,
    and_,
    condition,
    filter_to_dict,
    loads_filter,
    or_,
    parse_filter,
)

__all__ = [
    # Types
    "Filter",
    "AndFilter",
    "OrFilter",
    "Condition",
    "FilterOp",
    # Builders
    "and_",
    "or_",
    "condition",
    # Wire format
    "parse_filter",
    "loads_filter",
    "filter_to_dict",
    # Evaluation
    "evaluate",
    "resolve_field",
]
