"""
DSL Utility Functions for the condition tree.

This module provides utility functions for working with DSL nodes:
- iter_nodes: Depth-first walk over a tree
- get_referenced_keys: Extract all context keys a tree may resolve
- get_tree_depth / count_nodes: Size metrics for validation summaries
- Serialization functions: Convert nodes to the YAML dict format
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterator

from ..types import Symbol
from .base import ScalarValue, RangeValue, ListValue
from .condition import Cond
from .boolean import AllExpr, AnyExpr, CondExpr, TzExpr
from .types import Expr


# =============================================================================
# Tree Analysis
# =============================================================================

def iter_nodes(expr: Expr) -> Iterator[Expr]:
    """Yield every node in the tree, depth-first, parents before children."""
    yield expr
    for child in expr.children:
        yield from iter_nodes(child)


def get_referenced_keys(expr: Expr) -> set[str]:
    """
    Get all context keys referenced by leaves in an expression tree.

    Args:
        expr: Expression to analyze.

    Returns:
        Set of context keys.
    """
    return {node.key for node in iter_nodes(expr) if isinstance(node, Cond)}


def get_tree_depth(expr: Expr) -> int:
    """Depth of the tree (a lone leaf has depth 1)."""
    if not expr.children:
        return 1
    return 1 + max(get_tree_depth(c) for c in expr.children)


def count_nodes(expr: Expr) -> int:
    return sum(1 for _ in iter_nodes(expr))


# =============================================================================
# Serialization
# =============================================================================

def literal_to_plain(value: Any) -> Any:
    """
    Convert a literal to its YAML-friendly form.

    Symbols become ":name" strings, datetimes ISO strings, tuples/sets lists.
    """
    if isinstance(value, Symbol):
        return f":{value.name}"
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (tuple, list)):
        return [literal_to_plain(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return sorted((literal_to_plain(v) for v in value), key=repr)
    return value


def rhs_to_dict(rhs: ScalarValue | RangeValue | ListValue | None) -> dict:
    """Convert a literal operand to its dict fields."""
    if rhs is None:
        return {}
    if isinstance(rhs, RangeValue):
        return {"low": literal_to_plain(rhs.low), "high": literal_to_plain(rhs.high)}
    if isinstance(rhs, ListValue):
        return {"values": [literal_to_plain(v) for v in rhs.values]}
    return {"value": literal_to_plain(rhs.value)}


def expr_to_dict(expr: Expr) -> dict:
    """
    Convert an expression tree to a dict (the YAML node format).

    Args:
        expr: Expression to serialize.

    Returns:
        Dict representation, accepted back by dsl_parser.parse_expr.

    Examples:
        {"greater_than_or_equal": {"key": "amount", "value": 300}}
        {"any": [{...}, {...}]}
        {"tz": {"zone": "America/New_York", "children": [{...}]}}
    """
    if isinstance(expr, Cond):
        body: dict = {"key": expr.key}
        body.update(rhs_to_dict(expr.rhs))
        if expr.children:
            body["children"] = [expr_to_dict(c) for c in expr.children]
        return {expr.op: body}
    if isinstance(expr, AllExpr):
        return {"all": [expr_to_dict(c) for c in expr.children]}
    if isinstance(expr, AnyExpr):
        return {"any": [expr_to_dict(c) for c in expr.children]}
    if isinstance(expr, CondExpr):
        return {"cond": [expr_to_dict(c) for c in expr.children]}
    if isinstance(expr, TzExpr):
        return {
            "tz": {
                "zone": expr.zone,
                "children": [expr_to_dict(c) for c in expr.children],
            }
        }
    raise TypeError(f"Cannot serialize {type(expr).__name__}")


__all__ = [
    "iter_nodes",
    "get_referenced_keys",
    "get_tree_depth",
    "count_nodes",
    "literal_to_plain",
    "rhs_to_dict",
    "expr_to_dict",
]
