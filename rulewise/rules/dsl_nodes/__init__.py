"""
DSL Node Types for the condition tree.

Nodes are frozen dataclasses: a tree is built once and evaluated many
times, and cannot contain cycles.

Node Categories:
- Literal operands: ScalarValue, RangeValue, ListValue
- Leaf conditions: Cond (assert, eq, except, comparisons, between, in,
  include, day_of_week, in_cyclic_order)
- Combinators: AllExpr, AnyExpr, CondExpr, TzExpr

Type Hierarchy:
    Expr = AllExpr | AnyExpr | CondExpr | TzExpr | Cond

Usage:
    # amount >= 300 AND (tier is gold OR tier is platinum)
    expr = AllExpr((
        Cond(op="greater_than_or_equal", key="amount", rhs=ScalarValue(300)),
        AnyExpr((
            Cond(op="eq", key="tier", rhs=ScalarValue("gold")),
            Cond(op="eq", key="tier", rhs=ScalarValue("platinum")),
        )),
    ))
"""

# Constants
from .constants import (
    COMPARISON_KINDS,
    EQUALITY_KINDS,
    LEAF_KINDS,
    COMBINATOR_KINDS,
    ALL_KINDS,
    KIND_ALIASES,
    WEEKDAY_NAMES,
    WEEKDAY_INDEX,
)

# Literal operand nodes
from .base import (
    ScalarValue,
    RangeValue,
    ListValue,
    RhsValue,
)

# Leaf condition node
from .condition import Cond, weekday_literal_index

# Combinator nodes
from .boolean import (
    AllExpr,
    AnyExpr,
    CondExpr,
    TzExpr,
)

# Type aliases
from .types import Expr, COMBINATOR_TYPES

# Utility functions
from .utils import (
    iter_nodes,
    get_referenced_keys,
    get_tree_depth,
    count_nodes,
    literal_to_plain,
    rhs_to_dict,
    expr_to_dict,
)


__all__ = [
    # Constants
    "COMPARISON_KINDS",
    "EQUALITY_KINDS",
    "LEAF_KINDS",
    "COMBINATOR_KINDS",
    "ALL_KINDS",
    "KIND_ALIASES",
    "WEEKDAY_NAMES",
    "WEEKDAY_INDEX",
    # Literal operand nodes
    "ScalarValue",
    "RangeValue",
    "ListValue",
    "RhsValue",
    # Leaf condition node
    "Cond",
    "weekday_literal_index",
    # Combinator nodes
    "AllExpr",
    "AnyExpr",
    "CondExpr",
    "TzExpr",
    # Type aliases
    "Expr",
    "COMBINATOR_TYPES",
    # Utility functions
    "iter_nodes",
    "get_referenced_keys",
    "get_tree_depth",
    "count_nodes",
    "literal_to_plain",
    "rhs_to_dict",
    "expr_to_dict",
]
