"""
DSL Type Aliases for the condition tree.

Placed in a separate module to avoid circular imports.
"""

from __future__ import annotations

from .condition import Cond
from .boolean import AllExpr, AnyExpr, CondExpr, TzExpr


# All node types that can appear in a condition tree
Expr = AllExpr | AnyExpr | CondExpr | TzExpr | Cond

COMBINATOR_TYPES = (AllExpr, AnyExpr, CondExpr, TzExpr)


__all__ = [
    "Expr",
    "COMBINATOR_TYPES",
]
