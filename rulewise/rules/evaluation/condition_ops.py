"""
Leaf condition evaluation.

Resolves the condition's key through the EvalContext (forcing lazy values)
and dispatches to the operator implementation. A leaf carrying children is
true only when its own test and every child are true; the children run
behind a scope barrier and only after the leaf test passed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..dsl_nodes import Cond
from ..eval import (
    eval_assert,
    eval_eq,
    eval_except,
    eval_ordered,
    eval_between,
    eval_in,
    eval_include,
    eval_day_of_week,
)
from ..registry import ensure_supported
from ..types import EvalResult
from .boolean_ops import eval_sequence
from .protocols import ExprEvaluatorProtocol

if TYPE_CHECKING:
    from ..context import EvalContext


def dispatch_operator(cond: Cond, ctx: "EvalContext") -> EvalResult:
    """
    Resolve the key and run the leaf test.

    Args:
        cond: Leaf condition
        ctx: Per-call context

    Returns:
        EvalResult from operator
    """
    ensure_supported(cond.op, cond.key)

    value = ctx.resolve(cond.key)
    zones = ctx.zones
    op = cond.op

    if op == "assert":
        return eval_assert(value, cond.key)
    elif op == "eq":
        return eval_eq(value, cond.rhs.value, cond.key, zones)
    elif op == "except":
        return eval_except(value, cond.rhs.value, cond.key, zones)
    elif op in ("greater_than", "greater_than_or_equal", "less_than", "less_than_or_equal"):
        return eval_ordered(op, value, cond.rhs.value, cond.key, zones)
    elif op == "between":
        return eval_between(value, cond.rhs.low, cond.rhs.high, cond.key, zones)
    elif op == "in":
        return eval_in(value, cond.rhs.values, cond.key, zones)
    elif op == "include":
        return eval_include(value, cond.rhs.value, cond.key, zones)
    else:  # day_of_week
        return eval_day_of_week(value, cond.rhs.value, cond.key, zones)


def eval_cond(
    cond: Cond,
    ctx: "EvalContext",
    evaluator: ExprEvaluatorProtocol,
) -> EvalResult:
    """Evaluate a leaf condition and, if it passes, its children."""
    result = dispatch_operator(cond, ctx)
    if not result.ok or not cond.children:
        return result
    with ctx.zones.barrier():
        nested = eval_sequence(cond.children, ctx, evaluator, cond.op)
    return result if nested.ok else nested
