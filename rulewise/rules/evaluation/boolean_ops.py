"""
Combinator operators for condition trees.

Handles AllExpr, AnyExpr, CondExpr and TzExpr evaluation with short-circuit
semantics. Short-circuiting decides which lazy context values get forced,
so children are always visited in declared order.

Every combinator except tz raises a scope barrier: a tz zone is visible to
its direct children only (see TimeZoneResolver).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from ..dsl_nodes import AllExpr, AnyExpr, CondExpr, TzExpr, Expr
from ..types import EvalResult, ReasonCode
from .protocols import ExprEvaluatorProtocol

if TYPE_CHECKING:
    from ..context import EvalContext


def eval_sequence(
    children: Sequence[Expr],
    ctx: "EvalContext",
    evaluator: ExprEvaluatorProtocol,
    operator: str,
) -> EvalResult:
    """
    Evaluate children as a conjunction, stopping at the first false child.

    An empty sequence is vacuously true.
    """
    for child in children:
        result = evaluator.evaluate(child, ctx)
        if not result.ok:
            return result  # Short-circuit: first failure wins
    return EvalResult.success(True, None, "", operator)


def eval_all(
    expr: AllExpr,
    ctx: "EvalContext",
    evaluator: ExprEvaluatorProtocol,
) -> EvalResult:
    """
    Evaluate AllExpr (AND) with short-circuit.

    Returns False on first failing child; empty is true.
    """
    with ctx.zones.barrier():
        return eval_sequence(expr.children, ctx, evaluator, "all")


def eval_any(
    expr: AnyExpr,
    ctx: "EvalContext",
    evaluator: ExprEvaluatorProtocol,
) -> EvalResult:
    """
    Evaluate AnyExpr (OR) with short-circuit.

    Returns True on first passing child; empty is false.
    """
    last_failure: EvalResult | None = None
    with ctx.zones.barrier():
        for child in expr.children:
            result = evaluator.evaluate(child, ctx)
            if result.ok:
                return result  # Short-circuit: first success wins
            last_failure = result
    if last_failure is not None:
        return last_failure
    return EvalResult.failure(
        ReasonCode.CONDITION_FAILED,
        "No conditions in any() were true",
        operator="any",
    )


def eval_cond_pairs(
    expr: CondExpr,
    ctx: "EvalContext",
    evaluator: ExprEvaluatorProtocol,
) -> EvalResult:
    """
    Evaluate CondExpr: first true predicate's consequence decides.

    Raises:
        MalformedCondition: If the child count is odd.
    """
    pairs = expr.pairs()
    with ctx.zones.barrier():
        for predicate, consequence in pairs:
            if evaluator.evaluate(predicate, ctx).ok:
                return evaluator.evaluate(consequence, ctx)
    return EvalResult.failure(
        ReasonCode.CONDITION_FAILED,
        "No predicate in cond() was true",
        operator="cond",
    )


def eval_tz(
    expr: TzExpr,
    ctx: "EvalContext",
    evaluator: ExprEvaluatorProtocol,
) -> EvalResult:
    """
    Evaluate TzExpr: children as implicit AND inside the zone scope.

    The scope is popped on every exit path, including raised errors.
    """
    with ctx.zones.scope(expr.zone):
        return eval_sequence(expr.children, ctx, evaluator, "tz")
