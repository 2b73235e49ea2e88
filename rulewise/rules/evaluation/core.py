"""
Condition Tree Evaluator.

Evaluates condition trees against a per-call EvalContext.

Key Features:
- Short-circuit evaluation for all/any/cond (controls lazy forcing order)
- Lexical tz scopes with push/pop on every exit path
- Kind-aware operators; missing keys evaluate false, never raise

Usage:
    evaluator = ExprEvaluator()
    result = evaluator.evaluate(expr, EvalContext({"amount": 314}))
    # result is EvalResult with ok=True/False and reason code
"""

from __future__ import annotations

from typing import Any, Mapping

from ..context import EvalContext
from ..dsl_nodes import (
    Expr,
    Cond,
    AllExpr,
    AnyExpr,
    CondExpr,
    TzExpr,
)
from ..errors import MalformedCondition
from ..timezones import TimeZoneDatabase, UTC_ZONE
from ..types import EvalResult

from .boolean_ops import eval_all, eval_any, eval_cond_pairs, eval_tz
from .condition_ops import eval_cond


class ExprEvaluator:
    """
    Evaluates condition trees against an EvalContext.

    Stateless - all per-call state (lazy memo, tz scope stack) lives in the
    EvalContext, so one evaluator can serve concurrent calls.

    Example:
        evaluator = ExprEvaluator()

        cond = Cond(op="greater_than", key="amount", rhs=ScalarValue(100))
        result = evaluator.evaluate(cond, EvalContext({"amount": 150}))

        expr = AllExpr((cond1, AnyExpr((cond2, cond3))))
        result = evaluator.evaluate(expr, ctx)
    """

    def evaluate(self, expr: Expr, ctx: EvalContext) -> EvalResult:
        """
        Evaluate an expression tree against a context.

        Args:
            expr: The expression to evaluate.
            ctx: Per-call EvalContext.

        Returns:
            EvalResult with ok=True/False and reason code.

        Raises:
            MalformedCondition: Odd cond, or a node that is not a condition.
            TypeMismatch: Operands of incompatible kinds.
            InvalidTimestamp: Bad timestamp literal or unknown zone.
            ConditionNotImplemented: Reserved condition kind reached.
        """
        if isinstance(expr, Cond):
            return eval_cond(expr, ctx, self)
        elif isinstance(expr, AllExpr):
            return eval_all(expr, ctx, self)
        elif isinstance(expr, AnyExpr):
            return eval_any(expr, ctx, self)
        elif isinstance(expr, CondExpr):
            return eval_cond_pairs(expr, ctx, self)
        elif isinstance(expr, TzExpr):
            return eval_tz(expr, ctx, self)
        else:
            raise MalformedCondition(
                f"unknown expression type: {type(expr).__name__}"
            )

    def __repr__(self) -> str:
        return "ExprEvaluator()"


def evaluate_expression(
    expr: Expr,
    facts: Mapping[str, Any],
    tz_database: TimeZoneDatabase | None = None,
    default_zone: str = UTC_ZONE,
    inherit_tz_scope: bool = False,
) -> bool:
    """
    Convenience function to evaluate an expression against raw facts.

    Args:
        expr: The expression to evaluate.
        facts: Raw context mapping (may hold Lazy values).
        tz_database: Zone provider (ZoneInfoDatabase when omitted).
        default_zone: Zone for literals outside any tz scope.
        inherit_tz_scope: Let tz scopes flow through nested combinators.

    Returns:
        True if the expression holds.
    """
    ctx = EvalContext(
        facts,
        tz_database=tz_database,
        default_zone=default_zone,
        inherit_tz_scope=inherit_tz_scope,
    )
    return ExprEvaluator().evaluate(expr, ctx).ok
