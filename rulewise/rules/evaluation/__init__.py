"""
Condition Tree Evaluation Package.

This package provides the evaluator for condition trees:

- core.py: ExprEvaluator class and main evaluate() dispatch
- boolean_ops.py: AllExpr, AnyExpr, CondExpr, TzExpr evaluation
- condition_ops.py: Cond (leaf) evaluation and operator dispatch

Usage:
    from rulewise.rules.evaluation import ExprEvaluator

    evaluator = ExprEvaluator()
    result = evaluator.evaluate(expr, EvalContext(facts))
"""

from .core import ExprEvaluator, evaluate_expression

__all__ = [
    "ExprEvaluator",
    "evaluate_expression",
]
