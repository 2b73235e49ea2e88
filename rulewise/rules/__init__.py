"""
Decision-table rules engine.

Condition trees are immutable nodes evaluated against a per-call context.
A RuleSet guards a list of outcomes and returns the first one that matches,
or its fallback.

Design principles:
- Trees are frozen and acyclic; per-call state lives in EvalContext
- Lazy context values are forced at most once per call, only when reached
- Kind-aware comparisons with actionable errors (TypeMismatch, InvalidTimestamp)
- Missing keys make a leaf false, never raise
- Reserved kinds fail loudly (ConditionNotImplemented)
"""

from .types import (
    ABSENT,
    Symbol,
    Lazy,
    ValueType,
    ReasonCode,
    EvalResult,
    OutcomeTrace,
    EvaluationTrace,
)
from .errors import (
    RuleError,
    MalformedCondition,
    TypeMismatch,
    InvalidTimestamp,
    ConditionNotImplemented,
)
from .timezones import (
    UTC_ZONE,
    TimeZoneDatabase,
    ZoneInfoDatabase,
    FixedOffsetDatabase,
    TimeZoneResolver,
    parse_timestamp,
)
from .context import EvalContext
from .dsl_nodes import (
    Expr,
    Cond,
    AllExpr,
    AnyExpr,
    CondExpr,
    TzExpr,
    ScalarValue,
    RangeValue,
    ListValue,
    expr_to_dict,
)
from .registry import (
    OperatorSpec,
    OPERATOR_REGISTRY,
    SUPPORTED_KINDS,
    get_operator_spec,
    get_canonical_kind,
)
from .evaluation import ExprEvaluator, evaluate_expression
from .ruleset import Outcome, Decision, RuleSet
from .builder import RuleSetBuilder
from .dsl_parser import parse_expr, parse_ruleset, load_ruleset
from .batch import apply_ruleset, decide_frame

__all__ = [
    # Values
    "ABSENT",
    "Symbol",
    "Lazy",
    "ValueType",
    # Results
    "ReasonCode",
    "EvalResult",
    "OutcomeTrace",
    "EvaluationTrace",
    # Errors
    "RuleError",
    "MalformedCondition",
    "TypeMismatch",
    "InvalidTimestamp",
    "ConditionNotImplemented",
    # Time zones
    "UTC_ZONE",
    "TimeZoneDatabase",
    "ZoneInfoDatabase",
    "FixedOffsetDatabase",
    "TimeZoneResolver",
    "parse_timestamp",
    # Context
    "EvalContext",
    # Nodes
    "Expr",
    "Cond",
    "AllExpr",
    "AnyExpr",
    "CondExpr",
    "TzExpr",
    "ScalarValue",
    "RangeValue",
    "ListValue",
    "expr_to_dict",
    # Registry
    "OperatorSpec",
    "OPERATOR_REGISTRY",
    "SUPPORTED_KINDS",
    "get_operator_spec",
    "get_canonical_kind",
    # Evaluation
    "ExprEvaluator",
    "evaluate_expression",
    # RuleSets
    "Outcome",
    "Decision",
    "RuleSet",
    "RuleSetBuilder",
    "parse_expr",
    "parse_ruleset",
    "load_ruleset",
    "apply_ruleset",
    "decide_frame",
]
