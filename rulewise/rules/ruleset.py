"""
RuleSet: first-match outcome dispatch over condition trees.

Provides deterministic, first-match execution semantics for decision tables.

Key Concepts:
- Condition: a top-level guard; if any top-level condition fails, the
  fallback is returned without looking at outcomes
- Outcome: a value and an optional guard (no guard = always matches)
- Fallback: the value returned when nothing matches
- First-match: outcomes are evaluated in order, first true guard wins

Usage:
    ruleset = RuleSet(
        conditions=(Cond(op="eq", key="day_of_week", rhs=ScalarValue("friday")),),
        outcomes=(
            Outcome(8, when=Cond(op="greater_than_or_equal", key="amount",
                                 rhs=ScalarValue(300))),
            Outcome(7, when=Cond(op="greater_than_or_equal", key="amount",
                                 rhs=ScalarValue(100))),
            Outcome(3),
        ),
        fallback=0,
    )

    ruleset.call({"day_of_week": "friday", "amount": 314})  # 8
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from .context import EvalContext
from .dsl_nodes import AllExpr, Expr, expr_to_dict
from .dsl_nodes.utils import literal_to_plain
from .evaluation import ExprEvaluator
from .timezones import TimeZoneDatabase, ZoneInfoDatabase
from .types import EvalResult, EvaluationTrace, OutcomeTrace

logger = logging.getLogger(__name__)


# =============================================================================
# Data Structures
# =============================================================================

@dataclass(frozen=True)
class Outcome:
    """
    A candidate result of a RuleSet.

    Attributes:
        value: Value returned when this outcome is selected
        when: Guard expression (None = unconditional)

    First-match semantics: Outcomes are evaluated in order within a RuleSet.
    The first Outcome whose guard evaluates to true wins.
    """
    value: Any
    when: Expr | None = None

    @property
    def is_unconditional(self) -> bool:
        return self.when is None

    def __repr__(self) -> str:
        if self.when is None:
            return f"Outcome({self.value!r})"
        return f"Outcome({self.value!r}, when={self.when!r})"

    def to_dict(self) -> dict:
        """Serialize to dict."""
        result: dict = {"value": literal_to_plain(self.value)}
        if self.when is not None:
            result["when"] = [expr_to_dict(self.when)]
        return result


@dataclass(frozen=True)
class Decision:
    """
    The result of one RuleSet evaluation.

    Attributes:
        value: Selected outcome value or the fallback
        matched_outcome: Index of the selected outcome, None for fallback
        guard_passed: Whether the top-level conditions held
        forced_keys: Lazy context keys forced during the call, in order
        trace: Per-outcome results when tracing was requested
    """
    value: Any
    matched_outcome: int | None
    guard_passed: bool
    forced_keys: tuple[str, ...] = ()
    trace: EvaluationTrace | None = None

    @property
    def is_fallback(self) -> bool:
        return self.matched_outcome is None


# =============================================================================
# RuleSet
# =============================================================================

@dataclass(frozen=True)
class RuleSet:
    """
    An immutable decision table.

    Attributes:
        conditions: Top-level guard conditions (implicit AND, may be empty)
        outcomes: Ordered outcomes
        fallback: Value returned when nothing matches
        name: Label used in logs
        tz_database: Zone provider (ZoneInfoDatabase when omitted)
        default_zone: Zone outside tz scopes (config default when omitted)
        inherit_tz_scope: tz visibility mode (config default when omitted)

    Thread-safe: every call builds its own EvalContext, so lazy memoization
    and tz scope stacks are never shared between calls.

    Example:
        ruleset = RuleSet(outcomes=(Outcome("gold", when=is_vip),), fallback="basic")
        ruleset.call({"vip": True})   # "gold"
        ruleset({"vip": False})       # "basic"
    """
    conditions: tuple[Expr, ...] = ()
    outcomes: tuple[Outcome, ...] = ()
    fallback: Any = None
    name: str = "ruleset"
    tz_database: TimeZoneDatabase | None = field(default=None, compare=False, repr=False)
    default_zone: str | None = None
    inherit_tz_scope: bool | None = None

    def __post_init__(self):
        """Freeze sequences and resolve configured defaults."""
        if not isinstance(self.conditions, tuple):
            object.__setattr__(self, "conditions", tuple(self.conditions))
        if not isinstance(self.outcomes, tuple):
            object.__setattr__(self, "outcomes", tuple(self.outcomes))
        for i, outcome in enumerate(self.outcomes):
            if not isinstance(outcome, Outcome):
                raise TypeError(
                    f"RuleSet: outcomes[{i}] must be Outcome, got {type(outcome).__name__}"
                )

        if self.default_zone is None or self.inherit_tz_scope is None:
            from ..config import get_config
            evaluation = get_config().evaluation
            if self.default_zone is None:
                object.__setattr__(self, "default_zone", evaluation.default_zone)
            if self.inherit_tz_scope is None:
                object.__setattr__(self, "inherit_tz_scope", evaluation.inherit_tz_scope)
        if self.tz_database is None:
            object.__setattr__(self, "tz_database", ZoneInfoDatabase())

    @property
    def guard(self) -> Expr | None:
        """Top-level guard: None, the single condition, or an implicit AND."""
        if not self.conditions:
            return None
        if len(self.conditions) == 1:
            return self.conditions[0]
        return AllExpr(self.conditions)

    def new_context(self, facts: Mapping[str, Any]) -> EvalContext:
        """Build a fresh per-call context over raw facts."""
        return EvalContext(
            facts,
            tz_database=self.tz_database,
            default_zone=self.default_zone,
            inherit_tz_scope=self.inherit_tz_scope,
        )

    def call(self, context: Mapping[str, Any]) -> Any:
        """
        Evaluate against a fact mapping and return the selected value.

        Args:
            context: Raw facts; values may be Lazy and are forced at most once.

        Returns:
            First matching outcome's value, or the fallback.
        """
        return self.decide(context).value

    __call__ = call

    def decide(self, context: Mapping[str, Any], trace: bool = False) -> Decision:
        """
        Evaluate and return the full Decision.

        Execution:
            1. Evaluate top-level conditions; if false, return fallback
            2. Evaluate each outcome's guard in order
            3. First outcome whose guard holds (or has none): return its value
            4. No outcome matched: return fallback

        Args:
            context: Raw facts.
            trace: Record per-outcome EvalResults in Decision.trace.
        """
        ctx = self.new_context(context)
        evaluator = _EVALUATOR
        outcome_traces: list[OutcomeTrace] = []

        guard_result: EvalResult | None = None
        guard = self.guard
        if guard is not None:
            guard_result = evaluator.evaluate(guard, ctx)
            if not guard_result.ok:
                return self._finish(ctx, None, False, guard_result, outcome_traces, trace)

        for index, outcome in enumerate(self.outcomes):
            if outcome.when is None:
                outcome_traces.append(OutcomeTrace(index, True, None))
                return self._finish(ctx, index, True, guard_result, outcome_traces, trace)
            result = evaluator.evaluate(outcome.when, ctx)
            outcome_traces.append(OutcomeTrace(index, result.ok, result))
            if result.ok:
                # First match wins - later guards are never evaluated
                return self._finish(ctx, index, True, guard_result, outcome_traces, trace)

        return self._finish(ctx, None, True, guard_result, outcome_traces, trace)

    def _finish(
        self,
        ctx: EvalContext,
        matched: int | None,
        guard_passed: bool,
        guard_result: EvalResult | None,
        outcome_traces: list[OutcomeTrace],
        trace: bool,
    ) -> Decision:
        value = self.fallback if matched is None else self.outcomes[matched].value
        evaluation_trace = None
        if trace:
            evaluation_trace = EvaluationTrace(
                guard_result=guard_result,
                outcome_traces=outcome_traces,
                matched_outcome=matched,
                value=value,
            )
        if logger.isEnabledFor(logging.DEBUG):
            source = "fallback" if matched is None else f"outcome[{matched}]"
            logger.debug(
                "%s: %s -> %r (forced=%s)", self.name, source, value, list(ctx.forced_keys)
            )
        return Decision(
            value=value,
            matched_outcome=matched,
            guard_passed=guard_passed,
            forced_keys=ctx.forced_keys,
            trace=evaluation_trace,
        )

    def __repr__(self) -> str:
        return (
            f"RuleSet({self.name!r}, {len(self.conditions)} conditions, "
            f"{len(self.outcomes)} outcomes, fallback={self.fallback!r})"
        )

    def to_dict(self) -> dict:
        """Serialize to the YAML document format."""
        result: dict = {"name": self.name}
        if self.conditions:
            result["conditions"] = [expr_to_dict(c) for c in self.conditions]
        result["outcomes"] = [o.to_dict() for o in self.outcomes]
        result["fallback"] = literal_to_plain(self.fallback)
        if self.default_zone:
            result["default_zone"] = self.default_zone
        return result


_EVALUATOR = ExprEvaluator()


__all__ = [
    "Outcome",
    "Decision",
    "RuleSet",
]
