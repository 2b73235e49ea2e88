"""
Rule evaluation type definitions.

Value classification, context sentinels, and evaluation result dataclasses.

Values are plain Python objects classified into a closed set of kinds:

    NUMBER    int, float, Decimal, numpy numeric scalars (never bool)
    TEXT      str that is not shaped like a timestamp literal
    SYMBOL    Symbol("friday") - compares equal to Text with the same label
    BOOL      bool, numpy.bool_
    TEMPORAL  datetime, or str shaped like "YYYY-MM-DDT..."
    COLLECTION list, tuple, set, frozenset
    LAZY      Lazy(thunk) or any bare callable
    MISSING   None or NaN
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import IntEnum, auto
from typing import Any, Callable

import numpy as np


# Anything starting like a date-time literal is treated as a timestamp.
# Strict field validation happens in the timestamp parser.
TIMESTAMP_SHAPE = re.compile(r"^\d{4}-\d{2}-\d{2}T")


# =============================================================================
# Sentinels and wrapper values
# =============================================================================

class _Absent:
    """Sentinel for a key that is not mapped in the context."""

    _instance: "_Absent | None" = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()


@dataclass(frozen=True)
class Symbol:
    """
    A symbolic label (enum-like token).

    Symbols compare equal to Text values carrying the same label, so
    Symbol("friday") and "friday" are interchangeable in conditions.
    """
    name: str

    def __post_init__(self):
        if not self.name:
            raise ValueError("Symbol: name is required")

    def __repr__(self) -> str:
        return f":{self.name}"


class Lazy:
    """
    A deferred context value.

    The thunk is invoked at most once per evaluation call, the first time a
    condition resolves the key it is stored under.

    Examples:
        context = {"balance": Lazy(lambda: account.fetch_balance())}
    """

    __slots__ = ("thunk", "label")

    def __init__(self, thunk: Callable[[], Any], label: str | None = None):
        if not callable(thunk):
            raise TypeError(f"Lazy: thunk must be callable, got {type(thunk).__name__}")
        self.thunk = thunk
        self.label = label

    def force(self) -> Any:
        return self.thunk()

    def __repr__(self) -> str:
        return f"Lazy({self.label or getattr(self.thunk, '__name__', 'thunk')})"


def is_lazy(value: Any) -> bool:
    """Check whether a raw context value must be forced before use."""
    if isinstance(value, Lazy):
        return True
    return callable(value) and not isinstance(value, type)


# =============================================================================
# Value classification
# =============================================================================

class ValueType(IntEnum):
    """Value kinds used by operator type checks."""

    UNKNOWN = 0
    NUMBER = auto()
    TEXT = auto()
    SYMBOL = auto()
    BOOL = auto()
    TEMPORAL = auto()
    COLLECTION = auto()
    LAZY = auto()
    MISSING = auto()  # None or NaN
    ABSENT = auto()  # key not mapped

    @classmethod
    def from_value(cls, value: Any) -> "ValueType":
        """
        Determine ValueType from a Python value.

        Args:
            value: Any Python value

        Returns:
            Appropriate ValueType enum
        """
        if value is ABSENT:
            return cls.ABSENT
        if value is None:
            return cls.MISSING
        if isinstance(value, (bool, np.bool_)):
            return cls.BOOL
        if isinstance(value, (int, Decimal, np.integer)):
            return cls.NUMBER
        if isinstance(value, (float, np.floating)):
            if math.isnan(value):
                return cls.MISSING
            return cls.NUMBER
        if isinstance(value, Symbol):
            return cls.SYMBOL
        if isinstance(value, str):
            if TIMESTAMP_SHAPE.match(value):
                return cls.TEMPORAL
            return cls.TEXT
        if isinstance(value, datetime):
            return cls.TEMPORAL
        if isinstance(value, (list, tuple, set, frozenset)):
            return cls.COLLECTION
        if is_lazy(value):
            return cls.LAZY
        return cls.UNKNOWN

    @property
    def is_label(self) -> bool:
        """Text and Symbol compare by label."""
        return self in (ValueType.TEXT, ValueType.SYMBOL)

    @property
    def is_orderable(self) -> bool:
        return self in (ValueType.NUMBER, ValueType.TEMPORAL)


def label_of(value: Any) -> str:
    """Label string for a Text or Symbol value."""
    if isinstance(value, Symbol):
        return value.name
    return str(value)


# =============================================================================
# Evaluation results
# =============================================================================

class ReasonCode(IntEnum):
    """
    Reason codes for condition evaluation outcomes.

    These are machine-readable for logging/debugging. Hard errors
    (type mismatch, malformed tree, bad timestamp) are raised, not encoded.
    """

    OK = 0  # Condition evaluated cleanly to true/false
    MISSING_VALUE = auto()  # Referenced key absent or nil
    CONDITION_FAILED = auto()  # Combinator not satisfied (any(), cond, etc.)


@dataclass(frozen=True)
class EvalResult:
    """
    Result of a condition evaluation.

    Contains:
    - ok: Whether condition evaluated to true
    - reason: Why it evaluated this way
    - key/operator/rhs_repr: What was evaluated, for traces
    """

    ok: bool
    reason: ReasonCode
    key: str | None = None
    rhs_repr: str | None = None
    operator: str | None = None
    message: str | None = None

    @classmethod
    def success(
        cls,
        ok: bool,
        key: str | None,
        rhs_repr: str,
        operator: str,
    ) -> "EvalResult":
        """Create a clean evaluation result."""
        return cls(
            ok=ok,
            reason=ReasonCode.OK,
            key=key,
            rhs_repr=rhs_repr,
            operator=operator,
        )

    @classmethod
    def failure(
        cls,
        reason: ReasonCode,
        message: str,
        key: str | None = None,
        rhs_repr: str | None = None,
        operator: str | None = None,
    ) -> "EvalResult":
        """Create a failure result (condition not met, never an error)."""
        return cls(
            ok=False,
            reason=reason,
            key=key,
            rhs_repr=rhs_repr,
            operator=operator,
            message=message,
        )

    def __bool__(self) -> bool:
        return self.ok

    def describe(self) -> str:
        """One-line description: 'amount greater_than_or_equal 300 = PASS'."""
        status = "PASS" if self.ok else "FAIL"
        parts = [p for p in (self.key, self.operator, self.rhs_repr) if p]
        text = " ".join(parts) if parts else "?"
        if self.message and not self.ok:
            return f"{text} = {status} ({self.message})"
        return f"{text} = {status}"

    def to_dict(self) -> dict:
        """Convert to dict for logging/serialization."""
        return {
            "ok": self.ok,
            "reason": self.reason.name,
            "key": self.key,
            "rhs_repr": self.rhs_repr,
            "operator": self.operator,
            "message": self.message,
        }


@dataclass
class OutcomeTrace:
    """Trace of a single outcome guard evaluation."""
    outcome_index: int
    matched: bool
    result: EvalResult | None  # None for unconditional outcomes


@dataclass
class EvaluationTrace:
    """Full trace of one RuleSet call for verbose logging."""
    guard_result: EvalResult | None
    outcome_traces: list[OutcomeTrace]
    matched_outcome: int | None
    value: Any

    def format_lines(self) -> list[str]:
        """Format trace as human-readable log lines (no prefix - caller adds it)."""
        lines: list[str] = []
        if self.guard_result is not None:
            lines.append(f"GUARD: {self.guard_result.describe()}")
            if not self.guard_result.ok:
                lines.append(f"FALLBACK: guard failed -> {self.value!r}")
                return lines
        for ot in self.outcome_traces:
            desc = ot.result.describe() if ot.result is not None else "unconditional"
            status = "MATCH" if ot.matched else "skip"
            lines.append(f"OUTCOME[{ot.outcome_index}] {status}: {desc}")
        if self.matched_outcome is None:
            lines.append(f"FALLBACK: no outcome matched -> {self.value!r}")
        else:
            lines.append(f"RESULT: outcome[{self.matched_outcome}] -> {self.value!r}")
        return lines
