"""
Rule evaluation errors.

Every error raised by tree construction or evaluation derives from RuleError.
Each concrete error also derives from the matching builtin exception so
callers that only know about ValueError/TypeError still catch them.

Missing context keys are NOT errors: a leaf referencing an absent key simply
evaluates false. Exceptions raised by lazy context values are never wrapped;
they propagate out of the evaluation unchanged.
"""

from __future__ import annotations


class RuleError(Exception):
    """Base class for all rule construction and evaluation errors."""

    def __init__(self, message: str, kind: str | None = None, key: str | None = None):
        self.kind = kind
        self.key = key
        prefix = ""
        if kind and key:
            prefix = f"{kind}({key}): "
        elif kind:
            prefix = f"{kind}: "
        super().__init__(f"{prefix}{message}")


class MalformedCondition(RuleError, ValueError):
    """Condition tree is structurally invalid (odd cond, unknown kind, bad operands)."""


class TypeMismatch(RuleError, TypeError):
    """Operands are not mutually comparable or have the wrong shape."""


class InvalidTimestamp(RuleError, ValueError):
    """Timestamp literal is malformed or names a zone unknown to the provider."""


class ConditionNotImplemented(RuleError, NotImplementedError):
    """Condition kind is reserved but has no defined semantics."""


__all__ = [
    "RuleError",
    "MalformedCondition",
    "TypeMismatch",
    "InvalidTimestamp",
    "ConditionNotImplemented",
]
