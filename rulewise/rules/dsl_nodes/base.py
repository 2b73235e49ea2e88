"""
DSL Base Node Types for the condition tree.

This module defines the literal operand nodes bound by leaf conditions:
- ScalarValue: Single literal (number, text, symbol, bool, timestamp)
- RangeValue: Inclusive bounds for 'between'
- ListValue: Literal set for 'in'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


# =============================================================================
# Value Nodes
# =============================================================================

@dataclass(frozen=True)
class ScalarValue:
    """
    A literal scalar operand.

    Attributes:
        value: Number, str, Symbol, bool, datetime, or timestamp literal

    Examples:
        ScalarValue(300)                       # amount threshold
        ScalarValue(Symbol("friday"))          # symbolic label
        ScalarValue("2015-01-01T00:00:00")     # timestamp literal
    """
    value: Any

    def __repr__(self) -> str:
        return f"Scalar({self.value!r})"


@dataclass(frozen=True)
class RangeValue:
    """
    A range for the 'between' operator.

    Attributes:
        low: Lower bound (inclusive)
        high: Upper bound (inclusive)

    Semantics: low <= value <= high

    Bound order is the author's responsibility and is not validated;
    reversed bounds simply never match.

    Examples:
        RangeValue(low=100, high=299)
        RangeValue(low="2015-12-01T00:00:00", high="2015-12-24T23:59:59")
    """
    low: Any
    high: Any

    def __repr__(self) -> str:
        return f"Range({self.low!r}, {self.high!r})"


@dataclass(frozen=True)
class ListValue:
    """
    A set of literals for the 'in' operator.

    Attributes:
        values: Tuple of allowed values (frozen for immutability)

    An empty set never matches.

    Examples:
        ListValue(("gold", "platinum"))
        ListValue((1, 2, 3))
    """
    values: tuple[Any, ...]

    def __post_init__(self):
        """Freeze list input into a tuple."""
        if not isinstance(self.values, tuple):
            object.__setattr__(self, "values", tuple(self.values))

    def __repr__(self) -> str:
        return f"List({list(self.values)!r})"


# RHS type for leaf conditions
RhsValue = Union[ScalarValue, RangeValue, ListValue]


__all__ = [
    "ScalarValue",
    "RangeValue",
    "ListValue",
    "RhsValue",
]
