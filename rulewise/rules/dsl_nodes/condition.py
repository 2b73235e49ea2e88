"""
DSL Condition Node for the condition tree.

This module defines the Cond class for leaf conditions and the weekday
literal normalization shared with evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..errors import MalformedCondition
from ..types import Symbol, ValueType
from .base import ScalarValue, RangeValue, ListValue, RhsValue
from .constants import LEAF_KINDS, WEEKDAY_INDEX

if TYPE_CHECKING:
    from .types import Expr


def weekday_literal_index(literal: Any) -> int:
    """
    Normalize a day_of_week literal to Sunday=0 .. Saturday=6.

    Accepts integers 0-6, weekday names ("saturday", "Sat"), and Symbols.

    Raises:
        MalformedCondition: If the literal names no weekday.
    """
    if isinstance(literal, bool):
        raise MalformedCondition(f"invalid weekday literal {literal!r}", kind="day_of_week")
    if isinstance(literal, int):
        if 0 <= literal <= 6:
            return literal
        raise MalformedCondition(
            f"weekday index must be 0 (Sunday) to 6 (Saturday), got {literal}",
            kind="day_of_week",
        )
    if isinstance(literal, Symbol):
        literal = literal.name
    if isinstance(literal, str):
        index = WEEKDAY_INDEX.get(literal.strip().lower())
        if index is not None:
            return index
    raise MalformedCondition(f"invalid weekday literal {literal!r}", kind="day_of_week")


# =============================================================================
# Condition Node
# =============================================================================

@dataclass(frozen=True)
class Cond:
    """
    A leaf condition testing one context key.

    Attributes:
        op: Canonical leaf kind (from LEAF_KINDS)
        key: Context key the condition resolves
        rhs: Literal operand (None for 'assert')
        children: Optional nested conditions; the node is true only if the
            leaf test AND every child is true

    Examples:
        # amount >= 300
        Cond(op="greater_than_or_equal", key="amount", rhs=ScalarValue(300))

        # tier in {gold, platinum}
        Cond(op="in", key="tier", rhs=ListValue(("gold", "platinum")))

        # 100 <= amount <= 299
        Cond(op="between", key="amount", rhs=RangeValue(low=100, high=299))

        # member flag set, and then some
        Cond(op="assert", key="member", children=(other_cond,))
    """
    op: str
    key: str
    rhs: RhsValue | None = None
    children: tuple["Expr", ...] = ()

    def __post_init__(self):
        """Validate condition parameters."""
        from ..registry import OpCategory, OperandShape, get_operator_spec

        if self.op not in LEAF_KINDS:
            raise MalformedCondition(
                f"unknown leaf condition '{self.op}'. "
                f"Valid kinds: {sorted(LEAF_KINDS)}"
            )
        if not self.key:
            raise MalformedCondition("key is required", kind=self.op)
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))

        spec = get_operator_spec(self.op)
        shape = spec.shape
        if shape is OperandShape.NONE and self.rhs is not None:
            raise MalformedCondition("takes no literal operand", kind=self.op, key=self.key)
        if shape is OperandShape.SCALAR and not isinstance(self.rhs, ScalarValue):
            raise MalformedCondition(
                f"requires ScalarValue, got {type(self.rhs).__name__}",
                kind=self.op, key=self.key,
            )
        if shape is OperandShape.RANGE and not isinstance(self.rhs, RangeValue):
            raise MalformedCondition(
                f"requires RangeValue, got {type(self.rhs).__name__}",
                kind=self.op, key=self.key,
            )
        if shape is OperandShape.LIST and not isinstance(self.rhs, ListValue):
            raise MalformedCondition(
                f"requires ListValue, got {type(self.rhs).__name__}",
                kind=self.op, key=self.key,
            )

        if spec.category is OpCategory.ORDERABLE and spec.supported:
            literals = (
                (self.rhs.low, self.rhs.high) if shape is OperandShape.RANGE else (self.rhs.value,)
            )
            for literal in literals:
                if not ValueType.from_value(literal).is_orderable:
                    raise MalformedCondition(
                        f"requires a number or timestamp literal, got {literal!r}",
                        kind=self.op, key=self.key,
                    )

        if self.op == "day_of_week":
            weekday_literal_index(self.rhs.value)

    def __repr__(self) -> str:
        rhs = "" if self.rhs is None else f" {self.rhs}"
        if self.children:
            return f"Cond({self.key} {self.op}{rhs}, children={list(self.children)})"
        return f"Cond({self.key} {self.op}{rhs})"


__all__ = [
    "Cond",
    "weekday_literal_index",
]
