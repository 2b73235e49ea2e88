"""
DSL Combinator Nodes for the condition tree.

This module defines the combinator nodes:
- AllExpr: AND expression (all children must be true, empty is true)
- AnyExpr: OR expression (any child must be true, empty is false)
- CondExpr: ordered (predicate, consequence) pairs
- TzExpr: lexical time zone scope
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..errors import MalformedCondition

if TYPE_CHECKING:
    from .types import Expr


def _freeze(node, children) -> None:
    if not isinstance(children, tuple):
        object.__setattr__(node, "children", tuple(children))


# =============================================================================
# Boolean Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class AllExpr:
    """
    AND expression: All children must be true.

    Short-circuit evaluation: First false result stops evaluation.
    An empty AllExpr is vacuously true.

    Examples:
        AllExpr((cond1, cond2, cond3))  # cond1 AND cond2 AND cond3
    """
    children: tuple["Expr", ...] = ()

    def __post_init__(self):
        _freeze(self, self.children)

    def __repr__(self) -> str:
        children_str = ", ".join(repr(c) for c in self.children)
        return f"All({children_str})"


@dataclass(frozen=True)
class AnyExpr:
    """
    OR expression: Any child must be true.

    Short-circuit evaluation: First true result stops evaluation.
    An empty AnyExpr is false.

    Examples:
        AnyExpr((cond1, cond2))  # cond1 OR cond2
    """
    children: tuple["Expr", ...] = ()

    def __post_init__(self):
        _freeze(self, self.children)

    def __repr__(self) -> str:
        children_str = ", ".join(repr(c) for c in self.children)
        return f"Any({children_str})"


@dataclass(frozen=True)
class CondExpr:
    """
    Ordered predicate/consequence pairs.

    Children are read as (p1, c1, p2, c2, ...). The first true predicate
    decides: its consequence's result is the node's result. Consequences
    of false predicates are never evaluated. No true predicate -> false.

    An odd number of children is malformed; evaluation raises
    MalformedCondition.

    Examples:
        # if member: amount >= 50, elif vip: true-ish, else false
        CondExpr((is_member, min_50, is_vip, always))
    """
    children: tuple["Expr", ...] = ()

    def __post_init__(self):
        _freeze(self, self.children)

    @property
    def is_well_formed(self) -> bool:
        return len(self.children) % 2 == 0

    def pairs(self) -> list[tuple["Expr", "Expr"]]:
        """Return (predicate, consequence) pairs."""
        if not self.is_well_formed:
            raise MalformedCondition(
                f"requires an even number of children, got {len(self.children)}",
                kind="cond",
            )
        it = iter(self.children)
        return list(zip(it, it))

    def __repr__(self) -> str:
        children_str = ", ".join(repr(c) for c in self.children)
        return f"Cond({children_str})"


@dataclass(frozen=True)
class TzExpr:
    """
    Lexical time zone scope.

    Timestamp literals and naive datetimes evaluated by leaves directly
    inside this node are interpreted in `zone`. Several children are an
    implicit AllExpr.

    Attributes:
        zone: Zone identifier (e.g., "America/New_York")
        children: Scoped conditions

    Examples:
        TzExpr("America/New_York", (Cond(op="eq", key="timestamp",
               rhs=ScalarValue("2015-01-01T00:00:00")),))
    """
    zone: str
    children: tuple["Expr", ...] = ()

    def __post_init__(self):
        """Validate TzExpr parameters."""
        if not self.zone:
            raise MalformedCondition("zone identifier is required", kind="tz")
        _freeze(self, self.children)

    def __repr__(self) -> str:
        children_str = ", ".join(repr(c) for c in self.children)
        return f"Tz({self.zone!r}, {children_str})"


__all__ = [
    "AllExpr",
    "AnyExpr",
    "CondExpr",
    "TzExpr",
]
