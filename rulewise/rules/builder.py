"""
RuleSetBuilder: explicit-stack construction of decision tables.

Every leaf or combinator method appends a mutable frame to the current
parent and returns a handle. Entering the handle with `with` pushes its frame
on the builder's stack, so calls made inside the block become its children.
build() freezes the frames into immutable nodes.

Usage:
    b = RuleSetBuilder(name="pricing")
    b.eq("friday", "day_of_week")          # top-level condition

    with b.outcome(8):
        b.greater_than_or_equal(300, "amount")
    with b.outcome(7):
        b.between(100, 299, "amount")
    b.outcome(3)                           # unconditional

    b.fallback(0)
    ruleset = b.build()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from .dsl_nodes import (
    AllExpr,
    AnyExpr,
    Cond,
    CondExpr,
    Expr,
    ListValue,
    RangeValue,
    ScalarValue,
    TzExpr,
)
from .errors import MalformedCondition
from .registry import OperandShape, get_canonical_kind, get_operator_spec
from .ruleset import Outcome, RuleSet
from .timezones import TimeZoneDatabase


# =============================================================================
# Frames
# =============================================================================

@dataclass
class _Frame:
    """Mutable node under construction."""
    kind: str
    key: Optional[str] = None
    rhs: Any = None
    zone: Optional[str] = None
    value: Any = None
    children: list = field(default_factory=list)


class NodeHandle:
    """
    Returned by every builder method.

    Use as a context manager to add children to the node:

        with b.any():
            b.eq("gold", "tier")
            b.eq("platinum", "tier")
    """

    def __init__(self, builder: "RuleSetBuilder", frame: _Frame):
        self._builder = builder
        self._frame = frame

    @property
    def kind(self) -> str:
        return self._frame.kind

    def __enter__(self) -> "NodeHandle":
        self._builder._stack.append(self._frame)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        stack = self._builder._stack
        if stack and stack[-1] is self._frame:
            stack.pop()
            return
        if exc_type is None:
            raise MalformedCondition(
                "builder stack out of order on exit", kind=self._frame.kind
            )
        # Error path: drop this frame and anything left open above it
        for index in range(len(stack) - 1, -1, -1):
            if stack[index] is self._frame:
                del stack[index:]
                break

    def __repr__(self) -> str:
        return f"NodeHandle({self._frame.kind!r})"


# =============================================================================
# Builder
# =============================================================================

class RuleSetBuilder:
    """
    Builds a RuleSet through explicit frames on a stack.

    Literal operands come first and the context key last, e.g.
    between(100, 299, "amount"). Conditions added outside any outcome are
    top-level conditions (implicit AND).
    """

    def __init__(
        self,
        name: str = "ruleset",
        tz_database: TimeZoneDatabase | None = None,
        default_zone: str | None = None,
        inherit_tz_scope: bool | None = None,
    ):
        self.name = name
        self._tz_database = tz_database
        self._default_zone = default_zone
        self._inherit_tz_scope = inherit_tz_scope
        self._root = _Frame(kind="conditions")
        self._outcomes: list[_Frame] = []
        self._fallback: Any = None
        self._stack: list[_Frame] = [self._root]

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    @property
    def depth(self) -> int:
        """Number of open frames above the top level."""
        return len(self._stack) - 1

    def _append(self, frame: _Frame) -> NodeHandle:
        self._stack[-1].children.append(frame)
        return NodeHandle(self, frame)

    def _leaf(self, kind: str, key: str, rhs: Any = None) -> NodeHandle:
        kind = get_canonical_kind(kind)
        if not key:
            raise MalformedCondition("key is required", kind=kind)
        return self._append(_Frame(kind=kind, key=key, rhs=rhs))

    # -------------------------------------------------------------------------
    # Leaf conditions
    # -------------------------------------------------------------------------

    def assert_(self, key: str) -> NodeHandle:
        """key resolves to something other than missing, nil or false."""
        return self._leaf("assert", key)

    def eq(self, literal: Any, key: str) -> NodeHandle:
        return self._leaf("eq", key, ScalarValue(literal))

    def except_(self, literal: Any, key: str) -> NodeHandle:
        return self._leaf("except", key, ScalarValue(literal))

    def greater_than(self, literal: Any, key: str) -> NodeHandle:
        return self._leaf("greater_than", key, ScalarValue(literal))

    def greater_than_or_equal(self, literal: Any, key: str) -> NodeHandle:
        return self._leaf("greater_than_or_equal", key, ScalarValue(literal))

    def less_than(self, literal: Any, key: str) -> NodeHandle:
        return self._leaf("less_than", key, ScalarValue(literal))

    def less_than_or_equal(self, literal: Any, key: str) -> NodeHandle:
        return self._leaf("less_than_or_equal", key, ScalarValue(literal))

    gt = greater_than
    gte = greater_than_or_equal
    lt = less_than
    lte = less_than_or_equal

    def between(self, low: Any, high: Any, key: str) -> NodeHandle:
        """low <= value <= high, inclusive."""
        return self._leaf("between", key, RangeValue(low, high))

    def in_(self, values: Iterable[Any], key: str) -> NodeHandle:
        return self._leaf("in", key, ListValue(values))

    def include(self, literal: Any, key: str) -> NodeHandle:
        return self._leaf("include", key, ScalarValue(literal))

    def day_of_week(self, literal: Any, key: str) -> NodeHandle:
        """Weekday name, Symbol, or 0 (Sunday) to 6 (Saturday)."""
        return self._leaf("day_of_week", key, ScalarValue(literal))

    def in_cyclic_order(self, literal: Any, key: str) -> NodeHandle:
        # Accepted so trees can be described; evaluation raises.
        return self._leaf("in_cyclic_order", key, ScalarValue(literal))

    def condition(self, kind: str, *operands: Any) -> NodeHandle:
        """
        Generic leaf entry point by kind name or alias.

        Args:
            kind: Leaf kind (e.g., "gte", "between")
            *operands: Literal operands followed by the key

        Raises:
            MalformedCondition: Unknown kind or wrong operand count.
        """
        spec = get_operator_spec(kind)
        if not spec.is_leaf:
            raise MalformedCondition(f"'{kind}' is a combinator, not a leaf condition")
        if len(operands) != spec.operand_count + 1:
            raise MalformedCondition(
                f"expects {spec.operand_count} operand(s) and a key, got {len(operands)} values",
                kind=spec.name,
            )
        *literals, key = operands
        if spec.shape is OperandShape.NONE:
            return self._leaf(spec.name, key)
        if spec.shape is OperandShape.RANGE:
            return self._leaf(spec.name, key, RangeValue(*literals))
        if spec.shape is OperandShape.LIST:
            return self._leaf(spec.name, key, ListValue(literals[0]))
        return self._leaf(spec.name, key, ScalarValue(literals[0]))

    # -------------------------------------------------------------------------
    # Combinators
    # -------------------------------------------------------------------------

    def all(self) -> NodeHandle:
        return self._append(_Frame(kind="all"))

    def any(self) -> NodeHandle:
        return self._append(_Frame(kind="any"))

    def cond(self) -> NodeHandle:
        """Predicate/consequence pairs, added in order inside the block."""
        return self._append(_Frame(kind="cond"))

    def tz(self, zone: str) -> NodeHandle:
        if not zone:
            raise MalformedCondition("zone identifier is required", kind="tz")
        return self._append(_Frame(kind="tz", zone=zone))

    def add(self, expr: Expr) -> NodeHandle:
        """Append an already-built node."""
        return self._append(_Frame(kind="node", value=expr))

    # -------------------------------------------------------------------------
    # Outcomes
    # -------------------------------------------------------------------------

    def outcome(self, value: Any) -> NodeHandle:
        """
        Declare the next outcome.

        Without `with` the outcome is unconditional; inside `with`, the
        conditions added form its guard (implicit AND).
        """
        if self.depth:
            raise MalformedCondition("outcome() must be declared at the top level")
        frame = _Frame(kind="outcome", value=value)
        self._outcomes.append(frame)
        return NodeHandle(self, frame)

    def fallback(self, value: Any) -> "RuleSetBuilder":
        self._fallback = value
        return self

    # -------------------------------------------------------------------------
    # Finalize
    # -------------------------------------------------------------------------

    def build(self) -> RuleSet:
        """
        Freeze all frames into a RuleSet.

        Raises:
            MalformedCondition: A frame is still open, or a cond has an odd
                number of children.
        """
        if self.depth:
            open_kinds = [frame.kind for frame in self._stack[1:]]
            raise MalformedCondition(f"cannot build with open frames: {open_kinds}")

        conditions = tuple(_freeze(frame) for frame in self._root.children)
        outcomes = tuple(
            Outcome(frame.value, when=_freeze_guard(frame.children))
            for frame in self._outcomes
        )
        return RuleSet(
            conditions=conditions,
            outcomes=outcomes,
            fallback=self._fallback,
            name=self.name,
            tz_database=self._tz_database,
            default_zone=self._default_zone,
            inherit_tz_scope=self._inherit_tz_scope,
        )

    def __repr__(self) -> str:
        return (
            f"RuleSetBuilder({self.name!r}, {len(self._root.children)} conditions, "
            f"{len(self._outcomes)} outcomes)"
        )


def _freeze(frame: _Frame) -> Expr:
    """Convert a frame (and its subtree) into an immutable node."""
    if frame.kind == "node":
        return frame.value
    children = tuple(_freeze(child) for child in frame.children)
    if frame.kind == "all":
        return AllExpr(children)
    if frame.kind == "any":
        return AnyExpr(children)
    if frame.kind == "cond":
        if len(children) % 2:
            raise MalformedCondition(
                f"requires an even number of children, got {len(children)}",
                kind="cond",
            )
        return CondExpr(children)
    if frame.kind == "tz":
        return TzExpr(frame.zone, children)
    return Cond(op=frame.kind, key=frame.key, rhs=frame.rhs, children=children)


def _freeze_guard(frames: list) -> Expr | None:
    if not frames:
        return None
    if len(frames) == 1:
        return _freeze(frames[0])
    return AllExpr(tuple(_freeze(frame) for frame in frames))


__all__ = [
    "NodeHandle",
    "RuleSetBuilder",
]
