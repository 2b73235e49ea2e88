"""
Condition Kind Registry - Single source of truth for condition kind semantics.

All kind rules defined here. Used by:
- Node construction (reject unknown kinds, wrong operand shapes)
- Builder and YAML parser (alias resolution, operand arity)
- Runtime evaluation dispatch (reserved kinds raise)

Adding a new condition kind requires updating this registry.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from .dsl_nodes.constants import KIND_ALIASES
from .errors import ConditionNotImplemented, MalformedCondition


class OpCategory(Enum):
    """Value kinds a condition accepts."""
    ANY = auto()          # kind-aware equality, never raises on kind
    ORDERABLE = auto()    # both Number or both Temporal
    TRUTHY = auto()       # presence / truthiness
    TEMPORAL = auto()     # Temporal values only
    COLLECTION = auto()   # resolved value must be a collection
    STRUCTURAL = auto()   # combinators


class OperandShape(Enum):
    """Literal operand shape bound by a leaf."""
    NONE = auto()     # assert: key only
    SCALAR = auto()   # eq, greater_than, day_of_week, ...
    RANGE = auto()    # between: low, high
    LIST = auto()     # in: set of literals
    OPAQUE = auto()   # reserved kinds: anything


@dataclass(frozen=True)
class OperatorSpec:
    """
    Specification for a single condition kind.

    Attributes:
        name: Canonical kind name (e.g., "eq", "between")
        supported: Whether this kind has evaluation semantics
        category: Accepted value category
        shape: Literal operand shape (leaves only)
        is_leaf: True for leaf kinds, False for combinators
        error_if_unsupported: Error message for reserved kinds
    """
    name: str
    supported: bool
    category: OpCategory
    shape: OperandShape = OperandShape.NONE
    is_leaf: bool = True
    error_if_unsupported: Optional[str] = None

    @property
    def operand_count(self) -> int:
        """Number of positional literal operands before the key."""
        return {
            OperandShape.NONE: 0,
            OperandShape.SCALAR: 1,
            OperandShape.RANGE: 2,
            OperandShape.LIST: 1,
            OperandShape.OPAQUE: 1,
        }[self.shape]


def _leaf(name: str, category: OpCategory, shape: OperandShape) -> OperatorSpec:
    return OperatorSpec(name=name, supported=True, category=category, shape=shape)


def _combinator(name: str) -> OperatorSpec:
    return OperatorSpec(
        name=name,
        supported=True,
        category=OpCategory.STRUCTURAL,
        is_leaf=False,
    )


# =============================================================================
# KIND REGISTRY - Single Source of Truth
# =============================================================================

OPERATOR_REGISTRY = {
    "assert": _leaf("assert", OpCategory.TRUTHY, OperandShape.NONE),
    "eq": _leaf("eq", OpCategory.ANY, OperandShape.SCALAR),
    "except": _leaf("except", OpCategory.ANY, OperandShape.SCALAR),
    "greater_than": _leaf("greater_than", OpCategory.ORDERABLE, OperandShape.SCALAR),
    "greater_than_or_equal": _leaf(
        "greater_than_or_equal", OpCategory.ORDERABLE, OperandShape.SCALAR
    ),
    "less_than": _leaf("less_than", OpCategory.ORDERABLE, OperandShape.SCALAR),
    "less_than_or_equal": _leaf(
        "less_than_or_equal", OpCategory.ORDERABLE, OperandShape.SCALAR
    ),
    "between": _leaf("between", OpCategory.ORDERABLE, OperandShape.RANGE),
    "in": _leaf("in", OpCategory.ANY, OperandShape.LIST),
    "include": _leaf("include", OpCategory.COLLECTION, OperandShape.SCALAR),
    "day_of_week": _leaf("day_of_week", OpCategory.TEMPORAL, OperandShape.SCALAR),

    # Reserved: the semantics of cyclic ordering were never defined
    "in_cyclic_order": OperatorSpec(
        name="in_cyclic_order",
        supported=False,
        category=OpCategory.ORDERABLE,
        shape=OperandShape.OPAQUE,
        error_if_unsupported=(
            "Condition 'in_cyclic_order' is reserved and has no defined semantics. "
            "Express the rule with 'between' or 'in' instead."
        ),
    ),

    "all": _combinator("all"),
    "any": _combinator("any"),
    "cond": _combinator("cond"),
    "tz": _combinator("tz"),
}

SUPPORTED_KINDS = frozenset(
    name for name, spec in OPERATOR_REGISTRY.items() if spec.supported
)


def get_canonical_kind(kind: str) -> str:
    """Resolve an alias to its canonical kind name (unknown names pass through)."""
    return KIND_ALIASES.get(kind, kind)


def is_known_kind(kind: str) -> bool:
    return get_canonical_kind(kind) in OPERATOR_REGISTRY


def get_operator_spec(kind: str) -> OperatorSpec:
    """
    Look up the spec for a kind or alias.

    Raises:
        MalformedCondition: If the kind is unknown.
    """
    canonical = get_canonical_kind(kind)
    spec = OPERATOR_REGISTRY.get(canonical)
    if spec is None:
        raise MalformedCondition(
            f"unknown condition kind '{kind}'. "
            f"Known kinds: {sorted(OPERATOR_REGISTRY)}"
        )
    return spec


def ensure_supported(kind: str, key: str | None = None) -> OperatorSpec:
    """
    Look up a kind and fail if it has no evaluation semantics.

    Raises:
        MalformedCondition: If the kind is unknown.
        ConditionNotImplemented: If the kind is reserved.
    """
    spec = get_operator_spec(kind)
    if not spec.supported:
        raise ConditionNotImplemented(
            spec.error_if_unsupported or "not implemented",
            kind=spec.name,
            key=key,
        )
    return spec


__all__ = [
    "OpCategory",
    "OperandShape",
    "OperatorSpec",
    "OPERATOR_REGISTRY",
    "SUPPORTED_KINDS",
    "get_canonical_kind",
    "is_known_kind",
    "get_operator_spec",
    "ensure_supported",
]
