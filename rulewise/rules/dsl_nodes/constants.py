"""
DSL Constants for the condition tree.

This module defines constant values used by the node types:
- Leaf condition kinds and combinator kinds
- Kind aliases accepted by the builder and YAML parser
- Weekday literal names
"""

from __future__ import annotations

# =============================================================================
# Leaf Condition Kinds
# =============================================================================
# Each leaf binds a context key and zero or more literal operands.

COMPARISON_KINDS = frozenset({
    "greater_than",             # value > literal
    "greater_than_or_equal",    # value >= literal
    "less_than",                # value < literal
    "less_than_or_equal",       # value <= literal
    "between",                  # low <= value <= high
})

EQUALITY_KINDS = frozenset({
    "eq",                       # value == literal (kind-aware)
    "except",                   # not eq
    "in",                       # value equals some literal in the set
    "include",                  # collection value contains literal
})

LEAF_KINDS = COMPARISON_KINDS | EQUALITY_KINDS | frozenset({
    "assert",                   # value is present and not false/nil
    "day_of_week",              # zone-local weekday equals literal
    "in_cyclic_order",          # reserved, no semantics defined
})

# =============================================================================
# Combinator Kinds
# =============================================================================

COMBINATOR_KINDS = frozenset({
    "all",                      # conjunction, empty -> true
    "any",                      # disjunction, empty -> false
    "cond",                     # ordered (predicate, consequence) pairs
    "tz",                       # lexical time zone scope
})

ALL_KINDS = LEAF_KINDS | COMBINATOR_KINDS

# =============================================================================
# Aliases
# =============================================================================
# Shorthand spellings accepted on input; trees always store canonical kinds.

KIND_ALIASES = {
    "gt": "greater_than",
    ">": "greater_than",
    "gte": "greater_than_or_equal",
    "ge": "greater_than_or_equal",
    ">=": "greater_than_or_equal",
    "lt": "less_than",
    "<": "less_than",
    "lte": "less_than_or_equal",
    "le": "less_than_or_equal",
    "<=": "less_than_or_equal",
    "==": "eq",
    "ne": "except",
    "!=": "except",
    "not_eq": "except",
    "includes": "include",
    "time_zone": "tz",
}

# =============================================================================
# Weekdays
# =============================================================================
# Index 0 is Sunday.

WEEKDAY_NAMES = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

WEEKDAY_INDEX = {name: i for i, name in enumerate(WEEKDAY_NAMES)}
WEEKDAY_INDEX.update({name[:3]: i for i, name in enumerate(WEEKDAY_NAMES)})
