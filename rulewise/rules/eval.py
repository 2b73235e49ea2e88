"""
Operator implementations for leaf conditions.

Type contracts:
- eq, except, in: any kinds; different kinds are simply unequal
- greater_than[_or_equal], less_than[_or_equal], between: both NUMBER or
  both TEMPORAL, otherwise TypeMismatch
- include: resolved value must be a COLLECTION, otherwise TypeMismatch
- day_of_week: resolved value must be TEMPORAL, otherwise TypeMismatch
- assert: presence and truthiness only

Missing values (absent key, None, NaN) never match and never raise.
Every operator returns EvalResult; hard errors are raised.
"""

from __future__ import annotations

import operator as _op
from typing import Any, Callable

from .dsl_nodes import weekday_literal_index
from .errors import TypeMismatch
from .timezones import TimeZoneResolver, weekday_index
from .types import EvalResult, ReasonCode, ValueType, label_of


_ORDERING: dict[str, Callable[[Any, Any], bool]] = {
    "greater_than": _op.gt,
    "greater_than_or_equal": _op.ge,
    "less_than": _op.lt,
    "less_than_or_equal": _op.le,
}


def is_missing(value_type: ValueType) -> bool:
    return value_type in (ValueType.ABSENT, ValueType.MISSING)


def _missing(key: str, op: str, rhs_repr: str) -> EvalResult:
    return EvalResult.failure(
        ReasonCode.MISSING_VALUE,
        "value is missing",
        key=key,
        rhs_repr=rhs_repr,
        operator=op,
    )


# =============================================================================
# Value comparison primitives
# =============================================================================

def values_equal(lhs: Any, rhs: Any, zones: TimeZoneResolver) -> bool:
    """
    Kind-aware equality.

    - Missing never equals anything (including another missing value)
    - Temporal values compare as absolute instants
    - Text and Symbol compare by label
    - Collections compare element-wise with these same rules
    - Different kinds are unequal
    """
    lt = ValueType.from_value(lhs)
    rt = ValueType.from_value(rhs)
    if is_missing(lt) or is_missing(rt):
        return False
    if lt == ValueType.TEMPORAL or rt == ValueType.TEMPORAL:
        if lt != rt:
            return False
        return zones.to_instant(lhs) == zones.to_instant(rhs)
    if lt.is_label and rt.is_label:
        return label_of(lhs) == label_of(rhs)
    if lt != rt:
        return False
    if lt == ValueType.BOOL:
        return bool(lhs) == bool(rhs)
    if lt == ValueType.COLLECTION:
        if isinstance(lhs, (set, frozenset)) or isinstance(rhs, (set, frozenset)):
            return (
                len(lhs) == len(rhs)
                and all(any(values_equal(a, b, zones) for b in rhs) for a in lhs)
                and all(any(values_equal(a, b, zones) for a in lhs) for b in rhs)
            )
        return len(lhs) == len(rhs) and all(
            values_equal(a, b, zones) for a, b in zip(lhs, rhs)
        )
    # numpy scalars compare to np.bool_
    return bool(lhs == rhs)


def ordering_key(
    lhs: Any,
    rhs: Any,
    zones: TimeZoneResolver,
    op: str,
    key: str | None = None,
) -> tuple[Any, Any]:
    """
    Normalize two values for ordering comparison.

    Returns:
        (lhs, rhs) as numbers or as UTC instants.

    Raises:
        TypeMismatch: Unless both are NUMBER or both are TEMPORAL.
    """
    lt = ValueType.from_value(lhs)
    rt = ValueType.from_value(rhs)
    if lt == rt == ValueType.NUMBER:
        return lhs, rhs
    if lt == rt == ValueType.TEMPORAL:
        return zones.to_instant(lhs), zones.to_instant(rhs)
    raise TypeMismatch(
        f"cannot order {lt.name} value {lhs!r} against {rt.name} literal {rhs!r}",
        kind=op,
        key=key,
    )


# =============================================================================
# Operators
# =============================================================================

def eval_assert(value: Any, key: str) -> EvalResult:
    """Evaluate presence: false for absent, nil, and false; true otherwise."""
    vt = ValueType.from_value(value)
    if is_missing(vt):
        return _missing(key, "assert", "")
    ok = not (vt == ValueType.BOOL and not value)
    return EvalResult.success(ok, key, "", "assert")


def eval_eq(value: Any, literal: Any, key: str, zones: TimeZoneResolver) -> EvalResult:
    """Evaluate value == literal."""
    if is_missing(ValueType.from_value(value)):
        return _missing(key, "eq", repr(literal))
    return EvalResult.success(values_equal(value, literal, zones), key, repr(literal), "eq")


def eval_except(value: Any, literal: Any, key: str, zones: TimeZoneResolver) -> EvalResult:
    """
    Evaluate not (value == literal).

    A missing value never equals the literal, so except is true for it.
    """
    if is_missing(ValueType.from_value(value)):
        return EvalResult(
            ok=True,
            reason=ReasonCode.MISSING_VALUE,
            key=key,
            rhs_repr=repr(literal),
            operator="except",
            message="value is missing",
        )
    ok = not values_equal(value, literal, zones)
    return EvalResult.success(ok, key, repr(literal), "except")


def eval_ordered(
    op: str,
    value: Any,
    literal: Any,
    key: str,
    zones: TimeZoneResolver,
) -> EvalResult:
    """Evaluate value <op> literal for the four ordering kinds."""
    if is_missing(ValueType.from_value(value)):
        return _missing(key, op, repr(literal))
    lhs, rhs = ordering_key(value, literal, zones, op, key)
    return EvalResult.success(bool(_ORDERING[op](lhs, rhs)), key, repr(literal), op)


def eval_between(
    value: Any,
    low: Any,
    high: Any,
    key: str,
    zones: TimeZoneResolver,
) -> EvalResult:
    """Evaluate low <= value <= high (inclusive, bound order not checked)."""
    rhs_repr = f"[{low!r}, {high!r}]"
    if is_missing(ValueType.from_value(value)):
        return _missing(key, "between", rhs_repr)
    v_low, lo = ordering_key(value, low, zones, "between", key)
    v_high, hi = ordering_key(value, high, zones, "between", key)
    return EvalResult.success(bool(lo <= v_low and v_high <= hi), key, rhs_repr, "between")


def eval_in(
    value: Any,
    values: tuple[Any, ...],
    key: str,
    zones: TimeZoneResolver,
) -> EvalResult:
    """Evaluate value in {values} using eq semantics."""
    rhs_repr = repr(list(values))
    if is_missing(ValueType.from_value(value)):
        return _missing(key, "in", rhs_repr)
    ok = any(values_equal(value, candidate, zones) for candidate in values)
    return EvalResult.success(ok, key, rhs_repr, "in")


def eval_include(value: Any, literal: Any, key: str, zones: TimeZoneResolver) -> EvalResult:
    """Evaluate literal in value, where value must be a collection."""
    vt = ValueType.from_value(value)
    if is_missing(vt):
        return _missing(key, "include", repr(literal))
    if vt != ValueType.COLLECTION:
        raise TypeMismatch(
            f"requires a collection value, got {vt.name} {value!r}",
            kind="include",
            key=key,
        )
    ok = any(values_equal(element, literal, zones) for element in value)
    return EvalResult.success(ok, key, repr(literal), "include")


def eval_day_of_week(
    value: Any,
    literal: Any,
    key: str,
    zones: TimeZoneResolver,
) -> EvalResult:
    """
    Evaluate zone-local weekday of value == literal.

    The literal may be a weekday name or 0 (Sunday) .. 6 (Saturday).
    """
    vt = ValueType.from_value(value)
    if is_missing(vt):
        return _missing(key, "day_of_week", repr(literal))
    if vt != ValueType.TEMPORAL:
        raise TypeMismatch(
            f"requires a temporal value, got {vt.name} {value!r}",
            kind="day_of_week",
            key=key,
        )
    local = zones.to_local(value)
    ok = weekday_index(local) == weekday_literal_index(literal)
    return EvalResult.success(ok, key, repr(literal), "day_of_week")


__all__ = [
    "values_equal",
    "ordering_key",
    "eval_assert",
    "eval_eq",
    "eval_except",
    "eval_ordered",
    "eval_between",
    "eval_in",
    "eval_include",
    "eval_day_of_week",
]
