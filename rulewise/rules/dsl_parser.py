"""
DSL Parser: YAML to condition trees and RuleSets.

YAML Schema:
```yaml
name: pricing
default_zone: UTC            # optional
conditions:
  - eq: [friday, day_of_week]
outcomes:
  - value: 8
    when:
      - greater_than_or_equal: [300, amount]
  - value: 7
    when:
      - between: [100, 299, amount]
  - value: 3
fallback: 0
```

Node forms:
    {kind: [operands..., key]}                 # positional shorthand
    {kind: {key: k, value|values|low|high: .., children: [..]}}
    {assert: key}
    {all: [nodes]} / {any: [nodes]} / {cond: [p1, c1, p2, c2]}
    {tz: {zone: America/New_York, children: [nodes]}}

A string literal starting with ":" is a symbolic label (":friday").
Unquoted ISO timestamps are loaded by YAML as naive datetimes, which are
wall-clock values in the effective zone, same as the string literal.

Usage:
    ruleset = load_ruleset("rules/pricing.yml")
    expr = parse_expr({"any": [{"eq": ["gold", "tier"]}, {"assert": "vip"}]})
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

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
from .registry import OperandShape, get_operator_spec, is_known_kind
from .ruleset import Outcome, RuleSet
from .timezones import TimeZoneDatabase
from .types import Symbol


# =============================================================================
# Literals
# =============================================================================

def parse_literal(data: Any) -> Any:
    """
    Convert a YAML literal to a Value.

    Examples:
        ":friday"  -> Symbol("friday")
        [1, 2]     -> (1, 2)
        300        -> 300
    """
    if isinstance(data, str) and len(data) > 1 and data.startswith(":"):
        return Symbol(data[1:])
    if isinstance(data, list):
        return tuple(parse_literal(item) for item in data)
    return data


def _parse_rhs(kind: str, shape: OperandShape, literals: list, key: str):
    if shape is OperandShape.NONE:
        return None
    if shape is OperandShape.RANGE:
        low, high = literals
        return RangeValue(parse_literal(low), parse_literal(high))
    if shape is OperandShape.LIST:
        values = literals[0]
        if not isinstance(values, (list, tuple)):
            raise MalformedCondition("requires a list of values", kind=kind, key=key)
        return ListValue(parse_literal(v) for v in values)
    return ScalarValue(parse_literal(literals[0]))


# =============================================================================
# Leaf Conditions
# =============================================================================

def parse_cond(kind: str, data: Any) -> Cond:
    """
    Parse a leaf condition body.

    Formats:
        greater_than_or_equal: [300, amount]
        between: [100, 299, amount]
        in: [[gold, platinum], tier]
        assert: member
        eq:
          key: tier
          value: gold
          children:
            - assert: member

    Args:
        kind: Kind name or alias (the node's only mapping key).
        data: Body of the node.

    Returns:
        Cond node.
    """
    spec = get_operator_spec(kind)
    name = spec.name

    if isinstance(data, str):
        if spec.operand_count:
            raise MalformedCondition(
                f"expects {spec.operand_count} operand(s) before the key", kind=name, key=data
            )
        return Cond(op=name, key=data)

    if isinstance(data, list):
        if len(data) != spec.operand_count + 1:
            raise MalformedCondition(
                f"expects [{spec.operand_count} operand(s)..., key], got {len(data)} items",
                kind=name,
            )
        *literals, key = data
        if not isinstance(key, str):
            raise MalformedCondition(f"key must be a string, got {key!r}", kind=name)
        return Cond(op=name, key=key, rhs=_parse_rhs(name, spec.shape, literals, key))

    if isinstance(data, dict):
        key = data.get("key")
        if not key or not isinstance(key, str):
            raise MalformedCondition("requires 'key'", kind=name)

        if spec.shape is OperandShape.RANGE:
            if "low" not in data or "high" not in data:
                raise MalformedCondition("requires 'low' and 'high'", kind=name, key=key)
            literals = [data["low"], data["high"]]
        elif spec.shape is OperandShape.LIST:
            if "values" not in data:
                raise MalformedCondition("requires 'values'", kind=name, key=key)
            literals = [data["values"]]
        elif spec.shape is OperandShape.NONE:
            literals = []
        else:
            if "value" not in data:
                raise MalformedCondition("requires 'value'", kind=name, key=key)
            literals = [data["value"]]

        children = _parse_children(data.get("children"), name)
        return Cond(
            op=name,
            key=key,
            rhs=_parse_rhs(name, spec.shape, literals, key),
            children=children,
        )

    raise MalformedCondition(
        f"condition body must be a string, list or mapping, got {type(data).__name__}",
        kind=name,
    )


# =============================================================================
# Expressions
# =============================================================================

def _parse_children(data: Any, kind: str) -> tuple[Expr, ...]:
    if data is None:
        return ()
    if not isinstance(data, list):
        raise MalformedCondition("children must be a list", kind=kind)
    return tuple(parse_expr(item) for item in data)


def parse_expr(data: dict) -> Expr:
    """
    Parse one expression node from YAML.

    Args:
        data: Single-key mapping {kind: body}.

    Returns:
        Expr node.

    Raises:
        MalformedCondition: Unknown kind, bad operands, or odd cond.
    """
    if not isinstance(data, dict):
        raise MalformedCondition(
            f"expression must be a mapping, got {type(data).__name__}"
        )
    if len(data) != 1:
        raise MalformedCondition(
            f"expression must have exactly one kind, got {sorted(map(str, data))}"
        )

    (raw_kind, body), = data.items()
    if not isinstance(raw_kind, str) or not is_known_kind(raw_kind):
        raise MalformedCondition(f"unknown condition kind '{raw_kind}'")
    spec = get_operator_spec(raw_kind)
    kind = spec.name

    if spec.is_leaf:
        return parse_cond(kind, body)

    if kind == "tz":
        if isinstance(body, dict):
            zone = body.get("zone")
            children = _parse_children(body.get("children"), kind)
        elif isinstance(body, list) and body:
            zone = body[0]
            children = _parse_children(body[1:], kind)
        else:
            raise MalformedCondition("requires {zone, children}", kind=kind)
        if not isinstance(zone, str):
            raise MalformedCondition(f"zone must be a string, got {zone!r}", kind=kind)
        return TzExpr(zone, children)

    children = _parse_children(body, kind)
    if kind == "all":
        return AllExpr(children)
    if kind == "any":
        return AnyExpr(children)

    # cond
    if len(children) % 2:
        raise MalformedCondition(
            f"requires an even number of children, got {len(children)}", kind="cond"
        )
    return CondExpr(children)


def parse_conditions(data: Any) -> tuple[Expr, ...]:
    """Parse a list of nodes (a single mapping is accepted as one node)."""
    if data is None:
        return ()
    if isinstance(data, dict):
        return (parse_expr(data),)
    if not isinstance(data, list):
        raise MalformedCondition(
            f"conditions must be a list, got {type(data).__name__}"
        )
    return tuple(parse_expr(item) for item in data)


# =============================================================================
# Outcomes and RuleSets
# =============================================================================

def parse_outcome(data: dict) -> Outcome:
    """
    Parse an Outcome from YAML.

    Format:
        - value: 8
          when:
            - greater_than_or_equal: [300, amount]
        - value: 3          # unconditional
    """
    if not isinstance(data, dict):
        raise MalformedCondition(f"outcome must be a mapping, got {type(data).__name__}")
    if "value" not in data:
        raise MalformedCondition("outcome requires 'value'")

    when = parse_conditions(data.get("when"))
    if not when:
        guard = None
    elif len(when) == 1:
        guard = when[0]
    else:
        guard = AllExpr(when)
    return Outcome(parse_literal(data["value"]), when=guard)


def parse_ruleset(
    data: dict,
    tz_database: TimeZoneDatabase | None = None,
) -> RuleSet:
    """
    Parse a RuleSet document.

    Args:
        data: Raw document dict.
        tz_database: Zone provider (ZoneInfoDatabase when omitted).

    Returns:
        RuleSet instance.

    Raises:
        MalformedCondition: If the document is not a valid ruleset.
    """
    if not isinstance(data, dict):
        raise MalformedCondition(f"ruleset must be a mapping, got {type(data).__name__}")

    outcomes_data = data.get("outcomes", [])
    if not isinstance(outcomes_data, list):
        raise MalformedCondition("'outcomes' must be a list")

    inherit = data.get("inherit_tz_scope")
    return RuleSet(
        conditions=parse_conditions(data.get("conditions")),
        outcomes=tuple(parse_outcome(item) for item in outcomes_data),
        fallback=parse_literal(data.get("fallback")),
        name=str(data.get("name", "ruleset")),
        tz_database=tz_database,
        default_zone=data.get("default_zone"),
        inherit_tz_scope=None if inherit is None else bool(inherit),
    )


def load_ruleset(
    path: str | Path,
    tz_database: TimeZoneDatabase | None = None,
) -> RuleSet:
    """
    Load a RuleSet from a YAML file.

    The ruleset name defaults to the file stem.

    Raises:
        FileNotFoundError: If the file does not exist.
        MalformedCondition: If the document is empty or invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Ruleset file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not data:
        raise MalformedCondition(f"empty ruleset document: {path}")
    if isinstance(data, dict):
        data.setdefault("name", path.stem)
    return parse_ruleset(data, tz_database=tz_database)


__all__ = [
    "parse_literal",
    "parse_cond",
    "parse_expr",
    "parse_conditions",
    "parse_outcome",
    "parse_ruleset",
    "load_ruleset",
]
