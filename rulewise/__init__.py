"""
rulewise - decision tables over condition trees.

    from rulewise import RuleSetBuilder, load_ruleset

    ruleset = load_ruleset("rules/pricing.yml")
    ruleset.call({"day_of_week": "friday", "amount": 314})
"""

__version__ = "0.3.0"

from .rules import (
    ABSENT,
    Symbol,
    Lazy,
    RuleError,
    MalformedCondition,
    TypeMismatch,
    InvalidTimestamp,
    ConditionNotImplemented,
    FixedOffsetDatabase,
    ZoneInfoDatabase,
    Outcome,
    Decision,
    RuleSet,
    RuleSetBuilder,
    parse_ruleset,
    load_ruleset,
    apply_ruleset,
)

__all__ = [
    "__version__",
    "ABSENT",
    "Symbol",
    "Lazy",
    "RuleError",
    "MalformedCondition",
    "TypeMismatch",
    "InvalidTimestamp",
    "ConditionNotImplemented",
    "FixedOffsetDatabase",
    "ZoneInfoDatabase",
    "Outcome",
    "Decision",
    "RuleSet",
    "RuleSetBuilder",
    "parse_ruleset",
    "load_ruleset",
    "apply_ruleset",
]
