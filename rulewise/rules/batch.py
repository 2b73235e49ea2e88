"""
Batch evaluation of a RuleSet over a pandas DataFrame.

Each row is one context: column names are keys and cells are values.
NaN / NaT cells are treated as missing (None). pandas Timestamps are
datetime subclasses and evaluate as temporal values.

Usage:
    frame = pd.DataFrame({"day_of_week": ["friday", "monday"], "amount": [314, 124]})
    apply_ruleset(ruleset, frame)   # Series [8, 0] aligned to frame.index
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

import pandas as pd

from .ruleset import RuleSet

logger = logging.getLogger(__name__)


def _rows(frame: pd.DataFrame, columns: Sequence[str] | None) -> list[dict]:
    if columns is not None:
        missing = [c for c in columns if c not in frame.columns]
        if missing:
            raise KeyError(f"Columns not in frame: {missing}")
        frame = frame[list(columns)]
    cleaned = frame.astype(object).where(frame.notna(), None)
    return cleaned.to_dict(orient="records")


def apply_ruleset(
    ruleset: RuleSet,
    frame: pd.DataFrame,
    columns: Sequence[str] | None = None,
    extra: Mapping[str, Any] | None = None,
    name: str | None = None,
) -> pd.Series:
    """
    Evaluate a RuleSet row-wise.

    Args:
        ruleset: RuleSet to apply.
        frame: One context per row.
        columns: Restrict the context to these columns (default: all).
        extra: Facts shared by every row; row cells take precedence.
        name: Name of the result Series (defaults to the ruleset name).

    Returns:
        Series of selected values, aligned to frame.index.
    """
    values = []
    for row in _rows(frame, columns):
        facts = {**extra, **row} if extra else row
        values.append(ruleset.call(facts))
    logger.debug("%s: evaluated %d rows", ruleset.name, len(values))
    return pd.Series(values, index=frame.index, name=name or ruleset.name, dtype=object)


def decide_frame(
    ruleset: RuleSet,
    frame: pd.DataFrame,
    columns: Sequence[str] | None = None,
    extra: Mapping[str, Any] | None = None,
) -> pd.DataFrame:
    """
    Evaluate row-wise and keep the decision details.

    Returns:
        DataFrame with columns value, matched_outcome, guard_passed and
        is_fallback, aligned to frame.index.
    """
    decisions = []
    for row in _rows(frame, columns):
        facts = {**extra, **row} if extra else row
        decisions.append(ruleset.decide(facts))
    return pd.DataFrame(
        {
            "value": pd.Series([d.value for d in decisions], index=frame.index, dtype=object),
            "matched_outcome": pd.array([d.matched_outcome for d in decisions], dtype="Int64"),
            "guard_passed": [d.guard_passed for d in decisions],
            "is_fallback": [d.is_fallback for d in decisions],
        },
        index=frame.index,
    )


__all__ = [
    "apply_ruleset",
    "decide_frame",
]
