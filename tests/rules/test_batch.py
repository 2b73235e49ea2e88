"""
Tests for row-wise RuleSet evaluation over pandas DataFrames.
"""

import numpy as np
import pandas as pd
import pytest

from rulewise.rules.batch import apply_ruleset, decide_frame


@pytest.fixture
def orders() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "day_of_week": ["friday", "friday", "friday", "monday", None],
            "amount": [314, 256, 99, 124, np.nan],
        },
        index=["a", "b", "c", "d", "e"],
    )


class TestApplyRuleset:

    def test_values_aligned_to_index(self, pricing_ruleset, orders):
        result = apply_ruleset(pricing_ruleset, orders)
        assert list(result.index) == ["a", "b", "c", "d", "e"]
        assert result.tolist() == [8, 7, 3, 0, 0]
        assert result.name == "pricing"

    def test_nan_amount_is_missing(self, pricing_ruleset):
        frame = pd.DataFrame({"day_of_week": ["friday"], "amount": [np.nan]})
        assert apply_ruleset(pricing_ruleset, frame).tolist() == [3]

    def test_extra_facts(self, pricing_ruleset):
        frame = pd.DataFrame({"amount": [314, 99]})
        result = apply_ruleset(pricing_ruleset, frame, extra={"day_of_week": "friday"})
        assert result.tolist() == [8, 3]

    def test_row_cells_override_extra(self, pricing_ruleset):
        frame = pd.DataFrame({"day_of_week": ["monday"], "amount": [314]})
        result = apply_ruleset(pricing_ruleset, frame, extra={"day_of_week": "friday"})
        assert result.tolist() == [0]

    def test_columns_subset(self, pricing_ruleset, orders):
        result = apply_ruleset(pricing_ruleset, orders, columns=["amount"])
        assert result.tolist() == [0, 0, 0, 0, 0]

    def test_unknown_column(self, pricing_ruleset, orders):
        with pytest.raises(KeyError, match="not in frame"):
            apply_ruleset(pricing_ruleset, orders, columns=["nope"])

    def test_empty_frame(self, pricing_ruleset):
        frame = pd.DataFrame({"day_of_week": [], "amount": []})
        assert apply_ruleset(pricing_ruleset, frame).empty

    def test_timestamps_are_temporal(self, tz_db):
        from rulewise.rules.builder import RuleSetBuilder

        builder = RuleSetBuilder(tz_database=tz_db)
        with builder.outcome("weekend"):
            with builder.any():
                builder.day_of_week("saturday", "placed_at")
                builder.day_of_week("sunday", "placed_at")
        builder.fallback("weekday")
        ruleset = builder.build()

        frame = pd.DataFrame({
            "placed_at": pd.to_datetime(["2015-01-03 12:00", "2015-01-05 12:00", None]),
        })
        assert apply_ruleset(ruleset, frame).tolist() == ["weekend", "weekday", "weekday"]


class TestDecideFrame:

    def test_decision_columns(self, pricing_ruleset, orders):
        result = decide_frame(pricing_ruleset, orders)
        assert list(result.columns) == ["value", "matched_outcome", "guard_passed", "is_fallback"]
        assert result.loc["a", "matched_outcome"] == 0
        assert result.loc["c", "matched_outcome"] == 2
        assert pd.isna(result.loc["d", "matched_outcome"])
        assert result["guard_passed"].tolist() == [True, True, True, False, False]
        assert result["is_fallback"].tolist() == [False, False, False, True, True]
