"""
Tests for the explicit-stack RuleSetBuilder.
"""

from datetime import datetime, timezone

import pytest

from rulewise.rules.builder import RuleSetBuilder
from rulewise.rules.dsl_nodes import AllExpr, AnyExpr, Cond, CondExpr, ListValue, RangeValue, TzExpr
from rulewise.rules.errors import ConditionNotImplemented, MalformedCondition
from rulewise.rules.ruleset import RuleSet
from rulewise.rules.types import Symbol


@pytest.fixture
def builder(tz_db) -> RuleSetBuilder:
    return RuleSetBuilder(name="test", tz_database=tz_db)


class TestPricingExample:

    def test_build_and_call(self, builder):
        builder.eq(Symbol("friday"), "day_of_week")
        with builder.outcome(8):
            builder.greater_than_or_equal(300, "amount")
        with builder.outcome(7):
            builder.gte(100, "amount")
        builder.outcome(3)
        builder.fallback(0)
        ruleset = builder.build()

        assert isinstance(ruleset, RuleSet)
        assert ruleset.name == "test"
        assert ruleset.call({"day_of_week": "friday", "amount": 314}) == 8
        assert ruleset.call({"day_of_week": "friday", "amount": 256}) == 7
        assert ruleset.call({"day_of_week": "friday", "amount": 99}) == 3
        assert ruleset.call({"day_of_week": "monday", "amount": 124}) == 0

    def test_unconditional_outcome_has_no_guard(self, builder):
        builder.outcome("always")
        ruleset = builder.build()
        assert ruleset.outcomes[0].when is None


class TestTreeShape:

    def test_nested_combinators(self, builder):
        with builder.outcome("gold"):
            with builder.any():
                builder.in_(["gold", "platinum"], "tier")
                with builder.all():
                    builder.assert_("member")
                    builder.between(100, 299, "amount")
        ruleset = builder.build()

        guard = ruleset.outcomes[0].when
        assert isinstance(guard, AnyExpr)
        tier, inner = guard.children
        assert tier.op == "in" and tier.rhs == ListValue(("gold", "platinum"))
        assert isinstance(inner, AllExpr)
        assert inner.children[1].rhs == RangeValue(100, 299)

    def test_several_guard_conditions_are_anded(self, builder):
        with builder.outcome(1):
            builder.assert_("a")
            builder.assert_("b")
        guard = builder.build().outcomes[0].when
        assert isinstance(guard, AllExpr)
        assert len(guard.children) == 2

    def test_leaf_children(self, builder):
        with builder.assert_("member"):
            builder.lt(50, "amount")
        ruleset = builder.build()
        member = ruleset.conditions[0]
        assert isinstance(member, Cond)
        assert member.children[0].op == "less_than"

    def test_tz_scope(self, builder):
        with builder.outcome("ny-midnight"):
            with builder.tz("America/New_York"):
                builder.eq("2015-01-01T00:00:00", "timestamp")
        ruleset = builder.build()
        assert isinstance(ruleset.outcomes[0].when, TzExpr)
        assert ruleset.call({"timestamp": datetime(2015, 1, 1, 5, tzinfo=timezone.utc)}) == "ny-midnight"

    def test_cond_pairs(self, builder):
        with builder.outcome("ok"):
            with builder.cond():
                builder.assert_("member")
                builder.gt(50, "amount")
                builder.assert_("vip")
                builder.assert_("vip")
        ruleset = builder.build()
        assert isinstance(ruleset.outcomes[0].when, CondExpr)
        assert ruleset.call({"member": True, "amount": 60}) == "ok"
        assert ruleset.call({"member": True, "amount": 40}) is None
        assert ruleset.call({"vip": True}) == "ok"

    def test_add_prebuilt_node(self, builder):
        prebuilt = AnyExpr((Cond(op="assert", key="a"),))
        builder.add(prebuilt)
        assert builder.build().conditions == (prebuilt,)

    def test_generic_condition_entry(self, builder):
        builder.condition("gte", 300, "amount")
        builder.condition("between", 1, 2, "n")
        builder.condition("in", ("a", "b"), "letter")
        builder.condition("assert", "flag")
        ops = [c.op for c in builder.build().conditions]
        assert ops == ["greater_than_or_equal", "between", "in", "assert"]

    def test_day_of_week_literal_forms(self, builder):
        builder.day_of_week("sat", "timestamp")
        ruleset = builder.build()
        assert ruleset.conditions[0].rhs.value == "sat"


class TestBuilderErrors:

    def test_odd_cond_rejected_at_build(self, builder):
        with builder.outcome(1):
            with builder.cond():
                builder.assert_("a")
        with pytest.raises(MalformedCondition, match="even number"):
            builder.build()

    def test_open_frame_rejected(self, builder):
        handle = builder.outcome(1)
        handle.__enter__()
        builder.assert_("a")
        with pytest.raises(MalformedCondition, match="open frames"):
            builder.build()

    def test_outcome_must_be_top_level(self, builder):
        with builder.any():
            with pytest.raises(MalformedCondition, match="top level"):
                builder.outcome(1)

    def test_generic_condition_arity(self, builder):
        with pytest.raises(MalformedCondition, match="operand"):
            builder.condition("between", 1, "n")

    def test_generic_condition_unknown_kind(self, builder):
        with pytest.raises(MalformedCondition, match="unknown condition kind"):
            builder.condition("near_pct", 1, "n")

    def test_generic_condition_rejects_combinator(self, builder):
        with pytest.raises(MalformedCondition, match="combinator"):
            builder.condition("any", "n")

    def test_bad_weekday_rejected_at_build(self, builder):
        builder.day_of_week("funday", "timestamp")
        with pytest.raises(MalformedCondition, match="weekday"):
            builder.build()

    def test_empty_key_rejected(self, builder):
        with pytest.raises(MalformedCondition, match="key is required"):
            builder.eq(1, "")

    def test_reserved_kind_builds_but_raises_on_call(self, builder):
        builder.in_cyclic_order(("spring", "summer"), "season")
        ruleset = builder.build()
        with pytest.raises(ConditionNotImplemented):
            ruleset.call({"season": "spring"})

    def test_frame_popped_after_error_inside_block(self, builder):
        with pytest.raises(RuntimeError):
            with builder.any():
                raise RuntimeError("author error")
        assert builder.depth == 0

    def test_error_unwinds_frames_left_open_inside_block(self, builder):
        with pytest.raises(RuntimeError):
            with builder.outcome("gold"):
                with builder.any():
                    builder.all().__enter__()
                    builder.assert_("member")
                    raise RuntimeError("author error")
        assert builder.depth == 0
        builder.outcome("basic")
        assert builder.build().outcomes[-1].value == "basic"
