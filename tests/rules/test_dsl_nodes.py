"""
Tests for condition tree node construction and utilities.
"""

from dataclasses import FrozenInstanceError

import pytest

from rulewise.rules.dsl_nodes import (
    AllExpr,
    AnyExpr,
    Cond,
    CondExpr,
    ListValue,
    RangeValue,
    ScalarValue,
    TzExpr,
    count_nodes,
    expr_to_dict,
    get_referenced_keys,
    get_tree_depth,
    weekday_literal_index,
)
from rulewise.rules.errors import MalformedCondition
from rulewise.rules.types import Symbol


# =============================================================================
# Cond validation
# =============================================================================

class TestCondConstruction:

    def test_valid_scalar_condition(self):
        cond = Cond(op="greater_than", key="amount", rhs=ScalarValue(100))
        assert cond.children == ()
        assert "amount greater_than" in repr(cond)

    def test_unknown_kind_rejected(self):
        with pytest.raises(MalformedCondition, match="unknown leaf condition"):
            Cond(op="near_pct", key="amount", rhs=ScalarValue(1))

    def test_combinator_kind_is_not_a_leaf(self):
        with pytest.raises(MalformedCondition):
            Cond(op="all", key="amount")

    def test_key_required(self):
        with pytest.raises(MalformedCondition, match="key is required"):
            Cond(op="eq", key="", rhs=ScalarValue(1))

    def test_assert_takes_no_operand(self):
        Cond(op="assert", key="member")
        with pytest.raises(MalformedCondition, match="takes no literal operand"):
            Cond(op="assert", key="member", rhs=ScalarValue(True))

    @pytest.mark.parametrize("op,rhs", [
        ("eq", None),
        ("eq", ListValue((1, 2))),
        ("between", ScalarValue(1)),
        ("in", ScalarValue(1)),
        ("greater_than", RangeValue(1, 2)),
    ])
    def test_wrong_operand_shape(self, op, rhs):
        with pytest.raises(MalformedCondition, match="requires"):
            Cond(op=op, key="k", rhs=rhs)

    @pytest.mark.parametrize("op,rhs", [
        ("greater_than", ScalarValue("gold")),
        ("less_than_or_equal", ScalarValue(Symbol("high"))),
        ("greater_than", ScalarValue(True)),
        ("between", RangeValue(1, "high")),
        ("between", RangeValue(None, 10)),
    ])
    def test_ordering_needs_orderable_literal(self, op, rhs):
        with pytest.raises(MalformedCondition, match="number or timestamp literal"):
            Cond(op=op, key="amount", rhs=rhs)

    @pytest.mark.parametrize("rhs", [
        ScalarValue(2.5),
        ScalarValue("2015-01-01T00:00:00zUTC"),
        RangeValue("2015-12-01T00:00:00", "2015-12-24T23:59:59"),
    ])
    def test_ordering_accepts_numbers_and_timestamps(self, rhs):
        op = "between" if isinstance(rhs, RangeValue) else "less_than"
        assert Cond(op=op, key="amount", rhs=rhs).op == op

    def test_children_frozen_to_tuple(self):
        child = Cond(op="assert", key="vip")
        cond = Cond(op="assert", key="member", children=[child])
        assert cond.children == (child,)

    def test_nodes_are_immutable(self):
        cond = Cond(op="eq", key="tier", rhs=ScalarValue("gold"))
        with pytest.raises(FrozenInstanceError):
            cond.key = "other"

    def test_bad_weekday_rejected_at_construction(self):
        with pytest.raises(MalformedCondition, match="weekday"):
            Cond(op="day_of_week", key="ts", rhs=ScalarValue("funday"))

    def test_reserved_kind_constructs(self):
        cond = Cond(op="in_cyclic_order", key="season", rhs=ScalarValue(("spring", "summer")))
        assert cond.op == "in_cyclic_order"


class TestWeekdayLiteral:

    @pytest.mark.parametrize("literal,expected", [
        ("sunday", 0),
        ("Saturday", 6),
        ("sat", 6),
        ("FRI", 5),
        (Symbol("saturday"), 6),
        (0, 0),
        (6, 6),
    ])
    def test_valid_literals(self, literal, expected):
        assert weekday_literal_index(literal) == expected

    @pytest.mark.parametrize("literal", [7, -1, True, "someday", 2.0, None])
    def test_invalid_literals(self, literal):
        with pytest.raises(MalformedCondition):
            weekday_literal_index(literal)


# =============================================================================
# Combinators
# =============================================================================

class TestCombinators:

    def test_list_children_frozen(self):
        a = Cond(op="assert", key="a")
        assert AllExpr([a]).children == (a,)
        assert AnyExpr([a]).children == (a,)

    def test_cond_pairs(self):
        a, b, c, d = (Cond(op="assert", key=k) for k in "abcd")
        expr = CondExpr((a, b, c, d))
        assert expr.is_well_formed
        assert expr.pairs() == [(a, b), (c, d)]

    def test_odd_cond_constructs_but_pairs_raises(self):
        a = Cond(op="assert", key="a")
        expr = CondExpr((a,))
        assert not expr.is_well_formed
        with pytest.raises(MalformedCondition, match="even number"):
            expr.pairs()

    def test_tz_requires_zone(self):
        with pytest.raises(MalformedCondition, match="zone"):
            TzExpr("", ())


# =============================================================================
# Utilities
# =============================================================================

class TestTreeUtilities:

    @pytest.fixture
    def tree(self):
        return AllExpr((
            Cond(op="greater_than_or_equal", key="amount", rhs=ScalarValue(300)),
            AnyExpr((
                Cond(op="eq", key="tier", rhs=ScalarValue(Symbol("gold"))),
                TzExpr("America/New_York", (
                    Cond(op="between", key="ts", rhs=RangeValue(
                        "2015-12-01T00:00:00", "2015-12-24T23:59:59")),
                )),
            )),
        ))

    def test_referenced_keys(self, tree):
        assert get_referenced_keys(tree) == {"amount", "tier", "ts"}

    def test_depth_and_count(self, tree):
        assert get_tree_depth(tree) == 4
        assert count_nodes(tree) == 6

    def test_expr_to_dict(self, tree):
        data = expr_to_dict(tree)
        amount, any_part = data["all"]
        assert amount == {"greater_than_or_equal": {"key": "amount", "value": 300}}
        tier, tz = any_part["any"]
        assert tier == {"eq": {"key": "tier", "value": ":gold"}}
        assert tz["tz"]["zone"] == "America/New_York"
        assert tz["tz"]["children"][0]["between"]["low"] == "2015-12-01T00:00:00"

    def test_list_value_serialized(self):
        cond = Cond(op="in", key="tier", rhs=ListValue(("gold", Symbol("platinum"))))
        assert expr_to_dict(cond) == {"in": {"key": "tier", "values": ["gold", ":platinum"]}}
