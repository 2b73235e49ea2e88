"""
Shared pytest fixtures for rulewise tests.

Time zone tests use FixedOffsetDatabase so results never depend on the
host's zone database.
"""

import pytest

from rulewise.config import reset_config
from rulewise.rules.context import EvalContext
from rulewise.rules.dsl_nodes import Cond, ScalarValue
from rulewise.rules.evaluation import ExprEvaluator
from rulewise.rules.ruleset import Outcome, RuleSet
from rulewise.rules.timezones import FixedOffsetDatabase
from rulewise.rules.types import Symbol


RULEWISE_ENV_VARS = (
    "RULEWISE_DEFAULT_ZONE",
    "RULEWISE_INHERIT_TZ_SCOPE",
    "RULEWISE_LOG_LEVEL",
    "RULEWISE_LOG_DIR",
    "RULEWISE_TRACE",
)


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Every test starts from default configuration."""
    for name in RULEWISE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def tz_db() -> FixedOffsetDatabase:
    """Deterministic zones: New York -5h, Denver -7h, Tokyo +9h (no DST)."""
    return FixedOffsetDatabase({
        "America/New_York": -5,
        "America/Denver": -7,
        "Asia/Tokyo": 9,
    })


@pytest.fixture
def evaluator() -> ExprEvaluator:
    return ExprEvaluator()


@pytest.fixture
def make_ctx(tz_db):
    """Factory for EvalContext bound to the fixed-offset database."""
    def _make(facts=None, **kwargs) -> EvalContext:
        kwargs.setdefault("tz_database", tz_db)
        return EvalContext(facts or {}, **kwargs)
    return _make


@pytest.fixture
def check(evaluator, make_ctx):
    """Evaluate an expression against facts and return the boolean."""
    def _check(expr, facts=None, **kwargs) -> bool:
        return evaluator.evaluate(expr, make_ctx(facts, **kwargs)).ok
    return _check


@pytest.fixture
def pricing_ruleset(tz_db) -> RuleSet:
    """
    Friday pricing tiers.

    Top-level: day_of_week eq :friday
    Outcomes: amount >= 300 -> 8, amount >= 100 -> 7, always -> 3
    Fallback: 0
    """
    return RuleSet(
        conditions=(Cond(op="eq", key="day_of_week", rhs=ScalarValue(Symbol("friday"))),),
        outcomes=(
            Outcome(8, when=Cond(op="greater_than_or_equal", key="amount", rhs=ScalarValue(300))),
            Outcome(7, when=Cond(op="greater_than_or_equal", key="amount", rhs=ScalarValue(100))),
            Outcome(3),
        ),
        fallback=0,
        name="pricing",
        tz_database=tz_db,
    )
