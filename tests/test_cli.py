"""
Tests for the rulewise command line.
"""

import json
from textwrap import dedent

import pytest

from rulewise.cli import load_context, main
from rulewise.rules.types import Symbol
from rulewise.utils import setup_logger


RULES = dedent("""
    name: pricing
    conditions:
      - eq: [":friday", day_of_week]
    outcomes:
      - value: 8
        when:
          - greater_than_or_equal: [300, amount]
      - value: 7
        when:
          - greater_than_or_equal: [100, amount]
      - value: 3
    fallback: 0
""")


@pytest.fixture(autouse=True)
def quiet_logger():
    """Fresh logger bound to the captured streams, decisions suppressed."""
    setup_logger(log_level="WARNING")


@pytest.fixture
def rules_file(tmp_path):
    path = tmp_path / "pricing.yml"
    path.write_text(RULES, encoding="utf-8")
    return path


def write_json(tmp_path, name, data):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestEvaluate:

    @pytest.mark.parametrize("context,expected,matched", [
        ({"day_of_week": "friday", "amount": 314}, 8, 0),
        ({"day_of_week": "friday", "amount": 256}, 7, 1),
        ({"day_of_week": "friday", "amount": 99}, 3, 2),
        ({"day_of_week": "monday", "amount": 124}, 0, None),
    ])
    def test_json_output(self, tmp_path, rules_file, capsys, context, expected, matched):
        ctx = write_json(tmp_path, "ctx.json", context)
        code = main(["evaluate", str(rules_file), "--context", str(ctx), "--json"])
        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["ruleset"] == "pricing"
        assert output["value"] == expected
        assert output["matched_outcome"] == matched
        assert "trace" not in output

    def test_trace_json(self, tmp_path, rules_file, capsys):
        ctx = write_json(tmp_path, "ctx.json", {"day_of_week": "friday", "amount": 256})
        main(["evaluate", str(rules_file), "--context", str(ctx), "--json", "--trace"])
        output = json.loads(capsys.readouterr().out)
        assert output["trace"][-1] == "RESULT: outcome[1] -> 7"

    def test_trace_default_from_config(self, tmp_path, rules_file, capsys, monkeypatch):
        monkeypatch.setenv("RULEWISE_TRACE", "true")
        ctx = write_json(tmp_path, "ctx.json", {"day_of_week": "friday", "amount": 256})
        main(["evaluate", str(rules_file), "--context", str(ctx), "--json"])
        assert "trace" in json.loads(capsys.readouterr().out)

    def test_yaml_context_and_rich_output(self, tmp_path, rules_file, capsys):
        ctx = tmp_path / "ctx.yml"
        ctx.write_text("day_of_week: :friday\namount: 314\n", encoding="utf-8")
        code = main(["evaluate", str(rules_file), "--context", str(ctx), "--trace"])
        assert code == 0
        out = capsys.readouterr().out
        assert "pricing" in out
        assert "outcome[0]" in out

    def test_rule_error_exit_code(self, tmp_path, capsys):
        rules = tmp_path / "bad.yml"
        rules.write_text("outcomes:\n  - value: 1\n    when:\n      - gt: [1, name]\n",
                         encoding="utf-8")
        ctx = write_json(tmp_path, "ctx.json", {"name": "text"})
        code = main(["evaluate", str(rules), "--context", str(ctx)])
        assert code == 1
        assert "TypeMismatch" in capsys.readouterr().out

    def test_missing_context_file(self, rules_file, tmp_path, capsys):
        code = main(["evaluate", str(rules_file), "--context", str(tmp_path / "nope.json")])
        assert code == 1
        assert "not found" in capsys.readouterr().out


class TestValidate:

    def test_valid_json_summary(self, rules_file, capsys):
        code = main(["validate", str(rules_file), "--json"])
        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["status"] == "pass"
        assert output["conditions"] == 1
        assert output["outcomes"] == 3
        sections = [row["section"] for row in output["rows"]]
        assert sections == ["condition[0]", "outcome[0]", "outcome[1]", "outcome[2]", "fallback"]
        assert output["rows"][1]["keys"] == ["amount"]

    def test_tree_size_in_summary(self, tmp_path, capsys):
        rules = tmp_path / "nested.yml"
        rules.write_text(dedent("""
            outcomes:
              - value: gold
                when:
                  - any:
                      - in: [[gold, platinum], tier]
                      - all:
                          - assert: member
                          - gte: [100, amount]
              - value: basic
        """), encoding="utf-8")
        assert main(["validate", str(rules), "--json"]) == 0
        gold, basic, fallback = json.loads(capsys.readouterr().out)["rows"]
        assert (gold["nodes"], gold["depth"]) == (5, 3)
        assert (basic["nodes"], basic["depth"]) == (0, 0)
        assert fallback["nodes"] == 0

    def test_valid_table(self, rules_file, capsys):
        assert main(["validate", str(rules_file)]) == 0
        assert "ruleset is valid" in capsys.readouterr().out

    @pytest.mark.parametrize("document", [
        "outcomes:\n  - value: 1\n    when:\n      - cond: [{assert: a}]\n",
        "outcomes:\n  - value: 1\n    when:\n      - near_pct: [1, a]\n",
        "",
    ])
    def test_malformed_exit_code(self, tmp_path, capsys, document):
        rules = tmp_path / "bad.yml"
        rules.write_text(document, encoding="utf-8")
        assert main(["validate", str(rules)]) == 1
        assert "FAIL" in capsys.readouterr().out

    def test_requires_subcommand(self):
        with pytest.raises(SystemExit):
            main([])


class TestLoadContext:

    def test_symbols_in_context(self, tmp_path):
        path = write_json(tmp_path, "ctx.json", {"day": ":friday", "tags": [":vip", "new"]})
        assert load_context(str(path)) == {"day": Symbol("friday"), "tags": (Symbol("vip"), "new")}

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "ctx.yml"
        path.write_text("", encoding="utf-8")
        assert load_context(str(path)) == {}

    def test_non_mapping(self, tmp_path):
        path = write_json(tmp_path, "ctx.json", [1, 2])
        with pytest.raises(ValueError, match="mapping"):
            load_context(str(path))
