"""
rulewise - command line entry point.

Thin shell over the rules package: loads documents, calls RuleSet, prints.

    rulewise evaluate rules/pricing.yml --context order.json [--trace] [--json]
    rulewise validate rules/pricing.yml [--json]
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

import yaml
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import get_config
from .rules import RuleError, RuleSet, load_ruleset
from .rules.dsl_nodes import count_nodes, get_referenced_keys, get_tree_depth
from .rules.dsl_parser import parse_literal
from .rules.dsl_nodes.utils import literal_to_plain
from .utils import get_logger

console = Console()


def parse_cli_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="rulewise",
        description="rulewise - evaluate decision tables written in YAML",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rulewise evaluate rules/pricing.yml --context order.json
  rulewise evaluate rules/pricing.yml --context order.yml --trace
  rulewise validate rules/pricing.yml
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    evaluate_parser = subparsers.add_parser("evaluate", help="Evaluate a ruleset against a context file")
    evaluate_parser.add_argument("rules", help="Ruleset YAML file")
    evaluate_parser.add_argument("--context", required=True, help="Context file (.json, .yml or .yaml)")
    evaluate_parser.add_argument("--trace", action="store_true", default=None, help="Print per-outcome results")
    evaluate_parser.add_argument("--json", action="store_true", dest="json_output", help="Output result as JSON")

    validate_parser = subparsers.add_parser("validate", help="Parse a ruleset and print a summary")
    validate_parser.add_argument("rules", help="Ruleset YAML file")
    validate_parser.add_argument("--json", action="store_true", dest="json_output", help="Output summary as JSON")

    return parser.parse_args(argv)


def load_context(path: str) -> dict:
    """
    Load a context mapping from JSON or YAML.

    String values starting with ":" become symbolic labels, as in rulesets.
    """
    context_path = Path(path)
    if not context_path.exists():
        raise FileNotFoundError(f"Context file not found: {context_path}")

    with open(context_path, "r", encoding="utf-8") as f:
        if context_path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Context must be a mapping, got {type(data).__name__}")
    return {str(key): parse_literal(value) for key, value in data.items()}


def _summary_rows(ruleset: RuleSet) -> list[dict]:
    rows = []
    for index, condition in enumerate(ruleset.conditions):
        rows.append({
            "section": f"condition[{index}]",
            "value": "",
            "keys": sorted(get_referenced_keys(condition)),
            "nodes": count_nodes(condition),
            "depth": get_tree_depth(condition),
            "expr": repr(condition),
        })
    for index, outcome in enumerate(ruleset.outcomes):
        rows.append({
            "section": f"outcome[{index}]",
            "value": literal_to_plain(outcome.value),
            "keys": sorted(get_referenced_keys(outcome.when)) if outcome.when else [],
            "nodes": count_nodes(outcome.when) if outcome.when else 0,
            "depth": get_tree_depth(outcome.when) if outcome.when else 0,
            "expr": repr(outcome.when) if outcome.when else "(always)",
        })
    rows.append({
        "section": "fallback",
        "value": literal_to_plain(ruleset.fallback),
        "keys": [],
        "nodes": 0,
        "depth": 0,
        "expr": "",
    })
    return rows


def handle_evaluate(args) -> int:
    """Handle `evaluate` subcommand."""
    logger = get_logger()
    trace = get_config().cli.trace if args.trace is None else args.trace

    ruleset = load_ruleset(args.rules)
    context = load_context(args.context)
    decision = ruleset.decide(context, trace=trace)
    logger.decision(ruleset.name, decision.value, decision.matched_outcome)

    if args.json_output:
        output = {
            "ruleset": ruleset.name,
            "value": literal_to_plain(decision.value),
            "matched_outcome": decision.matched_outcome,
            "guard_passed": decision.guard_passed,
            "forced_keys": list(decision.forced_keys),
        }
        if decision.trace is not None:
            output["trace"] = decision.trace.format_lines()
        print(json.dumps(output, indent=2, default=str))
        return 0

    source = "fallback" if decision.is_fallback else f"outcome[{decision.matched_outcome}]"
    console.print(Panel(
        f"[bold cyan]{ruleset.name}[/]\n"
        f"Value: [bold]{escape(repr(decision.value))}[/] | Source: {source} | "
        f"Guard: {'pass' if decision.guard_passed else 'fail'}",
        border_style="cyan",
    ))
    if decision.trace is not None:
        for line in decision.trace.format_lines():
            console.print(f"[dim]{escape(line)}[/]", highlight=False)
    return 0


def handle_validate(args) -> int:
    """Handle `validate` subcommand."""
    ruleset = load_ruleset(args.rules)
    rows = _summary_rows(ruleset)

    if args.json_output:
        output = {
            "status": "pass",
            "ruleset": ruleset.name,
            "conditions": len(ruleset.conditions),
            "outcomes": len(ruleset.outcomes),
            "rows": rows,
        }
        print(json.dumps(output, indent=2, default=str))
        return 0

    table = Table(title=f"{ruleset.name}", show_lines=False)
    table.add_column("Section", style="cyan")
    table.add_column("Value")
    table.add_column("Keys", style="dim")
    table.add_column("Nodes", justify="right")
    table.add_column("Depth", justify="right")
    table.add_column("Expression")
    for row in rows:
        value = escape(repr(row["value"])) if row["value"] != "" else ""
        table.add_row(
            row["section"],
            value,
            ", ".join(row["keys"]),
            str(row["nodes"]),
            str(row["depth"]),
            escape(row["expr"]),
        )
    console.print(table)

    settings = Table(show_header=False, box=None)
    for key, value in get_config().summary().items():
        settings.add_row(f"[dim]{key}[/]", str(value))
    console.print(settings)
    console.print("[bold green]OK ruleset is valid[/]")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_cli_args(argv)
    handlers = {
        "evaluate": handle_evaluate,
        "validate": handle_validate,
    }
    try:
        return handlers[args.command](args)
    except RuleError as e:
        console.print(f"[bold red]FAIL {type(e).__name__}: {escape(str(e))}[/]", highlight=False)
        return 1
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        console.print(f"[bold red]FAIL {escape(str(e))}[/]", highlight=False)
        return 1


if __name__ == "__main__":
    sys.exit(main())
