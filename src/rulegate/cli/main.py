"""Main CLI entry point for rulegate.

Evaluates declarative rule sets against documents from the command line.
"""

from pathlib import Path
from typing import Any
import json
import sys

import click
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from rulegate import __version__
from rulegate.config import load_settings, set_global_settings
from rulegate.engine.validation_context import ValidationContext
from rulegate.logging import configure_logging
from rulegate.reporting import LoggingSink
from rulegate.rules.base import RuleResult
from rulegate.rules.registry import RuleRegistry
from rulegate.rulesets.base import RuleSetBuilder
from rulegate.rulesets.loader import RuleSetLoader, load_ruleset

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="rulegate")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="Settings YAML file")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (overrides the settings file)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: str | None, log_level: str | None) -> None:
    """Rulegate - Evaluate business rules and report violations."""
    settings = load_settings(config_path, log_level=log_level)
    set_global_settings(settings)
    configure_logging(settings)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["settings"] = settings


@cli.command()
@click.argument("ruleset_path", type=click.Path(exists=True))
@click.argument("data_path", type=click.Path(exists=True))
@click.option("--format", "-f", "output_format", type=click.Choice(["table", "json"]), default="table", help="Output format")
@click.option("--report", is_flag=True, help="Forward violations to the log sink")
@click.pass_context
def check(
    ctx: click.Context,
    ruleset_path: str,
    data_path: str,
    output_format: str,
    report: bool,
) -> None:
    """Evaluate a rule set against a document.

    RULESET_PATH is the rule set YAML file; DATA_PATH is a JSON or YAML
    document. Exits with status 1 when any rule is violated.
    """
    verbose = ctx.obj.get("verbose", False)

    try:
        ruleset = load_ruleset(ruleset_path)
        data = _load_document(Path(data_path))
        context = ruleset.build_context(
            data,
            sink=LoggingSink() if report else None,
            settings=ctx.obj["settings"],
        )
        context.render_rules()
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
        sys.exit(2)

    if output_format == "json":
        click.echo(json.dumps(context.summary(), indent=2, default=str))
    else:
        _print_context(ruleset.name, context)

    if context.has_rule_violations():
        sys.exit(1)


@cli.command()
@click.pass_context
def list_rules(ctx: click.Context) -> None:
    """List available rule types."""
    registry = RuleRegistry()

    table = Table(title="Available Rule Types")
    table.add_column("Type", style="cyan")
    table.add_column("Class")
    table.add_column("Description")

    for type_name in registry.list_types():
        rule_class = registry.get(type_name)
        doc = (rule_class.__doc__ or "").strip().splitlines()
        table.add_row(type_name, rule_class.__name__, doc[0] if doc else "-")

    console.print(table)


@cli.command()
@click.argument("path", type=click.Path(exists=True))
@click.pass_context
def validate(ctx: click.Context, path: str) -> None:
    """Check the structure of a rule set file.

    PATH is the path to the YAML file to validate.
    """
    loader = RuleSetLoader()

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        console.print(f"[red]Error loading file: {e}[/red]")
        sys.exit(1)

    problems = loader.check(data)
    if problems:
        console.print(f"\n{path}: [red]INVALID[/red]")
        for problem in problems:
            console.print(f"  [red]ERROR[/red]: {problem}")
        sys.exit(1)

    console.print(f"\n{path}: [green]VALID[/green]")


@cli.command()
@click.option("--name", "-n", required=True, help="Rule set name")
@click.option("--output", "-o", type=click.Path(), default="ruleset.yaml", help="Output file path")
@click.pass_context
def init_ruleset(ctx: click.Context, name: str, output: str) -> None:
    """Initialize a new rule set file.

    Creates a template rule set YAML file.
    """
    ruleset = (
        RuleSetBuilder(name)
        .description(f"Rules for {name}")
        .rule("string_range", "title", "Title is required.", field="title", min_length=3, max_length=200)
        .rule("range", "capacity", "Capacity must be between 1 and 500.", field="capacity", start=1, end=500)
        .rule("is_true", "published", "Course must be published.", field="published", severity="warning", priority=10)
        .build()
    )

    RuleSetLoader().save_file(ruleset, output)

    console.print(f"[green]Created rule set: {output}[/green]")


def _load_document(path: Path) -> Any:
    text = path.read_text()
    if path.suffix == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


def _print_context(name: str, context: ValidationContext) -> None:
    """Print evaluation results."""
    status = "[red]VIOLATIONS[/red]" if context.has_rule_violations() else "[green]VALID[/green]"

    table = Table(title=f"{name}: {context.state.value}")
    table.add_column("Rule", style="cyan")
    table.add_column("Result")
    table.add_column("Severity")
    table.add_column("Message")

    for result in context.results:
        _add_result_rows(table, result, depth=0)

    console.print(table)
    console.print(Panel.fit(
        f"{status}\n"
        f"Rules: {len(context.rules)}  Violations: {len(context.violations())}",
        title="Summary",
    ))


def _add_result_rows(table: Table, result: RuleResult, depth: int) -> None:
    color = {
        "exception": "red",
        "warning": "yellow",
        "information": "blue",
    }.get(result.severity.value, "white")

    table.add_row(
        "  " * depth + result.name,
        "[green]pass[/green]" if result.is_valid else f"[{color}]fail[/{color}]",
        result.severity.value,
        result.message or "-",
    )
    for child in result.children:
        _add_result_rows(table, child, depth + 1)


if __name__ == "__main__":
    cli()
