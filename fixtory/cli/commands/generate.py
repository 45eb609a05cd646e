"""Generate commands: run factories from files and print the results."""

from pathlib import Path

import typer

from ...core.enums import Strategy
from ...core.errors import FixtoryError
from ..app import app, console, get_json_mode
from ..utils import ExitCode, Output, load_registry, parse_assignments, to_jsonable


def _generate(
    files: list[Path] | None,
    factory: str,
    strategy: Strategy,
    assignments: list[str] | None,
    count: int,
) -> int:
    out = Output(console=console, json_mode=get_json_mode())
    overrides = parse_assignments(assignments)

    registry = load_registry(files, out)
    if registry is None:
        return out.finish()

    try:
        results = registry.run_batch(factory, count, strategy, **overrides)
    except FixtoryError as exc:
        out.error(str(exc), exit_code=ExitCode.GENERATION_ERROR)
        return out.finish()

    rendered = [to_jsonable(result) for result in results]
    out.set_data("factory", factory)
    out.set_data("strategy", strategy.value)
    out.set_data("results", rendered)

    if not out.json_mode:
        for index, item in enumerate(rendered, start=1):
            if count > 1:
                console.print(f"[bold cyan]#{index}[/bold cyan]")
            for key, value in item.items():
                console.print(f"  {key} = {value!r}", markup=False)
    out.success(f"Generated {count} x {factory} ({strategy.value})", count=count)
    return out.finish()


@app.command("attributes")
def attributes_command(
    files: list[Path] = typer.Argument(
        None, help="Factory YAML files (default: loader.factory_paths)"
    ),
    factory: str = typer.Option(..., "--factory", "-f", help="Factory to run"),
    assignments: list[str] = typer.Option(
        None, "--set", "-s", help="Override an attribute: key=value (repeatable)"
    ),
    count: int = typer.Option(1, "--count", "-n", min=1, help="How many to generate"),
):
    """Print attribute mappings (attributes_for) for a factory.

    Example:
        fixtory attributes factories.yaml -f user --set first_name=Bill -n 3
    """
    raise typer.Exit(
        _generate(files, factory, Strategy.ATTRIBUTES_FOR, assignments, count)
    )


@app.command("stub")
def stub_command(
    files: list[Path] = typer.Argument(
        None, help="Factory YAML files (default: loader.factory_paths)"
    ),
    factory: str = typer.Option(..., "--factory", "-f", help="Factory to stub"),
    assignments: list[str] = typer.Option(
        None, "--set", "-s", help="Override an attribute: key=value (repeatable)"
    ),
    count: int = typer.Option(1, "--count", "-n", min=1, help="How many to generate"),
):
    """Print stubbed objects (id plus attributes) for a factory.

    Example:
        fixtory stub factories.yaml -f post
    """
    raise typer.Exit(_generate(files, factory, Strategy.STUB, assignments, count))
