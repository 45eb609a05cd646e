"""List and show commands for factory files."""

from pathlib import Path

import typer

from ...core.errors import FixtoryError
from ..app import app, console, get_json_mode
from ..utils import ExitCode, Output, load_registry


def _class_label(class_spec) -> str:
    if class_spec is None:
        return "-"
    if isinstance(class_spec, type):
        return class_spec.__name__
    return str(class_spec)


@app.command("list")
def list_command(
    files: list[Path] = typer.Argument(
        None, help="Factory YAML files (default: loader.factory_paths)"
    ),
):
    """List the factories declared in one or more files.

    Example:
        fixtory list factories/users.yaml factories/posts.yaml
    """
    out = Output(console=console, json_mode=get_json_mode())
    registry = load_registry(files, out)
    if registry is None:
        raise typer.Exit(out.finish())

    rows = []
    for name in registry.names():
        declared = registry.get(name)
        strategy = declared.default_strategy.value if declared.default_strategy else "-"
        rows.append(
            [
                name,
                _class_label(declared.class_),
                declared.parent or "-",
                strategy,
                str(len(declared.attributes)),
                str(len(declared.callbacks)),
            ]
        )

    out.table(
        "Factories",
        ["Name", "Class", "Parent", "Strategy", "Attributes", "Callbacks"],
        rows,
    )
    out.success(f"{len(rows)} factories", count=len(rows))
    raise typer.Exit(out.finish())


@app.command("show")
def show_command(
    files: list[Path] = typer.Argument(
        None, help="Factory YAML files (default: loader.factory_paths)"
    ),
    factory: str = typer.Option(..., "--factory", "-f", help="Factory to show"),
):
    """Show the effective definition of one factory, inheritance included.

    Example:
        fixtory show factories.yaml --factory admin
    """
    out = Output(console=console, json_mode=get_json_mode())
    registry = load_registry(files, out)
    if registry is None:
        raise typer.Exit(out.finish())

    try:
        effective = registry.resolve(factory)
    except FixtoryError as exc:
        out.error(str(exc), exit_code=ExitCode.GENERATION_ERROR)
        raise typer.Exit(out.finish())

    strategy = effective.default_strategy.value if effective.default_strategy else None
    out.set_data("factory", effective.name)
    out.set_data("class", _class_label(effective.class_))
    out.set_data("lineage", effective.lineage)
    out.set_data("default_strategy", strategy)

    out.text(f"[bold]{effective.name}[/bold]  ({' -> '.join(effective.lineage)})")
    out.text(f"  class            = {_class_label(effective.class_)}")
    out.text(f"  default_strategy = {strategy or '[dim](config default)[/dim]'}")

    out.table(
        "Attributes",
        ["Name", "Kind", "Definition"],
        [[a.name, a.kind, a.describe()] for a in effective.attributes],
    )
    out.table(
        "Callbacks",
        ["Hook", "Declared in", "Function"],
        [
            [cb.name.value, cb.factory, getattr(cb.fn, "__name__", "callable")]
            for cb in effective.callbacks
        ],
    )
    raise typer.Exit(out.finish())
