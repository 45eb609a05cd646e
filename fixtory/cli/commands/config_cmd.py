"""Config command for viewing and managing fixtory configuration."""

import typer

from ..app import app, console, get_json_mode
from ..utils import Output
from ...config import (
    CONFIG_FILE,
    STRATEGY_NAMES,
    get_config,
    reset_config,
)


VALID_KEYS = {
    "engine.default_strategy",
    "engine.association_strategy",
    "engine.max_association_depth",
    "loader.model_modules",
    "loader.factory_paths",
}

INT_FIELDS = {"max_association_depth"}
STRATEGY_FIELDS = {"default_strategy", "association_strategy"}
LIST_FIELDS = {"model_modules", "factory_paths"}


@app.command("config")
def config_command(
    action: str = typer.Argument(
        ...,
        help="Action: show, set, reset",
    ),
    key: str | None = typer.Argument(
        None,
        help="Config key (e.g. engine.default_strategy, loader.model_modules)",
    ),
    value: str | None = typer.Argument(
        None,
        help="Value to set (comma-separated for lists)",
    ),
):
    """View or modify fixtory configuration.

    Examples:
        fixtory config show
        fixtory config set engine.default_strategy build
        fixtory config set loader.model_modules myapp.models,myapp.billing
        fixtory config reset
    """
    if action == "show":
        _show_config()
    elif action == "set":
        if not key or value is None:
            console.print("[red]Usage:[/red] fixtory config set <key> <value>")
            console.print()
            console.print("Available keys:")
            for k in sorted(VALID_KEYS):
                console.print(f"  {k}")
            raise typer.Exit(1)
        _set_config(key, value)
    elif action == "reset":
        _reset_config()
    else:
        console.print(f"[red]Unknown action:[/red] {action}")
        console.print("Valid actions: show, set, reset")
        raise typer.Exit(1)


def _show_config():
    """Display current resolved configuration."""
    config = get_config()

    if get_json_mode():
        out = Output(console=console, json_mode=True)
        out.set_data("config", config.to_dict())
        out.set_data("config_file", str(CONFIG_FILE))
        raise typer.Exit(out.finish())

    console.print()
    console.print("[bold]Fixtory Configuration[/bold]")
    console.print("─" * 40)

    console.print()
    console.print("[bold cyan]Engine[/bold cyan]")
    console.print(f"  default_strategy      = {config.engine.default_strategy}")
    console.print(f"  association_strategy  = {config.engine.association_strategy}")
    console.print(f"  max_association_depth = {config.engine.max_association_depth}")

    console.print()
    console.print("[bold cyan]Loader[/bold cyan] (YAML factory files)")
    modules = ", ".join(config.loader.model_modules) or "[dim](none)[/dim]"
    paths = ", ".join(config.loader.factory_paths) or "[dim](none)[/dim]"
    console.print(f"  model_modules = {modules}")
    console.print(f"  factory_paths = {paths}")

    console.print()
    if CONFIG_FILE.exists():
        console.print(f"Config file: {CONFIG_FILE}")
    else:
        console.print(f"Config file: [dim]not created yet[/dim] ({CONFIG_FILE})")
    console.print()


def _set_config(key: str, value: str):
    """Set a config value and save."""
    if key not in VALID_KEYS:
        console.print(f"[red]Unknown key:[/red] {key}")
        console.print()
        console.print("Available keys:")
        for k in sorted(VALID_KEYS):
            console.print(f"  {k}")
        raise typer.Exit(1)

    # Load current config (or defaults if no file)
    config = get_config()

    zone, field_name = key.split(".", 1)
    target = config.engine if zone == "engine" else config.loader

    # Type coercion
    if field_name in INT_FIELDS:
        try:
            parsed = int(value)
        except ValueError:
            console.print(f"[red]Invalid integer value:[/red] {value}")
            raise typer.Exit(1)
        if parsed < 1:
            console.print(f"[red]Value must be at least 1:[/red] {value}")
            raise typer.Exit(1)
        setattr(target, field_name, parsed)
    elif field_name in STRATEGY_FIELDS:
        if value not in STRATEGY_NAMES:
            console.print(f"[red]Invalid strategy:[/red] {value}")
            console.print(f"Valid strategies: {', '.join(STRATEGY_NAMES)}")
            raise typer.Exit(1)
        setattr(target, field_name, value)
    elif field_name in LIST_FIELDS:
        setattr(target, field_name, [v.strip() for v in value.split(",") if v.strip()])
    else:
        setattr(target, field_name, value)

    config.save()
    reset_config()  # Clear cached singleton so next get_config() reloads

    console.print(f"[green]✓[/green] Set {key} = {value}")
    console.print(f"  Saved to {CONFIG_FILE}")


def _reset_config():
    """Reset config to defaults."""
    if CONFIG_FILE.exists():
        CONFIG_FILE.unlink()
        reset_config()
        console.print("[green]✓[/green] Config reset to defaults")
        console.print(f"  Removed {CONFIG_FILE}")
    else:
        console.print("Config already at defaults (no config file exists)")
