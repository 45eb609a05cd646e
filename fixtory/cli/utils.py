"""CLI utilities for dual-mode output (human-friendly + machine-readable).

This module provides utilities for CLI commands to support both:
- Human mode (default): Rich formatting with colors and tables
- Machine mode (--json): Structured JSON output for scripts

Example:
    from ..utils import Output, ExitCode

    @app.command()
    def my_command():
        out = Output(console=console, json_mode=get_json_mode())
        out.success("Loaded factories", count=3)
        out.table("Factories", ["Name", "Class"], [["user", "User"]])
        raise typer.Exit(out.finish())
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from pydantic import BaseModel, PrivateAttr, ConfigDict
from rich.console import Console
from rich.table import Table

from ..config import get_config
from ..core.errors import FixtoryError
from ..core.registry import FactoryRegistry


class ExitCode:
    """Standardized exit codes for CLI commands.

        0 = Success
        1 = Validation error (fix the factory file first)
        3 = File not found
        4 = Generation error (resolution or strategy failure)
    """

    SUCCESS = 0
    VALIDATION_ERROR = 1
    FILE_NOT_FOUND = 3
    GENERATION_ERROR = 4


class Output(BaseModel):
    """Dual-mode output handler for CLI commands.

    In human mode: Uses Rich for pretty terminal output with colors and formatting.
    In JSON mode: Collects structured data and outputs JSON at the end.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    console: Console
    json_mode: bool = False

    _data: dict[str, Any] = PrivateAttr()
    _exit_code: int = PrivateAttr(default=ExitCode.SUCCESS)

    def model_post_init(self, __context: Any) -> None:
        # Ensure _data is a fresh dict for each instance
        self._data = {
            "status": "success",
            "errors": [],
        }

    def success(self, message: str, **data: Any) -> None:
        """Output a success message with optional data."""
        if self.json_mode:
            self._data.update(data)
        else:
            self.console.print(f"[green]✓[/green] {message}")

    def error(
        self,
        message: str,
        *,
        suggestion: str | None = None,
        exit_code: int = ExitCode.VALIDATION_ERROR,
    ) -> None:
        """Output an error message and set exit code."""
        self._exit_code = exit_code
        self._data["status"] = "error"

        if self.json_mode:
            error_obj: dict[str, Any] = {"message": message}
            if suggestion:
                error_obj["suggestion"] = suggestion
            self._data["errors"].append(error_obj)
        else:
            self.console.print(f"[red]✗[/red] {message}")
            if suggestion:
                self.console.print(f"  [dim]→ {suggestion}[/dim]")

    def text(self, message: str) -> None:
        """Output plain text (human mode only)."""
        if not self.json_mode:
            self.console.print(message)

    def table(
        self,
        title: str,
        columns: list[str],
        rows: list[list[str]],
        *,
        data_key: str | None = None,
    ) -> None:
        """Output a formatted table.

        Args:
            title: Table title
            columns: Column headers
            rows: Table rows (list of lists)
            data_key: Key to use in JSON output (defaults to snake_case of title)
        """
        key = data_key or title.lower().replace(" ", "_")

        if self.json_mode:
            self._data[key] = [dict(zip(columns, row)) for row in rows]
        else:
            table = Table(title=title, show_header=True, header_style="bold")
            for col in columns:
                table.add_column(col)
            for row in rows:
                table.add_row(*row)
            self.console.print(table)

    def set_data(self, key: str, value: Any) -> None:
        """Set arbitrary data in JSON output."""
        self._data[key] = value

    def finish(self) -> int:
        """Finalize output and return exit code.

        In JSON mode, prints the accumulated data as JSON to stdout.
        """
        if self.json_mode:
            self._data["exit_code"] = self._exit_code
            print(json.dumps(self._data, indent=2, default=str))

        return self._exit_code


def parse_assignments(assignments: list[str] | None) -> dict[str, Any]:
    """Parse ``--set key=value`` options; values are read as YAML scalars.

    Raises:
        typer.BadParameter: If an assignment has no '='
    """
    import yaml

    overrides: dict[str, Any] = {}
    for item in assignments or []:
        key, sep, raw = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got {item!r}")
        overrides[key.strip()] = yaml.safe_load(raw) if raw else ""
    return overrides


def load_registry(files: list[Path] | None, out: Output) -> FactoryRegistry | None:
    """Build a fresh registry from factory files (or the configured paths).

    Reports problems through ``out`` and returns None on failure.
    """
    from ..loader import load_factories

    paths = list(files or []) or [Path(p) for p in get_config().loader.factory_paths]
    if not paths:
        out.error(
            "No factory files given",
            suggestion="Pass files or set loader.factory_paths with `fixtory config set`",
        )
        return None

    missing = [p for p in paths if not Path(p).exists()]
    if missing:
        out.error(
            f"Factory file not found: {missing[0]}", exit_code=ExitCode.FILE_NOT_FOUND
        )
        return None

    registry = FactoryRegistry()
    try:
        load_factories(*paths, registry=registry)
    except FixtoryError as exc:
        out.error(str(exc))
        return None
    return registry


def to_jsonable(value: Any) -> Any:
    """Render factory output for display: stubs and objects become dicts."""
    if hasattr(value, "to_dict"):
        return to_jsonable(value.to_dict())
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if hasattr(value, "__dict__"):
        return {
            k: to_jsonable(v) for k, v in vars(value).items() if not k.startswith("_")
        }
    return str(value)
