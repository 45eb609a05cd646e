"""CLI commands for fixtory."""

from . import (
    factories,
    generate,
    config_cmd,
)

__all__ = [
    "factories",
    "generate",
    "config_cmd",
]
