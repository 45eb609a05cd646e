"""Command-line interface for fixtory."""

from .app import app

__all__ = ["app"]
