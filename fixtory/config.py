"""Configuration management for fixtory.

Two config zones:
- engine: strategy defaults and the association depth guard
- loader: where the YAML front-end finds model classes and factory files

Config resolution order (highest priority first):
1. Programmatic (FixtoryConfig constructed in code, installed via configure())
2. Environment variables (FIXTORY_DEFAULT_STRATEGY, FIXTORY_MODEL_MODULES, etc.)
3. Config file (~/.config/fixtory/config.json, managed by `fixtory config`)
4. Hardcoded defaults
"""

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any


logger = logging.getLogger(__name__)


# =============================================================================
# Config file location
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "fixtory"
CONFIG_FILE = CONFIG_DIR / "config.json"

STRATEGY_NAMES = ("attributes_for", "build", "create", "stub")


# =============================================================================
# Config dataclasses
# =============================================================================


@dataclass
class EngineConfig:
    """Strategy defaults used when a call or factory doesn't choose one.

    - default_strategy: strategy for run() when the factory declares none
    - association_strategy: strategy for associations that declare none
    - max_association_depth: nesting limit for association chains
    """

    default_strategy: str = "create"
    association_strategy: str = "create"
    max_association_depth: int = 32


@dataclass
class LoaderConfig:
    """YAML front-end settings."""

    model_modules: list[str] = field(default_factory=list)
    factory_paths: list[str] = field(default_factory=list)


# =============================================================================
# Main config class
# =============================================================================


@dataclass
class FixtoryConfig:
    """Top-level fixtory configuration.

    Examples:
        # Package use, no files needed
        config = FixtoryConfig(engine=EngineConfig(default_strategy="build"))

        # CLI use, loads from ~/.config/fixtory/config.json
        config = FixtoryConfig.load()
    """

    engine: EngineConfig = field(default_factory=EngineConfig)
    loader: LoaderConfig = field(default_factory=LoaderConfig)

    @classmethod
    def load(cls) -> "FixtoryConfig":
        """Load config from file + env vars.

        Priority: env var values > config.json values > defaults.
        """
        config = cls()

        # Layer 1: Load from config file if it exists
        if CONFIG_FILE.exists():
            try:
                with open(CONFIG_FILE) as f:
                    data = json.load(f)
                _apply_dict(config, data)
            except (json.JSONDecodeError, OSError) as exc:
                logger.warning("Failed to load config from %s: %s", CONFIG_FILE, exc)

        # Layer 2: Env var overrides
        if val := os.environ.get("FIXTORY_DEFAULT_STRATEGY"):
            if val in STRATEGY_NAMES:
                config.engine.default_strategy = val
            else:
                logger.warning("Invalid FIXTORY_DEFAULT_STRATEGY=%r, ignoring", val)
        if val := os.environ.get("FIXTORY_ASSOCIATION_STRATEGY"):
            if val in STRATEGY_NAMES:
                config.engine.association_strategy = val
            else:
                logger.warning(
                    "Invalid FIXTORY_ASSOCIATION_STRATEGY=%r, ignoring", val
                )
        if val := os.environ.get("FIXTORY_MAX_ASSOCIATION_DEPTH"):
            try:
                config.engine.max_association_depth = int(val)
            except ValueError:
                logger.warning(
                    "Invalid FIXTORY_MAX_ASSOCIATION_DEPTH=%r, ignoring", val
                )
        if val := os.environ.get("FIXTORY_MODEL_MODULES"):
            config.loader.model_modules = _split_list(val)
        if val := os.environ.get("FIXTORY_FACTORY_PATHS"):
            config.loader.factory_paths = _split_list(val)

        return config

    def save(self) -> None:
        """Save config to ~/.config/fixtory/config.json."""
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        with open(CONFIG_FILE, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for display."""
        return {
            "engine": asdict(self.engine),
            "loader": asdict(self.loader),
        }


# =============================================================================
# Config dict application
# =============================================================================


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _apply_dict(config: FixtoryConfig, data: dict) -> None:
    """Apply a dict of values onto a FixtoryConfig."""
    if "engine" in data and isinstance(data["engine"], dict):
        for k, v in data["engine"].items():
            if hasattr(config.engine, k):
                if k == "max_association_depth":
                    try:
                        v = int(v)
                    except (TypeError, ValueError):
                        logger.warning(
                            "Invalid engine.max_association_depth=%r in %s, ignoring",
                            v,
                            CONFIG_FILE,
                        )
                        continue
                elif v not in STRATEGY_NAMES:
                    logger.warning("Invalid engine.%s=%r in %s, ignoring", k, v, CONFIG_FILE)
                    continue
                setattr(config.engine, k, v)
    if "loader" in data and isinstance(data["loader"], dict):
        for k, v in data["loader"].items():
            if hasattr(config.loader, k):
                if isinstance(v, str):
                    v = _split_list(v)
                if not isinstance(v, list):
                    logger.warning("Invalid loader.%s=%r in %s, ignoring", k, v, CONFIG_FILE)
                    continue
                setattr(config.loader, k, [str(item) for item in v])


# =============================================================================
# Global config singleton
# =============================================================================

_config: FixtoryConfig | None = None


def get_config() -> FixtoryConfig:
    """Get the global FixtoryConfig instance.

    First call loads from file + env vars. Subsequent calls return cached instance.
    Use configure() to replace the global config programmatically.
    """
    global _config
    if _config is None:
        _config = FixtoryConfig.load()
    return _config


def configure(config: FixtoryConfig) -> None:
    """Set the global FixtoryConfig programmatically.

    Use this when fixtory is used as a package:
        from fixtory.config import configure, FixtoryConfig, EngineConfig
        configure(FixtoryConfig(engine=EngineConfig(default_strategy="build")))
    """
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global config (forces reload on next get_config())."""
    global _config
    _config = None
