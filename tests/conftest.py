"""Shared fixtures: every test gets a fresh default registry and config."""

import pytest

from fixtory.config import FixtoryConfig, configure, reset_config
from fixtory.core.registry import reset_registry

ENV_VARS = (
    "FIXTORY_DEFAULT_STRATEGY",
    "FIXTORY_ASSOCIATION_STRATEGY",
    "FIXTORY_MAX_ASSOCIATION_DEPTH",
    "FIXTORY_MODEL_MODULES",
    "FIXTORY_FACTORY_PATHS",
)


@pytest.fixture(autouse=True)
def isolated_fixtory(tmp_path, monkeypatch):
    """Keep tests away from ~/.config/fixtory and from each other's factories."""
    config_dir = tmp_path / "fixtory-config"
    monkeypatch.setattr("fixtory.config.CONFIG_DIR", config_dir)
    monkeypatch.setattr("fixtory.config.CONFIG_FILE", config_dir / "config.json")
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)

    reset_registry()
    configure(FixtoryConfig())
    yield
    reset_registry()
    reset_config()


@pytest.fixture
def database():
    """The in-memory table every saved sample model lands in."""
    from sample_models import DATABASE

    DATABASE.clear()
    yield DATABASE
    DATABASE.clear()
