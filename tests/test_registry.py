"""Tests for the factory registry: registration, class resolution, module API."""

import pytest

import fixtory
from fixtory.config import FixtoryConfig, LoaderConfig, configure
from fixtory.core.errors import (
    DuplicateFactoryError,
    UnknownClassError,
    UnknownFactoryError,
)
from fixtory.core.registry import (
    FactoryRegistry,
    get_registry,
    reset_registry,
    set_registry,
)

from sample_models import Post, User, UserProfile


class TestRegistration:
    def test_duplicate_factory(self):
        registry = FactoryRegistry()
        with registry.define("user"):
            pass
        with pytest.raises(DuplicateFactoryError):
            with registry.define("user"):
                pass

    def test_unknown_factory_is_a_lookup_error(self):
        with pytest.raises(LookupError):
            FactoryRegistry().get("ghost")
        with pytest.raises(UnknownFactoryError):
            FactoryRegistry().resolve("ghost")

    def test_failed_block_registers_nothing(self):
        registry = FactoryRegistry()
        with pytest.raises(RuntimeError):
            with registry.define("user") as f:
                f.set("name", "Ada")
                raise RuntimeError("abort")
        assert "user" not in registry
        assert len(registry) == 0

    def test_class_as_name(self):
        registry = FactoryRegistry()
        with registry.define(UserProfile) as f:
            f.set("bio", "hi")

        assert registry.names() == ["user_profile"]
        assert UserProfile in registry
        assert isinstance(registry.build(UserProfile), UserProfile)

    def test_clear(self):
        registry = FactoryRegistry()
        registry.define_sequence("n")
        with registry.define("user"):
            pass
        registry.clear()
        assert len(registry) == 0
        assert "n" not in registry.sequences


class TestClassResolution:
    """Target class derivation from class specs and factory names."""

    def test_registered_model_by_camelized_name(self):
        registry = FactoryRegistry()
        registry.register_model(UserProfile)
        with registry.define("user_profile"):
            pass
        assert isinstance(registry.build("user_profile"), UserProfile)

    def test_string_class_spec(self):
        registry = FactoryRegistry()
        registry.register_model(User)
        with registry.define("member", class_="user"):
            pass
        assert isinstance(registry.build("member"), User)

    def test_register_model_as_decorator(self):
        registry = FactoryRegistry()

        @registry.register_model
        class Widget:
            pass

        with registry.define("widget"):
            pass
        assert isinstance(registry.build("widget"), Widget)

    def test_dotted_import_path(self):
        registry = FactoryRegistry()
        with registry.define("post", class_="sample_models.Post"):
            pass
        assert isinstance(registry.build("post"), Post)

    def test_configured_model_modules(self):
        registry = FactoryRegistry(
            config=FixtoryConfig(loader=LoaderConfig(model_modules=["sample_models"]))
        )
        with registry.define("user_profile"):
            pass
        assert isinstance(registry.build("user_profile"), UserProfile)

    def test_unknown_class(self):
        registry = FactoryRegistry()
        with registry.define("gadget"):
            pass
        with pytest.raises(UnknownClassError, match="Gadget|gadget"):
            registry.build("gadget")

    def test_unknown_class_does_not_matter_for_attributes_and_stubs(self):
        registry = FactoryRegistry()
        with registry.define("gadget") as f:
            f.set("size", 3)
        assert registry.attributes_for("gadget") == {"size": 3}
        assert registry.stub("gadget").size == 3

    def test_bad_dotted_module(self):
        registry = FactoryRegistry()
        with registry.define("thing", class_="no_such_module_xyz.Thing"):
            pass
        with pytest.raises(UnknownClassError, match="Cannot import"):
            registry.build("thing")


class TestDefaultRegistry:
    """The process-wide registry and the fixtory.* shortcuts."""

    def test_get_registry_is_stable(self):
        assert get_registry() is get_registry()

    def test_reset_registry(self):
        first = get_registry()
        reset_registry()
        assert get_registry() is not first

    def test_set_registry(self):
        registry = FactoryRegistry()
        set_registry(registry)
        assert fixtory.get_registry() is registry

    def test_module_shortcuts(self):
        fixtory.get_registry().register_model(User)
        with fixtory.define("user") as f:
            f.set("name", "Ada")
        fixtory.define_sequence("n", start=10)

        assert fixtory.attributes_for("user") == {"name": "Ada"}
        assert isinstance(fixtory.build("user"), User)
        assert fixtory.create("user").new_record is False
        assert fixtory.stub("user").name == "Ada"
        assert fixtory.next_value("n") == 10
        assert len(fixtory.build_batch("user", 2)) == 2

    def test_run_uses_global_config_default(self):
        configure(FixtoryConfig.load())
        fixtory.get_registry().register_model(User)
        with fixtory.define("user") as f:
            f.set("name", "Ada")
        assert fixtory.run("user").new_record is False
