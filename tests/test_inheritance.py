"""Tests for parent/child factory merging."""

import pytest

from fixtory.core.enums import Strategy
from fixtory.core.errors import CircularInheritanceError, UnknownFactoryError
from fixtory.core.registry import FactoryRegistry

from sample_models import User


@pytest.fixture
def registry():
    registry = FactoryRegistry()
    registry.register_model(User)
    with registry.define("user") as f:
        f.set("first_name", "Jimi")
        f.set("last_name", "Hendrix")
        f.lazy("email", lambda a: f"{a.first_name}.{a.last_name}@example.com".lower())
    return registry


class TestMerge:
    """Effective definitions of child factories."""

    def test_child_keeps_parent_order_and_appends_its_own(self, registry):
        with registry.define("guest", parent="user") as f:
            f.set("username", "GuestUser")
            f.set("last_name", "Anonymous")

        effective = registry.resolve("guest")
        assert effective.attribute_names() == [
            "first_name",
            "last_name",
            "email",
            "username",
        ]
        assert effective.get_attribute("last_name").value == "Anonymous"

    def test_parent_lazy_attribute_sees_child_value(self, registry):
        with registry.define("guest", parent="user") as f:
            f.set("last_name", "Anonymous")

        assert registry.attributes_for("guest")["email"] == "jimi.anonymous@example.com"

    def test_parent_is_unchanged(self, registry):
        with registry.define("guest", parent="user") as f:
            f.set("last_name", "Anonymous")

        registry.attributes_for("guest")
        assert registry.attributes_for("user")["last_name"] == "Hendrix"

    def test_grandchild(self, registry):
        with registry.define("guest", parent="user") as f:
            f.set("last_name", "Anonymous")
        with registry.define("banned_guest", parent="guest") as f:
            f.set("banned", True)

        effective = registry.resolve("banned_guest")
        assert effective.lineage == ["user", "guest", "banned_guest"]
        attrs = registry.attributes_for("banned_guest")
        assert attrs["last_name"] == "Anonymous"
        assert attrs["banned"] is True

    def test_class_is_inherited(self, registry):
        with registry.define("guest", parent="user") as f:
            f.set("last_name", "Anonymous")

        assert isinstance(registry.build("guest"), User)

    def test_child_class_wins(self, registry):
        class Guest:
            pass

        with registry.define("guest", parent="user", class_=Guest):
            pass

        assert isinstance(registry.build("guest"), Guest)

    def test_default_strategy_is_inherited(self, registry):
        with registry.define("draft", default_strategy="build") as f:
            f.set("title", "x")
        with registry.define("child_draft", parent="draft", class_=User):
            pass

        assert registry.resolve("child_draft").default_strategy is Strategy.BUILD
        assert registry.run("child_draft").new_record is True

    def test_parent_may_be_defined_later(self):
        registry = FactoryRegistry()
        with registry.define("guest", parent="user") as f:
            f.set("last_name", "Anonymous")
        with registry.define("user") as f:
            f.set("first_name", "Jimi")

        assert registry.attributes_for("guest") == {
            "first_name": "Jimi",
            "last_name": "Anonymous",
        }


class TestErrors:
    def test_unknown_parent(self, registry):
        with registry.define("orphan", parent="nobody"):
            pass

        with pytest.raises(UnknownFactoryError, match="unknown parent 'nobody'"):
            registry.attributes_for("orphan")

    def test_circular_inheritance(self):
        registry = FactoryRegistry()
        with registry.define("a", parent="b"):
            pass
        with registry.define("b", parent="a"):
            pass

        with pytest.raises(CircularInheritanceError) as excinfo:
            registry.resolve("a")
        assert excinfo.value.chain == ["a", "b", "a"]
