"""End-to-end behaviour of the module-level API on the default registry."""

import re

import pytest

import fixtory
from fixtory import SequenceAbuseError, Stub

from sample_models import Business, Post, User


@pytest.fixture(autouse=True)
def factories(database):
    """The user / post / admin / guest / callback factory set."""
    registry = fixtory.get_registry()
    for model in (User, Post, Business):
        registry.register_model(model)

    with fixtory.define("user", class_="user") as f:
        f.set("first_name", "Jimi")
        f.set("last_name", "Hendrix")
        f.set("admin", False)
        f.lazy("email", lambda a: f"{a.first_name}.{a.last_name}@example.com".lower())

    with fixtory.define(Post, default_strategy="attributes_for") as f:
        f.set("name", "Test Post")
        f.association("author", factory="user")

    with fixtory.define("admin", class_=User) as f:
        f.set("first_name", "Ben")
        f.set("last_name", "Stein")
        f.set("admin", True)
        f.sequence("username", lambda n: f"username{n}")
        f.lazy("email", lambda: fixtory.next_value("email"))

    with fixtory.define("sequence_abuser", class_=User) as f:
        f.lazy("first_name", lambda: registry.sequences.get("email"))

    with fixtory.define("guest", parent="user") as f:
        f.set("last_name", "Anonymous")
        f.set("username", "GuestUser")

    with fixtory.define("user_with_callbacks", parent="user") as f:
        f.after_stub(lambda u: setattr(u, "first_name", "Stubby"))
        f.after_build(lambda u: setattr(u, "first_name", "Buildy"))
        f.after_create(lambda u: setattr(u, "last_name", "Createy"))

    with fixtory.define(
        "user_with_inherited_callbacks", parent="user_with_callbacks"
    ) as f:
        f.after_stub(lambda u: setattr(u, "last_name", "Double-Stubby"))

    with fixtory.define("business") as f:
        f.set("name", "Supplier of Awesome")
        f.association("owner", factory="user")

    fixtory.define_sequence("email", lambda n: f"somebody{n}@example.com")


class TestAttributesFor:
    """A generated attributes mapping."""

    def test_assigns_all_attributes(self):
        attrs = fixtory.attributes_for("user", first_name="Bill")
        assert sorted(attrs) == ["admin", "email", "first_name", "last_name"]

    def test_lazy_dependent_attribute_sees_override(self):
        attrs = fixtory.attributes_for("user", first_name="Bill")
        assert attrs["email"] == "bill.hendrix@example.com"

    def test_overrides_attributes(self):
        assert fixtory.attributes_for("user", first_name="Bill")["first_name"] == "Bill"

    def test_does_not_assign_associations(self):
        assert fixtory.attributes_for("post").get("author") is None
        assert "author" not in fixtory.attributes_for("post")

    def test_keys_follow_declaration_order(self):
        attrs = fixtory.attributes_for("user")
        assert list(attrs) == ["first_name", "last_name", "admin", "email"]


class TestBuild:
    """A built instance."""

    def test_is_not_saved(self):
        assert fixtory.build("post").new_record is True

    def test_assigns_associations(self):
        assert isinstance(fixtory.build("post").author, User)

    def test_saves_associations(self):
        assert fixtory.build("post").author.new_record is False

    def test_foreign_key_override_suppresses_association(self, database):
        post = fixtory.build("post", author_id=1)
        assert post.author_id == 1
        assert "author" not in vars(post)
        assert database == []


class TestCreate:
    """A created instance."""

    def test_is_saved(self, database):
        post = fixtory.create("post")
        assert post.new_record is False
        assert post in database

    def test_assigns_and_saves_associations(self):
        post = fixtory.create("post")
        assert isinstance(post.author, User)
        assert post.author.new_record is False

    def test_business_owner_is_created(self):
        business = fixtory.create("business")
        assert isinstance(business, Business)
        assert business.owner.first_name == "Jimi"


class TestStub:
    """A generated stub instance."""

    def test_assigns_all_attributes(self):
        stub = fixtory.stub("user", first_name="Bill")
        for name in ("admin", "email", "first_name", "last_name"):
            assert getattr(stub, name) is not None

    def test_correctly_assigns_attributes(self):
        stub = fixtory.stub("user", first_name="Bill")
        assert stub.email == "bill.hendrix@example.com"
        assert stub.first_name == "Bill"

    def test_assigns_associations(self):
        author = fixtory.stub("post").author
        assert isinstance(author, Stub)

    def test_has_unique_positive_ids(self):
        first = fixtory.stub("user")
        second = fixtory.stub("user")
        assert first.id > 0
        assert first.id != second.id

    def test_is_not_a_new_record(self):
        assert fixtory.stub("user").new_record is False

    def test_never_saves_anything(self, database):
        fixtory.stub("post")
        assert database == []

    @pytest.mark.parametrize(
        "touch",
        [
            lambda s: s.connection,
            lambda s: s.update_attribute("first_name", "Nick"),
            lambda s: s.reload(),
            lambda s: s.destroy(),
            lambda s: s.save(),
            lambda s: s.increment("age"),
        ],
    )
    def test_database_access_raises(self, touch):
        stub = fixtory.stub("user", first_name="Bill")
        with pytest.raises(RuntimeError):
            touch(stub)


class TestCustomClass:
    """Factories whose class differs from their name."""

    def test_uses_the_given_class(self):
        assert isinstance(fixtory.create("admin"), User)

    def test_uses_its_own_definition(self):
        assert fixtory.create("admin").admin is True


class TestInheritance:
    """An instance from a factory that inherits from another factory."""

    def test_uses_the_parent_class(self):
        assert isinstance(fixtory.create("guest"), User)

    def test_has_parent_attributes(self):
        assert fixtory.create("guest").first_name == "Jimi"

    def test_has_own_attributes(self):
        assert fixtory.create("guest").username == "GuestUser"

    def test_has_overridden_attributes(self):
        guest = fixtory.create("guest")
        assert guest.last_name == "Anonymous"
        assert guest.email == "jimi.anonymous@example.com"


class TestSequences:
    """Attributes generated by named and inline sequences."""

    def test_named_sequence_format_and_uniqueness(self):
        first = fixtory.attributes_for("admin")["email"]
        second = fixtory.attributes_for("admin")["email"]
        assert re.fullmatch(r"somebody\d+@example\.com", first)
        assert re.fullmatch(r"somebody\d+@example\.com", second)
        assert first != second

    def test_inline_sequence_format_and_uniqueness(self):
        first = fixtory.attributes_for("admin")["username"]
        second = fixtory.attributes_for("admin")["username"]
        assert re.fullmatch(r"username\d+", first)
        assert first != second

    def test_named_sequence_starts_at_one(self):
        assert fixtory.next_value("email") == "somebody1@example.com"


class TestDefaultStrategy:
    """run() honours the factory's default strategy."""

    def test_post_defaults_to_attributes_for(self):
        assert isinstance(fixtory.run("post"), dict)

    def test_user_defaults_to_create(self):
        user = fixtory.run("user")
        assert isinstance(user, User)
        assert user.new_record is False

    def test_explicit_strategy_wins(self):
        assert isinstance(fixtory.run("post", "build"), Post)


class TestSequenceAbuse:
    def test_returning_a_sequence_raises(self):
        with pytest.raises(SequenceAbuseError):
            fixtory.run("sequence_abuser")


class TestCallbacks:
    """An instance with callbacks."""

    def test_after_stub_runs_when_stubbing(self):
        assert fixtory.stub("user_with_callbacks").first_name == "Stubby"

    def test_after_build_runs_when_building(self):
        user = fixtory.build("user_with_callbacks")
        assert user.first_name == "Buildy"
        assert user.last_name == "Hendrix"

    def test_after_build_and_after_create_run_when_creating(self):
        user = fixtory.run("user_with_callbacks")
        assert user.first_name == "Buildy"
        assert user.last_name == "Createy"

    def test_inherited_and_own_after_stub_both_run(self):
        user = fixtory.stub("user_with_inherited_callbacks")
        assert user.first_name == "Stubby"
        assert user.last_name == "Double-Stubby"

    def test_attributes_for_runs_no_callbacks(self):
        attrs = fixtory.attributes_for("user_with_callbacks")
        assert attrs["first_name"] == "Jimi"
