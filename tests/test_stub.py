"""Tests for Stub stand-ins."""

import pytest

from fixtory.core.errors import FixtoryError, StubbedObjectError
from fixtory.core.stub import STUB_ID_START, Stub, next_stub_id


class TestStubIds:
    def test_ids_are_unique_and_increasing(self):
        first = next_stub_id()
        second = next_stub_id()
        assert first >= STUB_ID_START
        assert second > first

    def test_stub_without_id_gets_one(self):
        assert Stub("user", {"name": "Ada"}).id >= STUB_ID_START

    def test_none_id_is_replaced(self):
        assert Stub("user", {"id": None}).id is not None


class TestStubAttributes:
    """Reading and writing stub attributes."""

    def test_attribute_and_item_access(self):
        stub = Stub("user", {"name": "Ada"})
        assert stub.name == "Ada"
        assert stub["name"] == "Ada"
        assert "name" in stub
        assert stub.factory_name == "user"

    def test_missing_attribute(self):
        stub = Stub("user", {})
        with pytest.raises(AttributeError, match="no attribute 'nickname'"):
            stub.nickname

    def test_in_memory_assignment(self):
        stub = Stub("user", {"name": "Ada"})
        stub.name = "Grace"
        stub.nickname = "G"
        assert stub.to_dict()["name"] == "Grace"
        assert stub.nickname == "G"

    def test_private_assignment_rejected(self):
        stub = Stub("user", {})
        with pytest.raises(AttributeError):
            stub._attributes = {}

    def test_single_underscore_values_are_readable(self):
        stub = Stub("user", {"_token": "abc"})
        assert stub._token == "abc"
        stub._token = "xyz"
        assert stub.to_dict()["_token"] == "xyz"

    def test_looks_persisted(self):
        stub = Stub("user", {})
        assert stub.new_record is False
        assert stub.persisted is True

    def test_repr(self):
        assert repr(Stub("user", {"id": 7})) == "<Stub user id=7>"

    def test_to_dict_is_a_copy(self):
        stub = Stub("user", {"id": 1, "name": "Ada"})
        data = stub.to_dict()
        data["name"] = "changed"
        assert stub.name == "Ada"


class TestStubPersistence:
    @pytest.mark.parametrize(
        "operation",
        [
            "save",
            "reload",
            "destroy",
            "delete",
            "update",
            "update_attributes",
            "increment",
            "decrement",
            "toggle",
        ],
    )
    def test_operations_raise(self, operation):
        stub = Stub("user", {"age": 3})
        with pytest.raises(StubbedObjectError) as excinfo:
            getattr(stub, operation)()
        assert excinfo.value.operation == operation
        assert "not allowed to access the database" in str(excinfo.value)

    def test_connection_raises(self):
        with pytest.raises(StubbedObjectError):
            Stub("user", {}).connection

    def test_error_types(self):
        with pytest.raises(RuntimeError):
            Stub("user", {}).update_attribute("name", "x")
        assert issubclass(StubbedObjectError, FixtoryError)
