"""Tests for name conventions and callable inspection."""

import pytest

from fixtory.utils.naming import camelize, underscore
from fixtory.utils.signatures import positional_arity


@pytest.mark.parametrize(
    "name,expected",
    [
        ("user", "User"),
        ("user_profile", "UserProfile"),
        ("UserProfile", "UserProfile"),
        ("a__b", "AB"),
    ],
)
def test_camelize(name, expected):
    assert camelize(name) == expected


@pytest.mark.parametrize(
    "name,expected",
    [
        ("User", "user"),
        ("UserProfile", "user_profile"),
        ("HTTPRequest", "http_request"),
        ("Post2Tag", "post2_tag"),
    ],
)
def test_underscore(name, expected):
    assert underscore(name) == expected


class TestPositionalArity:
    def test_plain_functions(self):
        assert positional_arity(lambda: None) == 0
        assert positional_arity(lambda a: None) == 1
        assert positional_arity(lambda a, b: None) == 2

    def test_keyword_only_not_counted(self):
        def fn(a, *, b=1):
            return a

        assert positional_arity(fn) == 1

    def test_var_positional(self):
        assert positional_arity(lambda *args: None) >= 2

    def test_bound_method(self):
        class Thing:
            def method(self, a):
                return a

        assert positional_arity(Thing().method) == 1
