"""Tests for restricted formula evaluation."""

import pytest

from fixtory.utils.eval_safe import (
    FormulaError,
    eval_formula,
    eval_safe,
    validate_expression_syntax,
)


class TestEvalSafe:
    def test_arithmetic_and_builtins(self):
        assert eval_safe("max(0, age - 26)", {"age": 45}) == 19
        assert eval_safe("round(1.26, 1)", {}) == 1.3

    def test_string_helpers(self):
        ctx = {"first": " Jimi ", "last": "Hendrix"}
        assert eval_safe("lower(strip(first)) + '.' + lower(last)", ctx) == "jimi.hendrix"
        assert eval_safe("upper(last)", ctx) == "HENDRIX"
        assert eval_safe("title('ben stein')", ctx) == "Ben Stein"

    def test_conditionals_and_comparisons(self):
        assert eval_safe("'admin' if is_admin else 'user'", {"is_admin": True}) == "admin"
        assert eval_safe("1 < n <= 3", {"n": 3}) is True
        assert eval_safe("'a' in tags", {"tags": ["a"]}) is True

    def test_collections(self):
        assert eval_safe("[n, n * 2]", {"n": 2}) == [2, 4]
        assert eval_safe("{'k': n}", {"n": 1}) == {"k": 1}

    def test_f_string(self):
        assert eval_safe("f'{name}-{n + 1}'", {"name": "u", "n": 1}) == "u-2"

    @pytest.mark.parametrize(
        "expression",
        [
            "__import__('os')",
            "name.upper()",
            "open('x')",
            "(lambda: 1)()",
            "f'{n:>5}'",
            "[x for x in range(3)]",
        ],
    )
    def test_rejected(self, expression):
        with pytest.raises(FormulaError):
            eval_safe(expression, {"name": "a", "n": 1})

    def test_unknown_name(self):
        with pytest.raises(FormulaError, match="Unknown name 'missing'"):
            eval_safe("missing + 1", {})

    def test_syntax_error(self):
        with pytest.raises(FormulaError, match="Failed to parse"):
            eval_safe("1 +", {})


class TestEvalFormula:
    def test_runtime_errors_are_wrapped(self):
        with pytest.raises(FormulaError, match="failed"):
            eval_formula("a / b", {"a": 1, "b": 0})

    def test_validate_syntax(self):
        assert validate_expression_syntax("a + b") is None
        assert validate_expression_syntax("a +") is not None
