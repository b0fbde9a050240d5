"""Tests for the calculator fallback."""

import pytest

from evaluator import Evaluator
from utils.errors import EvalError


class TestEvaluator:
    """Evaluator.evaluate()."""

    def test_arithmetic(self):
        assert Evaluator().evaluate("2 ** 10") == "1024"

    def test_math_functions(self):
        assert Evaluator().evaluate("sqrt(16)") == "4.0"

    def test_booleans_are_lowercase(self):
        assert Evaluator().evaluate("1 == 1") == "true"

    def test_blank_line_is_nothing(self):
        assert Evaluator().evaluate("   ") is None

    def test_assignment_has_no_output_but_is_remembered(self):
        ev = Evaluator()

        assert ev.evaluate("r = 3") is None
        assert ev.evaluate("r * 2") == "6"

    def test_clear_forgets_variables(self):
        ev = Evaluator()
        ev.evaluate("r = 3")

        ev.clear()

        with pytest.raises(EvalError):
            ev.evaluate("r")

    def test_unknown_name(self):
        with pytest.raises(EvalError) as exc:
            Evaluator().evaluate("hello there")
        assert str(exc.value)

    def test_division_by_zero(self):
        with pytest.raises(EvalError):
            Evaluator().evaluate("1 / 0")

    def test_comparison_is_not_assignment(self):
        ev = Evaluator()
        ev.evaluate("x = 2")

        assert ev.evaluate("x == 2") == "true"

    def test_small_factorial(self):
        assert Evaluator().evaluate("factorial(5)") == "120"

    def test_huge_factorial_is_refused(self):
        with pytest.raises(EvalError, match="too large"):
            Evaluator().evaluate("factorial(10000000)")
