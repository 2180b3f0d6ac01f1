"""Tests for symbolic differentiation."""

import pytest
import sympy

from symcalc.core.errors import SymbolicError
from symcalc.symbolic.derivative import derivative
from symcalc.symbolic.node import Node, Operation

X = sympy.Symbol("x")
NAMES = {
    "x": X,
    "e": sympy.E,
    "pi": sympy.pi,
    "log": sympy.log,
    "sqrt": sympy.sqrt,
    "cos": sympy.cos,
    "sin": sympy.sin,
    "tan": sympy.tan,
    "exp": sympy.exp,
}
POINTS = [sympy.Rational(3, 10), sympy.Rational(7, 10), sympy.Rational(13, 10)]


def to_sympy(text: str):
    return sympy.sympify(text.replace("^", "**"), locals=NAMES)


class TestRules:
    """Test the per-operation rules after simplification."""

    @pytest.mark.parametrize("text,expected", [
        ("x^3", "(3 * (x^2))"),
        ("x^2", "(2 * x)"),
        ("sin(x)", "cos(x)"),
        ("cos(x)", "-(sin(x))"),
        ("tan(x)", "(1 + (tan(x)^2))"),
        ("log(x)", "(1 / x)"),
        ("sqrt(x)", "(0.5 / sqrt(x))"),
        ("exp(x)", "(e^x)"),
        ("x * x", "(x + x)"),
        ("x - 1", "1"),
        ("-x", "-(1)"),
        ("x % 2", "(x % 2)"),
    ])
    def test_simplified_derivative(self, expression, text, expected):
        """Test rendered derivatives."""
        assert expression(text).derivative().simplify().render() == expected

    @pytest.mark.parametrize("text", ["3", "2.5", "2i", "1e3", "pi", "e"])
    def test_constants(self, expression, text):
        """Test that constants differentiate to zero."""
        assert derivative(expression(text)).render() == "0"

    def test_variable(self, expression):
        """Test that the free variable differentiates to one."""
        assert derivative(expression("x")).render() == "1"

    @pytest.mark.parametrize("name", ["y", "e"])
    def test_any_variable(self, name):
        """Test that every variable differentiates to one, whatever its name."""
        assert derivative(Node.variable(name)).render() == "1"

    def test_simplified_natural_is_a_variable(self, expression):
        """Test that e^1, once simplified to a variable named e, differentiates to one."""
        product = Node.binary(Operation.MULTIPLY, expression("e^1").simplify(), Node.variable("x"))
        assert product.derivative().simplify().render() == "(e + x)"

    def test_unsimplified_sine(self, expression):
        """Test the raw chain rule output."""
        assert derivative(expression("sin(x)")).render() == "(cos(x) * 1)"

    def test_quotient_rule(self, expression):
        """Test the raw quotient rule output."""
        assert derivative(expression("x / 2")).render() == "(((2 * 1) - (x * 0)) / (2^2))"

    def test_symbolic_exponent(self, expression):
        """Test that only integer literal exponents are supported."""
        with pytest.raises(SymbolicError):
            derivative(expression("x^y"))

    def test_fractional_exponent(self, expression):
        """Test that decimal exponents are rejected."""
        with pytest.raises(SymbolicError):
            derivative(expression("x^0.5"))

    def test_input_untouched(self, expression):
        """Test that the result shares no nodes with its input."""
        tree = expression("sin(x) * tan(x) / sqrt(x)")
        before = tree.render()
        result = derivative(tree)
        assert tree.render() == before
        assert {id(node) for node in result.walk()}.isdisjoint(id(node) for node in tree.walk())


class TestAgainstSympy:
    """Cross-check derivatives numerically against sympy."""

    @pytest.mark.parametrize("text", [
        "x^3",
        "x^2 + 3 * x + 1",
        "sin(x)",
        "cos(x)",
        "tan(x)",
        "log(x)",
        "sqrt(x)",
        "exp(x)",
        "x * sin(x)",
        "sin(x) / x",
        "(x^2 + 1)^3",
        "exp(x^2)",
        "cos(x^2)",
        "log(sin(x))",
        "sqrt(x^2 + 1)",
        "-(x^2)",
        "e^x",
    ])
    def test_matches_sympy(self, expression, text):
        """Test that our derivative agrees with sympy at sample points."""
        ours = to_sympy(expression(text).derivative().simplify().render())
        expected = sympy.diff(to_sympy(text), X)
        for point in POINTS:
            assert abs(float(ours.subs(X, point)) - float(expected.subs(X, point))) < 1e-9
