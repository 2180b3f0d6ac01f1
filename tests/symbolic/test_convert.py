"""Tests for the symbolic converter."""

import pytest

from symcalc.core.errors import SymbolicError
from symcalc.parser.tree import parse
from symcalc.symbolic.convert import SymbolicConverter, convert
from symcalc.symbolic.node import Operation


class TestConvert:
    """Test parse tree to expression conversion."""

    @pytest.mark.parametrize("text,expected", [
        ("x^2 + 1", "((x^2) + 1)"),
        ("1 - 2 - 3", "((1 - 2) - 3)"),
        ("2^3^2", "((2^3)^2)"),
        ("a % b * c", "((a % b) * c)"),
        ("1 + 2 * 3", "(1 + (2 * 3))"),
        ("(x)", "x"),
        ("-x", "-(x)"),
        ("-(x + 1)", "-((x + 1))"),
        ("exp(x)", "(e^x)"),
        ("e^x", "(e^x)"),
        ("pi * e", "(pi * e)"),
        ("log(sqrt(cos(sin(tan(x)))))", "log(sqrt(cos(sin(tan(x)))))"),
        ("2.50", "2.50"),
        ("3i", "3i"),
        ("2.5e3", "2.5e3"),
        ("2e-3i", "2e-3i"),
    ])
    def test_render(self, text, expected):
        """Test that structure and literal text are preserved."""
        assert convert(parse(text)).render() == expected

    def test_literal_text_kept(self):
        """Test that literals are not evaluated."""
        node = convert(parse("0.10"))
        assert node.operation is Operation.NUMBER
        assert node.value == "0.10"

    def test_notation_structure(self):
        """Test E notation as mantissa and exponent children."""
        node = convert(parse("4e-2"))
        assert node.operation is Operation.NOTATION
        assert node.left.value == "4"
        assert node.right.value == "-2"

    def test_imaginary_notation_structure(self):
        """Test that an imaginary mantissa keeps its tag."""
        node = convert(parse("4e2i"))
        assert node.left.operation is Operation.IMAGINARY

    def test_nested_simplify(self):
        """Test simplify inside an expression."""
        assert convert(parse("simplify(x * 1) + 1")).render() == "(x + 1)"

    def test_nested_derivative(self):
        """Test derivative inside an expression."""
        assert convert(parse("derivative(x^2)")).render() == "(2 * x)"

    @pytest.mark.parametrize("text", ["[1, 2]", "prec(10)", "x + [[1]]"])
    def test_unsupported(self, text):
        """Test constructs without a symbolic form."""
        with pytest.raises(SymbolicError):
            convert(parse(text))

    def test_empty_tree(self):
        """Test that there is nothing to convert without a tree."""
        with pytest.raises(SymbolicError):
            SymbolicConverter().convert(None)
