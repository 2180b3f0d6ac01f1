"""Tests for exact complex rationals."""

from fractions import Fraction

import pytest

from symcalc.core.errors import DivisionByZeroError
from symcalc.math.rational import (
    ONE,
    ZERO,
    ComplexRational,
    format_decimal,
    format_rational,
    int_to_text,
    parse_rational,
)


class TestFormatting:
    """Test exact and decimal rendering."""

    def test_format_rational(self):
        """Test integer and fraction forms."""
        assert format_rational(Fraction(7)) == "7"
        assert format_rational(Fraction(-3, 4)) == "-3/4"

    @pytest.mark.parametrize("value,digits,expected", [
        (Fraction(1, 4), 10, "0.25"),
        (Fraction(1, 3), 5, "0.33333"),
        (Fraction(2, 3), 3, "0.667"),
        (Fraction(-2, 3), 3, "-0.667"),
        (Fraction(5, 2), 0, "3"),
        (Fraction(-1, 1000), 2, "0"),
        (Fraction(12), 4, "12"),
    ])
    def test_format_decimal(self, value, digits, expected):
        """Test rounding and trailing zero removal."""
        assert format_decimal(value, digits) == expected

    @pytest.mark.parametrize("real,imag,expected", [
        (7, 0, "7"),
        ("0.5", 0, "1/2"),
        (0, 3, "3i"),
        (0, -3, "-3i"),
        (1, 2, "1+2i"),
        (Fraction(1, 2), Fraction(-3, 4), "1/2-3/4i"),
    ])
    def test_to_string(self, real, imag, expected):
        """Test the exact complex forms."""
        assert ComplexRational(real, imag).to_string() == expected

    def test_to_decimal(self):
        """Test decimal rendering of both parts."""
        assert ComplexRational(Fraction(1, 2), -1).to_decimal(3) == "0.5-1i"
        assert ComplexRational(0, Fraction(1, 4)).to_decimal(3) == "0.25i"


class TestConstruction:
    """Test instantiation and predicates."""

    def test_from_decimal_text(self):
        """Test that decimal text is read exactly."""
        assert ComplexRational("0.1").real == Fraction(1, 10)

    def test_trailing_point(self):
        """Test a literal with no fraction digits."""
        assert ComplexRational("3.") == 3

    def test_predicates(self):
        """Test is_real, is_integer and is_zero."""
        assert ComplexRational(2).is_integer
        assert not ComplexRational("2.5").is_integer
        assert not ComplexRational(2, 1).is_real
        assert ZERO.is_zero and not ONE.is_zero

    def test_frozen(self):
        """Test that values are immutable."""
        with pytest.raises(Exception):
            ONE.real = Fraction(2)

    def test_hashable(self):
        """Test use as a dictionary key."""
        assert {ComplexRational(1, 1): "a"}[ComplexRational(1, 1)] == "a"


class TestArithmetic:
    """Test exact field operations."""

    def test_add_sub(self):
        """Test addition and subtraction."""
        assert ComplexRational(1, 2) + ComplexRational(3, -1) == ComplexRational(4, 1)
        assert ComplexRational(1, 2) - ComplexRational(3, -1) == ComplexRational(-2, 3)
        assert 1 - ComplexRational(0, 1) == ComplexRational(1, -1)

    def test_multiply(self):
        """Test (a + bi)(c + di)."""
        assert ComplexRational(1, 2) * ComplexRational(3, -1) == ComplexRational(5, 5)

    def test_divide(self):
        """Test complex division."""
        assert ComplexRational(5, 5) / ComplexRational(3, -1) == ComplexRational(1, 2)
        assert ComplexRational(1) / 3 == Fraction(1, 3)

    def test_divide_by_zero(self):
        """Test that exact zero divisors raise."""
        with pytest.raises(DivisionByZeroError):
            ONE / ZERO

    def test_power(self):
        """Test integer powers."""
        assert ComplexRational(0, 1) ** 2 == -1
        assert ComplexRational(2) ** -2 == Fraction(1, 4)
        assert ZERO ** 0 == 1

    def test_negative_power_of_zero(self):
        """Test 0 raised to a negative power."""
        with pytest.raises(DivisionByZeroError):
            ZERO ** -1

    def test_conjugate_and_norm(self):
        """Test conjugate and squared magnitude."""
        value = ComplexRational(3, 4)
        assert value.conjugate() == ComplexRational(3, -4)
        assert value.norm() == 25


class TestLargeNumbers:
    """Test numbers beyond the interpreter's int/str digit limit."""

    def test_int_to_text(self):
        """Test a ten-thousand digit power of ten."""
        text = int_to_text(10 ** 10000)
        assert text == "1" + "0" * 10000
        assert int_to_text(-(10 ** 10000 + 7)) == "-1" + "0" * 9999 + "7"

    def test_int_to_text_keeps_inner_zeros(self):
        """Test that zero runs across split points survive."""
        value = 10 ** 9000 + 1
        text = int_to_text(value)
        assert len(text) == 9001
        assert text.startswith("1") and text.endswith("1")
        assert set(text[1:-1]) == {"0"}

    def test_format_large_rational(self):
        """Test exact rendering of a large fraction."""
        assert format_rational(Fraction(1, 2 ** 20000)).startswith("1/3981")

    def test_format_long_decimal(self):
        """Test a decimal expansion longer than the digit limit."""
        text = format_decimal(Fraction(1, 3), 5000)
        assert text == "0." + "3" * 5000

    def test_parse_long_literal(self):
        """Test parsing literal text longer than the digit limit."""
        assert parse_rational("1" + "0" * 5000) == 10 ** 5000
        assert parse_rational("-0." + "0" * 4999 + "5") == Fraction(-5, 10 ** 5000)

    @pytest.mark.parametrize("text,expected", [
        ("3", Fraction(3)),
        ("3.", Fraction(3)),
        ("+5", Fraction(5)),
        (".25", Fraction(1, 4)),
        ("-2.50", Fraction(-5, 2)),
        ("3/4", Fraction(3, 4)),
    ])
    def test_parse_rational(self, text, expected):
        """Test the accepted literal forms."""
        assert parse_rational(text) == expected

    def test_parse_invalid(self):
        """Test that non-numeric text is rejected."""
        with pytest.raises(ValueError):
            parse_rational("+Inf")
