"""
Exact complex rationals.

A :class:`ComplexRational` is a pair of arbitrary-precision rationals
``real + imag·i``. All field operations are exact; anything irrational goes
through :class:`symcalc.math.precision.PrecisionContext`.
"""

from __future__ import annotations

import re
from fractions import Fraction
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..core.errors import DivisionByZeroError

Rationalish = int | str | Fraction

# Below the interpreter's int/str conversion limit (4300 digits).
_CHUNK_DIGITS = 4000
_DECIMAL = re.compile(r"([+-]?)(\d*)(?:\.(\d*))?")


def int_to_text(value: int) -> str:
    """
    Decimal text of an integer of any size.

    Large integers are split in halves by a power of ten, so no single
    conversion hits the interpreter's digit limit.
    """
    if value < 0:
        return "-" + int_to_text(-value)
    if value.bit_length() <= 3 * _CHUNK_DIGITS:
        return str(value)
    half = int(value.bit_length() * 0.30103) // 2
    high, low = divmod(value, 10 ** half)
    return int_to_text(high) + int_to_text(low).rjust(half, "0")


def text_to_int(text: str) -> int:
    """Inverse of :func:`int_to_text` for unsigned digit strings."""
    if len(text) <= _CHUNK_DIGITS:
        return int(text)
    half = len(text) // 2
    return text_to_int(text[:-half]) * 10 ** half + text_to_int(text[-half:])


def parse_rational(text: str) -> Fraction:
    """
    Parse ``p``, ``p.q`` or ``p/q`` literal text exactly.

    Raises:
        ValueError: If the text is not a rational literal
    """
    text = text.strip()
    match = _DECIMAL.fullmatch(text)
    if match is None or not (match.group(2) or match.group(3)):
        return Fraction(text)
    sign, whole, fraction = match.group(1), match.group(2), match.group(3) or ""
    value = Fraction(text_to_int(whole + fraction or "0"), 10 ** len(fraction))
    return -value if sign == "-" else value


def format_rational(value: Fraction) -> str:
    """Render as ``p`` or ``p/q``."""
    if value.denominator == 1:
        return int_to_text(value.numerator)
    return f"{int_to_text(value.numerator)}/{int_to_text(value.denominator)}"


def format_decimal(value: Fraction, digits: int) -> str:
    """
    Render a rational as a decimal expansion rounded to ``digits`` places.

    Trailing zeros (and a dangling point) are removed.

    Examples:
        >>> format_decimal(Fraction(1, 4), 10)
        '0.25'
        >>> format_decimal(Fraction(-2, 3), 3)
        '-0.667'
    """
    sign = "-" if value < 0 else ""
    scale = 10 ** digits
    scaled = (abs(value.numerator) * scale * 2 + value.denominator) // (2 * value.denominator)
    whole, fraction = divmod(scaled, scale)
    if digits == 0 or fraction == 0:
        text = int_to_text(whole)
    else:
        text = f"{int_to_text(whole)}.{int_to_text(fraction).rjust(digits, '0')}".rstrip("0")
    if text == "0":
        return "0"
    return sign + text


def _to_fraction(value: Rationalish) -> Fraction:
    if isinstance(value, Fraction):
        return value
    if isinstance(value, str):
        return parse_rational(value)
    return Fraction(value)


class ComplexRational(BaseModel):
    """
    Complex number with exact rational parts.

    Examples:
        >>> ComplexRational(1, 2) * ComplexRational(0, 1)
        ComplexRational(-2+1i)
        >>> str(ComplexRational("0.5"))
        '1/2'
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    real: Fraction = Field(description="The real part")
    imag: Fraction = Field(description="The imaginary part")

    def __init__(self, real: Rationalish = 0, imag: Rationalish = 0, **kwargs: Any):
        super().__init__(real=_to_fraction(real), imag=_to_fraction(imag), **kwargs)

    @property
    def is_real(self) -> bool:
        return self.imag == 0

    @property
    def is_integer(self) -> bool:
        """True for a real value with denominator 1."""
        return self.is_real and self.real.denominator == 1

    @property
    def is_zero(self) -> bool:
        return self.real == 0 and self.imag == 0

    def conjugate(self) -> ComplexRational:
        return ComplexRational(self.real, -self.imag)

    def norm(self) -> Fraction:
        """Squared magnitude ``real² + imag²``."""
        return self.real * self.real + self.imag * self.imag

    def to_string(self) -> str:
        """Exact rendering: ``7``, ``1/2``, ``3i``, ``1+2i``, ``1/2-3/4i``."""
        if self.imag == 0:
            return format_rational(self.real)
        imag = format_rational(abs(self.imag)) + "i"
        if self.real == 0:
            return ("-" if self.imag < 0 else "") + imag
        sign = "-" if self.imag < 0 else "+"
        return f"{format_rational(self.real)}{sign}{imag}"

    def to_decimal(self, digits: int) -> str:
        """Decimal rendering of both parts at ``digits`` places."""
        real = format_decimal(self.real, digits)
        imag = format_decimal(self.imag, digits)
        if imag == "0":
            return real
        if real == "0":
            return imag + "i"
        if imag.startswith("-"):
            return f"{real}-{imag[1:]}i"
        return f"{real}+{imag}i"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"ComplexRational({self.to_string()})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (int, Fraction)):
            return self.imag == 0 and self.real == other
        if isinstance(other, ComplexRational):
            return self.real == other.real and self.imag == other.imag
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.real, self.imag))

    # Field operations

    @staticmethod
    def _coerce(other: Any) -> ComplexRational | None:
        if isinstance(other, ComplexRational):
            return other
        if isinstance(other, (int, Fraction)):
            return ComplexRational(other)
        return None

    def __add__(self, other: Any) -> ComplexRational:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return ComplexRational(self.real + other.real, self.imag + other.imag)

    def __radd__(self, other: Any) -> ComplexRational:
        return self.__add__(other)

    def __sub__(self, other: Any) -> ComplexRational:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return ComplexRational(self.real - other.real, self.imag - other.imag)

    def __rsub__(self, other: Any) -> ComplexRational:
        return (-self).__add__(other)

    def __mul__(self, other: Any) -> ComplexRational:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        # (a + bi)(c + di) = (ac - bd) + (ad + bc)i
        return ComplexRational(
            self.real * other.real - self.imag * other.imag,
            self.real * other.imag + self.imag * other.real,
        )

    def __rmul__(self, other: Any) -> ComplexRational:
        return self.__mul__(other)

    def __truediv__(self, other: Any) -> ComplexRational:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        denominator = other.norm()
        if denominator == 0:
            raise DivisionByZeroError()
        # (a + bi) / (c + di) = [(a + bi)(c - di)] / (c² + d²)
        numerator = self * other.conjugate()
        return ComplexRational(numerator.real / denominator, numerator.imag / denominator)

    def __rtruediv__(self, other: Any) -> ComplexRational:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other.__truediv__(self)

    def __pow__(self, exponent: int) -> ComplexRational:
        """Exact integer power by repeated squaring."""
        if not isinstance(exponent, int):
            return NotImplemented
        if exponent < 0:
            return ONE / self.__pow__(-exponent)
        result, base = ONE, self
        while exponent:
            if exponent & 1:
                result = result * base
            base = base * base
            exponent >>= 1
        return result

    def __neg__(self) -> ComplexRational:
        return ComplexRational(-self.real, -self.imag)

    def __pos__(self) -> ComplexRational:
        return self


ZERO = ComplexRational(0)
ONE = ComplexRational(1)
