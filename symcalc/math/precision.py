"""
Arbitrary-precision float bridge.

Irrational operations convert exact :class:`ComplexRational` operands to
binary floats at a working precision (in bits), apply an mpmath primitive,
and convert the result back to an exact rational approximation.

Each :class:`PrecisionContext` owns a private mpmath context, so the bit
width is a per-session cell rather than process-wide state.
"""

from __future__ import annotations

import math
from fractions import Fraction
from typing import Any

from mpmath.ctx_mp import MPContext

from ..core.config import get_settings
from ..core.errors import DivisionByZeroError, EvaluationError
from ..core.logging import get_logger
from .rational import ComplexRational

logger = get_logger(__name__)

# Extra bits carried while iterating toward pi.
_GUARD_BITS = 16


def decimal_digits(bits: int) -> int:
    """Decimal digits representable in ``bits`` binary digits."""
    return max(1, int(bits * math.log10(2)))


def default_digits() -> int:
    """Decimal digits of the configured default precision."""
    return decimal_digits(get_settings().DEFAULT_PRECISION)


class PrecisionContext:
    """
    Working precision plus the float primitives that honour it.

    Args:
        precision: Bit width; defaults to ``Settings.DEFAULT_PRECISION``

    Example:
        >>> ctx = PrecisionContext(64)
        >>> ctx.sqrt(ComplexRational(4))
        ComplexRational(2)
    """

    def __init__(self, precision: int | None = None):
        self._mp = MPContext()
        self.precision = precision or get_settings().DEFAULT_PRECISION

    @property
    def precision(self) -> int:
        """Current bit width used for every float conversion."""
        return self._mp.prec

    @precision.setter
    def precision(self, bits: int) -> None:
        if bits < 1:
            raise EvaluationError(
                f"precision must be a positive number of bits, got {bits}",
                details={"precision": bits},
            )
        self._mp.prec = int(bits)

    @property
    def digits(self) -> int:
        """Decimal digits representable at the current precision."""
        return decimal_digits(self.precision)

    # Conversions

    def to_float(self, value: ComplexRational) -> Any:
        """Round an exact value to an mpf (real) or mpc (complex)."""
        real = self._fraction_to_mpf(value.real)
        if value.imag == 0:
            return real
        return self._mp.mpc(real, self._fraction_to_mpf(value.imag))

    def _fraction_to_mpf(self, value: Fraction) -> Any:
        return self._mp.mpf(value.numerator) / value.denominator

    def rationalize(self, value: Any) -> ComplexRational:
        """Convert an mpf/mpc back to the exact rational it represents."""
        if isinstance(value, self._mp.mpc):
            return ComplexRational(self._mpf_to_fraction(value.real), self._mpf_to_fraction(value.imag))
        return ComplexRational(self._mpf_to_fraction(self._mp.mpf(value)))

    def _mpf_to_fraction(self, value: Any) -> Fraction:
        if self._mp.isinf(value) or self._mp.isnan(value):
            raise EvaluationError(f"result is not finite: {value}")
        sign, mantissa, exponent, _ = value._mpf_
        if sign:
            mantissa = -mantissa
        if exponent >= 0:
            return Fraction(mantissa * (1 << exponent))
        return Fraction(mantissa, 1 << -exponent)

    # Primitives

    def pi(self) -> ComplexRational:
        """
        Compute pi with the Gauss-Legendre iteration.

        The arithmetic-geometric mean converges quadratically, so the number
        of correct bits roughly doubles each round.
        """
        mp = self._mp
        target = self.precision
        with mp.workprec(target + _GUARD_BITS):
            a = mp.mpf(1)
            b = 1 / mp.sqrt(2)
            t = mp.mpf(1) / 4
            p = mp.mpf(1)
            epsilon = mp.ldexp(1, -(target + _GUARD_BITS // 2))
            for _ in range(max(4, target.bit_length() + 4)):
                a_next = (a + b) / 2
                b = mp.sqrt(a * b)
                t -= p * (a - a_next) ** 2
                a = a_next
                p *= 2
                if abs(a - b) <= epsilon:
                    break
            value = (a + b) ** 2 / (4 * t)
        return self.rationalize(+value)

    def power(self, base: ComplexRational, exponent: ComplexRational) -> ComplexRational:
        """``base ** exponent`` evaluated in floating point."""
        if base.is_zero and (exponent.real < 0 or (exponent.real == 0 and exponent.imag != 0)):
            raise DivisionByZeroError("zero raised to a non-positive power")
        return self._apply("power", self.to_float(base), self.to_float(exponent))

    def exp(self, value: ComplexRational) -> ComplexRational:
        return self._apply("exp", self.to_float(value))

    def log(self, value: ComplexRational) -> ComplexRational:
        if value.is_zero:
            raise DivisionByZeroError("logarithm of zero")
        return self._apply("ln", self.to_float(value))

    def sqrt(self, value: ComplexRational) -> ComplexRational:
        return self._apply("sqrt", self.to_float(value))

    def cos(self, value: ComplexRational) -> ComplexRational:
        return self._apply("cos", self.to_float(value))

    def sin(self, value: ComplexRational) -> ComplexRational:
        return self._apply("sin", self.to_float(value))

    def tan(self, value: ComplexRational) -> ComplexRational:
        return self._apply("tan", self.to_float(value))

    def _apply(self, name: str, *args: Any) -> ComplexRational:
        primitive = getattr(self._mp, name)
        try:
            result = primitive(*args)
        except ZeroDivisionError as exc:
            raise DivisionByZeroError(f"{name}: {exc}") from exc
        except (ValueError, ArithmeticError) as exc:
            raise EvaluationError(f"{name} failed: {exc}") from exc
        return self.rationalize(result)

    def __repr__(self) -> str:
        return f"PrecisionContext(precision={self.precision})"
