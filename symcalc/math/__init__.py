"""
Numeric domain: exact complex rationals, matrices of them, and the
arbitrary-precision float bridge used for irrational operations.
"""

from .rational import ONE, ZERO, ComplexRational, format_decimal, format_rational
from .precision import PrecisionContext
from .matrix import Matrix
from .value import Value, ValueType

__all__ = [
    "ONE",
    "ZERO",
    "ComplexRational",
    "format_decimal",
    "format_rational",
    "PrecisionContext",
    "Matrix",
    "Value",
    "ValueType",
]
