"""
Symbolic Package

Expression trees with rendering, differentiation, simplification and an
evolutionary antiderivative search.
"""

from .node import (
    BINARY_OPERATIONS,
    CONSTANTS,
    NUMBERS,
    UNARY_OPERATIONS,
    Node,
    Operation,
    literal_value,
)
from .derivative import derivative
from .simplify import simplify
from .convert import SymbolicConverter, convert
from .integrate import Integrator, difference

__all__ = [
    "BINARY_OPERATIONS",
    "CONSTANTS",
    "NUMBERS",
    "UNARY_OPERATIONS",
    "Node",
    "Operation",
    "literal_value",
    "derivative",
    "simplify",
    "SymbolicConverter",
    "convert",
    "Integrator",
    "difference",
]
