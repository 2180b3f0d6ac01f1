"""
symcalc - an expression calculator with symbolic algebra.

Lines are parsed by a backtracking grammar into a tree, which is either
evaluated over exact complex rational matrices or converted into a
symbolic expression for rendering, differentiation, simplification and
evolutionary integration.
"""

from .calculator import Calculator
from .core.errors import (
    CalcError,
    DivisionByZeroError,
    EvaluationError,
    IntegrationError,
    MatrixNestingError,
    ParseError,
    ShapeError,
    SymbolicError,
    UnboundVariableError,
)
from .evaluator import Evaluator
from .math import ComplexRational, Matrix, PrecisionContext, Value, ValueType
from .symbolic import Integrator, Node, Operation

__version__ = "0.1.0"

__all__ = [
    "Calculator",
    "CalcError",
    "DivisionByZeroError",
    "EvaluationError",
    "IntegrationError",
    "MatrixNestingError",
    "ParseError",
    "ShapeError",
    "SymbolicError",
    "UnboundVariableError",
    "Evaluator",
    "ComplexRational",
    "Matrix",
    "PrecisionContext",
    "Value",
    "ValueType",
    "Integrator",
    "Node",
    "Operation",
]
