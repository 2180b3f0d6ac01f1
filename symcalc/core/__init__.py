"""Core utilities package"""

from .config import settings, get_settings, Settings
from .logging import setup_logging, get_logger, get_context_logger
from .errors import (
    CalcError,
    ParseError,
    EvaluationError,
    MatrixNestingError,
    DivisionByZeroError,
    ShapeError,
    UnboundVariableError,
    SymbolicError,
    IntegrationError,
)

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "setup_logging",
    "get_logger",
    "get_context_logger",
    "CalcError",
    "ParseError",
    "EvaluationError",
    "MatrixNestingError",
    "DivisionByZeroError",
    "ShapeError",
    "UnboundVariableError",
    "SymbolicError",
    "IntegrationError",
]
