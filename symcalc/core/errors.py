"""
Engine exceptions.

Every failure surfaced by the engine derives from :class:`CalcError` so that
front ends can abort a single request and keep the session alive.
"""

import json
from typing import Any, Dict, Optional


class CalcError(Exception):
    """Base exception for engine errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ParseError(CalcError):
    """
    Raised when an input line does not match the grammar.

    The error is anchored at the furthest token the grammar recorded before
    giving up. Positions are 1-based ``(line, symbol)`` pairs.
    """

    def __init__(
        self,
        rule: str,
        begin: tuple[int, int],
        end: tuple[int, int],
        text: str,
        offset: int = 0,
    ):
        self.rule = rule
        self.begin = begin
        self.end = end
        self.text = text
        self.offset = offset
        message = (
            f"parse error near {rule} "
            f"(line {begin[0]} symbol {begin[1]} - line {end[0]} symbol {end[1]}):\n"
            f"{json.dumps(text, ensure_ascii=False)}\n"
        )
        super().__init__(
            message,
            details={"rule": rule, "begin": begin, "end": end, "offset": offset},
        )


class EvaluationError(CalcError):
    """Raised when a parsed tree cannot be evaluated numerically"""


class MatrixNestingError(EvaluationError):
    """Raised when a matrix literal contains a non-scalar cell"""

    def __init__(self, shape: tuple[int, int]):
        super().__init__(
            message="matrix within matrix not allowed",
            details={"shape": shape}
        )


class DivisionByZeroError(EvaluationError):
    """Raised on exact division by zero or inversion of a singular matrix"""

    def __init__(self, message: str = "division by zero"):
        super().__init__(message)


class ShapeError(EvaluationError):
    """Raised when matrix shapes are incompatible with an operation"""

    def __init__(self, message: str, shapes: tuple = ()):
        super().__init__(message, details={"shapes": shapes} if shapes else None)


class UnboundVariableError(EvaluationError):
    """Raised when a free variable is evaluated numerically"""

    def __init__(self, name: str):
        super().__init__(
            message=f"variable '{name}' has no numeric value",
            details={"variable": name}
        )


class SymbolicError(CalcError):
    """Raised for malformed or unsupported symbolic expressions"""


class IntegrationError(CalcError):
    """
    Raised when the evolutionary integrator stops without converging.

    Attributes:
        best: Best candidate antiderivative found so far
        generations: Number of generations that were run
    """

    def __init__(self, message: str, best: Any = None, generations: int = 0):
        self.best = best
        self.generations = generations
        super().__init__(
            message,
            details={"generations": generations, "best": str(best) if best is not None else None}
        )
