"""
Evaluation results.

A :class:`Value` is either a numeric :class:`Matrix` or a symbolic
expression produced by an inline ``simplify``/``derivative`` request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from ..core.errors import EvaluationError
from .matrix import Matrix
from .precision import default_digits
from .rational import ComplexRational

if TYPE_CHECKING:
    from ..symbolic.node import Node


class ValueType(Enum):
    """Tag of the :class:`Value` union"""

    MATRIX = "matrix"
    EXPRESSION = "expression"


@dataclass(frozen=True)
class Value:
    """
    Result of evaluating one tree.

    Attributes:
        type: Which member of the union is populated
        matrix: The numeric result, for ``ValueType.MATRIX``
        expression: The symbolic result, for ``ValueType.EXPRESSION``
        digits: Default decimal places for :meth:`decimal`
    """

    type: ValueType
    matrix: Optional[Matrix] = None
    expression: Optional[Any] = None
    digits: int = field(default_factory=default_digits)

    @classmethod
    def of_matrix(cls, matrix: Matrix, digits: Optional[int] = None) -> Value:
        if digits is None:
            return cls(ValueType.MATRIX, matrix=matrix)
        return cls(ValueType.MATRIX, matrix=matrix, digits=digits)

    @classmethod
    def of_scalar(cls, value: ComplexRational, digits: Optional[int] = None) -> Value:
        return cls.of_matrix(Matrix.scalar_of(value), digits)

    @classmethod
    def of_expression(cls, expression: Node) -> Value:
        return cls(ValueType.EXPRESSION, expression=expression)

    @property
    def is_matrix(self) -> bool:
        return self.type is ValueType.MATRIX

    @property
    def is_expression(self) -> bool:
        return self.type is ValueType.EXPRESSION

    def require_matrix(self, operation: str = "operation") -> Matrix:
        """
        Return the numeric payload.

        Raises:
            EvaluationError: If this value is a symbolic expression
        """
        if self.matrix is None:
            raise EvaluationError(
                f"{operation} cannot combine a symbolic expression numerically",
                details={"expression": str(self.expression)},
            )
        return self.matrix

    def scalar(self, operation: str = "operation") -> ComplexRational:
        """The entry of a 1×1 numeric value."""
        return self.require_matrix(operation).scalar(operation)

    def decimal(self, digits: Optional[int] = None) -> str:
        """
        Decimal expansion of a numeric value.

        Symbolic values render the same as :meth:`__str__`.
        """
        if self.matrix is None:
            return str(self)
        return self.matrix.to_decimal(self.digits if digits is None else digits)

    def __str__(self) -> str:
        if self.matrix is not None:
            return self.matrix.to_string()
        return self.expression.render()
