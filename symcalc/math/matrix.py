"""
Matrices of exact complex rationals.

Every numeric result is a :class:`Matrix`; plain numbers are 1×1 matrices.
A 1×1 operand broadcasts against any shape in the elementwise operations.
"""

from __future__ import annotations

from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field

from ..core.errors import DivisionByZeroError, ShapeError
from .rational import ONE, ZERO, ComplexRational


class Matrix(BaseModel):
    """
    Rectangular grid of :class:`ComplexRational` entries.

    Examples:
        >>> Matrix([[1, 2], [3, 4]]).shape
        (2, 2)
        >>> str(Matrix.scalar_of(ComplexRational(1, 1)))
        '1+1i'
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    rows: list[list[ComplexRational]] = Field(default_factory=list)

    def __init__(self, rows: Iterable[Iterable[Any]], **kwargs: Any):
        super().__init__(rows=self._coerce_rows(rows), **kwargs)

    @staticmethod
    def _coerce_rows(raw_rows: Iterable[Iterable[Any]]) -> list[list[ComplexRational]]:
        """Convert raw rows to ComplexRational rows, checking the shape."""
        normalized = [
            [cell if isinstance(cell, ComplexRational) else ComplexRational(cell) for cell in row]
            for row in raw_rows
        ]
        if not normalized or not normalized[0]:
            raise ShapeError("matrix must have at least one entry")
        width = len(normalized[0])
        if any(len(row) != width for row in normalized):
            raise ShapeError(
                "matrix rows must all have the same length",
                shapes=tuple(len(row) for row in normalized),
            )
        return normalized

    @classmethod
    def scalar_of(cls, value: ComplexRational) -> Matrix:
        """Wrap a single entry as a 1×1 matrix."""
        return cls([[value]])

    @classmethod
    def identity(cls, size: int) -> Matrix:
        return cls([[ONE if i == j else ZERO for j in range(size)] for i in range(size)])

    @property
    def shape(self) -> tuple[int, int]:
        """Dimensions as (rows, columns)."""
        return (len(self.rows), len(self.rows[0]))

    @property
    def is_scalar(self) -> bool:
        return self.shape == (1, 1)

    @property
    def is_square(self) -> bool:
        rows, columns = self.shape
        return rows == columns

    def scalar(self, operation: str = "operation") -> ComplexRational:
        """
        Return the single entry of a 1×1 matrix.

        Raises:
            ShapeError: If the matrix has more than one entry
        """
        if not self.is_scalar:
            raise ShapeError(f"{operation} requires a 1x1 value", shapes=(self.shape,))
        return self.rows[0][0]

    def __getitem__(self, index: tuple[int, int]) -> ComplexRational:
        row, column = index
        return self.rows[row][column]

    def map(self, function) -> Matrix:
        """Apply ``function`` to every entry."""
        return Matrix([[function(cell) for cell in row] for row in self.rows])

    # Display

    def to_string(self) -> str:
        """Exact rendering; a 1×1 matrix renders as its entry."""
        if self.is_scalar:
            return self.rows[0][0].to_string()
        return "[" + "".join("[" + ",".join(cell.to_string() for cell in row) + "]" for row in self.rows) + "]"

    def to_decimal(self, digits: int) -> str:
        """Decimal rendering with the same layout as :meth:`to_string`."""
        if self.is_scalar:
            return self.rows[0][0].to_decimal(digits)
        return "[" + "".join(
            "[" + ",".join(cell.to_decimal(digits) for cell in row) + "]" for row in self.rows
        ) + "]"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Matrix({self.to_string()})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.rows == other.rows

    def __hash__(self) -> int:
        return hash(tuple(tuple(row) for row in self.rows))

    # Arithmetic

    def _elementwise(self, other: Matrix, function, name: str) -> Matrix:
        if other.is_scalar:
            value = other.rows[0][0]
            return self.map(lambda cell: function(cell, value))
        if self.is_scalar:
            value = self.rows[0][0]
            return other.map(lambda cell: function(value, cell))
        if self.shape != other.shape:
            raise ShapeError(f"cannot {name} {self.shape} and {other.shape} matrices",
                             shapes=(self.shape, other.shape))
        return Matrix([
            [function(a, b) for a, b in zip(row1, row2)]
            for row1, row2 in zip(self.rows, other.rows)
        ])

    def __add__(self, other: Any) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._elementwise(other, lambda a, b: a + b, "add")

    def __sub__(self, other: Any) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._elementwise(other, lambda a, b: a - b, "subtract")

    def __mul__(self, other: Any) -> Matrix:
        """Scalar multiplication when either side is 1×1, matrix product otherwise."""
        if not isinstance(other, Matrix):
            return NotImplemented
        if self.is_scalar or other.is_scalar:
            return self._elementwise(other, lambda a, b: a * b, "multiply")
        return self @ other

    def __matmul__(self, other: Any) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        rows, inner = self.shape
        if inner != other.shape[0]:
            raise ShapeError(f"cannot multiply {self.shape} by {other.shape} matrices",
                             shapes=(self.shape, other.shape))
        columns = other.shape[1]
        result = []
        for i in range(rows):
            row = []
            for j in range(columns):
                total = ZERO
                for k in range(inner):
                    total = total + self.rows[i][k] * other.rows[k][j]
                row.append(total)
            result.append(row)
        return Matrix(result)

    def __truediv__(self, other: Any) -> Matrix:
        """Entrywise division by a 1×1 divisor, otherwise ``self · other⁻¹``."""
        if not isinstance(other, Matrix):
            return NotImplemented
        if other.is_scalar:
            return self._elementwise(other, lambda a, b: a / b, "divide")
        return self * other.inverse()

    def __neg__(self) -> Matrix:
        return self.map(lambda cell: -cell)

    def inverse(self) -> Matrix:
        """
        Invert a square matrix with Gauss-Jordan elimination.

        Raises:
            ShapeError: If the matrix is not square
            DivisionByZeroError: If the matrix is singular
        """
        if not self.is_square:
            raise ShapeError("inverse only defined for square matrices", shapes=(self.shape,))
        size = self.shape[0]
        work = [list(row) + list(identity) for row, identity in zip(self.rows, Matrix.identity(size).rows)]

        for column in range(size):
            pivot = next((r for r in range(column, size) if not work[r][column].is_zero), None)
            if pivot is None:
                raise DivisionByZeroError("matrix is singular")
            work[column], work[pivot] = work[pivot], work[column]

            factor = work[column][column]
            work[column] = [cell / factor for cell in work[column]]
            for r in range(size):
                if r != column and not work[r][column].is_zero:
                    scale = work[r][column]
                    work[r] = [a - scale * b for a, b in zip(work[r], work[column])]

        return Matrix([row[size:] for row in work])

    def power(self, exponent: int) -> Matrix:
        """
        Integer power of a square matrix by repeated squaring.

        Negative exponents invert first.
        """
        if not self.is_square:
            raise ShapeError("power only defined for square matrices", shapes=(self.shape,))
        base = self.inverse() if exponent < 0 else self
        exponent = abs(exponent)
        result = Matrix.identity(self.shape[0])
        while exponent:
            if exponent & 1:
                result = result @ base
            base = base @ base
            exponent >>= 1
        return result
