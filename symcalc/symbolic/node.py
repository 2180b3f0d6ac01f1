"""
Symbolic expression trees.

A :class:`Node` carries an :class:`Operation` tag, the literal source text
for leaves, and up to two children. Construction is arity-checked: binary
operations take both children, unary operations only ``left``, leaves none.
"""

from __future__ import annotations

from enum import Enum
from fractions import Fraction
from typing import Iterator, Optional

from ..core.errors import SymbolicError
from ..math.rational import parse_rational


class Operation(Enum):
    """Symbolic operation tags"""

    NOOP = "noop"
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    MODULUS = "modulus"
    EXPONENTIATION = "exponentiation"
    NEGATE = "negate"
    VARIABLE = "variable"
    IMAGINARY = "imaginary"
    NUMBER = "number"
    NATURAL_EXPONENTIATION = "natural_exponentiation"
    NATURAL = "natural"
    PI = "pi"
    NATURAL_LOGARITHM = "natural_logarithm"
    SQUARE_ROOT = "square_root"
    COSINE = "cosine"
    SINE = "sine"
    TANGENT = "tangent"
    NOTATION = "notation"


BINARY = frozenset({
    Operation.ADD,
    Operation.SUBTRACT,
    Operation.MULTIPLY,
    Operation.DIVIDE,
    Operation.MODULUS,
    Operation.EXPONENTIATION,
    Operation.NOTATION,
})

UNARY = frozenset({
    Operation.NEGATE,
    Operation.NATURAL_EXPONENTIATION,
    Operation.NATURAL_LOGARITHM,
    Operation.SQUARE_ROOT,
    Operation.COSINE,
    Operation.SINE,
    Operation.TANGENT,
})

LEAF = frozenset({
    Operation.VARIABLE,
    Operation.IMAGINARY,
    Operation.NUMBER,
    Operation.NATURAL,
    Operation.PI,
})

# Literal operations compared by value in rewrite rules.
NUMERIC = frozenset({Operation.NUMBER, Operation.IMAGINARY, Operation.NOTATION})

# Operation pools drawn from by the evolutionary integrator.
BINARY_OPERATIONS = (
    Operation.ADD,
    Operation.SUBTRACT,
    Operation.MULTIPLY,
    Operation.DIVIDE,
    Operation.EXPONENTIATION,
    Operation.NOTATION,
)
UNARY_OPERATIONS = (
    Operation.NEGATE,
    Operation.NATURAL_EXPONENTIATION,
    Operation.NATURAL_LOGARITHM,
    Operation.SQUARE_ROOT,
    Operation.COSINE,
    Operation.SINE,
    Operation.TANGENT,
)
NUMBERS = (Operation.IMAGINARY, Operation.NUMBER)
CONSTANTS = (Operation.NATURAL, Operation.PI)

_INFIX = {
    Operation.ADD: " + ",
    Operation.SUBTRACT: " - ",
    Operation.MULTIPLY: " * ",
    Operation.DIVIDE: " / ",
    Operation.MODULUS: " % ",
    Operation.EXPONENTIATION: "^",
    Operation.NOOP: "???",
}

_FUNCTIONS = {
    Operation.NATURAL_LOGARITHM: "log",
    Operation.SQUARE_ROOT: "sqrt",
    Operation.COSINE: "cos",
    Operation.SINE: "sin",
    Operation.TANGENT: "tan",
}


def literal_value(text: str) -> Optional[Fraction]:
    """Parse literal text such as ``"3"``, ``"-2"`` or ``"0.5"``; None if it is not a number."""
    try:
        return parse_rational(text)
    except (ValueError, ZeroDivisionError):
        return None


class Node:
    """
    Symbolic expression tree node.

    Attributes:
        operation: What this node computes
        value: Literal source text (numbers, imaginaries, variables)
        left: First operand of binary and unary operations
        right: Second operand of binary operations

    Example:
        >>> x = Node.variable("x")
        >>> Node(Operation.ADD, left=x, right=Node.number("1")).render()
        '(x + 1)'
    """

    __slots__ = ("operation", "value", "left", "right")

    def __init__(
        self,
        operation: Operation,
        value: str = "",
        left: Optional[Node] = None,
        right: Optional[Node] = None,
    ):
        if operation in BINARY and (left is None or right is None):
            raise SymbolicError(f"{operation.value} requires two operands")
        if operation in UNARY and (left is None or right is not None):
            raise SymbolicError(f"{operation.value} requires exactly one operand")
        if operation in LEAF and (left is not None or right is not None):
            raise SymbolicError(f"{operation.value} takes no operands")
        self.operation = operation
        self.value = value
        self.left = left
        self.right = right

    # Convenience constructors

    @classmethod
    def number(cls, value: str) -> Node:
        return cls(Operation.NUMBER, value)

    @classmethod
    def imaginary(cls, value: str) -> Node:
        return cls(Operation.IMAGINARY, value)

    @classmethod
    def variable(cls, name: str) -> Node:
        return cls(Operation.VARIABLE, name)

    @classmethod
    def unary(cls, operation: Operation, operand: Node) -> Node:
        return cls(operation, left=operand)

    @classmethod
    def binary(cls, operation: Operation, left: Node, right: Node) -> Node:
        return cls(operation, left=left, right=right)

    # Structure

    def copy(self) -> Node:
        """Deep clone; the copy shares no nodes with the original."""
        return Node(
            self.operation,
            self.value,
            self.left.copy() if self.left is not None else None,
            self.right.copy() if self.right is not None else None,
        )

    def walk(self) -> Iterator[Node]:
        """Pre-order traversal: node, left subtree, right subtree."""
        yield self
        if self.left is not None:
            yield from self.left.walk()
        if self.right is not None:
            yield from self.right.walk()

    def size(self) -> int:
        return sum(1 for _ in self.walk())

    def equals(self, x: int) -> bool:
        """
        Compare a numeric literal with the integer ``x``.

        Number literals compare by exact value, so ``"0.5"`` never equals an
        integer. Imaginary literals equal only zero. Notation nodes compare
        ``mantissa * 10**exponent``.
        """
        if self.operation is Operation.NOTATION:
            mantissa = literal_value(self.left.value) if self.left.operation in NUMBERS else None
            exponent = literal_value(self.right.value) if self.right.operation is Operation.NUMBER else None
            if mantissa is None or exponent is None or exponent.denominator != 1:
                return False
            value = mantissa * Fraction(10) ** int(exponent)
            if self.left.operation is Operation.IMAGINARY:
                return x == 0 and value == 0
            return value == x
        if self.operation not in NUMBERS:
            return False
        value = literal_value(self.value)
        if value is None:
            return False
        if self.operation is Operation.IMAGINARY:
            return x == 0 and value == 0
        return value == x

    # Rendering

    def render(self) -> str:
        """Fully parenthesized text form."""
        operation = self.operation
        if operation in _INFIX:
            left = self.left.render() if self.left is not None else ""
            right = self.right.render() if self.right is not None else ""
            return f"({left}{_INFIX[operation]}{right})"
        if operation in _FUNCTIONS:
            return f"{_FUNCTIONS[operation]}({self.left.render()})"
        if operation is Operation.NEGATE:
            return f"-({self.left.render()})"
        if operation is Operation.NATURAL_EXPONENTIATION:
            return f"(e^{self.left.render()})"
        if operation is Operation.IMAGINARY:
            return self.value + "i"
        if operation is Operation.NOTATION:
            if self.left.operation is Operation.IMAGINARY:
                return f"{self.left.value}e{self.right.render()}i"
            return f"{self.left.render()}e{self.right.render()}"
        if operation is Operation.NATURAL:
            return "e"
        if operation is Operation.PI:
            return "pi"
        # Number and Variable
        return self.value

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Node({self.render()})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return (
            self.operation is other.operation
            and self.value == other.value
            and self.left == other.left
            and self.right == other.right
        )

    __hash__ = None

    # Calculus

    def derivative(self) -> Node:
        """Derivative with respect to the free variable (unsimplified)."""
        from .derivative import derivative

        return derivative(self)

    def simplify(self) -> Node:
        """Bottom-up rewrite to a simpler equivalent."""
        from .simplify import simplify

        return simplify(self)
