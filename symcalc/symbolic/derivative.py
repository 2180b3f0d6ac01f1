"""
Rule-table differentiation.

Each operation has one construction rule. Results are left unsimplified;
callers run :func:`symcalc.symbolic.simplify.simplify` afterwards. Operand
subtrees reused in a result are cloned, so the output never aliases the
input.
"""

from __future__ import annotations

from typing import Callable

from ..core.errors import SymbolicError
from .node import Node, Operation, literal_value

Rule = Callable[[Node], Node]


def _zero(node: Node) -> Node:
    return Node.number("0")


def _one(node: Node) -> Node:
    return Node.number("1")


def _unchanged(node: Node) -> Node:
    return node.copy()


def _sum(node: Node) -> Node:
    return Node.binary(node.operation, derivative(node.left), derivative(node.right))


def _product(node: Node) -> Node:
    # (uv)' = u·v' + v·u'
    return Node.binary(
        Operation.ADD,
        Node.binary(Operation.MULTIPLY, node.left.copy(), derivative(node.right)),
        Node.binary(Operation.MULTIPLY, node.right.copy(), derivative(node.left)),
    )


def _quotient(node: Node) -> Node:
    # (u/v)' = (v·u' - u·v') / v^2
    numerator = Node.binary(
        Operation.SUBTRACT,
        Node.binary(Operation.MULTIPLY, node.right.copy(), derivative(node.left)),
        Node.binary(Operation.MULTIPLY, node.left.copy(), derivative(node.right)),
    )
    square = Node.binary(Operation.EXPONENTIATION, node.right.copy(), Node.number("2"))
    return Node.binary(Operation.DIVIDE, numerator, square)


def _power(node: Node) -> Node:
    # (u^n)' = (n·u^(n-1))·u' for a constant integer n
    exponent = node.right
    value = literal_value(exponent.value) if exponent.operation is Operation.NUMBER else None
    if value is None or value.denominator != 1:
        raise SymbolicError(
            f"cannot differentiate {node.render()}: exponent must be an integer constant",
            details={"exponent": exponent.render()},
        )
    lowered = Node.binary(
        Operation.EXPONENTIATION, node.left.copy(), Node.number(str(value.numerator - 1))
    )
    scaled = Node.binary(Operation.MULTIPLY, exponent.copy(), lowered)
    return Node.binary(Operation.MULTIPLY, scaled, derivative(node.left))


def _negate(node: Node) -> Node:
    return Node.unary(Operation.NEGATE, derivative(node.left))


def _natural_exponentiation(node: Node) -> Node:
    # (e^u)' = e^u·u'
    return Node.binary(Operation.MULTIPLY, node.copy(), derivative(node.left))


def _logarithm(node: Node) -> Node:
    # log(u)' = u'/u
    return Node.binary(Operation.DIVIDE, derivative(node.left), node.left.copy())


def _square_root(node: Node) -> Node:
    # sqrt(u)' = (0.5·u')/sqrt(u)
    half = Node.binary(Operation.MULTIPLY, Node.number("0.5"), derivative(node.left))
    return Node.binary(Operation.DIVIDE, half, node.copy())


def _cosine(node: Node) -> Node:
    # cos(u)' = -(sin(u)·u')
    sine = Node.unary(Operation.SINE, node.left.copy())
    return Node.unary(
        Operation.NEGATE, Node.binary(Operation.MULTIPLY, sine, derivative(node.left))
    )


def _sine(node: Node) -> Node:
    # sin(u)' = cos(u)·u'
    cosine = Node.unary(Operation.COSINE, node.left.copy())
    return Node.binary(Operation.MULTIPLY, cosine, derivative(node.left))


def _tangent(node: Node) -> Node:
    # tan(u)' = (1 + tan(u)^2)·u'
    square = Node.binary(Operation.EXPONENTIATION, node.copy(), Node.number("2"))
    secant = Node.binary(Operation.ADD, Node.number("1"), square)
    return Node.binary(Operation.MULTIPLY, secant, derivative(node.left))


RULES: dict[Operation, Rule] = {
    Operation.NOOP: _unchanged,
    Operation.ADD: _sum,
    Operation.SUBTRACT: _sum,
    Operation.MULTIPLY: _product,
    Operation.DIVIDE: _quotient,
    Operation.MODULUS: _unchanged,
    Operation.EXPONENTIATION: _power,
    Operation.NEGATE: _negate,
    Operation.VARIABLE: _one,
    Operation.IMAGINARY: _zero,
    Operation.NUMBER: _zero,
    Operation.NOTATION: _zero,
    Operation.NATURAL_EXPONENTIATION: _natural_exponentiation,
    Operation.NATURAL: _zero,
    Operation.PI: _zero,
    Operation.NATURAL_LOGARITHM: _logarithm,
    Operation.SQUARE_ROOT: _square_root,
    Operation.COSINE: _cosine,
    Operation.SINE: _sine,
    Operation.TANGENT: _tangent,
}


def derivative(node: Node) -> Node:
    """
    Differentiate ``node`` with respect to its free variable.

    Args:
        node: Expression to differentiate; left untouched

    Returns:
        A new, unsimplified tree

    Raises:
        SymbolicError: For a power whose exponent is not an integer literal
    """
    return RULES[node.operation](node)
