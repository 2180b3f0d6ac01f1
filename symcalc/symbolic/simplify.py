"""
Bottom-up algebraic simplification.

Children are simplified first, then a fixed set of identities is tried at
the node itself, in order, and the first that applies wins:

    x + 0 -> x      0 + x -> x
    x - 0 -> x      0 - x -> -(x)
    x * 0 -> 0      0 * x -> 0      x * 1 -> x      1 * x -> x
    x / 0 -> +Inf   0 / x -> 0      x / 1 -> x
    x % 1 -> x
    x ^ 0 -> 1      0 ^ x -> 0      1 ^ x -> 1      x ^ 1 -> x
    -(0) -> 0
    e^0 -> 1        e^1 -> e
    log(e) -> e
    sqrt(0) -> 0    sqrt(1) -> 1

Literal tests go through :meth:`Node.equals`.
"""

from __future__ import annotations

from typing import Callable, Optional

from .node import NUMERIC, Node, Operation

# Rendered result of dividing by a literal zero.
INFINITY = "+Inf"

Rewrite = Callable[[Node, Node], Optional[Node]]


def _is(node: Node, x: int) -> bool:
    return node.operation in NUMERIC and node.equals(x)


def _add(left: Node, right: Node) -> Optional[Node]:
    if _is(right, 0):
        return left
    if _is(left, 0):
        return right
    return None


def _subtract(left: Node, right: Node) -> Optional[Node]:
    if _is(right, 0):
        return left
    if _is(left, 0):
        return Node.unary(Operation.NEGATE, right)
    return None


def _multiply(left: Node, right: Node) -> Optional[Node]:
    if _is(right, 0) or _is(left, 0):
        return Node.number("0")
    if _is(right, 1):
        return left
    if _is(left, 1):
        return right
    return None


def _divide(left: Node, right: Node) -> Optional[Node]:
    if _is(right, 0):
        return Node.number(INFINITY)
    if _is(left, 0):
        return Node.number("0")
    if _is(right, 1):
        return left
    return None


def _modulus(left: Node, right: Node) -> Optional[Node]:
    if _is(right, 1):
        return left
    return None


def _exponentiation(left: Node, right: Node) -> Optional[Node]:
    if _is(right, 0):
        return Node.number("1")
    if _is(left, 0):
        return Node.number("0")
    if _is(left, 1):
        return Node.number("1")
    if _is(right, 1):
        return left
    return None


BINARY_REWRITES: dict[Operation, Rewrite] = {
    Operation.ADD: _add,
    Operation.SUBTRACT: _subtract,
    Operation.MULTIPLY: _multiply,
    Operation.DIVIDE: _divide,
    Operation.MODULUS: _modulus,
    Operation.EXPONENTIATION: _exponentiation,
}


def _unary(node: Node, operand: Node) -> Optional[Node]:
    operation = node.operation
    if operation is Operation.NEGATE and _is(operand, 0):
        return Node.number("0")
    if operation is Operation.NATURAL_EXPONENTIATION:
        if _is(operand, 0):
            return Node.number("1")
        if _is(operand, 1):
            return Node.variable("e")
    if operation is Operation.NATURAL_LOGARITHM and operand.operation is Operation.NATURAL:
        return operand
    if operation is Operation.SQUARE_ROOT:
        if _is(operand, 0):
            return Node.number("0")
        if _is(operand, 1):
            return Node.number("1")
    return None


def simplify(node: Node) -> Node:
    """
    Return a simplified copy of ``node``.

    The input tree is not modified and the result shares none of its nodes.
    """
    operation = node.operation
    if operation in BINARY_REWRITES:
        left, right = simplify(node.left), simplify(node.right)
        rewritten = BINARY_REWRITES[operation](left, right)
        if rewritten is not None:
            return rewritten
        return Node.binary(operation, left, right)
    if node.left is not None and node.right is None:
        operand = simplify(node.left)
        rewritten = _unary(node, operand)
        if rewritten is not None:
            return rewritten
        return Node.unary(operation, operand)
    return node.copy()
