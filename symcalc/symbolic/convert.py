"""
Symbolic converter: parse tree to :class:`Node` tree.

Follows the same rule dispatch as the numeric evaluator but builds nodes
instead of values. Literals keep their source text.
"""

from __future__ import annotations

from typing import Optional

from ..core.errors import SymbolicError
from ..core.logging import get_logger
from ..parser.grammar import Rule
from ..parser.tree import TreeNode
from .node import Node, Operation

logger = get_logger(__name__)

BINARY_RULES: dict[Rule, Operation] = {
    Rule.ADD: Operation.ADD,
    Rule.MINUS: Operation.SUBTRACT,
    Rule.MULTIPLY: Operation.MULTIPLY,
    Rule.DIVIDE: Operation.DIVIDE,
    Rule.MODULUS: Operation.MODULUS,
    Rule.EXPONENTIATION: Operation.EXPONENTIATION,
}

FUNCTION_OPERATIONS: dict[Rule, Operation] = {
    Rule.LOG: Operation.NATURAL_LOGARITHM,
    Rule.SQRT: Operation.SQUARE_ROOT,
    Rule.COS: Operation.COSINE,
    Rule.SIN: Operation.SINE,
    Rule.TAN: Operation.TANGENT,
    Rule.EXP1: Operation.NATURAL_EXPONENTIATION,
}


class SymbolicConverter:
    """
    Builds symbolic expressions from parse trees.

    Usage:
        >>> from symcalc.parser import parse
        >>> SymbolicConverter().convert(parse("x^2 + 1")).render()
        '((x^2) + 1)'
    """

    def convert(self, tree: TreeNode) -> Node:
        """
        Convert a parse tree rooted at ``e``, ``e1``..``e4`` or ``value``.

        Raises:
            SymbolicError: For constructs with no symbolic form (matrices,
                ``prec``) or an empty tree
        """
        if tree is None:
            raise SymbolicError("nothing to convert")
        if tree.rule is Rule.E:
            operand = tree.child(Rule.E1)
            if operand is None:
                raise SymbolicError("nothing to convert")
            return self.convert(operand)
        if tree.rule in (Rule.E1, Rule.E2, Rule.E3):
            return self._fold(tree)
        if tree.rule is Rule.E4:
            return self._negation(tree)
        if tree.rule is Rule.VALUE:
            return self._value(tree)
        raise SymbolicError(f"cannot convert {tree.rule.value}")

    def _fold(self, tree: TreeNode) -> Node:
        """Left-to-right fold over one precedence level."""
        result: Optional[Node] = None
        pending: Optional[Operation] = None
        for child in tree.children:
            if child.rule in BINARY_RULES:
                pending = BINARY_RULES[child.rule]
                continue
            if child.rule not in (Rule.E2, Rule.E3, Rule.E4):
                continue
            operand = self.convert(child)
            if result is None:
                result = operand
            else:
                result = Node.binary(pending, result, operand)
        if result is None:
            raise SymbolicError(f"empty {tree.rule.value}")
        return result

    def _negation(self, tree: TreeNode) -> Node:
        value = tree.child(Rule.VALUE)
        operand = self._value(value)
        if tree.child(Rule.MINUS) is not None:
            return Node.unary(Operation.NEGATE, operand)
        return operand

    def _value(self, tree: TreeNode) -> Node:
        for child in tree.children:
            rule = child.rule
            if rule in FUNCTION_OPERATIONS:
                return Node.unary(FUNCTION_OPERATIONS[rule], self._argument(child))
            if rule is Rule.EXP2:
                return Node.unary(Operation.NATURAL_EXPONENTIATION, self._value(child.child(Rule.VALUE)))
            if rule is Rule.SIMPLIFY:
                return self._argument(child).simplify()
            if rule is Rule.DERIVATIVE:
                return self._argument(child).derivative().simplify()
            if rule is Rule.NATURAL:
                return Node(Operation.NATURAL)
            if rule is Rule.PI:
                return Node(Operation.PI)
            if rule is Rule.VARIABLE:
                return Node.variable(child.text)
            if rule is Rule.NUMBER:
                return self._literal(child, Operation.NUMBER)
            if rule is Rule.IMAGINARY:
                return self._literal(child, Operation.IMAGINARY)
            if rule is Rule.SUB:
                return self._argument(child)
            if rule in (Rule.MATRIX, Rule.PREC):
                raise SymbolicError(
                    f"{rule.value} has no symbolic form",
                    details={"text": child.text},
                )
        raise SymbolicError(f"cannot convert {tree.text!r}")

    def _argument(self, tree: TreeNode) -> Node:
        return self.convert(tree.child(Rule.E1))

    def _literal(self, tree: TreeNode, operation: Operation) -> Node:
        mantissa = Node(operation, tree.child(Rule.DECIMAL).text)
        notation = tree.child(Rule.NOTATION)
        if notation is None:
            return mantissa
        exponent = Node.number(notation.child(Rule.EXPONENT).text)
        return Node.binary(Operation.NOTATION, mantissa, exponent)


def convert(tree: TreeNode) -> Node:
    """Convert a parse tree with a fresh :class:`SymbolicConverter`."""
    node = SymbolicConverter().convert(tree)
    logger.debug("converted %r to %s", tree.text, node.render())
    return node
