"""
Calculator session.

A :class:`Calculator` owns one precision cell and exposes the engine's two
core operations: parse a line into a tree, and evaluate (or symbolically
process) a tree into a displayable result.
"""

from __future__ import annotations

from typing import Any, Optional

from .core.logging import get_context_logger
from .evaluator import Evaluator
from .math.precision import PrecisionContext
from .math.value import Value
from .parser.grammar import Grammar
from .parser.tree import TreeNode, build_tree
from .symbolic.convert import SymbolicConverter
from .symbolic.integrate import Integrator
from .symbolic.node import Node


class Calculator:
    """
    One evaluation session.

    Sessions are independent: ``prec(n)`` changes only the precision of the
    session that evaluated it.

    Args:
        precision: Initial bit precision; defaults to the configured value

    Example:
        >>> calc = Calculator()
        >>> str(calc.eval("(1 + 2) * 3"))
        '9'
        >>> str(calc.eval("derivative(x^3)"))
        '(3 * (x^2))'
    """

    def __init__(self, precision: Optional[int] = None):
        self.context = PrecisionContext(precision)
        self.evaluator = Evaluator(self.context)
        self.converter = SymbolicConverter()
        self.logger = get_context_logger(__name__, session=id(self))

    @property
    def precision(self) -> int:
        return self.context.precision

    @precision.setter
    def precision(self, bits: int) -> None:
        self.context.precision = bits

    def parse(self, line: str) -> TreeNode:
        """
        Parse one input line.

        Raises:
            ParseError: With the furthest-failure position
        """
        return build_tree(Grammar().parse(line), line)

    def evaluate(self, tree: TreeNode) -> Value:
        """Evaluate a parsed tree numerically (or symbolically for simplify/derivative)."""
        value = self.evaluator.evaluate(tree)
        self.logger.debug(
            "evaluated expression",
            extra_data={"input": tree.text, "type": value.type.value, "precision": self.precision},
        )
        return value

    def eval(self, line: str) -> Value:
        """Parse and evaluate ``line``."""
        return self.evaluate(self.parse(line))

    def expression(self, line: str) -> Node:
        """Parse ``line`` into a symbolic expression without evaluating it."""
        return self.converter.convert(self.parse(line))

    def integrate(self, line: str, **options: Any) -> Node:
        """
        Search for an antiderivative of ``line``.

        Keyword options override the configured integrator settings (see
        :meth:`Integrator.from_settings`).

        Raises:
            IntegrationError: If the generation budget runs out
        """
        target = self.expression(line)
        result = Integrator.from_settings(**options).run(target)
        self.logger.info(
            "integration finished",
            extra_data={"target": target.render(), "result": result.render()},
        )
        return result
