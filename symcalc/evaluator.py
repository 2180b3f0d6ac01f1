"""
Numeric evaluator.

Walks a parse tree by rule tag and computes a :class:`Value`. Exact
arithmetic stays in :class:`ComplexRational`; irrational operations go
through the session's :class:`PrecisionContext`.
"""

from __future__ import annotations

from typing import Callable, Optional

from .core.errors import (
    DivisionByZeroError,
    EvaluationError,
    MatrixNestingError,
    ShapeError,
    UnboundVariableError,
)
from .core.logging import get_logger
from .math.matrix import Matrix
from .math.precision import PrecisionContext
from .math.rational import ComplexRational
from .math.value import Value
from .parser.grammar import Rule
from .parser.tree import TreeNode
from .symbolic.convert import SymbolicConverter

logger = get_logger(__name__)

TEN = ComplexRational(10)


class Evaluator:
    """
    Evaluates parse trees against one precision context.

    Args:
        context: Precision cell shared with the owning session; ``prec(n)``
            updates it in place

    Usage:
        >>> from symcalc.parser import parse
        >>> str(Evaluator(PrecisionContext()).evaluate(parse("1 + 2 * 3")))
        '7'
    """

    def __init__(self, context: Optional[PrecisionContext] = None):
        self.context = context or PrecisionContext()
        self.converter = SymbolicConverter()
        self._operators: dict[Rule, Callable[[Matrix, Matrix], Matrix]] = {
            Rule.ADD: lambda a, b: a + b,
            Rule.MINUS: lambda a, b: a - b,
            Rule.MULTIPLY: lambda a, b: a * b,
            Rule.DIVIDE: lambda a, b: a / b,
            Rule.MODULUS: self._modulus,
            Rule.EXPONENTIATION: self._power,
        }
        self._functions: dict[Rule, Callable[[ComplexRational], ComplexRational]] = {
            Rule.LOG: self.context.log,
            Rule.SQRT: self.context.sqrt,
            Rule.COS: self.context.cos,
            Rule.SIN: self.context.sin,
            Rule.TAN: self.context.tan,
            Rule.EXP1: self.context.exp,
        }

    def evaluate(self, tree: TreeNode) -> Value:
        """
        Evaluate a tree rooted at ``e`` (or any expression level).

        Raises:
            EvaluationError: Or one of its subclasses, for a request that
                cannot be computed
        """
        if tree is None:
            raise EvaluationError("nothing to evaluate")
        if tree.rule is Rule.E:
            return self.evaluate(tree.child(Rule.E1))
        if tree.rule in (Rule.E1, Rule.E2, Rule.E3):
            return self._fold(tree)
        if tree.rule is Rule.E4:
            return self._negation(tree)
        if tree.rule is Rule.VALUE:
            return self._value(tree)
        raise EvaluationError(f"cannot evaluate {tree.rule.value}")

    def _wrap(self, matrix: Matrix) -> Value:
        return Value.of_matrix(matrix, digits=self.context.digits)

    def _fold(self, tree: TreeNode) -> Value:
        """Apply one precedence level's operators left to right."""
        result: Optional[Value] = None
        pending: Optional[Rule] = None
        for child in tree.children:
            if child.rule in self._operators:
                pending = child.rule
                continue
            if child.rule not in (Rule.E2, Rule.E3, Rule.E4):
                continue
            operand = self.evaluate(child)
            if result is None:
                result = operand
                continue
            left = result.require_matrix(pending.value)
            right = operand.require_matrix(pending.value)
            logger.debug("applying %s to %s and %s", pending.value, left.shape, right.shape)
            result = self._wrap(self._operators[pending](left, right))
        return result

    def _negation(self, tree: TreeNode) -> Value:
        value = self._value(tree.child(Rule.VALUE))
        if tree.child(Rule.MINUS) is None:
            return value
        return self._wrap(-value.require_matrix("negation"))

    # Binary operators

    def _modulus(self, left: Matrix, right: Matrix) -> Matrix:
        """Euclidean remainder of two integers; any other operands pass through."""
        if not (left.is_scalar and right.is_scalar):
            return left
        a, b = left.scalar(), right.scalar()
        if not (a.is_integer and b.is_integer):
            return left
        if b.real == 0:
            raise DivisionByZeroError("integer modulo by zero")
        remainder = a.real.numerator % abs(b.real.numerator)
        return Matrix.scalar_of(ComplexRational(remainder))

    def _power(self, base: Matrix, exponent: Matrix) -> Matrix:
        power = exponent.scalar("exponentiation")
        if base.is_scalar:
            return Matrix.scalar_of(self.scalar_power(base.scalar(), power))
        if not power.is_integer:
            raise ShapeError(
                "a matrix can only be raised to an integer power",
                shapes=(base.shape,),
            )
        return base.power(power.real.numerator)

    def scalar_power(self, base: ComplexRational, exponent: ComplexRational) -> ComplexRational:
        """Exact for integer exponents, otherwise through the float bridge."""
        if exponent.is_integer:
            return base ** exponent.real.numerator
        return self.context.power(base, exponent)

    # Values

    def _value(self, tree: TreeNode) -> Value:
        for child in tree.children:
            rule = child.rule
            if rule is Rule.MATRIX:
                return self._matrix(child)
            if rule in self._functions:
                argument = self._argument(child).scalar(rule.value)
                return self._scalar(self._functions[rule](argument))
            if rule is Rule.EXP2:
                argument = self._value(child.child(Rule.VALUE)).scalar("exp")
                return self._scalar(self.context.exp(argument))
            if rule is Rule.NATURAL:
                return self._scalar(self.context.exp(ComplexRational(1)))
            if rule is Rule.PI:
                return self._scalar(self.context.pi())
            if rule is Rule.PREC:
                return self._precision(child)
            if rule is Rule.SIMPLIFY:
                expression = self.converter.convert(child.child(Rule.E1))
                return Value.of_expression(expression.simplify())
            if rule is Rule.DERIVATIVE:
                expression = self.converter.convert(child.child(Rule.E1))
                return Value.of_expression(expression.derivative().simplify())
            if rule is Rule.NUMBER:
                return self._scalar(self._literal(child))
            if rule is Rule.IMAGINARY:
                return self._scalar(ComplexRational(0, 1) * self._literal(child))
            if rule is Rule.VARIABLE:
                raise UnboundVariableError(child.text)
            if rule is Rule.SUB:
                return self._argument(child)
        raise EvaluationError(f"cannot evaluate {tree.text!r}")

    def _scalar(self, value: ComplexRational) -> Value:
        return self._wrap(Matrix.scalar_of(value))

    def _argument(self, tree: TreeNode) -> Value:
        return self.evaluate(tree.child(Rule.E1))

    def _literal(self, tree: TreeNode) -> ComplexRational:
        """Decimal literal, scaled by ``10^exponent`` when in E notation."""
        mantissa = ComplexRational(tree.child(Rule.DECIMAL).text)
        notation = tree.child(Rule.NOTATION)
        if notation is None:
            return mantissa
        exponent = ComplexRational(notation.child(Rule.EXPONENT).text)
        return mantissa * self.scalar_power(TEN, exponent)

    def _matrix(self, tree: TreeNode) -> Value:
        rows: list[list[ComplexRational]] = [[]]
        for child in tree.children:
            if child.rule is Rule.ROW:
                rows.append([])
            elif child.rule is Rule.E1:
                cell = self.evaluate(child).require_matrix("matrix")
                if not cell.is_scalar:
                    raise MatrixNestingError(cell.shape)
                rows[-1].append(cell.scalar())
        return self._wrap(Matrix(rows))

    def _precision(self, tree: TreeNode) -> Value:
        """Set the session precision to the argument's integer part and return the argument."""
        value = self._argument(tree)
        bits = int(value.scalar("prec").real)
        self.context.precision = bits
        logger.debug("precision set to %d bits", bits)
        return self._wrap(value.require_matrix("prec"))
