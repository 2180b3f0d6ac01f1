"""Tests for the calculator session."""

import pytest

from symcalc.calculator import Calculator
from symcalc.core.errors import (
    DivisionByZeroError,
    EvaluationError,
    MatrixNestingError,
    ParseError,
    ShapeError,
    UnboundVariableError,
)
from symcalc.math.value import ValueType
from symcalc.symbolic.node import Node


class TestArithmetic:
    """Test exact numeric evaluation."""

    @pytest.mark.parametrize("text,expected", [
        ("1 + 2 * 3", "7"),
        ("(1 + 2) * 3", "9"),
        ("10 - 4 - 3", "3"),
        ("1 / 3 + 1 / 6", "1/2"),
        ("2^3^2", "64"),
        ("2^-2", "1/4"),
        ("-7 % 3", "2"),
        ("7 % 3", "1"),
        ("7.5 % 2", "15/2"),
        ("(1+2i)*(3-1i)", "5+5i"),
        ("2i * 2i", "-4"),
        ("1.5e2", "150"),
        ("5e-1", "1/2"),
        ("-(2 + 3)", "-5"),
    ])
    def test_exact(self, evaluate, text, expected):
        """Test results against exact rational arithmetic."""
        assert evaluate(text) == expected

    def test_power_folds_left(self, calculator):
        """Test that repeated exponentiation groups from the left."""
        assert str(calculator.eval("2^3^2")) == str(calculator.eval("(2^3)^2"))
        assert str(calculator.eval("2^(3^2)")) == "512"

    def test_long_exact_result(self, evaluate, calculator):
        """Test results longer than the int/str conversion limit."""
        assert evaluate("1e5000") == "1" + "0" * 5000
        assert len(evaluate("2^20000")) == 6021
        assert calculator.eval("1e20000 + 0.5").decimal(1) == "1" + "0" * 20000 + ".5"

    def test_decimal_display(self, calculator):
        """Test the decimal expansion of a result."""
        assert calculator.eval("1/4").decimal() == "0.25"
        assert calculator.eval("2/3").decimal(3) == "0.667"


class TestMatrices:
    """Test matrix literals and arithmetic."""

    def test_literal_shape(self, calculator):
        """Test that nested brackets build a grid."""
        value = calculator.eval("[[1,2][3,4]]")
        assert value.type is ValueType.MATRIX
        assert value.matrix.shape == (2, 2)

    @pytest.mark.parametrize("text,expected", [
        ("[[1,2][3,4]] + [[1,1][1,1]]", "[[2,3][4,5]]"),
        ("[[1,2][3,4]] - 1", "[[0,1][2,3]]"),
        ("[[1,2][3,4]] * [[1,0][0,1]]", "[[1,2][3,4]]"),
        ("2 * [[1,2][3,4]]", "[[2,4][6,8]]"),
        ("[[1,2][3,4]]^2", "[[7,10][15,22]]"),
        ("[[1,2][3,4]]^-1", "[[-2,1][3/2,-1/2]]"),
        ("[1 2; 3 4]", "[[1,2][3,4]]"),
        ("[[1]]", "1"),
    ])
    def test_arithmetic(self, evaluate, text, expected):
        """Test shape-aware operators."""
        assert evaluate(text) == expected

    def test_nested_matrix(self, calculator):
        """Test that a matrix cell must be a scalar."""
        with pytest.raises(MatrixNestingError):
            calculator.eval("[[[1,2][3,4]], 5]")

    def test_ragged(self, calculator):
        """Test that rows must have equal lengths."""
        with pytest.raises(ShapeError):
            calculator.eval("[1,2;3]")

    def test_multi_cell_transcendental(self, calculator):
        """Test that functions only apply to 1×1 values."""
        with pytest.raises(ShapeError):
            calculator.eval("sqrt([[1,2][3,4]])")


class TestTranscendentals:
    """Test functions and constants through the float bridge."""

    def test_pi(self, calculator):
        """Test pi at the default precision."""
        assert calculator.eval("pi").decimal(20) == "3.14159265358979323846"

    def test_e(self, calculator):
        """Test Euler's number, both as a constant and through exp."""
        assert calculator.eval("e").decimal(10) == "2.7182818285"
        assert calculator.eval("exp(1)").decimal(10) == "2.7182818285"
        assert calculator.eval("e^1").decimal(10) == "2.7182818285"

    def test_sqrt_negative(self, evaluate):
        """Test an imaginary square root."""
        assert evaluate("sqrt(-4)") == "2i"

    def test_trigonometry(self, evaluate):
        """Test trigonometric identities at zero."""
        assert evaluate("cos(0) + sin(0) + tan(0)") == "1"

    def test_log_of_e(self, calculator):
        """Test that log inverts exp up to rounding."""
        assert calculator.eval("log(e)").decimal(50) == "1"


class TestPrecision:
    """Test the per-session precision cell."""

    def test_prec_returns_argument(self, calculator):
        """Test that setting precision is an expression."""
        assert str(calculator.eval("prec(64)")) == "64"
        assert calculator.precision == 64

    def test_prec_truncates(self, calculator):
        """Test that the integer part becomes the precision."""
        assert str(calculator.eval("prec(64.9)")) == "649/10"
        assert calculator.precision == 64

    def test_lower_precision_changes_output(self):
        """Test that sqrt(2) follows the session precision."""
        calculator = Calculator(precision=1024)
        wide = calculator.eval("sqrt(2)").decimal()
        calculator.eval("prec(64)")
        narrow = calculator.eval("sqrt(2)").decimal()
        assert narrow.startswith("1.41421356237309504")
        assert len(narrow) < len(wide)
        assert len(wide) > 300

    def test_sessions_independent(self):
        """Test that one session's prec leaves another alone."""
        first, second = Calculator(precision=1024), Calculator(precision=1024)
        first.eval("prec(32)")
        assert first.precision == 32
        assert second.precision == 1024

    def test_invalid_precision(self, calculator):
        """Test that a non-positive precision is rejected."""
        with pytest.raises(EvaluationError):
            calculator.eval("prec(0)")


class TestSymbolic:
    """Test inline simplify and derivative."""

    def test_derivative(self, calculator):
        """Test the simplified derivative of a cube."""
        value = calculator.eval("derivative(x^3)")
        assert value.type is ValueType.EXPRESSION
        assert str(value) == "(3 * (x^2))"

    def test_derivative_of_sine(self, evaluate):
        """Test that the multiply-by-one identity fires."""
        assert evaluate("derivative(sin(x))") == "cos(x)"

    def test_simplify(self, evaluate):
        """Test simplification at top level."""
        assert evaluate("simplify(x * 1 + 0)") == "x"

    def test_expression_decimal(self, calculator):
        """Test that symbolic values render the same in decimal mode."""
        assert calculator.eval("derivative(x^2)").decimal() == "(2 * x)"

    def test_numeric_use_of_expression(self, calculator):
        """Test that a symbolic result cannot enter arithmetic."""
        with pytest.raises(EvaluationError):
            calculator.eval("1 + derivative(x)")

    def test_expression(self, calculator):
        """Test converting a line without evaluating it."""
        node = calculator.expression("x^2 + 1")
        assert isinstance(node, Node)
        assert node.render() == "((x^2) + 1)"

    def test_integrate(self, calculator):
        """Test the integrator through the session."""
        result = calculator.integrate("1", population_size=50, seed=7, max_generations=500)
        assert result.derivative().simplify().render() == "1"


class TestErrors:
    """Test request-scoped failures."""

    def test_unbound_variable(self, calculator):
        """Test that variables have no numeric value."""
        with pytest.raises(UnboundVariableError):
            calculator.eval("x + 1")

    def test_division_by_zero(self, calculator):
        """Test exact division by zero."""
        with pytest.raises(DivisionByZeroError):
            calculator.eval("1/0")

    def test_singular_matrix(self, calculator):
        """Test inverting a singular matrix."""
        with pytest.raises(DivisionByZeroError):
            calculator.eval("[[1,2][2,4]]^-1")

    def test_parse_error_position(self, calculator):
        """Test that a trailing operator is reported at or after the operator."""
        with pytest.raises(ParseError) as exc_info:
            calculator.eval("1 + ")
        assert exc_info.value.begin[1] >= 3

    def test_session_survives_errors(self, calculator):
        """Test that a failed request does not disturb the session."""
        with pytest.raises(ParseError):
            calculator.eval("1 +")
        with pytest.raises(MatrixNestingError):
            calculator.eval("[[[1,2]], 2]")
        assert str(calculator.eval("1 + 1")) == "2"
