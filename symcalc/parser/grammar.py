"""
Grammar engine for calculator input.

A deterministic backtracking matcher (parsing expression grammar, ordered
choice) over a layered precedence grammar. Every production that succeeds
records a :class:`Token` - a rule tag plus a half-open span over the input's
code points. Tokens are recorded after their sub-productions, so the flat
token list is a post-order trace of the match; :mod:`symcalc.parser.tree`
nests it back into a hierarchy.

Grammar (``/`` is ordered choice, ``!`` negative lookahead)::

    e              <- sp e1 !.
    e1             <- e2 ((add e2) / (minus e2))*
    e2             <- e3 ((multiply e3) / (divide e3) / (modulus e3))*
    e3             <- e4 (exponentiation e4)*
    e4             <- (minus value) / value
    value          <- matrix / simplify / derivative / log / sqrt / cos / sin
                    / tan / prec / exp1 / exp2 / pi / natural / imaginary
                    / number / variable / sub
    matrix         <- '[' sp ('[' sp cells (row cells)* ']' sp
                             / cells (row cells)*) ']' sp
    cells          <- e1 ((',' sp)? e1)*
    row            <- (']' sp '[' / ';') sp
    exp1           <- 'exp' sp open e1 close
    exp2           <- 'e' '^' sp value
    natural        <- 'e' !word sp
    pi             <- 'pi' !word sp
    <function>     <- '<function>' sp open e1 close
    imaginary      <- decimal notation? 'i' sp
    number         <- decimal notation? sp
    decimal        <- '-'? [0-9]+ ('.' [0-9]*)?
    notation       <- 'e' exponent
    exponent       <- ('+' / '-')? [0-9]+
    variable       <- [A-Za-z_] [A-Za-z0-9_]* sp
    sub            <- open e1 close
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from ..core.errors import ParseError
from ..core.logging import get_logger

logger = get_logger(__name__)

Matcher = Callable[[], bool]


class Rule(Enum):
    """Grammar rule tags, valued by the name used in diagnostics."""

    UNKNOWN = "Unknown"
    E = "e"
    E1 = "e1"
    E2 = "e2"
    E3 = "e3"
    E4 = "e4"
    VALUE = "value"
    MATRIX = "matrix"
    ROW = "row"
    SIMPLIFY = "simplify"
    DERIVATIVE = "derivative"
    LOG = "log"
    SQRT = "sqrt"
    COS = "cos"
    SIN = "sin"
    TAN = "tan"
    EXP1 = "exp1"
    EXP2 = "exp2"
    PREC = "prec"
    PI = "pi"
    NATURAL = "natural"
    IMAGINARY = "imaginary"
    NUMBER = "number"
    DECIMAL = "decimal"
    NOTATION = "notation"
    EXPONENT = "exponent"
    VARIABLE = "variable"
    SUB = "sub"
    ADD = "add"
    MINUS = "minus"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    MODULUS = "modulus"
    EXPONENTIATION = "exponentiation"
    OPEN = "open"
    CLOSE = "close"
    SP = "sp"


# Named functions taking a single parenthesized argument, keyed by keyword.
FUNCTION_RULES: dict[str, Rule] = {
    "simplify": Rule.SIMPLIFY,
    "derivative": Rule.DERIVATIVE,
    "log": Rule.LOG,
    "sqrt": Rule.SQRT,
    "cos": Rule.COS,
    "sin": Rule.SIN,
    "tan": Rule.TAN,
    "prec": Rule.PREC,
}

# Keywords offered to front ends for completion, with a short description.
KEYWORDS: dict[str, str] = {
    "exp": "The natural number raised to a value",
    "e": "The natural number",
    "pi": "The constant PI",
    "prec": "Sets the precision for calculations",
    "simplify": "Simplifies the expression",
    "derivative": "Computes the symbolic derivative of the expression",
    "log": "The natural logarithm of the input",
    "sqrt": "The square root of the value",
    "cos": "The cosine of the value",
    "sin": "The sine of the value",
    "tan": "The tangent of the value",
}


@dataclass(frozen=True)
class Token:
    """
    A labeled half-open span over the input.

    Attributes:
        rule: The production that matched
        begin: Offset of the first code point
        end: Offset one past the last code point
    """

    rule: Rule
    begin: int
    end: int

    def __repr__(self) -> str:
        return f"Token({self.rule.value}, {self.begin}, {self.end})"

    def contains(self, other: Token) -> bool:
        """Return True if ``other`` lies within this span."""
        return self.begin <= other.begin and other.end <= self.end


def translate_position(text: str, offset: int) -> tuple[int, int]:
    """
    Map a code point offset to a 1-based ``(line, symbol)`` pair.

    The offset may equal ``len(text)``, addressing the end of input.
    """
    line, symbol = 1, 0
    for index in range(offset + 1):
        if index < len(text) and text[index] == "\n":
            line, symbol = line + 1, 0
        else:
            symbol += 1
    return line, symbol


class Grammar:
    """
    Backtracking matcher for the calculator grammar.

    Usage:
        >>> tokens = Grammar().parse("1 + 2")
        >>> tokens[-1]
        Token(e, 0, 5)
    """

    def __init__(self):
        self.text = ""
        self._position = 0
        self._tokens: list[Token] = []
        self._max = Token(Rule.UNKNOWN, 0, 0)

    def parse(self, text: str) -> list[Token]:
        """
        Match ``text`` against the top-level production.

        Args:
            text: One line of input

        Returns:
            Tokens in the order the productions completed

        Raises:
            ParseError: If the input does not match; anchored at the
                furthest token recorded during the attempt
        """
        self.text = text
        self._position = 0
        self._tokens = []
        self._max = Token(Rule.UNKNOWN, 0, 0)

        if self._e():
            logger.debug("parsed %r into %d tokens", text, len(self._tokens))
            return list(self._tokens)

        error = self._error()
        logger.debug("parse failure for %r near %s", text, error.rule)
        raise error

    def _error(self) -> ParseError:
        token = self._max
        return ParseError(
            rule=token.rule.value,
            begin=translate_position(self.text, token.begin),
            end=translate_position(self.text, token.end),
            text=self.text[token.begin:token.end],
            offset=token.begin,
        )

    # Matching primitives

    def _add(self, rule: Rule, begin: int) -> None:
        token = Token(rule, begin, self._position)
        self._tokens.append(token)
        if begin != self._position and self._position > self._max.end:
            self._max = token

    def _restore(self, position: int, index: int) -> None:
        self._position = position
        del self._tokens[index:]

    def _peek(self) -> str:
        if self._position < len(self.text):
            return self.text[self._position]
        return ""

    def _literal(self, literal: str) -> bool:
        if self.text.startswith(literal, self._position):
            self._position += len(literal)
            return True
        return False

    def _char(self, predicate: Callable[[str], bool]) -> bool:
        char = self._peek()
        if char and predicate(char):
            self._position += 1
            return True
        return False

    def _digits(self) -> bool:
        """One or more ASCII digits."""
        if not self._char(_is_digit):
            return False
        while self._char(_is_digit):
            pass
        return True

    def _seq(self, *parts: Matcher) -> bool:
        position, index = self._position, len(self._tokens)
        for part in parts:
            if not part():
                self._restore(position, index)
                return False
        return True

    def _many(self, part: Matcher) -> bool:
        while True:
            position = self._position
            if not part() or self._position == position:
                return True

    def _optional(self, part: Matcher) -> bool:
        part()
        return True

    def _not(self, part: Matcher) -> bool:
        position, index = self._position, len(self._tokens)
        matched = part()
        self._restore(position, index)
        return not matched

    def _production(self, rule: Rule, body: Matcher) -> bool:
        begin, index = self._position, len(self._tokens)
        if body():
            self._add(rule, begin)
            return True
        self._restore(begin, index)
        return False

    # Precedence levels

    def _e(self) -> bool:
        return self._production(
            Rule.E,
            lambda: self._seq(self._sp, self._e1, lambda: self._position == len(self.text)),
        )

    def _e1(self) -> bool:
        return self._production(
            Rule.E1,
            lambda: self._e2() and self._many(
                lambda: self._seq(self._add_op, self._e2)
                or self._seq(self._minus, self._e2)
            ),
        )

    def _e2(self) -> bool:
        return self._production(
            Rule.E2,
            lambda: self._e3() and self._many(
                lambda: self._seq(self._multiply, self._e3)
                or self._seq(self._divide, self._e3)
                or self._seq(self._modulus, self._e3)
            ),
        )

    def _e3(self) -> bool:
        return self._production(
            Rule.E3,
            lambda: self._e4() and self._many(
                lambda: self._seq(self._exponentiation, self._e4)
            ),
        )

    def _e4(self) -> bool:
        return self._production(
            Rule.E4,
            lambda: self._seq(self._minus, self._value) or self._value(),
        )

    def _value(self) -> bool:
        return self._production(
            Rule.VALUE,
            lambda: (
                self._matrix()
                or any(self._function(keyword, rule) for keyword, rule in FUNCTION_RULES.items())
                or self._exp1()
                or self._exp2()
                or self._constant("pi", Rule.PI)
                or self._constant("e", Rule.NATURAL)
                or self._imaginary()
                or self._number()
                or self._variable()
                or self._sub()
            ),
        )

    # Values

    def _matrix(self) -> bool:
        def nested() -> bool:
            return self._seq(
                lambda: self._literal("["), self._sp, self._rows,
                lambda: self._literal("]"), self._sp,
            )

        return self._production(
            Rule.MATRIX,
            lambda: self._seq(
                lambda: self._literal("["), self._sp,
                lambda: nested() or self._rows(),
                lambda: self._literal("]"), self._sp,
            ),
        )

    def _rows(self) -> bool:
        return self._cells() and self._many(lambda: self._seq(self._row, self._cells))

    def _cells(self) -> bool:
        return self._e1() and self._many(
            lambda: self._seq(
                lambda: self._optional(lambda: self._seq(lambda: self._literal(","), self._sp)),
                self._e1,
            )
        )

    def _row(self) -> bool:
        return self._production(
            Rule.ROW,
            lambda: self._seq(
                lambda: self._seq(lambda: self._literal("]"), self._sp, lambda: self._literal("["))
                or self._literal(";"),
                self._sp,
            ),
        )

    def _function(self, keyword: str, rule: Rule) -> bool:
        return self._production(
            rule,
            lambda: self._seq(
                lambda: self._literal(keyword), self._sp, self._open, self._e1, self._close
            ),
        )

    def _exp1(self) -> bool:
        return self._production(
            Rule.EXP1,
            lambda: self._seq(
                lambda: self._literal("exp"), self._sp, self._open, self._e1, self._close
            ),
        )

    def _exp2(self) -> bool:
        return self._production(
            Rule.EXP2,
            lambda: self._seq(
                lambda: self._literal("e"), lambda: self._literal("^"), self._sp, self._value
            ),
        )

    def _constant(self, keyword: str, rule: Rule) -> bool:
        return self._production(
            rule,
            lambda: self._seq(
                lambda: self._literal(keyword),
                lambda: self._not(lambda: self._char(_is_word)),
                self._sp,
            ),
        )

    def _imaginary(self) -> bool:
        return self._production(
            Rule.IMAGINARY,
            lambda: self._seq(
                self._decimal,
                lambda: self._optional(self._notation),
                lambda: self._literal("i"),
                self._sp,
            ),
        )

    def _number(self) -> bool:
        return self._production(
            Rule.NUMBER,
            lambda: self._seq(self._decimal, lambda: self._optional(self._notation), self._sp),
        )

    def _decimal(self) -> bool:
        return self._production(
            Rule.DECIMAL,
            lambda: self._seq(
                lambda: self._optional(lambda: self._literal("-")),
                self._digits,
                lambda: self._optional(
                    lambda: self._literal(".") and self._many(lambda: self._char(_is_digit))
                ),
            ),
        )

    def _notation(self) -> bool:
        return self._production(
            Rule.NOTATION,
            lambda: self._seq(lambda: self._literal("e"), self._exponent),
        )

    def _exponent(self) -> bool:
        return self._production(
            Rule.EXPONENT,
            lambda: self._seq(
                lambda: self._optional(lambda: self._literal("+") or self._literal("-")),
                self._digits,
            ),
        )

    def _variable(self) -> bool:
        return self._production(
            Rule.VARIABLE,
            lambda: self._seq(
                lambda: self._char(_is_letter),
                lambda: self._many(lambda: self._char(_is_word)),
                self._sp,
            ),
        )

    def _sub(self) -> bool:
        return self._production(
            Rule.SUB,
            lambda: self._seq(self._open, self._e1, self._close),
        )

    # Operators and punctuation

    def _operator(self, rule: Rule, symbol: str) -> bool:
        return self._production(
            rule, lambda: self._seq(lambda: self._literal(symbol), self._sp)
        )

    def _add_op(self) -> bool:
        return self._operator(Rule.ADD, "+")

    def _minus(self) -> bool:
        return self._operator(Rule.MINUS, "-")

    def _multiply(self) -> bool:
        return self._operator(Rule.MULTIPLY, "*")

    def _divide(self) -> bool:
        return self._operator(Rule.DIVIDE, "/")

    def _modulus(self) -> bool:
        return self._operator(Rule.MODULUS, "%")

    def _exponentiation(self) -> bool:
        return self._operator(Rule.EXPONENTIATION, "^")

    def _open(self) -> bool:
        return self._operator(Rule.OPEN, "(")

    def _close(self) -> bool:
        return self._operator(Rule.CLOSE, ")")

    def _sp(self) -> bool:
        def spaces() -> bool:
            while self._peek() in (" ", "\t"):
                self._position += 1
            return True

        return self._production(Rule.SP, spaces)


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _is_letter(char: str) -> bool:
    return char == "_" or ("a" <= char <= "z") or ("A" <= char <= "Z")


def _is_word(char: str) -> bool:
    return _is_letter(char) or _is_digit(char)
