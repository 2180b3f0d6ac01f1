"""Command line interface for symcalc."""

from __future__ import annotations

import argparse
import sys
from typing import Iterable, TextIO

from .calculator import Calculator
from .core.errors import CalcError
from .core.logging import get_logger, setup_logging
from .math.value import Value
from .parser.grammar import KEYWORDS

logger = get_logger(__name__)

PROMPT = "> "
EXIT = "exit"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="symcalc",
        description="Evaluate expressions over exact complex rationals and matrices, "
        "or manipulate them symbolically.",
    )
    parser.add_argument(
        "expressions",
        nargs="*",
        help="Expressions to evaluate; reads lines interactively when none are given.",
    )
    parser.add_argument(
        "-p",
        "--precision",
        type=int,
        default=None,
        help="Initial float precision in bits (default: SYMCALC_DEFAULT_PRECISION).",
    )
    parser.add_argument(
        "--digits",
        type=int,
        default=None,
        help="Decimal places to print (default: as many as the precision holds).",
    )
    parser.add_argument(
        "--exact",
        action="store_true",
        help="Print exact rationals instead of decimal expansions.",
    )
    parser.add_argument(
        "--integrate",
        action="store_true",
        help="Search for an antiderivative of each expression instead of evaluating it.",
    )
    parser.add_argument(
        "--max-generations",
        type=int,
        default=None,
        help="Generation budget for --integrate (default: SYMCALC_MAX_GENERATIONS).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for --integrate.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: SYMCALC_LOG_LEVEL).",
    )
    return parser


def format_value(value: Value, exact: bool = False, digits: int | None = None) -> str:
    """Render a result for the console."""
    if value.is_expression or exact:
        return str(value)
    return value.decimal(digits)


def _install_completion() -> None:
    """Offer the calculator keywords as tab completions when readline is present."""
    try:
        import readline
    except ImportError:
        return

    words = sorted([*KEYWORDS, EXIT])

    def complete(text: str, state: int) -> str | None:
        matches = [word for word in words if word.startswith(text)]
        return matches[state] if state < len(matches) else None

    readline.set_completer(complete)
    readline.parse_and_bind("tab: complete")


def _process(calculator: Calculator, line: str, args: argparse.Namespace) -> str:
    if args.integrate:
        options = {}
        if args.max_generations is not None:
            options["max_generations"] = args.max_generations
        if args.seed is not None:
            options["seed"] = args.seed
        return calculator.integrate(line, **options).render()
    return format_value(calculator.eval(line), exact=args.exact, digits=args.digits)


def run(
    calculator: Calculator,
    lines: Iterable[str],
    args: argparse.Namespace,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    """
    Process lines until exhausted or ``exit``.

    Errors are reported and the session continues.

    Returns:
        Number of lines that failed
    """
    out = out or sys.stdout
    err = err or sys.stderr
    failures = 0
    for raw in lines:
        line = raw.rstrip("\n")
        if not line.strip():
            continue
        if line.strip() == EXIT:
            break
        try:
            print(_process(calculator, line, args), file=out)
        except CalcError as exc:
            failures += 1
            logger.debug("request failed: %s", exc.message, exc_info=True)
            print(exc.message.rstrip("\n"), file=err)
    return failures


def _interactive() -> Iterable[str]:
    while True:
        try:
            yield input(PROMPT)
        except EOFError:
            return


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        calculator = Calculator(precision=args.precision)
    except CalcError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 2

    if args.expressions:
        return 1 if run(calculator, args.expressions, args) else 0

    if sys.stdin.isatty():
        _install_completion()
        run(calculator, _interactive(), args)
    else:
        run(calculator, sys.stdin, args)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
