"""
Shared pytest fixtures for the symcalc test suite.

This module provides:
- A fresh calculator session per test
- A seeded random generator for the integrator
- Helpers for symbolic expressions and validation errors
"""

import random
from typing import Any, Type

import pytest
from pydantic import BaseModel, ValidationError

from symcalc.calculator import Calculator
from symcalc.math.precision import PrecisionContext
from symcalc.symbolic.convert import convert
from symcalc.symbolic.node import Node
from symcalc.parser.tree import parse


@pytest.fixture
def calculator() -> Calculator:
    """A new session at the default precision."""
    return Calculator()


@pytest.fixture
def context() -> PrecisionContext:
    """A 1024-bit precision context."""
    return PrecisionContext(1024)


@pytest.fixture
def rng() -> random.Random:
    """Deterministic random generator."""
    return random.Random(1234)


@pytest.fixture
def expression():
    """Parse text into a symbolic expression."""
    def _expression(text: str) -> Node:
        return convert(parse(text))
    return _expression


@pytest.fixture
def evaluate(calculator):
    """Evaluate text and return the exact rendering."""
    def _evaluate(text: str) -> str:
        return str(calculator.eval(text))
    return _evaluate


@pytest.fixture
def assert_validation_error():
    """Helper to assert that a model rejects data on a given field."""
    def _assert_validation(
        model_class: Type[BaseModel],
        data: dict[str, Any],
        expected_field: str | None = None,
    ) -> ValidationError:
        with pytest.raises(ValidationError) as exc_info:
            model_class(**data)

        error = exc_info.value
        if expected_field:
            field_errors = [e for e in error.errors() if e["loc"][0] == expected_field]
            assert len(field_errors) > 0, f"Expected error for field '{expected_field}' not found"
        return error

    return _assert_validation
