"""
Evolutionary search for antiderivatives.

A population of candidate expressions is mutated at random and ranked by
how closely each candidate's derivative matches the target. The search
stops when the best candidate's simplified derivative renders exactly as
the target does, or when the generation budget runs out.
"""

from __future__ import annotations

import math
import random
import threading
from fractions import Fraction
from typing import Any, Optional, Union

from ..core.config import get_settings
from ..core.errors import IntegrationError, SymbolicError
from ..core.logging import get_context_logger
from .node import (
    BINARY_OPERATIONS,
    CONSTANTS,
    NUMBERS,
    UNARY_OPERATIONS,
    Node,
    Operation,
    literal_value,
)

FREE_VARIABLE = "x"

# Penalty for two nodes with different operations.
OPERATION_MISMATCH = 8

Score = Union[Fraction, float]


def difference(a: Optional[Node], b: Optional[Node], diff: Score = 0) -> Score:
    """
    Structural distance between two trees.

    Numeric literals add the absolute difference of their values, mismatched
    constants or variables add 1, mismatched operations add 8, and every
    node present on only one side adds 1.

    Args:
        a: First tree
        b: Second tree
        diff: Starting score
    """
    if a is not None and b is not None:
        if a.operation in NUMBERS and b.operation in NUMBERS:
            diff += abs(_integer(a.value) - _integer(b.value))
        elif a.operation in CONSTANTS and b.operation in CONSTANTS:
            if a.operation is not b.operation:
                diff += 1
        elif a.operation is Operation.VARIABLE and b.operation is Operation.VARIABLE:
            if a.value != b.value:
                diff += 1
        elif a.operation is not b.operation:
            diff += OPERATION_MISMATCH
        diff = difference(a.left, b.left, diff)
        diff = difference(a.right, b.right, diff)
    elif a is not None or b is not None:
        present = a if a is not None else b
        diff += 1
        diff = difference(present.left, None, diff)
        diff = difference(present.right, None, diff)
    return diff


def _integer(text: str) -> Fraction:
    value = literal_value(text)
    return value if value is not None else Fraction(0)


class Integrator:
    """
    Genetic-style antiderivative search.

    Args:
        population_size: Survivors kept after each generation
        mutation_rate: Chance that an individual spawns a mutant
        max_mutations: A mutant receives between 1 and this many mutations
        max_generations: Generation budget; None searches until convergence
        seed: Seed for a private random generator
        rng: Random generator to use instead of a seeded one
        cancel_event: Checked once per generation; setting it stops the search

    Example:
        >>> from symcalc.symbolic.node import Node
        >>> result = Integrator(population_size=50, seed=1).run(Node.number("1"))
        >>> result.derivative().simplify().render()
        '1'
    """

    def __init__(
        self,
        population_size: int = 1000,
        mutation_rate: float = 1 / 3,
        max_mutations: int = 3,
        max_generations: Optional[int] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        if population_size < 1:
            raise ValueError("population_size must be positive")
        if max_mutations < 1:
            raise ValueError("max_mutations must be positive")
        self.population_size = population_size
        self.mutation_rate = mutation_rate
        self.max_mutations = max_mutations
        self.max_generations = max_generations
        self.rng = rng or random.Random(seed)
        self.cancel_event = cancel_event
        self.logger = get_context_logger(__name__, population_size=population_size)

    @classmethod
    def from_settings(cls, **overrides: Any) -> Integrator:
        """Build an integrator from the configured defaults, with overrides."""
        settings = get_settings()
        options: dict[str, Any] = {
            "population_size": settings.POPULATION_SIZE,
            "mutation_rate": settings.MUTATION_RATE,
            "max_mutations": settings.MAX_MUTATIONS,
            "max_generations": settings.MAX_GENERATIONS,
            "seed": settings.RANDOM_SEED,
        }
        options.update(overrides)
        return cls(**options)

    # Search

    def run(self, target: Node) -> Node:
        """
        Search for an expression whose derivative matches ``target``.

        Returns:
            The first best-ranked candidate whose simplified derivative
            renders identically to ``target``

        Raises:
            IntegrationError: When the budget is exhausted or the search is
                cancelled; carries the best candidate found
        """
        expected = target.render()
        population = [target.copy() for _ in range(self.population_size)]
        generation = 0

        while True:
            if self.cancel_event is not None and self.cancel_event.is_set():
                raise IntegrationError(
                    "integration cancelled", best=population[0], generations=generation
                )
            if self.max_generations is not None and generation >= self.max_generations:
                raise IntegrationError(
                    f"no antiderivative of {expected} found in {generation} generations",
                    best=population[0],
                    generations=generation,
                )
            generation += 1

            for individual in list(population):
                if self.rng.random() < self.mutation_rate:
                    mutant = self.mutate(individual)
                    for _ in range(self.rng.randrange(self.max_mutations)):
                        mutant = self.mutate(mutant)
                    population.append(mutant)

            population.sort(key=lambda candidate: self.fitness(candidate, target))
            population = population[:self.population_size]
            best = population[0]

            self.logger.debug(
                "generation complete",
                extra_data={
                    "generation": generation,
                    "best": best.render(),
                    "fitness": str(self.fitness(best, target)),
                },
            )
            if self.converged(best, expected):
                self.logger.info(
                    "antiderivative found",
                    extra_data={"generation": generation, "result": best.render()},
                )
                return best

    def fitness(self, candidate: Node, target: Node) -> Score:
        """Distance of the candidate's derivative from the target; lower is better."""
        try:
            derived = candidate.derivative()
        except SymbolicError:
            return math.inf
        return difference(derived, target, len(derived.render()))

    @staticmethod
    def converged(candidate: Node, expected: str) -> bool:
        try:
            return candidate.derivative().simplify().render() == expected
        except SymbolicError:
            return False

    # Mutation

    def mutate(self, node: Node) -> Node:
        """
        Return a mutated copy of ``node``; the original is left unchanged.

        One uniformly chosen subtree is either restructured (wrapped in a
        new operation, or replaced by a random leaf) or retagged in place.
        """
        root = node.copy()
        slots = list(self._slots(root, None, ""))
        selected, parent, side = slots[self.rng.randrange(len(slots))]

        if self.rng.randrange(2) == 0:
            replacement = self._restructure(selected)
        else:
            replacement = self._retag(selected)

        if parent is None:
            return replacement
        setattr(parent, side, replacement)
        return root

    def _slots(self, node: Node, parent: Optional[Node], side: str):
        yield node, parent, side
        if node.left is not None:
            yield from self._slots(node.left, node, "left")
        if node.right is not None:
            yield from self._slots(node.right, node, "right")

    def _restructure(self, selected: Node) -> Node:
        choice = self.rng.randrange(3)
        if choice == 0:
            operation = self.rng.choice(BINARY_OPERATIONS)
            if operation is Operation.EXPONENTIATION:
                operand = Node.number(str(self.rng.randrange(10)))
            else:
                operand = self._leaf()
            return Node.binary(operation, selected, operand)
        if choice == 1:
            return Node.unary(self.rng.choice(UNARY_OPERATIONS), selected)
        return self._leaf()

    def _retag(self, selected: Node) -> Node:
        operation = selected.operation
        if operation in BINARY_OPERATIONS:
            selected.operation = self.rng.choice(BINARY_OPERATIONS)
        elif operation in UNARY_OPERATIONS:
            selected.operation = self.rng.choice(UNARY_OPERATIONS)
        elif operation in NUMBERS:
            value = literal_value(selected.value)
            number = value.numerator if value is not None and value.denominator == 1 else 0
            step = self.rng.randrange(3)
            if step == 0:
                number = 0
            elif step == 1:
                number += 1
            else:
                number -= 1
            selected.value = str(number)
        elif operation in CONSTANTS:
            if self.rng.randrange(2) == 0:
                return Node.number("0")
            selected.operation = self.rng.choice(CONSTANTS)
        elif self.rng.randrange(2) == 0:
            return Node.number("0")
        return selected

    def _leaf(self) -> Node:
        """Random digit literal, constant, or the free variable."""
        choice = self.rng.randrange(3)
        if choice == 0:
            digit = str(self.rng.randrange(10))
            if self.rng.randrange(2) == 0:
                return Node.number(digit)
            return Node.imaginary(digit)
        if choice == 1:
            return Node(self.rng.choice(CONSTANTS))
        return Node.variable(FREE_VARIABLE)
