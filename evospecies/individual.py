from __future__ import annotations

from typing import Callable, Protocol, TypeVar

from evospecies.exceptions import InvariantViolation


class Individual(Protocol):
    """Capability required from anything that lives inside a species."""

    def fitness(self) -> float | None:
        """Raw fitness, or None while the individual is not evaluated."""
        ...

    def is_compatible(self, other) -> bool:
        """True if `other` belongs in the same species as `self`."""
        ...


I = TypeVar("I", bound=Individual)

Evaluator = Callable[[I], float]


def evaluate_individual(individual: I, evaluate: Evaluator) -> float:
    """Run `evaluate` on `individual` and check the result is observable."""
    fitness = evaluate(individual)
    observed = individual.fitness()
    if observed is None:
        raise InvariantViolation(
            f"Evaluation returned {fitness} but the individual reports no fitness"
        )
    if observed != fitness:
        raise InvariantViolation(
            f"Evaluation returned {fitness} but the individual reports {observed}"
        )
    return fitness
