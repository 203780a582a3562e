from abc import ABC, abstractmethod
import random
from typing import Generic, Sequence

from loguru import logger

from evospecies.individual import I


def _fitness_or_zero(individual) -> float:
    fitness = individual.fitness()
    return 0.0 if fitness is None else fitness


class ParentSelector(ABC, Generic[I]):
    """Picks one parent out of a species."""

    @abstractmethod
    def __call__(self, pool: Sequence[I]) -> I:
        """Return one member of `pool` (never empty)."""


class ParentPairSelector(ABC, Generic[I]):
    """Picks two parents out of a species for crossover."""

    @abstractmethod
    def __call__(self, pool: Sequence[I]) -> tuple[I, I]:
        """Return two members of `pool` (at least two members)."""


class FirstParentSelector(ParentSelector[I]):
    """Always the first member (the representative). Deterministic."""

    def __call__(self, pool: Sequence[I]) -> I:
        return pool[0]


class RandomParentSelector(ParentSelector[I]):
    """Uniformly random member."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def __call__(self, pool: Sequence[I]) -> I:
        return self.rng.choice(pool)


class TournamentParentSelector(ParentSelector[I]):
    """Fittest of `tournament_size` randomly drawn members."""

    def __init__(self, tournament_size: int = 3, rng: random.Random | None = None):
        if tournament_size < 1:
            raise ValueError(
                f"tournament_size must be at least 1, got {tournament_size}"
            )
        self.tournament_size = tournament_size
        self.rng = rng or random.Random()

    def __call__(self, pool: Sequence[I]) -> I:
        candidates = self.rng.sample(list(pool), min(self.tournament_size, len(pool)))
        return max(candidates, key=_fitness_or_zero)


class FitnessProportionalParentSelector(ParentSelector[I]):
    """Roulette wheel on raw fitness; uniform if every member has zero fitness."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def __call__(self, pool: Sequence[I]) -> I:
        weights = [_fitness_or_zero(individual) for individual in pool]
        if sum(weights) <= 0:
            logger.debug(
                "FitnessProportionalParentSelector: no positive fitness among {} members, "
                "falling back to uniform choice",
                len(pool),
            )
            return self.rng.choice(pool)
        return self.rng.choices(list(pool), weights=weights, k=1)[0]


class RandomParentPairSelector(ParentPairSelector[I]):
    """Two distinct random members."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def __call__(self, pool: Sequence[I]) -> tuple[I, I]:
        first, second = self.rng.sample(list(pool), 2)
        return first, second


class TournamentParentPairSelector(ParentPairSelector[I]):
    """Two tournaments; the first winner does not take part in the second."""

    def __init__(self, tournament_size: int = 3, rng: random.Random | None = None):
        self.selector = TournamentParentSelector(tournament_size, rng)

    def __call__(self, pool: Sequence[I]) -> tuple[I, I]:
        first = self.selector(pool)
        remaining = [individual for individual in pool if individual is not first]
        return first, self.selector(remaining)
