from abc import ABC, abstractmethod
import copy
from typing import Generic, Sequence

from loguru import logger

from evospecies.individual import I


def _by_fitness(individuals: Sequence[I]) -> list[I]:
    """Best first; stable, so equal fitness keeps the original order."""
    return sorted(
        individuals,
        key=lambda individual: individual.fitness() or 0.0,
        reverse=True,
    )


class PopulationManager(ABC, Generic[I]):
    """Decides the final roster of a species for the next generation.

    Subclasses choose which individuals survive; the base class guarantees
    the roster holds exactly `target` individuals.
    """

    def __call__(
        self, new_individuals: list[I], old_individuals: list[I], target: int
    ) -> list[I]:
        if target <= 0:
            return []

        roster = self.select(new_individuals, old_individuals, target)[:target]
        if len(roster) < target:
            roster = self._pad(roster, new_individuals, old_individuals, target)
        return roster

    @abstractmethod
    def select(
        self, new_individuals: list[I], old_individuals: list[I], target: int
    ) -> list[I]:
        """Return up to `target` survivors; the first becomes the representative."""

    def _pad(
        self,
        roster: list[I],
        new_individuals: list[I],
        old_individuals: list[I],
        target: int,
    ) -> list[I]:
        pool = _by_fitness(list(new_individuals) + list(old_individuals))
        if not pool:
            raise ValueError(
                f"{type(self).__name__}: cannot fill {target} slots from an empty pool"
            )
        missing = target - len(roster)
        logger.warning(
            "{}: only {} of {} slots filled, padding with {} copies",
            type(self).__name__,
            len(roster),
            target,
            missing,
        )
        padded = list(roster)
        for i in range(missing):
            padded.append(copy.deepcopy(pool[i % len(pool)]))
        return padded


class GenerationalReplacement(PopulationManager[I]):
    """Children replace their parents; parents only fill the gaps."""

    def select(
        self, new_individuals: list[I], old_individuals: list[I], target: int
    ) -> list[I]:
        roster = _by_fitness(new_individuals)[:target]
        if len(roster) < target:
            roster += _by_fitness(old_individuals)[: target - len(roster)]
        return roster


class ElitistReplacement(PopulationManager[I]):
    """The `elite_count` best parents survive; children fill the rest."""

    def __init__(self, elite_count: int = 1):
        if elite_count < 0:
            raise ValueError(f"elite_count must be non-negative, got {elite_count}")
        self.elite_count = elite_count

    def select(
        self, new_individuals: list[I], old_individuals: list[I], target: int
    ) -> list[I]:
        old_sorted = _by_fitness(old_individuals)
        elites = old_sorted[: min(self.elite_count, target)]
        roster = elites + _by_fitness(new_individuals)[: target - len(elites)]
        if len(roster) < target:
            roster += old_sorted[len(elites) : len(elites) + target - len(roster)]
        return _by_fitness(roster)


class TruncationSelection(PopulationManager[I]):
    """The `target` fittest of parents and children together."""

    def select(
        self, new_individuals: list[I], old_individuals: list[I], target: int
    ) -> list[I]:
        return _by_fitness(list(new_individuals) + list(old_individuals))[:target]
