from __future__ import annotations

from typing import Generic, Iterable, Iterator

from loguru import logger

from evospecies.exceptions import InvariantViolation
from evospecies.individual import I
from evospecies.speciation.config import SpeciationConfig
from evospecies.speciation.species import Species


class SpeciesCollection(Generic[I]):
    """Ordered species with a cached index of the best one.

    The best species is the one holding the fittest individual. The cache is
    invalidated by every membership change of the collection itself; callers
    that change individuals inside a species must call `invalidate_cache`.
    The worst species is never cached since it depends on the exclusion set.
    """

    def __init__(self, species: Iterable[Species[I]] = ()):
        self._species: list[Species[I]] = list(species)
        self._best: int | None = None
        self._cache_dirty = True

    def __len__(self) -> int:
        return len(self._species)

    def __iter__(self) -> Iterator[Species[I]]:
        return iter(self._species)

    def __getitem__(self, index: int) -> Species[I]:
        return self._species[index]

    def ids(self) -> list[int]:
        return [species.id for species in self._species]

    def push(self, species: Species[I]) -> None:
        self._species.append(species)
        self.invalidate_cache()

    def cleanup(self) -> None:
        """Remove all empty species."""
        before = len(self._species)
        self._species = [s for s in self._species if not s.is_empty()]
        if len(self._species) != before:
            logger.debug(
                "SpeciesCollection: removed {} empty species ({} left)",
                before - len(self._species),
                len(self._species),
            )
        self.invalidate_cache()

    def clear(self) -> None:
        self._species.clear()
        self.invalidate_cache()

    def invalidate_cache(self) -> None:
        self._cache_dirty = True
        self._best = None

    def count_individuals(self) -> int:
        """Total number of individuals; recomputed on every call."""
        return sum(len(species) for species in self._species)

    # -------------------------- Best / worst --------------------------

    def get_best(self) -> int | None:
        """Index of the best species, or None if no species is evaluated."""
        if not self._species:
            raise InvariantViolation(
                "Cannot query the best species of an empty collection"
            )
        if self._cache_dirty:
            self._update_cache()
        return self._best

    def get_worst(self, exclude_ids: Iterable[int] = ()) -> int | None:
        """Index of the species whose best individual is the weakest.

        Species listed in `exclude_ids` and species without any evaluated
        individual are skipped. Ties go to the lowest species id.
        """
        if not self._species:
            raise InvariantViolation(
                "Cannot query the worst species of an empty collection"
            )
        excluded = set(exclude_ids)
        worst: int | None = None
        worst_key: tuple[float, int] | None = None
        for index, species in enumerate(self._species):
            if species.id in excluded:
                continue
            fitness = species.get_best_fitness()
            if fitness is None:
                continue
            key = (fitness, species.id)
            if worst_key is None or key < worst_key:
                worst, worst_key = index, key
        return worst

    def _update_cache(self) -> None:
        best: int | None = None
        best_key: tuple[float, int] | None = None
        for index, species in enumerate(self._species):
            fitness = species.get_best_fitness()
            if fitness is None:
                continue
            # higher fitness first, lower id on ties
            key = (fitness, -species.id)
            if best_key is None or key > best_key:
                best, best_key = index, key
        self._best = best
        self._cache_dirty = False

    # -------------------------- Generation update --------------------------

    def compute_update(self) -> None:
        """Age every species and rejuvenate the previous best one."""
        old_best = self.get_best()

        for species in self._species:
            species.increase_generations()
            species.increase_no_improvements_generations()

        # increments first, then the reset, so the best species ends up young
        if old_best is not None:
            self._species[old_best].reset_age()
            logger.debug(
                "SpeciesCollection: rejuvenated best species {}",
                self._species[old_best].id,
            )

    def compute_adjust_fitness(self, conf: SpeciationConfig) -> None:
        """Compute the adjusted fitness of every species."""
        self.invalidate_cache()
        best = self.get_best()
        best_id = None if best is None else self._species[best].id
        for species in self._species:
            species.compute_adjust_fitness(species.id == best_id, conf)
