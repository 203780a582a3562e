from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterable, Iterator

from loguru import logger

from evospecies.exceptions import InvariantViolation
from evospecies.individual import I
from evospecies.speciation.age import Age
from evospecies.speciation.config import SpeciationConfig

# Stand-in for a zero fitness so the species is not starved entirely.
ZERO_FITNESS_SUBSTITUTE = 1e-4
# Multiplier for stagnating species that are not the current best.
STAGNATION_PENALTY = 1e-7


@dataclass
class _Member(Generic[I]):
    individual: I
    adjusted_fitness: float | None = None


class Species(Generic[I]):
    """A cluster of mutually compatible individuals.

    The first member is the representative: candidates are tested for
    compatibility against it. Members carry an adjusted-fitness slot filled
    by `compute_adjust_fitness`.
    """

    def __init__(self, individual: I, species_id: int):
        self._members: list[_Member[I]] = [_Member(individual)]
        self._id = species_id
        self.age = Age()
        self.last_best_fitness = 0.0

    @classmethod
    def _empty(cls, species_id: int, age: Age, last_best_fitness: float) -> Species[I]:
        species = cls.__new__(cls)
        species._members = []
        species._id = species_id
        species.age = age
        species.last_best_fitness = last_best_fitness
        return species

    def clone_with_new_individuals(self, individuals: Iterable[I]) -> Species[I]:
        """Same id, age and watermark; different members."""
        species = Species._empty(
            self._id, self.age.model_copy(), self.last_best_fitness
        )
        species.set_individuals(individuals)
        return species

    # -------------------------- Membership --------------------------

    @property
    def id(self) -> int:
        return self._id

    @property
    def representative(self) -> I | None:
        return self._members[0].individual if self._members else None

    @property
    def individuals(self) -> list[I]:
        return [m.individual for m in self._members]

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[I]:
        return (m.individual for m in self._members)

    def __repr__(self) -> str:
        return (
            f"Species(id={self._id}, size={len(self._members)}, "
            f"generations={self.age.generations}, "
            f"no_improvements={self.age.no_improvements})"
        )

    def is_empty(self) -> bool:
        return not self._members

    def is_compatible(self, candidate: I) -> bool:
        representative = self.representative
        if representative is None:
            return False
        return representative.is_compatible(candidate)

    def insert(self, individual: I) -> None:
        self._members.append(_Member(individual))

    def drain_individuals(self) -> list[I]:
        """Remove and return all members, leaving the species empty."""
        drained = [m.individual for m in self._members]
        self._members = []
        return drained

    def set_individuals(self, individuals: Iterable[I]) -> None:
        """Replace all members; adjusted fitness must be recomputed."""
        self._members = [_Member(individual) for individual in individuals]

    # -------------------------- Fitness --------------------------

    def get_best_individual(self) -> I | None:
        """Member with the highest raw fitness; the first one wins ties."""
        best: I | None = None
        best_fitness: float | None = None
        for member in self._members:
            fitness = member.individual.fitness()
            if fitness is None:
                continue
            if best_fitness is None or fitness > best_fitness:
                best, best_fitness = member.individual, fitness
        return best

    def get_best_fitness(self) -> float | None:
        best = self.get_best_individual()
        return None if best is None else best.fitness()

    def compute_adjust_fitness(
        self, is_best_species: bool, conf: SpeciationConfig
    ) -> None:
        """Fitness sharing with age boost, age penalty and stagnation penalty.

        Every member gets `adjusted / len(species)` so the reproductive weight
        of the species as a whole does not grow with its size.
        """
        if self.is_empty():
            raise InvariantViolation(
                f"Species {self._id}: cannot adjust fitness of an empty species"
            )

        raw_fitness: list[float] = []
        for member in self._members:
            fitness = member.individual.fitness()
            if fitness is None:
                raise InvariantViolation(
                    f"Species {self._id}: individual {member.individual!r} is not evaluated"
                )
            if fitness < 0:
                raise InvariantViolation(
                    f"Species {self._id}: fitness cannot be negative, got {fitness}"
                )
            raw_fitness.append(fitness if fitness != 0 else ZERO_FITNESS_SUBSTITUTE)

        self._record_best_fitness(max(raw_fitness))

        size = len(self._members)
        for member, fitness in zip(self._members, raw_fitness):
            adjusted = self._individual_adjusted_fitness(
                fitness, is_best_species, conf
            )
            member.adjusted_fitness = adjusted / size

        logger.debug(
            "Species {}: adjusted fitness computed (size={}, best={}, age={}, "
            "no_improvements={}, accumulated={:.6f})",
            self._id,
            size,
            is_best_species,
            self.age.generations,
            self.age.no_improvements,
            self.accumulated_adjusted_fitness(),
        )

    def _record_best_fitness(self, fitness: float) -> None:
        if fitness >= self.last_best_fitness:
            self.last_best_fitness = fitness
            self.age.reset_no_improvements()

    def _individual_adjusted_fitness(
        self, fitness: float, is_best_species: bool, conf: SpeciationConfig
    ) -> float:
        generations = self.age.generations
        if generations < conf.young_age_threshold:
            fitness *= conf.young_age_fitness_boost
        if generations > conf.old_age_threshold:
            fitness *= conf.old_age_fitness_penalty

        # the best species is exempt from the stagnation penalty
        if (
            not is_best_species
            and self.age.no_improvements > conf.species_max_stagnation
        ):
            fitness *= STAGNATION_PENALTY

        return fitness

    def adjusted_fitness_values(self) -> list[float | None]:
        return [m.adjusted_fitness for m in self._members]

    def accumulated_adjusted_fitness(self) -> float:
        total = 0.0
        for member in self._members:
            if member.adjusted_fitness is None:
                raise InvariantViolation(
                    f"Species {self._id}: adjusted fitness read before it was computed"
                )
            total += member.adjusted_fitness
        return total

    # -------------------------- Age --------------------------

    def increase_generations(self) -> None:
        self.age.increase_generations()

    def increase_no_improvements_generations(self) -> None:
        self.age.increase_no_improvements()

    def reset_age(self) -> None:
        """Rejuvenate: clears both generations and the stagnation streak."""
        self.age.reset_generations()
