from __future__ import annotations

import math
from typing import Callable, Generic, Iterable, Iterator

from loguru import logger

from evospecies.exceptions import (
    ConfigurationError,
    InvariantViolation,
    OffspringAllocationError,
)
from evospecies.individual import Evaluator, I, evaluate_individual
from evospecies.policies.reproduction import GenerationPolicies
from evospecies.speciation.config import SpeciationConfig
from evospecies.speciation.genus_seed import GenusSeed
from evospecies.speciation.metrics import GenusMetrics
from evospecies.speciation.species import Species
from evospecies.speciation.species_collection import SpeciesCollection

PopulationManagement = Callable[[list, list, int], list]


class Genus(Generic[I]):
    """The whole population, partitioned into species.

    One generation runs as::

        genus.update(conf)
        seed = genus.generate_new_individuals(conf, policies)
        seed.evaluate(evaluate)
        genus = genus.next_generation(conf, seed, population_management)

    `next_generation` never modifies the genus it is called on; the returned
    genus carries the species-id counter forward.
    """

    def __init__(
        self,
        next_species_id: int = 0,
        species_collection: SpeciesCollection[I] | None = None,
    ):
        self._next_species_id = next_species_id
        if species_collection is None:
            species_collection = SpeciesCollection()
        self.species_collection: SpeciesCollection[I] = species_collection

    @property
    def next_species_id(self) -> int:
        return self._next_species_id

    def __iter__(self) -> Iterator[Species[I]]:
        return iter(self.species_collection)

    def __repr__(self) -> str:
        return (
            f"Genus(species={len(self.species_collection)}, "
            f"individuals={self.count_individuals()}, "
            f"next_species_id={self._next_species_id})"
        )

    def count_individuals(self) -> int:
        return self.species_collection.count_individuals()

    def _allocate_species_id(self) -> int:
        species_id = self._next_species_id
        self._next_species_id += 1
        return species_id

    def _assign(self, individual: I) -> bool:
        """Insert into the first compatible species; create one otherwise.

        Returns True if a new species was created.
        """
        for species in self.species_collection:
            if species.is_compatible(individual):
                species.insert(individual)
                return False
        self.species_collection.push(Species(individual, self._allocate_species_id()))
        return True

    # -------------------------- Speciation --------------------------

    def speciate(self, population: Iterable[I]) -> None:
        """Partition `population` greedily into species, in input order."""
        self.species_collection.clear()
        for individual in population:
            self._assign(individual)
        self.species_collection.invalidate_cache()

        logger.info(
            "Genus: speciated {} individuals into {} species (next_species_id={})",
            self.count_individuals(),
            len(self.species_collection),
            self._next_species_id,
        )

    def ensure_evaluated_population(self, evaluate: Evaluator) -> int:
        """Evaluate every member that has no fitness yet.

        Returns the number of individuals evaluated.
        """
        evaluated = 0
        for species in self.species_collection:
            for individual in species:
                if individual.fitness() is None:
                    evaluate_individual(individual, evaluate)
                    evaluated += 1
        self.species_collection.invalidate_cache()
        logger.debug("Genus: evaluated {} individuals", evaluated)
        return evaluated

    def update(self, conf: SpeciationConfig) -> Genus[I]:
        """Age the species, rejuvenate the best one and adjust fitness."""
        self.species_collection.compute_update()
        self.species_collection.compute_adjust_fitness(conf)
        return self

    # -------------------------- Offspring apportionment --------------------------

    def calculate_average_fitness(self) -> float:
        """Average adjusted fitness per individual across the genus."""
        total_adjusted = sum(
            species.accumulated_adjusted_fitness()
            for species in self.species_collection
        )
        if total_adjusted <= 0:
            raise ConfigurationError(
                f"Total adjusted fitness must be positive, got {total_adjusted}"
            )
        return total_adjusted / self.count_individuals()

    def count_offsprings(self, number_of_individuals: int) -> list[int]:
        """Offspring quota of every species, in collection order.

        Quotas are proportional to each species' accumulated adjusted
        fitness. The rounding deficit goes to the best species; an excess is
        taken from the worst species first.
        """
        average = self.calculate_average_fitness()
        offsprings = [
            math.floor(species.accumulated_adjusted_fitness() / average)
            for species in self.species_collection
        ]

        missing = number_of_individuals - sum(offsprings)
        if missing > 0:
            best = self.species_collection.get_best()
            if best is None:
                raise OffspringAllocationError(
                    f"No evaluated species to receive {missing} missing offspring"
                )
            offsprings[best] += missing
            logger.debug(
                "Genus: added {} missing offspring to best species {}",
                missing,
                self.species_collection[best].id,
            )
        elif missing < 0:
            self._drain_excess(offsprings, -missing)

        total = sum(offsprings)
        if total != number_of_individuals:
            raise OffspringAllocationError(
                f"Offspring quotas sum to {total}, expected {number_of_individuals}"
            )
        return offsprings

    def _drain_excess(self, offsprings: list[int], excess: int) -> None:
        excluded: set[int] = set()
        while excess > 0:
            worst = self.species_collection.get_worst(excluded)
            if worst is None:
                break
            removed = min(excess, offsprings[worst])
            offsprings[worst] -= removed
            excess -= removed
            excluded.add(self.species_collection[worst].id)
            logger.debug(
                "Genus: removed {} excess offspring from species {}",
                removed,
                self.species_collection[worst].id,
            )

    # -------------------------- Reproduction --------------------------

    def generate_new_individuals(
        self, conf: SpeciationConfig, policies: GenerationPolicies[I]
    ) -> GenusSeed[I]:
        """Produce the offspring of every species according to its quota."""
        quotas = self.count_offsprings(conf.total_population_size)
        seed: GenusSeed[I] = GenusSeed()

        for species, quota in zip(self.species_collection, quotas):
            parents = species.individuals
            staged = species.clone_with_new_individuals([])
            seed.prior_generation_members.append(parents)
            seed.staged_species.append(staged)

            use_crossover = conf.crossover and len(parents) > 1
            orphans_before = len(seed.orphans)
            for _ in range(quota):
                if use_crossover:
                    first, second = policies.select_parents(parents)
                    child = policies.crossover(first, second)
                else:
                    child = policies.reproduce(policies.select_parent(parents))
                policies.mutate(child)

                if species.is_compatible(child):
                    staged.insert(child)
                else:
                    seed.orphans.append(child)
                seed.pending_evaluation.append(child)

            logger.debug(
                "Genus: species {} produced {} children ({} orphans, crossover={})",
                species.id,
                quota,
                len(seed.orphans) - orphans_before,
                use_crossover,
            )

        logger.info(
            "Genus: generated {} new individuals from {} species ({} orphans)",
            len(seed.pending_evaluation),
            len(self.species_collection),
            len(seed.orphans),
        )
        return seed

    def next_generation(
        self,
        conf: SpeciationConfig,
        seed: GenusSeed[I],
        population_management: PopulationManagement,
    ) -> Genus[I]:
        """Build the next genus from an evaluated seed.

        Orphans join the first compatible staged species or found a new one.
        Every species inherited from this genus then gets its final roster
        from `population_management(new_individuals, previous_members, quota)`.
        """
        paired = len(self.species_collection)
        if (
            len(seed.staged_species) != paired
            or len(seed.prior_generation_members) != paired
        ):
            raise InvariantViolation(
                f"Seed holds {len(seed.staged_species)} staged species but the genus has {paired}"
            )
        if not seed.evaluated:
            raise InvariantViolation(
                "Seed was not evaluated before the generation transition"
            )
        unevaluated = sum(1 for i in seed.pending_evaluation if i.fitness() is None)
        if unevaluated:
            raise InvariantViolation(
                f"{unevaluated} new individuals were not evaluated before the generation transition"
            )

        next_genus: Genus[I] = Genus(
            self._next_species_id, SpeciesCollection(seed.staged_species)
        )

        new_species = 0
        for orphan in seed.orphans:
            if next_genus._assign(orphan):
                new_species += 1
        next_genus.species_collection.invalidate_cache()

        # species founded by orphans have no previous generation to manage
        fixed = sum(
            len(next_genus.species_collection[index])
            for index in range(paired, len(next_genus.species_collection))
        )
        quotas = self.count_offsprings(conf.total_population_size - fixed)

        for index in range(paired):
            species = next_genus.species_collection[index]
            new_individuals = species.drain_individuals()
            roster = population_management(
                new_individuals, seed.prior_generation_members[index], quotas[index]
            )
            species.set_individuals(roster)
            logger.debug(
                "Genus: species {} roster {} new + {} old -> {} (quota {})",
                species.id,
                len(new_individuals),
                len(seed.prior_generation_members[index]),
                len(roster),
                quotas[index],
            )

        next_genus.species_collection.cleanup()
        next_genus._check_invariants(conf.total_population_size)

        logger.info(
            "Genus: next generation has {} species ({} new from orphans, {} fixed individuals), "
            "{} individuals",
            len(next_genus.species_collection),
            new_species,
            fixed,
            next_genus.count_individuals(),
        )
        return next_genus

    def _check_invariants(self, total_population_size: int) -> None:
        ids = self.species_collection.ids()
        if len(ids) != len(set(ids)):
            raise InvariantViolation(f"Duplicate species ids: {ids}")
        total = self.count_individuals()
        if total != total_population_size:
            raise InvariantViolation(
                f"Population size is {total}, expected {total_population_size}"
            )

    # -------------------------- Monitoring --------------------------

    def get_metrics(self) -> GenusMetrics:
        collection = self.species_collection
        best = collection.get_best() if len(collection) else None
        best_species = None if best is None else collection[best]
        return GenusMetrics(
            species_count=len(collection),
            total_individuals=collection.count_individuals(),
            next_species_id=self._next_species_id,
            best_species_id=None if best_species is None else best_species.id,
            best_fitness=(
                None if best_species is None else best_species.get_best_fitness()
            ),
            species_sizes={species.id: len(species) for species in collection},
        )
