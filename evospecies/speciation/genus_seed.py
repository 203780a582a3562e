from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic

from loguru import logger

from evospecies.individual import Evaluator, I, evaluate_individual
from evospecies.speciation.species import Species


@dataclass
class GenusSeed(Generic[I]):
    """Offspring of one generation, staged for the next one.

    Attributes:
        orphans: children incompatible with the species that produced them
        staged_species: one species per parent species, holding its compatible
            children; aligned by index with the producing collection
        pending_evaluation: every child produced, in production order
        prior_generation_members: members of each parent species before
            reproduction, aligned by index with `staged_species`
        evaluated: set by `evaluate`; the generation transition requires it
    """

    orphans: list[I] = field(default_factory=list)
    staged_species: list[Species[I]] = field(default_factory=list)
    pending_evaluation: list[I] = field(default_factory=list)
    prior_generation_members: list[list[I]] = field(default_factory=list)
    evaluated: bool = False

    def evaluate(self, evaluate: Evaluator) -> None:
        """Evaluate every pending child with the caller's fitness function."""
        for individual in self.pending_evaluation:
            evaluate_individual(individual, evaluate)
        self.evaluated = True
        logger.debug("GenusSeed: evaluated {} children", len(self.pending_evaluation))

    def count_new_individuals(self) -> int:
        return sum(len(species) for species in self.staged_species) + len(self.orphans)
