from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Callable, Generic, Sequence

from evospecies.individual import I


def clone_parent(parent: I) -> I:
    """Asexual reproduction: an independent deep copy of the parent."""
    return copy.deepcopy(parent)


def no_mutation(individual: I) -> None:
    pass


@dataclass(frozen=True)
class GenerationPolicies(Generic[I]):
    """Caller-supplied behavior used to produce one generation of offspring.

    Attributes:
        select_parent: picks the parent for single-parent reproduction
        select_parents: picks the two parents for crossover
        crossover: creates a child from two parents
        reproduce: creates a child from one parent
        mutate: mutates a freshly created child in place
    """

    select_parent: Callable[[Sequence[I]], I]
    select_parents: Callable[[Sequence[I]], tuple[I, I]]
    crossover: Callable[[I, I], I]
    reproduce: Callable[[I], I] = clone_parent
    mutate: Callable[[I], None] = no_mutation
