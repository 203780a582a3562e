from evospecies.policies.population_management import (
    ElitistReplacement,
    GenerationalReplacement,
    PopulationManager,
    TruncationSelection,
)
from evospecies.policies.reproduction import (
    GenerationPolicies,
    clone_parent,
    no_mutation,
)
from evospecies.policies.selectors import (
    FirstParentSelector,
    FitnessProportionalParentSelector,
    ParentPairSelector,
    ParentSelector,
    RandomParentPairSelector,
    RandomParentSelector,
    TournamentParentPairSelector,
    TournamentParentSelector,
)

__all__ = [
    "ElitistReplacement",
    "FirstParentSelector",
    "FitnessProportionalParentSelector",
    "GenerationPolicies",
    "GenerationalReplacement",
    "ParentPairSelector",
    "ParentSelector",
    "PopulationManager",
    "RandomParentPairSelector",
    "RandomParentSelector",
    "TournamentParentPairSelector",
    "TournamentParentSelector",
    "TruncationSelection",
    "clone_parent",
    "no_mutation",
]
