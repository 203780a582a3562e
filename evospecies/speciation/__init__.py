from evospecies.speciation.age import Age
from evospecies.speciation.config import SpeciationConfig
from evospecies.speciation.genus import Genus, PopulationManagement
from evospecies.speciation.genus_seed import GenusSeed
from evospecies.speciation.metrics import GenusMetrics
from evospecies.speciation.species import Species
from evospecies.speciation.species_collection import SpeciesCollection

__all__ = [
    "Age",
    "Genus",
    "GenusMetrics",
    "GenusSeed",
    "PopulationManagement",
    "SpeciationConfig",
    "Species",
    "SpeciesCollection",
]
