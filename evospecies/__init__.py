"""
evospecies - speciation engine for population-based evolutionary search.

Partitions a population into species, applies fitness sharing and age-based
fitness adjustment, apportions offspring and reconciles the next generation.
"""

__version__ = "0.1.0"

from evospecies.exceptions import (
    ConfigurationError,
    InvariantViolation,
    OffspringAllocationError,
    SpeciationError,
)
from evospecies.individual import Individual
from evospecies.speciation import (
    Age,
    Genus,
    GenusMetrics,
    GenusSeed,
    SpeciationConfig,
    Species,
    SpeciesCollection,
)

__all__ = [
    "Age",
    "ConfigurationError",
    "Genus",
    "GenusMetrics",
    "GenusSeed",
    "Individual",
    "InvariantViolation",
    "OffspringAllocationError",
    "SpeciationConfig",
    "SpeciationError",
    "Species",
    "SpeciesCollection",
]
