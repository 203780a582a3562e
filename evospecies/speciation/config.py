from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SpeciationConfig(BaseModel):
    """Configuration options controlling speciation and reproduction."""

    total_population_size: int = Field(
        default=100, gt=0, description="Exact size of every generation"
    )
    crossover: bool = Field(
        default=True,
        description="Use two-parent crossover when a species has more than one member",
    )
    young_age_threshold: int = Field(
        default=10,
        ge=0,
        description="Species younger than this (in generations) get a fitness boost",
    )
    old_age_threshold: int = Field(
        default=40,
        ge=0,
        description="Species older than this (in generations) get a fitness penalty",
    )
    species_max_stagnation: int = Field(
        default=400,
        ge=0,
        description="Generations without improvement before a species is penalized",
    )
    young_age_fitness_boost: float = Field(
        default=1.1, gt=1.0, description="Fitness multiplier for young species"
    )
    old_age_fitness_penalty: float = Field(
        default=0.9,
        gt=0.0,
        lt=1.0,
        description="Fitness multiplier for old species",
    )
    model_config = ConfigDict(frozen=True, extra="forbid")
