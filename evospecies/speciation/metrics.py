from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, computed_field


class GenusMetrics(BaseModel):
    """Snapshot of a genus for logging and monitoring."""

    species_count: int = Field(default=0, ge=0, description="Number of species")
    total_individuals: int = Field(
        default=0, ge=0, description="Individuals across all species"
    )
    next_species_id: int = Field(
        default=0, ge=0, description="Id the next new species will receive"
    )
    best_species_id: Optional[int] = Field(
        default=None, description="Id of the species holding the fittest individual"
    )
    best_fitness: Optional[float] = Field(
        default=None, description="Raw fitness of the fittest individual"
    )
    species_sizes: Dict[int, int] = Field(
        default_factory=dict, description="Species id -> number of members"
    )

    @computed_field
    @property
    def average_species_size(self) -> float:
        if self.species_count == 0:
            return 0.0
        return self.total_individuals / self.species_count

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "species_count": self.species_count,
            "total_individuals": self.total_individuals,
            "next_species_id": self.next_species_id,
            "average_species_size": round(self.average_species_size, 2),
            "best_species_id": self.best_species_id,
            "best_fitness": self.best_fitness,
        }
        return result
