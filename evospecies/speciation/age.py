from pydantic import BaseModel, Field


class Age(BaseModel):
    """Per-species age counters."""

    generations: int = Field(default=0, ge=0)
    evaluations: int = Field(default=0, ge=0)
    no_improvements: int = Field(
        default=0, ge=0, description="Generations since the last new best fitness"
    )

    def increase_generations(self) -> None:
        self.generations += 1

    def increase_evaluations(self) -> None:
        self.evaluations += 1

    def increase_no_improvements(self) -> None:
        self.no_improvements += 1

    def reset_generations(self) -> None:
        """Make the species young again; stagnation is cleared too."""
        self.generations = 0
        self.no_improvements = 0

    def reset_no_improvements(self) -> None:
        self.no_improvements = 0

    def reset_evaluations(self) -> None:
        self.evaluations = 0
