from __future__ import annotations

import random


class Creature:
    """Individual whose compatibility is decided by a group label."""

    def __init__(self, group: str, fitness: float | None = None, name: str = ""):
        self.group = group
        self._fitness = fitness
        self.name = name

    def fitness(self) -> float | None:
        return self._fitness

    def set_fitness(self, value: float | None) -> None:
        self._fitness = value

    def is_compatible(self, other: Creature) -> bool:
        return self.group == other.group

    def __repr__(self) -> str:
        return f"Creature({self.group!r}, {self._fitness}, {self.name!r})"


class BitString:
    """OneMax individual: compatible within a Hamming distance."""

    def __init__(self, genome: list[bool], max_distance: int):
        self.genome = genome
        self.max_distance = max_distance
        self._fitness: float | None = None

    @classmethod
    def random(cls, size: int, max_distance: int, rng: random.Random) -> BitString:
        return cls([rng.random() < 0.5 for _ in range(size)], max_distance)

    def fitness(self) -> float | None:
        return self._fitness

    def evaluate(self) -> float:
        self._fitness = float(sum(self.genome))
        return self._fitness

    def is_compatible(self, other: BitString) -> bool:
        distance = sum(1 for a, b in zip(self.genome, other.genome) if a != b)
        return distance <= self.max_distance


def creatures(group: str, *fitness: float | None) -> list[Creature]:
    return [
        Creature(group, value, name=f"{group}{i}") for i, value in enumerate(fitness)
    ]
