"""Populations — typed, capacity-bounded collections of kernels."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from ontogenesis.exceptions import PopulationTypeError
from ontogenesis.kernel.models import Kernel
from ontogenesis.types import KernelId, KernelState, KernelType, PopulationId

FITNESS_TREND_WINDOW = 20


class PopulationStatistics(BaseModel):
    total_created: int = 0
    active_count: int = 0
    archived_count: int = 0
    average_fitness: float = 0.0
    best_fitness: float = 0.0
    fitness_trend: list[float] = Field(default_factory=list)
    diversity_index: float = 0.0


class Population(BaseModel):
    """All live kernels of one kernel type.

    Every kernel's type equals the population's ``name``.
    """

    id: PopulationId
    name: KernelType
    generation: int = 0
    kernels: list[Kernel] = Field(default_factory=list)
    statistics: PopulationStatistics = Field(default_factory=PopulationStatistics)
    selection_pressure: float = 0.5
    mutation_rate: float = 0.1
    capacity: int = 10

    @model_validator(mode="after")
    def check_kernel_types(self) -> Population:
        for kernel in self.kernels:
            self._check_type(kernel)
        return self

    def _check_type(self, kernel: Kernel) -> None:
        if kernel.type != self.name:
            raise PopulationTypeError(
                f"Kernel {kernel.id} of type {kernel.type.value} "
                f"cannot join the {self.name.value} population"
            )

    def add(self, kernel: Kernel) -> None:
        self._check_type(kernel)
        self.kernels.append(kernel)

    def get(self, kernel_id: KernelId) -> Kernel | None:
        for kernel in self.kernels:
            if kernel.id == kernel_id:
                return kernel
        return None

    def best(self) -> Kernel | None:
        """Highest overall fitness; the earliest kernel wins ties."""
        if not self.kernels:
            return None
        return max(self.kernels, key=lambda k: k.fitness.overall)

    def ranked(self) -> list[Kernel]:
        """Kernels by descending overall fitness, ties in current order."""
        return sorted(self.kernels, key=lambda k: k.fitness.overall, reverse=True)

    @property
    def size(self) -> int:
        return len(self.kernels)


def refresh_statistics(population: Population) -> PopulationStatistics:
    """Recompute derived statistics and extend the fitness trend."""
    stats = population.statistics
    kernels = population.kernels

    if not kernels:
        stats.average_fitness = 0.0
        stats.best_fitness = 0.0
        stats.diversity_index = 0.0
        stats.active_count = 0
        return stats

    scores = [k.fitness.overall for k in kernels]
    stats.average_fitness = sum(scores) / len(scores)
    stats.best_fitness = max(scores)

    stats.fitness_trend.append(stats.average_fitness)
    if len(stats.fitness_trend) > FITNESS_TREND_WINDOW:
        stats.fitness_trend = stats.fitness_trend[-FITNESS_TREND_WINDOW:]

    unique_genomes = {k.genome.checksum for k in kernels}
    stats.diversity_index = len(unique_genomes) / len(kernels)
    stats.active_count = sum(1 for k in kernels if k.state == KernelState.ACTIVE)
    return stats
