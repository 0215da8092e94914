"""Engine state — the aggregate owned by the evolution scheduler."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from ontogenesis.config import OntogenesisSettings
from ontogenesis.evolution.emergence import EmergenceEvent
from ontogenesis.evolution.population import Population
from ontogenesis.kernel.models import Kernel
from ontogenesis.types import KernelType, new_id


class EngineState(BaseModel):
    populations: list[Population] = Field(default_factory=list)
    archive: list[Kernel] = Field(default_factory=list)
    config: OntogenesisSettings
    global_generation: int = 0
    total_kernels_created: int = 0
    emergence_events: list[EmergenceEvent] = Field(default_factory=list)
    is_running: bool = False
    last_cycle_at: datetime | None = None

    def population(self, kernel_type: KernelType) -> Population | None:
        for population in self.populations:
            if population.name == kernel_type:
                return population
        return None


class PopulationSummary(BaseModel):
    name: KernelType
    size: int
    average_fitness: float


class GenerationReport(BaseModel):
    """Summary of a single generation cycle."""

    id: str = Field(default_factory=new_id)
    generation: int
    populations: list[PopulationSummary] = Field(default_factory=list)
    kernels_bred: int = 0
    kernels_archived: int = 0
    emergence_events: list[EmergenceEvent] = Field(default_factory=list)
    failed_populations: list[KernelType] = Field(default_factory=list)
    duration_ms: float = 0.0

    def __repr__(self) -> str:
        return (
            f"GenerationReport(generation={self.generation}, "
            f"bred={self.kernels_bred}, archived={self.kernels_archived}, "
            f"emergence={len(self.emergence_events)})"
        )
