"""Kernel model — lineage, fitness and the kernel itself."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from pydantic import BaseModel, Field, field_validator

from ontogenesis.genome.models import Genome, Mutation, utcnow
from ontogenesis.types import (
    BreedingMethod,
    KernelId,
    KernelState,
    KernelType,
    new_kernel_id,
)

MAX_ANCESTORS = 5

# Weights of the five fitness dimensions in the overall score
FITNESS_WEIGHTS: dict[str, float] = {
    "performance": 0.30,
    "efficiency": 0.20,
    "reliability": 0.20,
    "adaptability": 0.15,
    "innovation": 0.15,
}

NEUTRAL_SCORE = 0.5


class Lineage(BaseModel):
    generation: int = Field(default=0, ge=0)
    parents: list[KernelId] = Field(default_factory=list)
    ancestors: list[KernelId] = Field(default_factory=list, max_length=MAX_ANCESTORS)
    breeding_method: BreedingMethod = BreedingMethod.SYNTHETIC
    mutations: list[Mutation] = Field(default_factory=list)


class FitnessUpdate(BaseModel):
    """Partial fitness measurement reported by a scoring service.

    Scores outside [0, 1] are clamped.
    """

    performance: float | None = None
    efficiency: float | None = None
    reliability: float | None = None
    adaptability: float | None = None
    innovation: float | None = None

    model_config = {"extra": "ignore"}

    @field_validator("*")
    @classmethod
    def _clamp(cls, v: float | None) -> float | None:
        if v is None:
            return None
        return min(1.0, max(0.0, v))


class FitnessScores(BaseModel):
    overall: float = Field(default=NEUTRAL_SCORE, ge=0, le=1)
    performance: float = Field(default=NEUTRAL_SCORE, ge=0, le=1)
    efficiency: float = Field(default=NEUTRAL_SCORE, ge=0, le=1)
    reliability: float = Field(default=NEUTRAL_SCORE, ge=0, le=1)
    adaptability: float = Field(default=NEUTRAL_SCORE, ge=0, le=1)
    innovation: float = Field(default=NEUTRAL_SCORE, ge=0, le=1)
    evaluations: int = Field(default=0, ge=0)
    last_evaluated: datetime | None = None

    def weighted_overall(self) -> float:
        return sum(getattr(self, name) * weight for name, weight in FITNESS_WEIGHTS.items())

    def apply(self, update: FitnessUpdate | Mapping[str, Any]) -> None:
        """Merge a partial measurement and recompute the overall score."""
        if not isinstance(update, FitnessUpdate):
            update = FitnessUpdate.model_validate(dict(update))
        for name, value in update.model_dump(exclude_none=True).items():
            setattr(self, name, value)
        self.overall = min(1.0, max(0.0, self.weighted_overall()))
        self.evaluations += 1
        self.last_evaluated = utcnow()


class Kernel(BaseModel):
    """A versioned configuration unit with a genome, fitness and lineage."""

    id: KernelId = Field(default_factory=new_kernel_id)
    name: str
    version: str = "1.0.0"
    type: KernelType
    lineage: Lineage = Field(default_factory=Lineage)
    genome: Genome = Field(default_factory=Genome)
    fitness: FitnessScores = Field(default_factory=FitnessScores)
    state: KernelState = KernelState.DORMANT
    created: datetime = Field(default_factory=utcnow)
    last_activated: datetime | None = None


class KernelTemplate(BaseModel):
    """Blueprint from which founder kernels are built."""

    name: str
    type: KernelType
    base_genome: Genome = Field(default_factory=Genome)
    description: str = ""
