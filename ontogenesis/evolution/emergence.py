"""Emergence detection — flag step-change improvements in fitness trends."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from pydantic import BaseModel, Field

from ontogenesis.evolution.population import Population
from ontogenesis.genome.models import utcnow
from ontogenesis.types import EmergenceType, KernelId, KernelType, new_id


class EmergenceEvent(BaseModel):
    id: str = Field(default_factory=lambda: f"emerge-{new_id()}")
    timestamp: datetime = Field(default_factory=utcnow)
    type: EmergenceType
    description: str
    population: KernelType | None = None
    kernel_id: KernelId | None = None
    significance: float


class EmergenceDetector:
    """Compares the mean of the latest ``window`` trend samples with the
    ``window`` before them.

    A recent mean above ``older * threshold`` is a capability emergence whose
    significance is the relative improvement.
    """

    def __init__(self, window: int = 5, threshold: float = 1.2) -> None:
        self.window = window
        self.threshold = threshold

    def check(self, population: Population) -> EmergenceEvent | None:
        trend = population.statistics.fitness_trend
        if len(trend) < self.window:
            return None

        recent = trend[-self.window:]
        older = trend[-2 * self.window:-self.window]
        if not older:
            return None

        recent_avg = sum(recent) / len(recent)
        older_avg = sum(older) / len(older)
        # A zero baseline has no defined relative improvement
        if older_avg <= 0 or recent_avg <= older_avg * self.threshold:
            return None

        best = population.best()
        return EmergenceEvent(
            type=EmergenceType.CAPABILITY,
            description=(
                f"Significant capability improvement in {population.name.value} population"
            ),
            population=population.name,
            kernel_id=best.id if best else None,
            significance=(recent_avg - older_avg) / older_avg,
        )

    def scan(self, populations: Iterable[Population]) -> list[EmergenceEvent]:
        events = []
        for population in populations:
            event = self.check(population)
            if event is not None:
                events.append(event)
        return events
