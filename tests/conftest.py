"""Shared test fixtures — seeded schedulers and kernel builders."""

from __future__ import annotations

import random

import pytest

from ontogenesis.config import OntogenesisSettings
from ontogenesis.events.bus import EventBus
from ontogenesis.evolution.scheduler import EvolutionScheduler
from ontogenesis.genome.models import Genome, ParameterGene
from ontogenesis.kernel.models import FitnessScores, Kernel, Lineage
from ontogenesis.types import KernelType


class ScriptedRandom(random.Random):
    """Random whose uniform draws and Gaussian steps are scripted. No surprises."""

    def __init__(self, draws: list[float], delta: float = 0.05):
        super().__init__(0)
        self._draws = list(draws)
        self._delta = delta

    def random(self) -> float:
        return self._draws.pop(0)

    def gauss(self, mu: float = 0.0, sigma: float = 1.0) -> float:
        return self._delta


def make_genome(*values: float, prefix: str = "g") -> Genome:
    return Genome(core_genes=[
        ParameterGene(id=f"{prefix}{i}", name=f"{prefix}{i}", value=v)
        for i, v in enumerate(values)
    ])


def make_kernel(
    kernel_type: KernelType = KernelType.MEMORY,
    overall: float = 0.5,
    evaluations: int = 0,
    generation: int = 0,
    genome: Genome | None = None,
    ancestors: list[str] | None = None,
) -> Kernel:
    return Kernel(
        name="test-kernel",
        type=kernel_type,
        lineage=Lineage(generation=generation, ancestors=ancestors or []),
        genome=genome or make_genome(0.2, 0.4, 0.6),
        fitness=FitnessScores(overall=overall, evaluations=evaluations),
    )


@pytest.fixture
def scripted_random():
    def _factory(draws: list[float], delta: float = 0.05) -> ScriptedRandom:
        return ScriptedRandom(draws, delta)
    return _factory


@pytest.fixture
def kernel_factory():
    return make_kernel


@pytest.fixture
def genome_factory():
    return make_genome


@pytest.fixture
def settings():
    return OntogenesisSettings(seed=1234, generation_interval=60)


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def scheduler(settings, event_bus):
    return EvolutionScheduler(settings=settings, event_bus=event_bus)
