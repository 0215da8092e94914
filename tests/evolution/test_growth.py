"""Tests for the per-population breeding step."""

import random

from ontogenesis.evolution.breeding import BreedingEngine
from ontogenesis.evolution.growth import BreedingScheduler
from ontogenesis.evolution.population import Population
from ontogenesis.types import BreedingMethod, KernelState, KernelType


def _growth(seed=0, elitism_rate=0.4, crossover_rate=0.7) -> BreedingScheduler:
    rng = random.Random(seed)
    return BreedingScheduler(
        BreedingEngine(rng), rng, elitism_rate=elitism_rate, crossover_rate=crossover_rate
    )


def _population(kernels, capacity=5) -> Population:
    population = Population(
        id="pop-inference", name=KernelType.INFERENCE, capacity=capacity, mutation_rate=0.1
    )
    for k in kernels:
        population.add(k)
    return population


def test_fills_shortfall_to_capacity(kernel_factory):
    population = _population([
        kernel_factory(KernelType.INFERENCE, overall=0.8),
        kernel_factory(KernelType.INFERENCE, overall=0.4),
    ])

    results = _growth().grow(population)

    assert len(results) == 3
    assert population.size == 5
    assert population.statistics.total_created == 3
    assert all(k.type == KernelType.INFERENCE for k in population.kernels)


def test_elite_is_top_fraction(kernel_factory):
    best = kernel_factory(KernelType.INFERENCE, overall=0.8)
    population = _population([kernel_factory(KernelType.INFERENCE, overall=0.4), best])

    results = _growth().grow(population)

    # ceil(2 * 0.4) = 1, so every child descends from the best kernel only
    for result in results:
        assert result.parents == [best.id]
        assert result.method == BreedingMethod.ASEXUAL


def test_crossover_needs_two_elite(kernel_factory):
    population = _population(
        [kernel_factory(KernelType.INFERENCE, overall=0.1 * i) for i in range(1, 5)],
        capacity=8,
    )

    results = _growth(elitism_rate=0.5, crossover_rate=1.0).grow(population)

    assert len(results) == 4
    assert all(r.method == BreedingMethod.CROSSOVER for r in results)
    assert all(len(r.parents) == 2 for r in results)


def test_asexual_when_crossover_rate_zero(kernel_factory):
    population = _population([kernel_factory(KernelType.INFERENCE) for _ in range(3)])

    results = _growth(elitism_rate=1.0, crossover_rate=0.0).grow(population)

    assert all(r.method == BreedingMethod.ASEXUAL for r in results)
    assert all(len(r.parents) == 1 for r in results)


def test_full_population_does_not_grow(kernel_factory):
    population = _population([kernel_factory(KernelType.INFERENCE) for _ in range(5)])
    assert _growth().grow(population) == []
    assert population.statistics.total_created == 0


def test_deprecated_kernels_do_not_breed(kernel_factory):
    deprecated = kernel_factory(KernelType.INFERENCE, overall=0.9)
    deprecated.state = KernelState.DEPRECATED
    healthy = kernel_factory(KernelType.INFERENCE, overall=0.3)
    population = _population([deprecated, healthy])

    results = _growth(elitism_rate=1.0).grow(population)

    assert results
    assert all(r.parents == [healthy.id] for r in results)
    assert population.get(deprecated.id) is deprecated


def test_no_eligible_parents(kernel_factory):
    deprecated = kernel_factory(KernelType.INFERENCE)
    deprecated.state = KernelState.DEPRECATED
    population = _population([deprecated])

    assert _growth().grow(population) == []
    assert population.size == 1


def test_empty_population_cannot_grow():
    population = _population([])
    assert _growth().grow(population) == []
