"""Growth — refill a population up to capacity by breeding from its elite."""

from __future__ import annotations

import math
import random

from ontogenesis.evolution.breeding import BreedingEngine, BreedingRequest, BreedingResult
from ontogenesis.evolution.population import Population
from ontogenesis.kernel.models import Kernel
from ontogenesis.types import BreedingMethod, KernelState


class BreedingScheduler:
    """Per-tick breeding step for one population.

    Deprecated kernels stay in the population but never serve as parents.
    """

    def __init__(
        self,
        breeder: BreedingEngine,
        rng: random.Random,
        elitism_rate: float,
        crossover_rate: float,
    ) -> None:
        self._breeder = breeder
        self._rng = rng
        self.elitism_rate = elitism_rate
        self.crossover_rate = crossover_rate

    def elite(self, population: Population) -> list[Kernel]:
        candidates = [k for k in population.ranked() if k.state != KernelState.DEPRECATED]
        return candidates[: math.ceil(len(candidates) * self.elitism_rate)]

    def grow(self, population: Population, generation_label: int = 0) -> list[BreedingResult]:
        """Breed one offspring per missing slot and add it to the population."""
        shortfall = max(0, population.capacity - population.size)
        if shortfall == 0:
            return []

        elite = self.elite(population)
        if not elite:
            return []
        by_id = {k.id: k for k in elite}

        results: list[BreedingResult] = []
        for _ in range(shortfall):
            method = (
                BreedingMethod.CROSSOVER
                if self._rng.random() < self.crossover_rate
                else BreedingMethod.ASEXUAL
            )
            if method == BreedingMethod.CROSSOVER and len(elite) >= 2:
                parents = [self._rng.choice(elite).id, self._rng.choice(elite).id]
            else:
                method = BreedingMethod.ASEXUAL
                parents = [self._rng.choice(elite).id]

            result = self._breeder.breed(
                BreedingRequest(parents=parents, method=method, offspring_count=1),
                resolve=by_id.get,
                default_mutation_rate=population.mutation_rate,
                generation_label=generation_label,
            )
            for child in result.offspring:
                population.add(child)
                population.statistics.total_created += 1
            results.append(result)

        return results
