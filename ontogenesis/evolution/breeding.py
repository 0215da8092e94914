"""Breeding — combine parent genomes, mutate, and assemble offspring."""

from __future__ import annotations

import random
from typing import Callable

from pydantic import BaseModel, Field

from ontogenesis.genome import operators
from ontogenesis.genome.models import Genome
from ontogenesis.kernel.models import MAX_ANCESTORS, FitnessScores, Kernel, Lineage
from ontogenesis.types import BreedingMethod, KernelId, KernelState, MutationType

# Ancestors inherited from each parent before the chain is capped
ANCESTORS_PER_PARENT = 4

KernelResolver = Callable[[KernelId], "Kernel | None"]


class BreedingRequest(BaseModel):
    parents: list[KernelId]
    method: BreedingMethod = BreedingMethod.ASEXUAL
    mutation_rate: float | None = Field(default=None, ge=0, le=1)
    offspring_count: int = Field(default=1, ge=1)


class BreedingResult(BaseModel):
    offspring: list[Kernel] = Field(default_factory=list)
    success_rate: float = 0.0
    mutations_applied: int = 0
    novel_genes: int = 0
    parents: list[KernelId] = Field(default_factory=list)  # ids that resolved
    method: BreedingMethod = BreedingMethod.ASEXUAL


def build_ancestor_chain(parents: list[Kernel]) -> list[KernelId]:
    """Parent ids plus the nearest ancestors of each, deduplicated and capped."""
    chain: dict[KernelId, None] = {}
    for parent in parents:
        chain[parent.id] = None
        for ancestor in parent.lineage.ancestors[:ANCESTORS_PER_PARENT]:
            chain[ancestor] = None
    return list(chain)[:MAX_ANCESTORS]


class BreedingEngine:
    """Produces offspring kernels from resolved parents.

    The engine never places offspring anywhere; the caller owns them.
    """

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng

    def breed(
        self,
        request: BreedingRequest,
        resolve: KernelResolver,
        default_mutation_rate: float,
        generation_label: int = 0,
    ) -> BreedingResult:
        parents = [k for k in (resolve(pid) for pid in request.parents) if k is not None]
        if not parents:
            return BreedingResult(method=request.method)

        rate = request.mutation_rate if request.mutation_rate is not None else default_mutation_rate
        generation = max(p.lineage.generation for p in parents) + 1
        parent_ids = [p.id for p in parents]
        ancestors = build_ancestor_chain(parents)

        offspring: list[Kernel] = []
        total_mutations = 0
        novel_genes = 0

        for i in range(request.offspring_count):
            child_genome = self._combine(request.method, [p.genome for p in parents])
            genome, mutations = operators.mutate(child_genome, rate, self._rng)
            total_mutations += len(mutations)
            novel_genes += sum(1 for m in mutations if m.type == MutationType.INSERTION)

            offspring.append(Kernel(
                name=f"{parents[0].type.value}-gen{generation_label + 1}-{i}",
                type=parents[0].type,
                lineage=Lineage(
                    generation=generation,
                    parents=list(parent_ids),
                    ancestors=list(ancestors),
                    breeding_method=request.method,
                    mutations=mutations,
                ),
                genome=genome,
                fitness=FitnessScores(),
                state=KernelState.DORMANT,
            ))

        return BreedingResult(
            offspring=offspring,
            success_rate=len(offspring) / request.offspring_count,
            mutations_applied=total_mutations,
            novel_genes=novel_genes,
            parents=parent_ids,
            method=request.method,
        )

    def _combine(self, method: BreedingMethod, genomes: list[Genome]) -> Genome:
        if method == BreedingMethod.CROSSOVER:
            other = genomes[1] if len(genomes) > 1 else genomes[0]
            return operators.crossover(genomes[0], other, self._rng)
        if method == BreedingMethod.MULTI_PARENT:
            return operators.multi_parent(genomes, self._rng)
        # asexual and synthetic requests clone the first parent
        return operators.asexual(genomes[0])
