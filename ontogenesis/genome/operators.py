"""Genome operators — clone, crossover, multi-parent recombination, mutation.

All operators are pure: they never modify their input genomes and draw every
random decision from the ``rng`` they are given, so a seeded generator
reproduces the same child genome and mutation list.
"""

from __future__ import annotations

import random
from typing import Sequence

from ontogenesis.genome.models import (
    MUTATION_SIGMA,
    Genome,
    Mutation,
    ParameterGene,
)
from ontogenesis.types import MutationType

# Insertion probability relative to the per-gene mutation rate
NOVEL_GENE_FACTOR = 0.1


def _rng_id(prefix: str, rng: random.Random) -> str:
    return f"{prefix}-{rng.getrandbits(48):012x}"


def asexual(genome: Genome) -> Genome:
    """Deep clone of a single parent."""
    return genome.model_copy(deep=True)


def crossover(
    genome_a: Genome,
    genome_b: Genome,
    rng: random.Random,
    point: int | None = None,
) -> Genome:
    """Single-point crossover of core genes.

    The child takes ``a[:point] + b[point:]``. Parents of different lengths
    are sliced with whatever range exists; the child may be longer or shorter
    than either parent.
    """
    if point is None:
        point = rng.randrange(len(genome_a.core_genes)) if genome_a.core_genes else 0

    core = [g.model_copy(deep=True) for g in genome_a.core_genes[:point]]
    core += [g.model_copy(deep=True) for g in genome_b.core_genes[point:]]

    donor = genome_a if rng.random() < 0.5 else genome_b
    regulatory = [g.model_copy(deep=True) for g in donor.regulatory_genes]

    mods_a = genome_a.expression_modifiers
    mods_b = genome_b.expression_modifiers
    modifiers = [m.model_copy() for m in mods_a[: len(mods_a) // 2]]
    modifiers += [m.model_copy() for m in mods_b[len(mods_b) // 2 :]]

    return Genome(
        core_genes=core,
        regulatory_genes=regulatory,
        expression_modifiers=modifiers,
    )


def multi_parent(genomes: Sequence[Genome], rng: random.Random) -> Genome:
    """Per-locus recombination across any number of parents.

    Each core locus of the first parent is filled from a uniformly chosen
    parent; parents too short to have that locus contribute nothing there.
    """
    if not genomes:
        return Genome()

    core = []
    for i in range(len(genomes[0].core_genes)):
        donor = rng.choice(genomes)
        if i < len(donor.core_genes):
            core.append(donor.core_genes[i].model_copy(deep=True))

    regulatory_donor = rng.choice(genomes)
    return Genome(
        core_genes=core,
        regulatory_genes=[g.model_copy(deep=True) for g in regulatory_donor.regulatory_genes],
    )


def mutate(
    genome: Genome,
    rate: float,
    rng: random.Random,
    sigma: float = MUTATION_SIGMA,
) -> tuple[Genome, list[Mutation]]:
    """Mutate a copy of ``genome``.

    Every mutable core gene mutates independently with probability ``rate``
    (Gaussian step for parameters, flip for switches). With probability
    ``rate * NOVEL_GENE_FACTOR`` a new parameter gene is appended.
    """
    mutated = genome.model_copy(deep=True)
    mutations: list[Mutation] = []

    for gene in mutated.core_genes:
        if not gene.mutable or rng.random() >= rate:
            continue
        magnitude = gene.mutate(rng, sigma)
        if magnitude is None:
            continue
        mutations.append(Mutation(
            id=_rng_id("mut", rng),
            type=MutationType.PARAMETER,
            target=gene.id,
            magnitude=magnitude,
        ))

    if rng.random() < rate * NOVEL_GENE_FACTOR:
        novel = ParameterGene(
            id=_rng_id("gene", rng),
            name="Novel Gene",
            value=rng.random(),
            expression_level=0.5,
        )
        mutated.core_genes.append(novel)
        mutations.append(Mutation(
            id=_rng_id("mut", rng),
            type=MutationType.INSERTION,
            target=novel.id,
            magnitude=1.0,
        ))

    return mutated, mutations
