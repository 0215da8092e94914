"""Kernel factory — builds founder kernels from templates."""

from __future__ import annotations

from ontogenesis.genome.models import Genome
from ontogenesis.kernel.models import FitnessScores, Kernel, KernelTemplate, Lineage
from ontogenesis.types import BreedingMethod, KernelState, new_kernel_id


class KernelFactory:
    """Instantiates generation-0 kernels.

    Every gene is deep-copied out of the template, so kernels built from the
    same template never share gene storage.
    """

    def __init__(self, version: str = "1.0.0") -> None:
        self._version = version

    def create(self, template: KernelTemplate, custom_genome: Genome | None = None) -> Kernel:
        base = template.base_genome
        genome = Genome(
            core_genes=[g.model_copy(deep=True) for g in base.core_genes],
            regulatory_genes=[g.model_copy(deep=True) for g in base.regulatory_genes],
            expression_modifiers=[m.model_copy() for m in base.expression_modifiers],
        )

        # Custom genes are appended, not merged by id
        if custom_genome is not None:
            genome.core_genes.extend(g.model_copy(deep=True) for g in custom_genome.core_genes)
            genome.regulatory_genes.extend(
                g.model_copy(deep=True) for g in custom_genome.regulatory_genes
            )

        kernel_id = new_kernel_id()
        return Kernel(
            id=kernel_id,
            name=f"{template.name}-{kernel_id[-4:]}",
            version=self._version,
            type=template.type,
            lineage=Lineage(generation=0, breeding_method=BreedingMethod.SYNTHETIC),
            genome=genome,
            fitness=FitnessScores(),
            state=KernelState.DORMANT,
        )
