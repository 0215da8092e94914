"""Built-in kernel templates — the founder catalog seeded on first start."""

from __future__ import annotations

from ontogenesis.genome.models import Genome, ParameterGene
from ontogenesis.kernel.models import KernelTemplate
from ontogenesis.types import KernelType


def _param(gene_id: str, name: str, value: float) -> ParameterGene:
    return ParameterGene(id=gene_id, name=name, value=value)


KERNEL_TEMPLATES: list[KernelTemplate] = [
    KernelTemplate(
        name="Basic Inference",
        type=KernelType.INFERENCE,
        base_genome=Genome(core_genes=[
            _param("temperature", "Temperature", 0.7),
            _param("maxTokens", "Max Tokens", 2048),
            _param("topP", "Top P", 0.9),
        ]),
        description="Basic LLM inference kernel",
    ),
    KernelTemplate(
        name="Analytical Reasoning",
        type=KernelType.REASONING,
        base_genome=Genome(core_genes=[
            _param("depth", "Reasoning Depth", 3),
            _param("breadth", "Exploration Breadth", 5),
            _param("rigor", "Logical Rigor", 0.8),
        ]),
        description="Analytical reasoning kernel",
    ),
    KernelTemplate(
        name="Working Memory",
        type=KernelType.MEMORY,
        base_genome=Genome(core_genes=[
            _param("capacity", "Capacity", 7),
            _param("decay", "Decay Rate", 0.1),
            _param("consolidation", "Consolidation Rate", 0.3),
        ]),
        description="Working memory management kernel",
    ),
    KernelTemplate(
        name="Meta-Cognitive Monitor",
        type=KernelType.META,
        base_genome=Genome(core_genes=[
            _param("introspectionDepth", "Introspection Depth", 2),
            _param("selfAwareness", "Self-Awareness Level", 0.5),
            _param("adaptability", "Adaptability", 0.6),
        ]),
        description="Meta-cognitive monitoring kernel",
    ),
]


def template_for(kernel_type: KernelType) -> KernelTemplate | None:
    """First built-in template of the given type, if any."""
    for template in KERNEL_TEMPLATES:
        if template.type == kernel_type:
            return template
    return None
