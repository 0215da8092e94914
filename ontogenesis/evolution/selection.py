"""Selection — rank a population and archive evaluated underperformers."""

from __future__ import annotations

from ontogenesis.evolution.population import Population
from ontogenesis.kernel.models import Kernel
from ontogenesis.kernel.state_machine import transition
from ontogenesis.types import KernelState


class SelectionEngine:
    """Culls kernels whose measured fitness falls below the archive threshold.

    Kernels that were never evaluated are exempt, so fresh offspring get a
    chance to be scored before they can be culled.
    """

    def __init__(self, archive_threshold: float) -> None:
        self.archive_threshold = archive_threshold

    def select(self, population: Population, archive: list[Kernel]) -> list[Kernel]:
        """Rank ``population`` in place and move culled kernels to ``archive``.

        Returns the kernels archived by this call.
        """
        ranked = population.ranked()  # stable: ties keep prior order

        survivors: list[Kernel] = []
        culled: list[Kernel] = []
        for kernel in ranked:
            if (
                kernel.fitness.overall < self.archive_threshold
                and kernel.fitness.evaluations > 0
            ):
                culled.append(kernel)
            else:
                survivors.append(kernel)

        for kernel in culled:
            transition(kernel, KernelState.ARCHIVED)
            archive.append(kernel)

        population.kernels = survivors
        population.statistics.archived_count += len(culled)
        return culled
