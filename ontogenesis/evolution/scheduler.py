"""EvolutionScheduler — the self-generating core of ontogenesis.

Owns all engine state and drives the generation cycle:
  1. For each population, in creation order:
     select → grow → refresh statistics → advance generation
  2. Scan fitness trends for emergence
  3. Advance the global generation and publish a summary

Every operation that touches state is synchronous and serialized by one
re-entrant lock. The periodic timer is an asyncio task; a tick always runs
to completion, so ``stop()`` takes effect between ticks.
"""

from __future__ import annotations

import asyncio
import random
import threading
import time
from typing import Any, Iterable, Mapping

import structlog

from ontogenesis.config import OntogenesisSettings
from ontogenesis.events.bus import EventBus, EventHandler
from ontogenesis.evolution.breeding import BreedingEngine, BreedingRequest, BreedingResult
from ontogenesis.evolution.emergence import EmergenceDetector, EmergenceEvent
from ontogenesis.evolution.growth import BreedingScheduler
from ontogenesis.evolution.population import Population, refresh_statistics
from ontogenesis.evolution.selection import SelectionEngine
from ontogenesis.evolution.state import EngineState, GenerationReport, PopulationSummary
from ontogenesis.exceptions import KernelStateError
from ontogenesis.genome.models import Genome, utcnow
from ontogenesis.kernel.factory import KernelFactory
from ontogenesis.kernel.models import FitnessScores, FitnessUpdate, Kernel, KernelTemplate
from ontogenesis.kernel.state_machine import transition
from ontogenesis.kernel.templates import KERNEL_TEMPLATES
from ontogenesis.types import EventType, KernelId, KernelState, KernelType

logger = structlog.get_logger()

_SOURCE = "ontogenesis"

_PendingEvent = tuple[EventType, dict[str, Any]]


def _breeding_payload(result: BreedingResult) -> dict[str, Any]:
    return {
        "parents": list(result.parents),
        "offspring": [k.id for k in result.offspring],
        "method": result.method.value,
        "mutations_applied": result.mutations_applied,
        "novel_genes": result.novel_genes,
    }


class EvolutionScheduler:
    """Caller-owned evolution engine.

    Read-only accessors return deep copies; collaborators change engine
    state only through the public operations below.
    """

    def __init__(
        self,
        settings: OntogenesisSettings | None = None,
        templates: Iterable[KernelTemplate] | None = None,
        event_bus: EventBus | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._settings = settings or OntogenesisSettings()
        self._templates = list(KERNEL_TEMPLATES if templates is None else templates)
        self._bus = event_bus or EventBus(history_limit=self._settings.event_history_limit)
        self._rng = rng or random.Random(self._settings.seed)

        self._state = EngineState(config=self._settings)
        self._lock = threading.RLock()
        self._tick_in_progress = False
        self._task: asyncio.Task | None = None
        self._index: dict[KernelId, Kernel] | None = None

        self._factory = KernelFactory()
        self._breeder = BreedingEngine(self._rng)
        self._selection = SelectionEngine(self._settings.archive_threshold)
        self._growth = BreedingScheduler(
            self._breeder,
            self._rng,
            elitism_rate=self._settings.elitism_rate,
            crossover_rate=self._settings.crossover_rate,
        )
        self._detector = EmergenceDetector()

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def start(self) -> None:
        """Start periodic evolution. Seeds founder populations on first start."""
        with self._lock:
            if self._state.is_running:
                return
            self._state.is_running = True
            self.ensure_populations()
        self._task = asyncio.create_task(self._run_loop())
        logger.info(
            "evolution_started",
            interval_seconds=self._settings.generation_interval,
            populations=len(self._state.populations),
        )

    async def stop(self) -> None:
        """Stop periodic evolution after the current tick, if any."""
        with self._lock:
            was_running = self._state.is_running
            self._state.is_running = False
        task, self._task = self._task, None
        if task and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        if was_running:
            logger.info("evolution_stopped", generation=self._state.global_generation)

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    @property
    def settings(self) -> OntogenesisSettings:
        return self._settings

    @property
    def event_bus(self) -> EventBus:
        return self._bus

    @property
    def global_generation(self) -> int:
        return self._state.global_generation

    def ensure_populations(self) -> None:
        """Seed one founder population per template type if none exist yet."""
        with self._lock:
            if self._state.populations:
                return
            seeded: set[KernelType] = set()
            for template in self._templates:
                if template.type in seeded:
                    continue
                seeded.add(template.type)
                self._population_for(template.type)
                for _ in range(self._settings.founders_per_population):
                    self._create_and_place(template, None)
            logger.info("populations_seeded", types=[t.value for t in seeded])

    # ── Generation cycle ──────────────────────────────────────────────────

    def tick(self) -> GenerationReport | None:
        """Run one generation cycle. Returns None if a cycle is already running."""
        with self._lock:
            if self._tick_in_progress:
                logger.warning(
                    "tick_skipped_in_progress",
                    generation=self._state.global_generation,
                )
                return None
            self._tick_in_progress = True
            try:
                return self._run_cycle()
            finally:
                self._tick_in_progress = False

    def _run_cycle(self) -> GenerationReport:
        start = time.monotonic()
        report = GenerationReport(generation=self._state.global_generation + 1)

        for index, population in enumerate(list(self._state.populations)):
            try:
                staged, archived, results, pending = self._cycle_population(population)
            except Exception as e:
                # The population keeps its pre-tick state; the others proceed
                logger.error(
                    "population_cycle_failed",
                    population=population.name.value,
                    error=str(e),
                )
                report.failed_populations.append(population.name)
                continue

            bred = sum(len(r.offspring) for r in results)
            self._state.populations[index] = staged
            self._state.archive.extend(archived)
            self._state.total_kernels_created += bred
            self._invalidate_index()
            report.kernels_bred += bred
            report.kernels_archived += len(archived)

            for event_type, data in pending:
                self._emit(event_type, data)

        if self._settings.enable_emergence:
            report.emergence_events = self._record_emergence(
                self._detector.scan(self._state.populations)
            )

        self._state.global_generation += 1
        self._state.last_cycle_at = utcnow()
        report.populations = [
            PopulationSummary(
                name=p.name,
                size=p.size,
                average_fitness=p.statistics.average_fitness,
            )
            for p in self._state.populations
        ]
        report.duration_ms = (time.monotonic() - start) * 1000

        self._emit(EventType.GENERATION_COMPLETE, {
            "generation": self._state.global_generation,
            "populations": [s.model_dump(mode="json") for s in report.populations],
        })
        logger.info(
            "generation_completed",
            generation=report.generation,
            bred=report.kernels_bred,
            archived=report.kernels_archived,
            emergence=len(report.emergence_events),
        )
        return report

    def _cycle_population(
        self, population: Population
    ) -> tuple[Population, list[Kernel], list[BreedingResult], list[_PendingEvent]]:
        """Run one population's tick on a staged copy; nothing is committed here."""
        staged = population.model_copy(deep=True)
        archived: list[Kernel] = []

        self._selection.select(staged, archived)
        results = self._growth.grow(staged, generation_label=self._state.global_generation)
        refresh_statistics(staged)
        staged.generation += 1

        pending: list[_PendingEvent] = [
            (EventType.BREEDING_COMPLETE, _breeding_payload(r))
            for r in results
            if r.offspring
        ]
        pending.append((EventType.POPULATION_UPDATED, {
            "population_id": staged.id,
            "name": staged.name.value,
            "generation": staged.generation,
            "statistics": staged.statistics.model_dump(mode="json"),
        }))
        return staged, archived, results, pending

    def _record_emergence(self, events: list[EmergenceEvent]) -> list[EmergenceEvent]:
        if not events:
            return []
        log = self._state.emergence_events
        log.extend(events)
        limit = self._settings.emergence_log_limit
        if len(log) > limit:
            self._state.emergence_events = log[-limit:]
        for event in events:
            logger.info(
                "emergence_detected",
                population=event.population.value if event.population else None,
                significance=round(event.significance, 4),
            )
            self._emit(EventType.EMERGENCE_DETECTED, {"event": event.model_dump(mode="json")})
        return [e.model_copy(deep=True) for e in events]

    async def _run_loop(self) -> None:
        """Main loop — one tick per generation interval until stopped."""
        while self._state.is_running:
            try:
                await asyncio.sleep(self._settings.generation_interval)
            except asyncio.CancelledError:
                break
            if not self._state.is_running:
                break
            try:
                self.tick()
            except Exception as e:
                logger.error("generation_cycle_failed", error=str(e))

    # ── Kernel operations ─────────────────────────────────────────────────

    def create_kernel(
        self, template: KernelTemplate, custom_genome: Genome | None = None
    ) -> Kernel:
        """Build a founder kernel and place it in the population of its type."""
        with self._lock:
            return self._create_and_place(template, custom_genome).model_copy(deep=True)

    def breed(self, request: BreedingRequest) -> BreedingResult:
        """Breed offspring from existing kernels.

        Unknown parent ids are dropped; if none resolve the result is empty.
        Offspring join the population of their type.
        """
        with self._lock:
            result = self._breeder.breed(
                request,
                resolve=self._find_kernel,
                default_mutation_rate=self._default_mutation_rate(request.parents),
                generation_label=self._state.global_generation,
            )
            if not result.offspring:
                return result

            for child in result.offspring:
                population = self._population_for(child.type)
                population.add(child)
                population.statistics.total_created += 1
            self._state.total_kernels_created += len(result.offspring)
            self._invalidate_index()

            self._emit(EventType.BREEDING_COMPLETE, _breeding_payload(result))
            return result.model_copy(deep=True)

    def evaluate_fitness(
        self, kernel_id: KernelId, scores: FitnessUpdate | Mapping[str, Any]
    ) -> FitnessScores | None:
        """Merge partial scores into a kernel's fitness. None if unknown."""
        with self._lock:
            kernel = self._find_kernel(kernel_id)
            if kernel is None:
                return None
            kernel.fitness.apply(scores)
            return kernel.fitness.model_copy(deep=True)

    def activate_kernel(self, kernel_id: KernelId) -> bool:
        with self._lock:
            kernel = self._find_kernel(kernel_id)
            if kernel is None:
                return False
            try:
                transition(kernel, KernelState.ACTIVE)
            except KernelStateError:
                return False
            kernel.last_activated = utcnow()
            self._emit(EventType.KERNEL_ACTIVATED, {"kernel_id": kernel_id})
            return True

    def deprecate_kernel(self, kernel_id: KernelId) -> bool:
        """Mark a kernel deprecated. It stays in its population but stops breeding."""
        with self._lock:
            kernel = self._find_kernel(kernel_id)
            if kernel is None:
                return False
            try:
                transition(kernel, KernelState.DEPRECATED)
            except KernelStateError:
                return False
            self._emit(EventType.KERNEL_DEPRECATED, {"kernel_id": kernel_id})
            return True

    # ── Read-only accessors ───────────────────────────────────────────────

    def get_population(self, kernel_type: KernelType) -> Population | None:
        with self._lock:
            population = self._state.population(kernel_type)
            return population.model_copy(deep=True) if population else None

    def get_best_kernel(self, kernel_type: KernelType) -> Kernel | None:
        with self._lock:
            population = self._state.population(kernel_type)
            best = population.best() if population else None
            return best.model_copy(deep=True) if best else None

    def get_kernel(self, kernel_id: KernelId) -> Kernel | None:
        with self._lock:
            kernel = self._find_kernel(kernel_id)
            return kernel.model_copy(deep=True) if kernel else None

    def snapshot(self) -> EngineState:
        """Deep copy of the whole engine state, for dashboards."""
        with self._lock:
            return self._state.model_copy(deep=True)

    # ── Events ────────────────────────────────────────────────────────────

    def subscribe(self, event_type: EventType | str, handler: EventHandler) -> None:
        self._bus.subscribe(event_type, handler)

    def unsubscribe(self, event_type: EventType | str, handler: EventHandler) -> None:
        self._bus.unsubscribe(event_type, handler)

    def _emit(self, event_type: EventType, data: dict[str, Any]) -> None:
        self._bus.emit(event_type, data, source=_SOURCE)

    # ── Internals ─────────────────────────────────────────────────────────

    def _create_and_place(
        self, template: KernelTemplate, custom_genome: Genome | None
    ) -> Kernel:
        kernel = self._factory.create(template, custom_genome)
        population = self._population_for(kernel.type)
        population.add(kernel)
        population.statistics.total_created += 1
        self._state.total_kernels_created += 1
        self._invalidate_index()
        self._emit(EventType.KERNEL_CREATED, {"kernel": kernel.model_dump(mode="json")})
        return kernel

    def _population_for(self, kernel_type: KernelType) -> Population:
        population = self._state.population(kernel_type)
        if population is not None:
            return population
        population = Population(
            id=f"pop-{kernel_type.value}",
            name=kernel_type,
            selection_pressure=self._settings.selection_pressure,
            mutation_rate=self._settings.base_mutation_rate,
            capacity=self._capacity_share(),
        )
        self._state.populations.append(population)
        return population

    def _capacity_share(self) -> int:
        types = {t.type for t in self._templates}
        return max(1, self._settings.population_capacity // max(1, len(types)))

    def _default_mutation_rate(self, parent_ids: list[KernelId]) -> float:
        for parent_id in parent_ids:
            kernel = self._find_kernel(parent_id)
            if kernel is None:
                continue
            population = self._state.population(kernel.type)
            if population is not None:
                return population.mutation_rate
        return self._settings.base_mutation_rate

    def _find_kernel(self, kernel_id: KernelId) -> Kernel | None:
        if self._index is None:
            index: dict[KernelId, Kernel] = {}
            for population in self._state.populations:
                for kernel in population.kernels:
                    index[kernel.id] = kernel
            for kernel in self._state.archive:
                index.setdefault(kernel.id, kernel)
            self._index = index
        return self._index.get(kernel_id)

    def _invalidate_index(self) -> None:
        self._index = None
