"""Tests for the scheduler's periodic timer."""

import asyncio

import pytest

from ontogenesis.config import OntogenesisSettings
from ontogenesis.evolution.scheduler import EvolutionScheduler
from ontogenesis.types import EventType


@pytest.mark.asyncio
async def test_start_seeds_and_runs():
    scheduler = EvolutionScheduler(
        settings=OntogenesisSettings(seed=7, generation_interval=0.05)
    )

    await scheduler.start()
    assert scheduler.is_running
    assert len(scheduler.snapshot().populations) == 4

    await asyncio.sleep(0.3)
    await scheduler.stop()

    assert not scheduler.is_running
    reached = scheduler.global_generation
    assert reached >= 2

    await asyncio.sleep(0.15)
    assert scheduler.global_generation == reached


@pytest.mark.asyncio
async def test_start_and_stop_are_idempotent():
    scheduler = EvolutionScheduler(
        settings=OntogenesisSettings(seed=7, generation_interval=60)
    )
    created = []
    scheduler.subscribe(EventType.KERNEL_CREATED, created.append)

    await scheduler.start()
    await scheduler.start()
    assert len(created) == 20

    await scheduler.stop()
    await scheduler.stop()
    assert not scheduler.is_running


@pytest.mark.asyncio
async def test_stop_before_first_interval():
    scheduler = EvolutionScheduler(
        settings=OntogenesisSettings(seed=7, generation_interval=60)
    )

    await scheduler.start()
    await asyncio.sleep(0.05)
    await scheduler.stop()

    assert scheduler.global_generation == 0
    assert scheduler.snapshot().last_cycle_at is None


@pytest.mark.asyncio
async def test_restart_resumes_ticking():
    scheduler = EvolutionScheduler(
        settings=OntogenesisSettings(seed=7, generation_interval=0.05)
    )

    await scheduler.start()
    await asyncio.sleep(0.15)
    await scheduler.stop()
    first = scheduler.global_generation

    await scheduler.start()
    await asyncio.sleep(0.15)
    await scheduler.stop()

    assert scheduler.global_generation > first
    assert scheduler.snapshot().total_kernels_created >= 20


@pytest.mark.asyncio
async def test_manual_tick_while_running():
    scheduler = EvolutionScheduler(
        settings=OntogenesisSettings(seed=7, generation_interval=60)
    )

    await scheduler.start()
    report = scheduler.tick()
    await scheduler.stop()

    assert report.generation == 1
    assert scheduler.global_generation == 1
