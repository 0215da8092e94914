"""Core types shared across all ontogenesis subsystems."""

from __future__ import annotations

import uuid
from enum import Enum
from typing import TypeAlias

# ── ID Types ──────────────────────────────────────────────────────────────────

KernelId: TypeAlias = str
GeneId: TypeAlias = str
PopulationId: TypeAlias = str


def new_id() -> str:
    return uuid.uuid4().hex[:12]


def new_kernel_id() -> KernelId:
    return f"kernel-{uuid.uuid4().hex}"


# ── Kernel Classification ─────────────────────────────────────────────────────


class KernelType(str, Enum):
    INFERENCE = "inference"
    REASONING = "reasoning"
    MEMORY = "memory"
    PERCEPTION = "perception"
    ACTION = "action"
    META = "meta"
    INTEGRATION = "integration"
    SPECIALIZED = "specialized"


class KernelState(str, Enum):
    DORMANT = "dormant"
    ACTIVE = "active"
    BREEDING = "breeding"
    EVALUATING = "evaluating"
    DEPRECATED = "deprecated"
    ARCHIVED = "archived"


# ── Genetics ──────────────────────────────────────────────────────────────────


class GeneType(str, Enum):
    PARAMETER = "parameter"  # numeric
    SWITCH = "switch"  # boolean toggle
    SELECTOR = "selector"  # choice from options
    SEQUENCE = "sequence"  # ordered list
    STRUCTURE = "structure"  # nested mapping


class MutationType(str, Enum):
    PARAMETER = "parameter"
    STRUCTURAL = "structural"
    BEHAVIORAL = "behavioral"
    DELETION = "deletion"
    INSERTION = "insertion"
    DUPLICATION = "duplication"


class BreedingMethod(str, Enum):
    ASEXUAL = "asexual"
    CROSSOVER = "crossover"
    MULTI_PARENT = "multi-parent"
    SYNTHETIC = "synthetic"  # built from a template


# ── Emergence & Events ────────────────────────────────────────────────────────


class EmergenceType(str, Enum):
    CAPABILITY = "capability"
    BEHAVIOR = "behavior"
    STRUCTURE = "structure"
    INTEGRATION = "integration"


class EventType(str, Enum):
    KERNEL_CREATED = "kernel-created"
    KERNEL_ACTIVATED = "kernel-activated"
    KERNEL_DEPRECATED = "kernel-deprecated"
    BREEDING_COMPLETE = "breeding-complete"
    GENERATION_COMPLETE = "generation-complete"
    EMERGENCE_DETECTED = "emergence-detected"
    POPULATION_UPDATED = "population-updated"
