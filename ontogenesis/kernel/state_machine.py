"""Kernel lifecycle — enforces valid state transitions."""

from __future__ import annotations

from ontogenesis.exceptions import KernelStateError
from ontogenesis.kernel.models import Kernel
from ontogenesis.types import KernelState

# Valid state transitions. ARCHIVED is terminal.
VALID_TRANSITIONS: dict[KernelState, set[KernelState]] = {
    KernelState.DORMANT: {
        KernelState.ACTIVE,
        KernelState.BREEDING,
        KernelState.EVALUATING,
        KernelState.DEPRECATED,
        KernelState.ARCHIVED,
    },
    KernelState.ACTIVE: {
        KernelState.ACTIVE,  # re-activation refreshes last_activated
        KernelState.DORMANT,
        KernelState.BREEDING,
        KernelState.EVALUATING,
        KernelState.DEPRECATED,
        KernelState.ARCHIVED,
    },
    KernelState.BREEDING: {
        KernelState.DORMANT,
        KernelState.ACTIVE,
        KernelState.DEPRECATED,
        KernelState.ARCHIVED,
    },
    KernelState.EVALUATING: {
        KernelState.DORMANT,
        KernelState.ACTIVE,
        KernelState.DEPRECATED,
        KernelState.ARCHIVED,
    },
    KernelState.DEPRECATED: {KernelState.ARCHIVED},
    KernelState.ARCHIVED: set(),  # terminal
}


def can_transition(current: KernelState, target: KernelState) -> bool:
    return target in VALID_TRANSITIONS.get(current, set())


def transition(kernel: Kernel, target: KernelState) -> KernelState:
    """Move ``kernel`` to ``target``, returning the previous state."""
    if not can_transition(kernel.state, target):
        raise KernelStateError(
            f"Cannot transition kernel {kernel.id} "
            f"from {kernel.state.value} to {target.value}"
        )
    old = kernel.state
    kernel.state = target
    return old
