"""Tests for the kernel lifecycle state machine."""

import pytest

from ontogenesis.exceptions import KernelStateError
from ontogenesis.kernel.state_machine import can_transition, transition
from ontogenesis.types import KernelState


def test_initial_state(kernel_factory):
    assert kernel_factory().state == KernelState.DORMANT


def test_activate_then_deprecate(kernel_factory):
    kernel = kernel_factory()

    assert transition(kernel, KernelState.ACTIVE) == KernelState.DORMANT
    assert transition(kernel, KernelState.DEPRECATED) == KernelState.ACTIVE
    assert kernel.state == KernelState.DEPRECATED


def test_reactivation_allowed(kernel_factory):
    kernel = kernel_factory()
    transition(kernel, KernelState.ACTIVE)
    transition(kernel, KernelState.ACTIVE)
    assert kernel.state == KernelState.ACTIVE


def test_deprecated_cannot_reactivate(kernel_factory):
    kernel = kernel_factory()
    transition(kernel, KernelState.DEPRECATED)

    with pytest.raises(KernelStateError, match="deprecated"):
        transition(kernel, KernelState.ACTIVE)


def test_deprecated_can_be_archived(kernel_factory):
    kernel = kernel_factory()
    transition(kernel, KernelState.DEPRECATED)
    transition(kernel, KernelState.ARCHIVED)
    assert kernel.state == KernelState.ARCHIVED


def test_archived_is_terminal(kernel_factory):
    kernel = kernel_factory()
    transition(kernel, KernelState.ARCHIVED)

    for target in KernelState:
        assert not can_transition(KernelState.ARCHIVED, target)
    with pytest.raises(KernelStateError):
        transition(kernel, KernelState.ACTIVE)
    assert kernel.state == KernelState.ARCHIVED
