"""Tests for fitness scoring."""

import pytest

from ontogenesis.kernel.models import FITNESS_WEIGHTS, FitnessScores, FitnessUpdate


def test_weights_sum_to_one():
    assert sum(FITNESS_WEIGHTS.values()) == pytest.approx(1.0)


def test_neutral_defaults():
    scores = FitnessScores()
    assert scores.overall == 0.5
    assert scores.evaluations == 0
    assert scores.last_evaluated is None


def test_partial_update_recomputes_overall():
    scores = FitnessScores()
    scores.apply({"performance": 1.0})

    assert scores.performance == 1.0
    assert scores.efficiency == 0.5
    assert scores.overall == pytest.approx(0.3 * 1.0 + 0.7 * 0.5)
    assert scores.evaluations == 1
    assert scores.last_evaluated is not None


def test_full_update():
    scores = FitnessScores()
    scores.apply(FitnessUpdate(
        performance=0.9,
        efficiency=0.8,
        reliability=0.7,
        adaptability=0.6,
        innovation=0.5,
    ))

    expected = 0.9 * 0.3 + 0.8 * 0.2 + 0.7 * 0.2 + 0.6 * 0.15 + 0.5 * 0.15
    assert scores.overall == pytest.approx(expected)


def test_evaluations_accumulate():
    scores = FitnessScores()
    scores.apply({})
    scores.apply({"innovation": 0.1})
    assert scores.evaluations == 2


def test_scores_are_clamped():
    update = FitnessUpdate(performance=1.7, efficiency=-0.2)
    assert update.performance == 1.0
    assert update.efficiency == 0.0


def test_unknown_dimensions_ignored():
    scores = FitnessScores()
    scores.apply({"charisma": 1.0, "reliability": 0.1})
    assert scores.reliability == 0.1
    assert not hasattr(scores, "charisma")
