"""
Tests for segment crossover and Gaussian mutation.
"""

import numpy as np
import pytest

from evopool.evolution import Reproducer
from evopool.evolution.reproduction import segment_bounds


def _reproducer(rate: float = 0.2, strength: float = 1.0, seed: int = 0) -> Reproducer:
    return Reproducer(rng=np.random.default_rng(seed), mutation_rate=rate, mutation_strength=strength)


def test_segment_bounds_split_into_quarters() -> None:
    assert segment_bounds(10) == [(0, 2), (2, 5), (5, 7), (7, 10)]


def test_segment_bounds_skip_zero_length_segments() -> None:
    assert segment_bounds(3) == [(0, 1), (1, 2), (2, 3)]
    assert segment_bounds(1) == [(0, 1)]


def test_crossover_alternates_parent_segments() -> None:
    child = _reproducer().crossover(np.zeros(10), np.ones(10))
    assert child.tolist() == [0, 0, 1, 1, 1, 0, 0, 1, 1, 1]


@pytest.mark.parametrize("length", [1, 2, 3, 5, 9, 16, 33])
def test_crossover_preserves_vector_length(length: int) -> None:
    reproducer = _reproducer()
    mother = np.arange(length, dtype=np.float64)
    father = -np.arange(length, dtype=np.float64)
    assert len(reproducer.crossover(mother, father)) == length
    assert len(reproducer.offspring(mother, father)) == length


def test_offspring_leaves_parents_untouched() -> None:
    reproducer = _reproducer(rate=1.0)
    mother, father = np.zeros(12), np.ones(12)
    reproducer.offspring(mother, father)
    assert not mother.any()
    assert father.all()


def test_mutation_perturbs_exactly_rate_times_length_genes() -> None:
    reproducer = _reproducer(rate=0.2)
    for _ in range(25):
        genes = np.zeros(10)
        touched = reproducer.mutate(genes)
        assert len(touched) == 2
        assert np.count_nonzero(genes) == 2


@pytest.mark.parametrize("rate", [0.0, 0.01, 0.04])
def test_tiny_mutation_rates_still_mutate_one_gene(rate: float) -> None:
    reproducer = _reproducer(rate=rate)
    genes = np.zeros(10)
    reproducer.mutate(genes)
    assert np.count_nonzero(genes) == 1


def test_full_mutation_rate_touches_every_gene() -> None:
    genes = np.zeros(10)
    _reproducer(rate=1.0).mutate(genes)
    assert np.count_nonzero(genes) == 10


def test_mutation_magnitude_is_not_clamped() -> None:
    genes = np.zeros(50)
    _reproducer(rate=1.0, strength=1e6).mutate(genes)
    assert np.abs(genes).max() > 1e3
