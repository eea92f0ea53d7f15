"""
Tests for the roulette sampling table and parent draws.
"""

import numpy as np
import pytest

from evopool.evolution import RouletteSelector
from evopool.evolution.selection import TABLE_SIZE, elite_indices


def _selector(seed: int = 0) -> RouletteSelector:
    return RouletteSelector(np.random.default_rng(seed))


def test_table_fills_consecutive_slots_in_score_order() -> None:
    selector = _selector()
    table = selector.build([50.0, 30.0, 20.0])

    assert list(selector.slot_counts()) == [50, 30, 20]
    assert list(table[:50]) == [0] * 50
    assert list(table[50:80]) == [1] * 30
    assert list(table[80:]) == [2] * 20
    assert not selector.uniform


def test_fractional_shares_are_truncated() -> None:
    selector = _selector()
    table = selector.build([10.0, 10.0, 10.0])

    assert list(selector.slot_counts()) == [33, 33, 33]
    assert len(table) == 99


def test_weak_individuals_can_receive_no_slot() -> None:
    selector = _selector()
    selector.build([99.5, 0.4, 0.1])

    assert list(selector.slot_counts()) == [99, 0, 0]
    assert {selector.draw() for _ in range(50)} == {0}


def test_table_never_exceeds_capacity_and_points_at_live_indices() -> None:
    rng = np.random.default_rng(11)
    selector = _selector()
    for size in (2, 3, 7, 10, 40, 150):
        scores = np.sort(rng.uniform(0.0, 5.0, size=size))[::-1]
        table = selector.build(scores)
        assert 0 < len(table) <= TABLE_SIZE
        assert selector.slot_counts().sum() <= TABLE_SIZE
        assert table.min() >= 0
        assert table.max() < size


def test_zero_total_falls_back_to_uniform_table() -> None:
    selector = _selector()
    table = selector.build([0.0, 0.0, 0.0, 0.0])

    assert selector.uniform
    assert len(table) == TABLE_SIZE
    assert list(selector.slot_counts()) == [25, 25, 25, 25]


def test_negative_total_falls_back_to_uniform_table() -> None:
    selector = _selector()
    selector.build([-1.0, -2.0])

    assert selector.uniform
    assert set(selector.table.tolist()) == {0, 1}


def test_collisions_are_redrawn_over_the_rest_of_the_population() -> None:
    selector = _selector(seed=5)
    selector.build([100.0, 0.0, 0.0])

    fathers = set()
    for _ in range(200):
        mother, father = selector.draw_parents()
        assert mother == 0
        assert father != mother
        fathers.add(father)
    assert fathers == {1, 2}


def test_self_breeding_uses_the_replaced_slot_as_a_parent() -> None:
    selector = _selector(seed=9)
    selector.build([100.0, 0.0, 0.0, 0.0])

    mothers = set()
    for _ in range(200):
        mother, father = selector.draw_parents(slot=3, self_breeding=True)
        assert mother != father
        mothers.add(mother)
    assert mothers == {0, 3}


@pytest.mark.parametrize("count", [0, 1, 4])
def test_elite_indices_cover_the_top_ranks(count: int) -> None:
    assert list(elite_indices(count)) == list(range(count))
