"""
Roulette-wheel selection over a fixed 100-slot sampling table.

Individuals receive table slots in proportion to their share of the total
generation score. Shares are truncated, so the weakest individuals may get no
slot at all and cannot become parents in that generation.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

import numpy as np
from loguru import logger

TABLE_SIZE = 100


class RouletteSelector:
    """Fitness-weighted parent sampling with elitism helpers."""

    def __init__(self, rng: np.random.Generator, capacity: int = TABLE_SIZE) -> None:
        self.rng = rng
        self.capacity = capacity
        self.table = np.zeros(0, dtype=np.int64)
        self.population_size = 0
        self.uniform = False

    def build(self, scores: Sequence[float]) -> np.ndarray:
        """
        Rebuild the sampling table from scores sorted best first.

        Each index ``k`` fills ``int(score_k / total * capacity)`` consecutive
        slots, the fill cursor carrying over from one individual to the next
        until the table is full. A table that cannot be built from the scores
        (non-positive total, or every share below one slot) falls back to a
        uniform table.
        """

        scores = np.asarray(scores, dtype=np.float64)
        self.population_size = len(scores)
        total = float(scores.sum())
        slots = []
        if total > 0 and math.isfinite(total):
            for index, score in enumerate(scores):
                share = int(max(score, 0.0) / total * self.capacity)
                take = min(share, self.capacity - len(slots))
                slots.extend([index] * take)
                if len(slots) >= self.capacity:
                    break
        self.uniform = not slots
        if self.uniform:
            logger.warning(
                "Degenerate fitness (total score {}), sampling parents uniformly this generation.",
                total,
            )
            self.table = np.arange(self.capacity, dtype=np.int64) % self.population_size
        else:
            self.table = np.asarray(slots, dtype=np.int64)
        return self.table

    def slot_counts(self) -> np.ndarray:
        """Number of table slots held by each population index."""
        return np.bincount(self.table, minlength=self.population_size)

    def draw(self) -> int:
        return int(self.table[self.rng.integers(len(self.table))])

    def draw_parents(self, slot: Optional[int] = None, self_breeding: bool = False) -> Tuple[int, int]:
        """
        Draw two distinct parent indices.

        When the draws collide the second parent is picked uniformly over the
        rest of the population. With ``self_breeding`` the replaced ``slot``
        becomes the first parent half of the time.
        """

        if self_breeding and slot is not None and self.rng.random() < 0.5:
            mother = slot
        else:
            mother = self.draw()
        father = self.draw()
        if mother == father:
            father = int(self.rng.integers(self.population_size - 1))
            if father >= mother:
                father += 1
        return mother, father


def elite_indices(elite_count: int) -> range:
    """Indices exempt from replacement once the population is sorted."""
    return range(elite_count)
