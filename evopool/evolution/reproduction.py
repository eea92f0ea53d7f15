"""
Crossover and mutation over flat weight vectors.

Crossover is positional: the parents are cut into contiguous segments and the
child alternates between them, so genes that sit close together (the weights
of one layer) tend to be inherited together.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

CROSSOVER_SEGMENTS = 4


def segment_bounds(length: int, segments: int = CROSSOVER_SEGMENTS) -> List[Tuple[int, int]]:
    """Split ``range(length)`` into contiguous ``(start, stop)`` pairs, dropping empty ones."""
    cuts = [length * k // segments for k in range(segments + 1)]
    return [(start, stop) for start, stop in zip(cuts[:-1], cuts[1:]) if stop > start]


@dataclass
class Reproducer:
    """Builds offspring vectors from two parents, then mutates them in place.

    Mutation has no clamp: weights may drift to any magnitude.
    """

    rng: np.random.Generator
    mutation_rate: float = 0.2
    mutation_strength: float = 1.0
    segments: int = CROSSOVER_SEGMENTS

    def crossover(self, mother: np.ndarray, father: np.ndarray) -> np.ndarray:
        parents = (mother, father)
        pieces = [parents[i % 2][start:stop] for i, (start, stop) in enumerate(segment_bounds(len(mother), self.segments))]
        return np.concatenate(pieces).astype(np.float64, copy=False)

    def genes_to_mutate(self, length: int) -> int:
        return min(length, max(1, int(round(self.mutation_rate * length))))

    def mutate(self, genes: np.ndarray) -> np.ndarray:
        """Perturb distinct random genes with ``±N(0, 1) * strength``; returns the touched indices."""
        count = self.genes_to_mutate(len(genes))
        indices = self.rng.choice(len(genes), size=count, replace=False)
        noise = self.rng.standard_normal(count) * self.mutation_strength
        signs = np.where(self.rng.random(count) < 0.5, 1.0, -1.0)
        genes[indices] += signs * noise
        return indices

    def offspring(self, mother: np.ndarray, father: np.ndarray) -> np.ndarray:
        child = self.crossover(mother, father)
        self.mutate(child)
        return child
