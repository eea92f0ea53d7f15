"""
Population management utilities for EvoPool evolution cycles.

The `Population` owns the ordered list of individuals and the explicit random
source shared by selection, reproduction and network initialisation. Its size
never changes after creation; evolution only overwrites weights and scores.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from evopool.exceptions import EvoPoolConfigError

from .individual import Individual, generate_name
from .network import FeedForwardNet


@dataclass
class Population:
    """Container around a fixed-size list of individuals with helper utilities."""

    individuals: List[Individual]
    rng: np.random.Generator = field(default_factory=np.random.default_rng, repr=False)

    @classmethod
    def create(
        cls,
        size: int,
        input_size: int,
        hidden_size: int,
        layers: int,
        output_size: int,
        rng: Optional[np.random.Generator] = None,
    ) -> "Population":
        """Create ``size`` individuals sharing one topology.

        Parameters
        ----------
        size : int
            Number of individuals, at least 2 so that crossover has two parents.
        input_size, hidden_size, layers, output_size : int
            Topology forwarded to :class:`FeedForwardNet`.
        rng : numpy.random.Generator, optional
            Random source for the whole run. A fresh generator is used when omitted.
        """

        if size < 2:
            raise EvoPoolConfigError(
                f"Population size must be at least 2, got {size}.",
                context={"population_size": size},
            )
        rng = rng if rng is not None else np.random.default_rng()
        individuals = [
            Individual(
                network=FeedForwardNet(input_size, hidden_size, layers, output_size, rng=rng),
                name=generate_name(index),
            )
            for index in range(size)
        ]
        return cls(individuals=individuals, rng=rng)

    @property
    def size(self) -> int:
        return len(self.individuals)

    def __len__(self) -> int:
        return len(self.individuals)

    def __iter__(self):
        return iter(self.individuals)

    def __getitem__(self, index: int) -> Individual:
        return self.individuals[index]

    def sort(self) -> None:
        """Order individuals by generation score, best first. Ties keep their order."""
        self.individuals.sort(key=lambda ind: ind.generation_score, reverse=True)

    def top_k(self, k: int) -> Sequence[Individual]:
        """Return the best performing individuals (population must be sorted)."""
        return self.individuals[:k]

    def scores(self) -> np.ndarray:
        return np.array([ind.generation_score for ind in self.individuals], dtype=np.float64)

    def standings(self, k: int) -> List[Tuple[str, float]]:
        return [(ind.name, ind.generation_score) for ind in self.top_k(k)]

    def weights_snapshot(self) -> List[np.ndarray]:
        """Copy every weight vector, in population order."""
        return [ind.weights for ind in self.individuals]

    def seed_weights(self, weights: Sequence[float]) -> None:
        """Load one weight vector (e.g. recovered from a checkpoint) into every individual."""
        vector = np.asarray(weights, dtype=np.float64)
        for ind in self.individuals:
            ind.weights = vector

    def reset_scores(self) -> None:
        for ind in self.individuals:
            ind.reset()
