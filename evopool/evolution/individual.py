"""
Representation of EvoPool individuals.

An individual owns one network model and the fitness bookkeeping gathered
while a generation is evaluated. Its weight vector is only ever overwritten,
never resized: the length is fixed by the network topology at creation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from evopool.exceptions import EvoPoolRuntimeError

from .network import FeedForwardNet


def generate_name(index: int, prefix: str = "net") -> str:
    """Generate the display name of the individual created at ``index``."""
    return f"{prefix}-{index:03d}"


@dataclass
class Individual:
    """Candidate solution: a network plus per-generation and cumulative scores."""

    network: FeedForwardNet = field(repr=False)
    name: str
    generation_score: float = 0.0
    games_played: int = 0
    cumulative_score: float = 0.0

    @property
    def weights(self) -> np.ndarray:
        return self.network.get_weights()

    @weights.setter
    def weights(self, vector: Sequence[float]) -> None:
        expected = self.network.parameter_count
        if len(vector) != expected:
            raise EvoPoolRuntimeError(
                f"Weight vector for {self.name} must have {expected} genes, got {len(vector)}.",
                context={"individual": self.name, "expected": expected, "received": len(vector)},
            )
        self.network.set_weights(vector)

    @property
    def gene_count(self) -> int:
        return self.network.parameter_count

    @property
    def average_score(self) -> float:
        if self.games_played == 0:
            return self.generation_score
        return self.generation_score / self.games_played

    def infer(self, inputs: Sequence[float]) -> np.ndarray:
        return self.network.infer(inputs)

    def award(self, points: float) -> None:
        """Credit one match result, used by challenge evaluation."""
        self.generation_score += points
        self.cumulative_score += points
        self.games_played += 1

    def reset(self) -> None:
        """Clear the transient per-generation counters."""
        self.generation_score = 0.0
        self.games_played = 0
