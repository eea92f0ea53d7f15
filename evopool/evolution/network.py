"""
Fixed-topology feed-forward network evolved by EvoPool.

The optimizer never trains these networks with gradients; it only reads and
writes their parameters as one flat vector and runs forward inference. The
vector layout follows ``nn.Module.parameters()`` order, so the weights and
bias of one layer sit next to each other.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

import numpy as np
import torch
from torch import nn
from torch.nn.utils import parameters_to_vector, vector_to_parameters


def layer_sizes(input_size: int, hidden_size: int, layers: int, output_size: int) -> List[int]:
    """Return neuron counts per layer; ``layers`` counts the input and output layers too."""
    return [input_size] + [hidden_size] * (layers - 2) + [output_size]


class FeedForwardNet(nn.Module):
    """Fully connected sigmoid network with float64 parameters."""

    def __init__(
        self,
        input_size: int,
        hidden_size: int,
        layers: int,
        output_size: int,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        super().__init__()
        if layers < 2:
            raise ValueError(f"A network needs at least an input and an output layer, got layers={layers}.")
        if min(input_size, hidden_size, output_size) < 1:
            raise ValueError("Layer sizes must be positive.")
        sizes = layer_sizes(input_size, hidden_size, layers, output_size)
        self.sizes = sizes
        self.linears = nn.ModuleList(
            nn.Linear(fan_in, fan_out, dtype=torch.float64) for fan_in, fan_out in zip(sizes[:-1], sizes[1:])
        )
        self.reset_parameters(rng or np.random.default_rng())

    def reset_parameters(self, rng: np.random.Generator) -> None:
        """Draw every weight and bias uniformly from ``±1/sqrt(fan_in)``."""
        with torch.no_grad():
            for linear in self.linears:
                bound = 1.0 / math.sqrt(linear.in_features)
                linear.weight.copy_(torch.from_numpy(rng.uniform(-bound, bound, size=tuple(linear.weight.shape))))
                linear.bias.copy_(torch.from_numpy(rng.uniform(-bound, bound, size=tuple(linear.bias.shape))))

    @property
    def parameter_count(self) -> int:
        return sum(param.numel() for param in self.parameters())

    def forward(self, inputs: torch.Tensor) -> torch.Tensor:
        out = inputs
        for linear in self.linears:
            out = torch.sigmoid(linear(out))
        return out

    def infer(self, inputs: Sequence[float]) -> np.ndarray:
        """Run one forward pass on a single input vector."""
        with torch.no_grad():
            tensor = torch.as_tensor(np.asarray(inputs, dtype=np.float64))
            return self.forward(tensor).numpy().copy()

    def get_weights(self) -> np.ndarray:
        with torch.no_grad():
            return parameters_to_vector(self.parameters()).numpy().copy()

    def set_weights(self, weights: Sequence[float]) -> None:
        vector = torch.tensor(np.asarray(weights, dtype=np.float64))
        with torch.no_grad():
            vector_to_parameters(vector, self.parameters())
