"""
Tests for the feed-forward network model and its flat weight vector.
"""

import numpy as np
import pytest

from evopool.evolution import FeedForwardNet
from evopool.evolution.network import layer_sizes


def test_layer_sizes_count_input_and_output_layers() -> None:
    assert layer_sizes(2, 3, 3, 1) == [2, 3, 1]
    assert layer_sizes(2, 4, 5, 1) == [2, 4, 4, 4, 1]
    assert layer_sizes(3, 9, 2, 2) == [3, 2]


def test_weights_round_trip_through_the_flat_vector() -> None:
    net = FeedForwardNet(2, 3, 4, 1, rng=np.random.default_rng(0))
    vector = np.arange(net.parameter_count, dtype=np.float64) / 10.0
    net.set_weights(vector)
    np.testing.assert_array_equal(net.get_weights(), vector)


def test_get_weights_returns_a_copy() -> None:
    net = FeedForwardNet(2, 2, 3, 1, rng=np.random.default_rng(0))
    vector = net.get_weights()
    vector[:] = 0.0
    assert net.get_weights().any()


def test_infer_returns_sigmoid_outputs() -> None:
    net = FeedForwardNet(2, 2, 3, 2, rng=np.random.default_rng(1))
    output = net.infer([1.0, 0.0])
    assert output.shape == (2,)
    assert ((output > 0.0) & (output < 1.0)).all()


def test_initialisation_respects_fan_in_bound() -> None:
    net = FeedForwardNet(4, 8, 3, 1, rng=np.random.default_rng(2))
    assert np.abs(net.get_weights()).max() <= 0.5


def test_network_needs_input_and_output_layers() -> None:
    with pytest.raises(ValueError):
        FeedForwardNet(2, 2, 1, 1)
