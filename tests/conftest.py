"""
Shared fixtures for the Genetic Snake tests.
"""
import os
import sys

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from network_state import NetworkState


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def make_state():
    """
    Build a state for `network` with every weight set to `weight`, every bias
    zero except the output layer's, which is `output_bias` when given.
    """
    def _make(network, weight=0.0, output_bias=None):
        weights = [np.full((l.size, l.fan_in), weight) for l in network.layers]
        bias    = [np.zeros(l.size) for l in network.layers]
        if output_bias is not None:
            bias[-1] = np.asarray(output_bias, dtype=np.float64)
        return NetworkState(weights, bias, network.dimension)
    return _make
