"""
Detached snapshot of a network's weights and biases.

Nested form:
  weights[layer]  – float64 array, shape (neurons, fan_in), one row per neuron
  bias[layer]     – float64 array, shape (neurons,)

Flat form (used by crossover): layer by layer, neuron by neuron, the neuron's
weights followed by its bias. Its length is the network dimension.
"""

import numpy as np
from errors import ShapeMismatchError


class NetworkState:

    def __init__(self, weights: list, bias: list, dimension: int):
        if len(weights) != len(bias):
            raise ShapeMismatchError(
                f"weights describe {len(weights)} layers but bias describes {len(bias)}")

        self.weights = [np.array(w, dtype=np.float64, ndmin=2) for w in weights]
        self.bias    = [np.array(b, dtype=np.float64, ndmin=1) for b in bias]
        self.dimension = int(dimension)

        for layer, (w, b) in enumerate(zip(self.weights, self.bias)):
            if w.shape[0] != b.shape[0]:
                raise ShapeMismatchError(
                    f"Layer #{layer}: {w.shape[0]} weight rows but {b.shape[0]} biases")

        actual = sum(w.size + b.size for w, b in zip(self.weights, self.bias))
        if actual != self.dimension:
            raise ShapeMismatchError(
                f"Declared dimension {self.dimension} does not match the "
                f"{actual} weights and biases supplied")

    # ──────────────────────────────────────────────────────────────────────────

    @property
    def shape(self) -> tuple:
        """(neurons, fan_in) for every layer."""
        return tuple(w.shape for w in self.weights)

    def flatten(self) -> np.ndarray:
        """All parameters as one contiguous vector in crossover order."""
        parts = [np.hstack([w, b[:, None]]).ravel()
                 for w, b in zip(self.weights, self.bias)]
        if not parts:
            return np.zeros(0, dtype=np.float64)
        return np.concatenate(parts)

    @classmethod
    def unflatten(cls, flat, shape) -> "NetworkState":
        """Inverse of flatten() for the given per-layer (neurons, fan_in) shape."""
        flat = np.asarray(flat, dtype=np.float64).ravel()
        dimension = sum(n * (fan_in + 1) for n, fan_in in shape)
        if flat.size != dimension:
            raise ShapeMismatchError(
                f"Flat state has {flat.size} values, shape requires {dimension}")

        weights, bias = [], []
        offset = 0
        for n, fan_in in shape:
            block = flat[offset:offset + n * (fan_in + 1)].reshape(n, fan_in + 1)
            weights.append(block[:, :fan_in].copy())
            bias.append(block[:, fan_in].copy())
            offset += block.size
        return cls(weights, bias, dimension)

    def copy(self) -> "NetworkState":
        return NetworkState([w.copy() for w in self.weights],
                            [b.copy() for b in self.bias],
                            self.dimension)

    def __eq__(self, other):
        if not isinstance(other, NetworkState):
            return NotImplemented
        return (self.shape == other.shape
                and all(np.array_equal(a, b) for a, b in zip(self.weights, other.weights))
                and all(np.array_equal(a, b) for a, b in zip(self.bias, other.bias)))

    __hash__ = None

    def __repr__(self):
        lines = [""]
        for layer, (n, fan_in) in enumerate(self.shape):
            lines.append(f"Layer #{layer}, {n} Neurons [{fan_in}i, {fan_in}w, 1b]")
        lines.append(f"Total Weights and Biases: {self.dimension}")
        return "\n".join(lines)
