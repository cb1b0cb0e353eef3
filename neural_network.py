"""
Neural Network Brain for Genetic Snake.

Fixed topology, fully connected, feed-forward:
  1. the first layer has hidden_layer_sizes[0] neurons, each with number_of_inputs inputs
  2. every later hidden layer takes the previous layer's outputs as its inputs
  3. the final layer has number_of_outputs neurons

Each neuron also has a hidden "always 1.0" input whose weight is its bias.
"""

import numpy as np
from errors import ShapeMismatchError, UninitializedStateError
from network_state import NetworkState


class Layer:
    """One row of `weights` per neuron; `bias` holds one value per neuron."""

    __slots__ = ("size", "fan_in", "activation", "weights", "bias")

    def __init__(self, size: int, fan_in: int, activation):
        self.size       = size
        self.fan_in     = fan_in
        self.activation = activation
        self.weights    = None
        self.bias       = None

    def think(self, inputs: np.ndarray) -> np.ndarray:
        return self.activation.threshold(self.bias + self.weights @ inputs)


class NeuralNetwork:

    def __init__(self, activation, number_of_inputs: int, number_of_outputs: int,
                 *hidden_layer_sizes: int):
        self.activation        = activation
        self.number_of_inputs  = number_of_inputs
        self.number_of_outputs = number_of_outputs

        self.layers = []
        fan_in = number_of_inputs
        for size in (*hidden_layer_sizes, number_of_outputs):
            self.layers.append(Layer(size, fan_in, activation))
            fan_in = size

        # account for the bias weight of every neuron
        self.dimension = sum(l.size * (l.fan_in + 1) for l in self.layers)
        self._state = None

    @property
    def shape(self) -> tuple:
        return tuple((l.size, l.fan_in) for l in self.layers)

    # ──────────────────────────────────────────────────────────────────────────

    def set_random_state(self, rng) -> NetworkState:
        """Draw every weight and bias uniformly from [-1, 1]."""
        weights, bias = [], []
        for layer in self.layers:
            weights.append(rng.uniform(-1.0, 1.0, size=(layer.size, layer.fan_in)))
            bias.append(rng.uniform(-1.0, 1.0, size=layer.size))
        state = NetworkState(weights, bias, self.dimension)
        self._load(state)
        return state

    def set_state(self, state: NetworkState):
        if state.dimension != self.dimension:
            raise ShapeMismatchError(
                "The required dimension does not match the value provided in the "
                f"network state, supplied: {state.dimension}, required: {self.dimension}")
        if len(state.weights) != len(self.layers):
            raise ShapeMismatchError(
                f"Incorrect layer count in the network state, supplied: "
                f"{len(state.weights)}, required: {len(self.layers)}")
        for i, ((n, fan_in), layer) in enumerate(zip(state.shape, self.layers)):
            if n != layer.size:
                raise ShapeMismatchError(
                    f"Incorrect neuron count for layer #{i}, supplied: {n}, required: {layer.size}")
            if fan_in != layer.fan_in:
                raise ShapeMismatchError(
                    f"Incorrect number of weights for layer #{i}, supplied: {fan_in}, "
                    f"required: {layer.fan_in}")

        self._load(state.copy())

    def get_state(self) -> NetworkState:
        if self._state is None:
            raise UninitializedStateError("No network state has been set")
        return self._state.copy()

    @property
    def has_state(self) -> bool:
        return self._state is not None

    def _load(self, state: NetworkState):
        self._state = state
        for layer, w, b in zip(self.layers, state.weights, state.bias):
            layer.weights = w
            layer.bias    = b

    # ──────────────────────────────────────────────────────────────────────────

    def think(self, inputs) -> np.ndarray:
        """
        Run one forward pass.

        Args:
            inputs: sequence of number_of_inputs floats

        Returns:
            float64 array of shape (number_of_outputs,)
        """
        x = np.asarray(inputs, dtype=np.float64)
        if x.shape != (self.number_of_inputs,):
            raise ShapeMismatchError(
                f"Wrong number of network inputs, received: {x.size}, "
                f"expected: {self.number_of_inputs}")
        if self._state is None:
            raise UninitializedStateError("No network state has been set")

        for layer in self.layers:
            x = layer.think(x)
        return np.asarray(x, dtype=np.float64)

    def summary(self) -> str:
        lines = [f"NeuralNetwork ({self.activation.description}, "
                 f"{self.number_of_inputs} inputs, dimension {self.dimension})"]
        for i, layer in enumerate(self.layers):
            lines.append(f"  Layer #{i}: {layer.size:>3} neurons x {layer.fan_in:>3} inputs")
        return "\n".join(lines)
