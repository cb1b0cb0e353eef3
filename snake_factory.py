"""
Builds snakes of one configured species, each with a correctly shaped brain.
"""

import numpy as np
from errors import ConfigurationError
from activation import get_activation
from neural_network import NeuralNetwork
from species import get_species
from snake import Snake
from config import GRID_WIDTH, GRID_HEIGHT, SPECIES, ACTIVATION, TOPOLOGIES, MIN_GRID_SIZE


class SnakeFactory:

    def __init__(self, species_name: str = SPECIES,
                 width: int = GRID_WIDTH, height: int = GRID_HEIGHT,
                 activation: str = ACTIVATION, rng=None):
        if width < MIN_GRID_SIZE or height < MIN_GRID_SIZE:
            raise ConfigurationError(
                f"A {width}x{height} grid is too small to hatch snakes, "
                f"both sides need at least {MIN_GRID_SIZE} cells")
        self.species    = get_species(species_name, width, height)
        self.activation = get_activation(activation)
        self.rng        = rng if rng is not None else np.random.default_rng()

        inputs, outputs, hidden = TOPOLOGIES[self.species.name]
        if (inputs, outputs) != (self.species.inputs, self.species.outputs):
            raise ConfigurationError(
                f"Topology for {self.species.name!r} has {inputs} inputs / {outputs} "
                f"outputs, the species needs {self.species.inputs} / {self.species.outputs}")
        self.topology = (inputs, outputs, tuple(hidden))

    @property
    def width(self) -> int:
        return self.species.width

    @property
    def height(self) -> int:
        return self.species.height

    def new_brain(self) -> NeuralNetwork:
        inputs, outputs, hidden = self.topology
        return NeuralNetwork(self.activation, inputs, outputs, *hidden)

    def create(self, state=None, body=None, rng=None) -> Snake:
        """
        A new snake. Its brain gets `state` when given, otherwise a random
        state; its body is `body` when given, otherwise a random hatchling.
        """
        rng = rng if rng is not None else self.rng
        brain = self.new_brain()
        if state is None:
            brain.set_random_state(rng)
        else:
            brain.set_state(state)
        return Snake(brain, self.species, rng, body=body)
