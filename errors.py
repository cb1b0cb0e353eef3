"""
Named failures for Genetic Snake.

Collisions and move timeouts are not errors; they are terminal states of a
snake's survival loop (see snake.SnakeState).
"""


class SnakeEvolutionError(Exception):
    """Base class for every failure raised by this package."""


class ConfigurationError(SnakeEvolutionError, ValueError):
    """Invalid construction parameter, e.g. a mutation probability outside [0, 1]."""


class ShapeMismatchError(SnakeEvolutionError, ValueError):
    """A network state or input vector disagrees with a network's fixed topology."""


class UninitializedStateError(SnakeEvolutionError, RuntimeError):
    """Network state or weights were read before any had been set."""


class InvariantViolation(SnakeEvolutionError, RuntimeError):
    """The population engine was driven out of order, e.g. breeding with no mates."""
