"""
Genetic operators for Genetic Snake.

A network's state is read as one flat sequence of parameters (see
NetworkState.flatten): layer by layer, neuron by neuron, the neuron's weights
followed by its bias. Crossover splits that sequence at a single pivot.
"""

import numpy as np
from errors import ShapeMismatchError
from network_state import NetworkState
from config import MUTATION_DIVISOR

# ──────────────────────────────────────────────────────────────────────────────
# Mutation
# ──────────────────────────────────────────────────────────────────────────────

def mutate(values, threshold: float, rng) -> np.ndarray:
    """
    Perturb each value with probability 1 - threshold by adding
    N(0, 1) / MUTATION_DIVISOR, clamping the result to [-1, 1].
    Untouched values are copied as is.
    """
    values = np.asarray(values, dtype=np.float64)
    out = values.copy()
    mask = rng.random(values.shape) >= threshold
    count = int(mask.sum())
    if count:
        noise = rng.standard_normal(count) / MUTATION_DIVISOR
        out[mask] = np.clip(values[mask] + noise, -1.0, 1.0)
    return out


# ──────────────────────────────────────────────────────────────────────────────
# Crossover
# ──────────────────────────────────────────────────────────────────────────────

def crossover(mother: NetworkState, father: NetworkState, threshold: float,
              rng, pivot: int = None) -> tuple:
    """
    Single-point crossover of two network states.

    The daughter takes the mother's values before the pivot and the father's
    from it on; the son takes the complement. Every value is then passed
    through mutate().

    Returns:
        (daughter, son) as NetworkStates with the parents' shape
    """
    if mother.shape != father.shape:
        raise ShapeMismatchError(
            f"Parents have different shapes, mother: {mother.shape}, father: {father.shape}")

    dimension = mother.dimension
    if pivot is None:
        pivot = int(rng.integers(dimension))
    elif not 0 <= pivot <= dimension:
        raise ShapeMismatchError(f"Pivot {pivot} is outside [0, {dimension}]")

    m = mother.flatten()
    f = father.flatten()
    daughter = np.concatenate([m[:pivot], f[pivot:]])
    son      = np.concatenate([f[:pivot], m[pivot:]])

    return (NetworkState.unflatten(mutate(daughter, threshold, rng), mother.shape),
            NetworkState.unflatten(mutate(son, threshold, rng), mother.shape))
