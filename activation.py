"""
Neuron activation functions.

Every activation works on a scalar or a numpy array, so a whole layer can be
thresholded in one call.
"""

import numpy as np
from errors import ConfigurationError


class ReLU:
    description = "ReLU"

    def threshold(self, x):
        return np.maximum(0.0, x)


class ExpLU:
    """Exponential linear unit, identity for x >= 0 and alpha*(e^x - 1) below."""

    def __init__(self, alpha: float = 0.3):
        self.alpha = alpha
        self.description = f"ExpLU, alpha = {alpha}"

    def threshold(self, x):
        # expm1 on the clipped input keeps large positive values from overflowing
        out = np.where(x >= 0.0, x, self.alpha * np.expm1(np.minimum(x, 0.0)))
        return out if out.ndim else float(out)


class Sigmoid:
    """
    Logistic sigmoid. Inputs outside [-10, 10] saturate to 1.0 / 0.0.
    Use slope values < 1.0 to widen the curve.
    """

    LIMIT = 10.0

    def __init__(self, slope: float = 1.0):
        self.slope = slope
        self.description = f"Sigmoid, slope = {slope}, limits [-10.0, 10.0]"

    def threshold(self, x):
        x = np.asarray(x, dtype=np.float64)
        clipped = np.clip(x, -self.LIMIT, self.LIMIT)
        out = 1.0 / (1.0 + np.exp(-self.slope * clipped))
        out = np.where(x > self.LIMIT, 1.0, out)
        out = np.where(x < -self.LIMIT, 0.0, out)
        return out if out.ndim else float(out)


ACTIVATIONS = {
    "relu":    ReLU,
    "elu":     ExpLU,
    "sigmoid": Sigmoid,
}


def get_activation(name: str):
    """Build an activation from its config name."""
    try:
        return ACTIVATIONS[name.lower()]()
    except (KeyError, AttributeError):
        raise ConfigurationError(
            f"Unknown activation {name!r}, expected one of {sorted(ACTIVATIONS)}"
        ) from None
