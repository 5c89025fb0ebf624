"""
Cost functions for network training.

Costs are averaged over the samples of a batch. Gradients are taken with
respect to the network output for a single sample, i.e. they are not divided
by the batch size; the trainer does the averaging.
"""

from enum import Enum
from typing import Union

import numpy as np

# Outputs are clipped away from 0 and 1 before taking logarithms
LOG_CLIP = 1e-12


class Cost(Enum):
    """Types of cost functions available."""

    SQUARED_ERROR = "squared_error"  # 1/2 ||a - y||^2
    CROSS_ENTROPY = "cross_entropy"  # -sum y log a + (1 - y) log(1 - a)


def cost_value(cost: Cost, outputs: np.ndarray, targets: np.ndarray) -> float:
    """
    Mean cost over the rows of ``outputs``.

    Parameters
    ----------
    cost : Cost
        Cost variant.
    outputs : np.ndarray
        Network outputs with shape [n_samples, n_outputs].
    targets : np.ndarray
        Targets with shape [n_samples, n_outputs].

    Returns
    -------
    value : float
        Mean per-sample cost.
    """
    n = max(outputs.shape[0], 1)
    if cost is Cost.SQUARED_ERROR:
        return float(0.5 * np.sum((outputs - targets) ** 2) / n)
    if cost is Cost.CROSS_ENTROPY:
        a = np.clip(outputs, LOG_CLIP, 1.0 - LOG_CLIP)
        return float(-np.sum(targets * np.log(a) + (1.0 - targets) * np.log(1.0 - a)) / n)
    raise ValueError(f"Unknown cost: {cost}")


def cost_gradient(cost: Cost, outputs: np.ndarray, targets: np.ndarray) -> np.ndarray:
    """Per-sample gradient of the cost with respect to ``outputs``."""
    if cost is Cost.SQUARED_ERROR:
        return outputs - targets
    if cost is Cost.CROSS_ENTROPY:
        a = np.clip(outputs, LOG_CLIP, 1.0 - LOG_CLIP)
        return (a - targets) / (a * (1.0 - a))
    raise ValueError(f"Unknown cost: {cost}")


def get_cost(name: Union[str, Cost]) -> Cost:
    """Look up a cost function by name."""
    try:
        return Cost(name)
    except ValueError:
        available = ", ".join(c.value for c in Cost)
        raise ValueError(f"Unknown cost '{name}'. Available: {available}") from None
