"""
Activation functions and their derivatives.
"""

from enum import Enum
from typing import Union

import numpy as np
from scipy.special import expit


class Activation(Enum):
    """Types of activation functions available."""

    SIGMOID = "sigmoid"
    TANH = "tanh"
    RELU = "relu"
    LINEAR = "linear"


def activate(activation: Activation, z: np.ndarray) -> np.ndarray:
    """
    Apply an activation function elementwise.

    Parameters
    ----------
    activation : Activation
        Activation variant.
    z : np.ndarray
        Pre-activation values.

    Returns
    -------
    a : np.ndarray
        Activated values, same shape as ``z``.
    """
    if activation is Activation.SIGMOID:
        return expit(z)
    if activation is Activation.TANH:
        return np.tanh(z)
    if activation is Activation.RELU:
        return np.maximum(z, 0.0)
    if activation is Activation.LINEAR:
        return np.array(z, dtype=float)
    raise ValueError(f"Unknown activation: {activation}")


def derivative(activation: Activation, z: np.ndarray, a: np.ndarray) -> np.ndarray:
    """
    Derivative of the activation with respect to its input.

    Parameters
    ----------
    activation : Activation
        Activation variant.
    z : np.ndarray
        Pre-activation values.
    a : np.ndarray
        ``activate(activation, z)``, reused where the derivative is cheaper
        in terms of the output.

    Returns
    -------
    grad : np.ndarray
        Elementwise derivative, same shape as ``z``.
    """
    if activation is Activation.SIGMOID:
        return a * (1.0 - a)
    if activation is Activation.TANH:
        return 1.0 - a**2
    if activation is Activation.RELU:
        return (z > 0).astype(float)
    if activation is Activation.LINEAR:
        return np.ones_like(z, dtype=float)
    raise ValueError(f"Unknown activation: {activation}")


def get_activation(name: Union[str, Activation]) -> Activation:
    """Look up an activation by name."""
    try:
        return Activation(name)
    except ValueError:
        available = ", ".join(a.value for a in Activation)
        raise ValueError(f"Unknown activation '{name}'. Available: {available}") from None
