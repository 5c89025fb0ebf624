"""
Feed-forward neural networks.

This module provides fully connected networks trained by backpropagation
and gradient descent, together with their activation and cost functions.
"""

from .activations import Activation, activate, derivative, get_activation
from .costs import Cost, cost_gradient, cost_value, get_cost
from .model import Layer, NetworkModel, forward_pass
from .training import (
    DEFAULT_EPOCHS,
    DEFAULT_LEARNING_RATE,
    NetworkConfig,
    NetworkTrainer,
    train_network,
)

__all__ = [
    # Training
    "NetworkConfig",
    "NetworkTrainer",
    "train_network",
    "DEFAULT_LEARNING_RATE",
    "DEFAULT_EPOCHS",
    # Model
    "NetworkModel",
    "Layer",
    "forward_pass",
    # Activations
    "Activation",
    "activate",
    "derivative",
    "get_activation",
    # Costs
    "Cost",
    "cost_value",
    "cost_gradient",
    "get_cost",
]
