"""
Margin classifiers.

This module provides a soft-margin kernel support vector machine trained by
Sequential Minimal Optimization.
"""

from .model import SVMModel
from .smo import SMOSolution, dual_objective, smo
from .training import (
    DEFAULT_MAX_ITER,
    DEFAULT_PENALTY,
    DEFAULT_TOL,
    SVMConfig,
    SVMTrainer,
    train_svm,
)

__all__ = [
    # Training
    "SVMConfig",
    "SVMTrainer",
    "train_svm",
    "DEFAULT_PENALTY",
    "DEFAULT_TOL",
    "DEFAULT_MAX_ITER",
    # Model
    "SVMModel",
    # Optimizer
    "smo",
    "SMOSolution",
    "dual_objective",
]
