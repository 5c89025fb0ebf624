"""
Evaluation metrics.

This module provides scores for comparing predictions with targets. All
scores follow the convention that higher is better.
"""

from .classification import (
    accuracy,
    f1,
    precision,
    recall,
    row_accuracy,
)
from .evaluation import evaluate_model
from .regression import neg_mean_squared_error

__all__ = [
    # Classification
    "accuracy",
    "row_accuracy",
    "precision",
    "recall",
    "f1",
    # Regression
    "neg_mean_squared_error",
    # Models
    "evaluate_model",
]
