"""
learnkit
========

A small supervised-learning toolkit with a uniform train/predict contract
over two model families.

Main Features
-------------
- Immutable dense vectors and matrices with strict shape checking
- Kernel functions (linear, polynomial, hyperbolic tangent, RBF, ...)
- Soft-margin kernel SVM trained by Sequential Minimal Optimization
- Feed-forward networks trained by backpropagation and gradient descent
- Classification and regression scores

Quick Start
-----------
>>> from learnkit import Dataset, Kernel, train_svm, train_network
>>>
>>> # Margin classifier
>>> data = Dataset.from_pairs([(x, 1 if x > 0 else -1) for x in range(-1000, 1000, 100)])
>>> result = train_svm(data, Kernel.hyper_tan(), penalty=10.0)
>>> result.model.predict([500.0])
1.0
>>>
>>> # Perceptron learning an AND gate
>>> gate = Dataset([[0, 0], [0, 1], [1, 0], [1, 1]], [0, 0, 0, 1])
>>> result = train_network(gate, [2, 1], epochs=2000, learning_rate=1.0,
...                        cost="cross_entropy", random_state=0)
>>> round(result.model.predict([1, 1])[0])
1

Trainer-level problems do not raise: ``result.error`` holds a
``DidNotConverge`` (SVM iteration cap reached, model still usable) or a
``NonFiniteGradient`` (network training aborted, last good weights kept).
"""

__version__ = "0.1.0"
__author__ = "learnkit developers"

# Errors
from .exceptions import (
    DidNotConverge,
    DimensionMismatch,
    EmptyDataset,
    InvalidData,
    LearnkitError,
    NonFiniteGradient,
    PredictionError,
    TrainingError,
)

# Numeric substrate and data
from .data import Dataset
from .linalg import Matrix, Vector, as_matrix, as_vector

# Kernels
from .kernels import Kernel, KernelType, get_kernel, list_kernels

# Common interface
from .model import Model, Trainer, TrainingResult

# Margin classifiers
from .svm import SVMConfig, SVMModel, SVMTrainer, train_svm

# Networks
from .network import (
    Activation,
    Cost,
    Layer,
    NetworkConfig,
    NetworkModel,
    NetworkTrainer,
    train_network,
)

# Metrics
from .metrics import (
    accuracy,
    evaluate_model,
    f1,
    neg_mean_squared_error,
    precision,
    recall,
    row_accuracy,
)

# Parallel training
from .parallel import train_parallel

__all__ = [
    # Version
    "__version__",
    # Errors
    "LearnkitError",
    "PredictionError",
    "DimensionMismatch",
    "TrainingError",
    "EmptyDataset",
    "InvalidData",
    "DidNotConverge",
    "NonFiniteGradient",
    # Numeric substrate
    "Vector",
    "Matrix",
    "as_vector",
    "as_matrix",
    "Dataset",
    # Kernels
    "Kernel",
    "KernelType",
    "get_kernel",
    "list_kernels",
    # Interface
    "Model",
    "Trainer",
    "TrainingResult",
    # SVM
    "SVMConfig",
    "SVMTrainer",
    "SVMModel",
    "train_svm",
    # Network
    "NetworkConfig",
    "NetworkTrainer",
    "NetworkModel",
    "Layer",
    "Activation",
    "Cost",
    "train_network",
    # Metrics
    "accuracy",
    "row_accuracy",
    "precision",
    "recall",
    "f1",
    "neg_mean_squared_error",
    "evaluate_model",
    # Parallel
    "train_parallel",
]
