"""
Error types raised or reported by learnkit.

Caller mistakes (bad shapes, empty or malformed data) are raised immediately.
Trainer-level conditions (:class:`DidNotConverge`, :class:`NonFiniteGradient`)
are returned next to a usable model in a
:class:`~learnkit.model.TrainingResult` and also emitted through
:mod:`warnings`, so they are never silent.
"""

from typing import Any, Optional


class LearnkitError(Exception):
    """Base class for all learnkit errors."""


class PredictionError(LearnkitError):
    """A model could not produce a prediction."""


class DimensionMismatch(PredictionError, ValueError):
    """
    Operand shapes are incompatible.

    Raised by the linear algebra layer, kernels, dataset construction and
    ``Model.predict``. Always a programming error on the caller's side.

    Parameters
    ----------
    message : str
        Human readable description.
    expected : Any, optional
        Expected shape or length.
    actual : Any, optional
        Shape or length actually received.
    """

    def __init__(self, message: str, expected: Any = None, actual: Any = None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class TrainingError(LearnkitError):
    """Base class for training failures."""

    #: Whether the condition leaves the caller without a usable model.
    fatal = True


class EmptyDataset(TrainingError, ValueError):
    """Training was invoked with zero examples."""


class InvalidData(TrainingError, ValueError):
    """Training data is malformed (non-finite values, unsupported labels)."""


class DidNotConverge(TrainingError, RuntimeWarning):
    """
    The optimizer hit its iteration cap before meeting its tolerance.

    Non-fatal: the best model found so far is returned alongside it.
    """

    fatal = False

    def __init__(self, message: str, n_iterations: Optional[int] = None):
        super().__init__(message)
        self.n_iterations = n_iterations


class NonFiniteGradient(TrainingError, FloatingPointError, RuntimeWarning):
    """
    Network training produced NaN or infinite values.

    The run is aborted; the result holds a model built from the last
    known-good weights. Emitted through :mod:`warnings` like
    :class:`DidNotConverge`.
    """

    def __init__(self, message: str, epoch: Optional[int] = None):
        super().__init__(message)
        self.epoch = epoch
