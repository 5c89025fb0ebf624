"""
Common model and trainer interfaces.

Model families do not share a base class. Anything that provides
``predict`` and ``n_features`` is a :class:`Model`; anything that turns a
:class:`~learnkit.data.Dataset` into a :class:`TrainingResult` is a
:class:`Trainer`.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from .data import Dataset
from .exceptions import TrainingError


@runtime_checkable
class Model(Protocol):
    """Capability shared by every trained model."""

    @property
    def n_features(self) -> int:
        """Feature dimension the model was trained on."""
        ...

    def predict(self, features) -> Any:
        """Predict the label for one feature vector."""
        ...


@runtime_checkable
class Trainer(Protocol):
    """Capability shared by every training procedure."""

    def train(self, dataset: Dataset) -> "TrainingResult":
        ...


@dataclass
class TrainingResult:
    """Container for the outcome of a training run.

    Attributes
    ----------
    model : Model
        Trained model. For a non-fatal ``error`` this is the best model found;
        for a fatal one it holds the last known-good parameters.
    error : TrainingError, optional
        Condition reported by the trainer, or None on clean convergence.
    n_iterations : int
        Optimizer sweeps (SVM) or epochs (network) actually run.
    history : Dict[str, List[float]]
        Per-iteration diagnostics, e.g. ``train_loss``.
    elapsed_time : float
        Computation time in seconds.
    """

    model: Model
    error: Optional[TrainingError] = None
    n_iterations: int = 0
    history: Dict[str, List[float]] = field(default_factory=dict)
    elapsed_time: float = 0.0

    @property
    def converged(self) -> bool:
        """True if training finished without any reported condition."""
        return self.error is None

    @property
    def ok(self) -> bool:
        """True unless a fatal condition aborted training."""
        return self.error is None or not self.error.fatal

    def unwrap(self) -> Model:
        """
        Return the model, raising the reported error if it was fatal.

        Raises
        ------
        TrainingError
            The fatal condition recorded in ``error``.
        """
        if not self.ok:
            raise self.error
        return self.model
