"""
Scoring trained models against datasets.
"""

from typing import Dict, Optional

import numpy as np

from ..data import Dataset
from ..model import Model
from .classification import row_accuracy
from .regression import neg_mean_squared_error


def evaluate_model(model: Model, dataset: Dataset, threshold: Optional[float] = None) -> Dict[str, float]:
    """
    Score a model on every sample of a dataset.

    Parameters
    ----------
    model : Model
        Any trained model.
    dataset : Dataset
        Samples to predict.
    threshold : float, optional
        If given, outputs are mapped to 1 when ``>= threshold`` and 0
        otherwise before computing accuracy (e.g. 0.5 for sigmoid outputs).

    Returns
    -------
    scores : Dict[str, float]
        ``accuracy``, ``neg_mean_squared_error`` and ``n_errors``.
    """
    if dataset.is_empty():
        raise ValueError("Cannot evaluate on an empty dataset")

    outputs = np.array(
        [np.atleast_1d(np.asarray(model.predict(x), dtype=float)) for x, _ in dataset]
    )
    targets = dataset.targets.data

    labels = outputs if threshold is None else (outputs >= threshold).astype(float)
    acc = row_accuracy(labels, targets)

    return {
        "accuracy": acc,
        "neg_mean_squared_error": neg_mean_squared_error(outputs, targets),
        "n_errors": int(round((1.0 - acc) * len(dataset))),
    }
