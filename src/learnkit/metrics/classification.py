"""
Classification scores.

All scores follow the convention that higher is better. The binary scores
(precision, recall, F1) expect labels encoded as 0 and 1.
"""

from typing import Sequence, Tuple

import numpy as np

from ..exceptions import DimensionMismatch


def _paired(outputs, targets) -> Tuple[np.ndarray, np.ndarray]:
    o = np.asarray(outputs)
    t = np.asarray(targets)
    if len(o) != len(t):
        raise DimensionMismatch(
            f"Got {len(o)} outputs but {len(t)} targets",
            expected=len(t),
            actual=len(o),
        )
    if len(o) == 0:
        raise ValueError("Cannot score empty outputs")
    return o, t


def _binary_counts(outputs, targets, score: str) -> Tuple[float, float, float]:
    o, t = _paired(outputs, targets)
    if not (np.all(np.isin(o, (0, 1))) and np.all(np.isin(t, (0, 1)))):
        raise ValueError(f"{score} must be used for 2 class classification with 0/1 labels")
    tp = float(np.sum((o == 1) & (t == 1)))
    fp = float(np.sum((o == 1) & (t == 0)))
    fn = float(np.sum((o == 0) & (t == 1)))
    return tp, fp, fn


def accuracy(outputs: Sequence, targets: Sequence) -> float:
    """
    Fraction of outputs equal to their target.

    Parameters
    ----------
    outputs : Sequence
        Predicted labels.
    targets : Sequence
        True labels.

    Returns
    -------
    accuracy : float
        Value in [0, 1].

    Examples
    --------
    >>> accuracy([1, 2, 3, 4, 5, 6], [1, 2, 3, 3, 5, 1])
    0.6666666666666666
    """
    o, t = _paired(outputs, targets)
    if o.ndim > 1 or t.ndim > 1:
        return row_accuracy(o, t)
    return float(np.mean(o == t))


def row_accuracy(outputs, targets) -> float:
    """Fraction of output rows that match their target row exactly."""
    o, t = _paired(outputs, targets)
    o = o.reshape(len(o), -1)
    t = t.reshape(len(t), -1)
    if o.shape != t.shape:
        raise DimensionMismatch(
            f"Output rows of shape {o.shape} do not match targets {t.shape}",
            expected=t.shape,
            actual=o.shape,
        )
    return float(np.mean(np.all(o == t, axis=1)))


def precision(outputs: Sequence, targets: Sequence) -> float:
    """
    Precision for 2 class classification.

    true-positive / (true-positive + false-positive); 0.0 when nothing was
    predicted positive.
    """
    tp, fp, _ = _binary_counts(outputs, targets, "precision")
    return tp / (tp + fp) if tp + fp > 0 else 0.0


def recall(outputs: Sequence, targets: Sequence) -> float:
    """
    Recall for 2 class classification.

    true-positive / (true-positive + false-negative); 0.0 when there are no
    positive targets.
    """
    tp, _, fn = _binary_counts(outputs, targets, "recall")
    return tp / (tp + fn) if tp + fn > 0 else 0.0


def f1(outputs: Sequence, targets: Sequence) -> float:
    """
    F1 score for 2 class classification.

    2 * precision * recall / (precision + recall); 0.0 when both are zero.
    """
    tp, fp, fn = _binary_counts(outputs, targets, "f1-score")
    p = tp / (tp + fp) if tp + fp > 0 else 0.0
    r = tp / (tp + fn) if tp + fn > 0 else 0.0
    return 2 * p * r / (p + r) if p + r > 0 else 0.0
