"""
Regression scores.
"""

import numpy as np

from ..exceptions import DimensionMismatch


def neg_mean_squared_error(outputs, targets) -> float:
    """
    Negated mean squared error.

    The squared error of each sample is summed over its outputs and the
    result is averaged over samples, so the value is always <= 0 and higher
    is better.

    Parameters
    ----------
    outputs : array-like
        Predictions with shape [n_samples] or [n_samples, n_outputs].
    targets : array-like
        Targets with the same shape.

    Returns
    -------
    score : float
        Negative mean squared error.

    Examples
    --------
    >>> neg_mean_squared_error([[1.0], [2.0], [3.0]], [[2.0], [4.0], [3.0]])
    -1.6666666666666667
    """
    o = np.asarray(outputs, dtype=float)
    t = np.asarray(targets, dtype=float)
    if o.shape != t.shape:
        raise DimensionMismatch(
            f"Outputs of shape {o.shape} do not match targets {t.shape}",
            expected=t.shape,
            actual=o.shape,
        )
    if o.size == 0:
        raise ValueError("Cannot score empty outputs")
    o = o.reshape(len(o), -1)
    t = t.reshape(len(t), -1)
    return -float(np.sum((o - t) ** 2) / len(o))
