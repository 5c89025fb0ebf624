"""
Labeled datasets.

A :class:`Dataset` pairs a feature matrix (one row per sample) with a target
matrix (one row per sample, one column per output). Scalar labels are stored
as a single target column.
"""

from typing import Iterable, Iterator, Sequence, Tuple, Union

import numpy as np

from ..exceptions import DimensionMismatch
from ..linalg import Matrix, Vector

ArrayLike = Union[Sequence, np.ndarray, Matrix, Vector]


def _as_2d(values: ArrayLike, name: str) -> Matrix:
    if isinstance(values, Matrix):
        return values
    if isinstance(values, Vector):
        return Matrix.from_column(values)
    if isinstance(values, np.ndarray) and values.ndim == 1:
        return Matrix.from_column(values)
    if not isinstance(values, np.ndarray):
        values = list(values)
        if values and all(np.ndim(v) == 0 for v in values):
            return Matrix.from_column([float(v) for v in values])
    try:
        return Matrix(values)
    except DimensionMismatch as exc:
        raise DimensionMismatch(f"Invalid {name}: {exc}", exc.expected, exc.actual) from exc


class Dataset:
    """
    Ordered collection of (feature vector, label) pairs.

    Parameters
    ----------
    features : array-like
        Feature matrix with shape [n_samples, n_features]. A flat sequence is
        treated as a single feature column.
    targets : array-like
        Targets with shape [n_samples] or [n_samples, n_outputs].

    Raises
    ------
    DimensionMismatch
        If rows are ragged or the number of targets differs from the number
        of feature rows.

    Examples
    --------
    >>> data = Dataset([[0.0, 1.0], [1.0, 0.0]], [1.0, -1.0])
    >>> data.n_samples, data.n_features, data.n_outputs
    (2, 2, 1)
    """

    __slots__ = ("_features", "_targets")

    def __init__(self, features: ArrayLike, targets: ArrayLike):
        features = _as_2d(features, "features")
        targets = _as_2d(targets, "targets")
        if features.rows != targets.rows:
            raise DimensionMismatch(
                f"Got {features.rows} feature rows but {targets.rows} targets",
                expected=features.rows,
                actual=targets.rows,
            )
        object.__setattr__(self, "_features", features)
        object.__setattr__(self, "_targets", targets)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[ArrayLike, ArrayLike]]) -> "Dataset":
        """
        Build a dataset from ``(features, label)`` pairs.

        Scalars are accepted for both the features and the label.
        """
        features, targets = [], []
        for x, y in pairs:
            features.append(np.atleast_1d(np.asarray(x, dtype=np.float64)))
            targets.append(np.atleast_1d(np.asarray(y, dtype=np.float64)))
        if not features:
            return cls(np.zeros((0, 0)), np.zeros((0, 0)))
        return cls(features, targets)

    def __setattr__(self, name, value):
        raise AttributeError("Dataset is immutable")

    @property
    def features(self) -> Matrix:
        return self._features

    @property
    def targets(self) -> Matrix:
        return self._targets

    @property
    def labels(self) -> Vector:
        """Scalar labels; only defined for single-output datasets."""
        if self.n_outputs != 1:
            raise DimensionMismatch(
                f"Dataset has {self.n_outputs} outputs, scalar labels need exactly 1",
                expected=1,
                actual=self.n_outputs,
            )
        return self._targets.col(0)

    @property
    def n_samples(self) -> int:
        return self._features.rows

    @property
    def n_features(self) -> int:
        return self._features.cols

    @property
    def n_outputs(self) -> int:
        return self._targets.cols

    def is_empty(self) -> bool:
        return self.n_samples == 0

    def __len__(self) -> int:
        return self.n_samples

    def __iter__(self) -> Iterator[Tuple[Vector, Vector]]:
        for i in range(self.n_samples):
            yield self._features.row(i), self._targets.row(i)

    def __repr__(self) -> str:
        return (
            f"Dataset(n_samples={self.n_samples}, n_features={self.n_features}, "
            f"n_outputs={self.n_outputs})"
        )

    def subset(self, indices: Sequence[int]) -> "Dataset":
        """Return the samples at ``indices``, in that order."""
        return Dataset(self._features.select_rows(indices), self._targets.select_rows(indices))
