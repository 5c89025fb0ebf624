"""
Trained support vector machine.
"""

from typing import Optional, Union

import numpy as np

from ..exceptions import DimensionMismatch
from ..kernels import Kernel
from ..linalg import Matrix, Vector, as_matrix, as_vector


class SVMModel:
    """
    Immutable kernel SVM decision function.

    The decision value for ``x`` is

        f(x) = sum_i dual_coef_i * sv_label_i * K(sv_i, x) + bias

    and the predicted label is +1 when ``f(x) >= 0``, -1 otherwise.

    Parameters
    ----------
    support_vectors : Matrix
        Support vectors with shape [n_support, n_features].
    dual_coef : Vector
        Lagrange multipliers of the support vectors.
    sv_labels : Vector
        Labels (+1/-1) of the support vectors.
    bias : float
        Intercept.
    kernel : Kernel
        Kernel used during training.
    n_features : int, optional
        Feature dimension. Required when there are no support vectors.
    """

    __slots__ = ("_support_vectors", "_dual_coef", "_sv_labels", "_weights", "_bias", "_kernel", "_n_features")

    def __init__(
        self,
        support_vectors: Matrix,
        dual_coef: Vector,
        sv_labels: Vector,
        bias: float,
        kernel: Kernel,
        n_features: Optional[int] = None,
    ):
        support_vectors = as_matrix(support_vectors)
        dual_coef = as_vector(dual_coef)
        sv_labels = as_vector(sv_labels)
        if not (support_vectors.rows == len(dual_coef) == len(sv_labels)):
            raise DimensionMismatch(
                "support_vectors, dual_coef and sv_labels must have the same length",
                expected=support_vectors.rows,
                actual=(len(dual_coef), len(sv_labels)),
            )
        if n_features is None:
            n_features = support_vectors.cols
        elif support_vectors.rows > 0 and support_vectors.cols != n_features:
            raise DimensionMismatch(
                f"Support vectors have {support_vectors.cols} features, expected {n_features}",
                expected=n_features,
                actual=support_vectors.cols,
            )

        set_ = object.__setattr__
        set_(self, "_support_vectors", support_vectors)
        set_(self, "_dual_coef", dual_coef)
        set_(self, "_sv_labels", sv_labels)
        set_(self, "_weights", dual_coef * sv_labels)
        set_(self, "_bias", float(bias))
        set_(self, "_kernel", kernel)
        set_(self, "_n_features", int(n_features))

    def __setattr__(self, name, value):
        raise AttributeError("SVMModel is immutable")

    @property
    def support_vectors(self) -> Matrix:
        return self._support_vectors

    @property
    def dual_coef(self) -> Vector:
        return self._dual_coef

    @property
    def sv_labels(self) -> Vector:
        return self._sv_labels

    @property
    def bias(self) -> float:
        return self._bias

    @property
    def kernel(self) -> Kernel:
        return self._kernel

    @property
    def n_support(self) -> int:
        return self._support_vectors.rows

    @property
    def n_features(self) -> int:
        return self._n_features

    def __repr__(self) -> str:
        return (
            f"SVMModel(n_support={self.n_support}, n_features={self.n_features}, "
            f"bias={self._bias:.4g}, kernel={self._kernel!r})"
        )

    def _check_features(self, n: int) -> None:
        if n != self._n_features:
            raise DimensionMismatch(
                f"Model expects {self._n_features} features, got {n}",
                expected=self._n_features,
                actual=n,
            )

    def decision_function(self, features: Union[Vector, np.ndarray, list]) -> float:
        """Signed distance-like score of one feature vector."""
        x = as_vector(features)
        self._check_features(len(x))
        if self.n_support == 0:
            return self._bias
        k = self._kernel.gram(self._support_vectors, Matrix._adopt(x.data[np.newaxis, :].copy()))
        return float(self._weights.data @ k.data[:, 0] + self._bias)

    def predict(self, features: Union[Vector, np.ndarray, list]) -> float:
        """
        Predict the class of one feature vector.

        Returns
        -------
        label : float
            +1.0 or -1.0.

        Raises
        ------
        DimensionMismatch
            If the feature count differs from the training dimension.
        """
        return 1.0 if self.decision_function(features) >= 0 else -1.0

    def decision_batch(self, features: Matrix) -> Vector:
        """Decision values for every row of ``features``."""
        X = as_matrix(features)
        self._check_features(X.cols)
        if self.n_support == 0:
            return Vector._adopt(np.full(X.rows, self._bias))
        k = self._kernel.gram(self._support_vectors, X)
        return Vector._adopt(self._weights.data @ k.data + self._bias)

    def predict_batch(self, features: Matrix) -> Vector:
        """Predicted labels for every row of ``features``."""
        decision = self.decision_batch(features)
        return Vector._adopt(np.where(decision.data >= 0, 1.0, -1.0))
