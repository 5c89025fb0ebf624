"""
Kernel functions for margin classifiers.

A kernel maps a pair of feature vectors to a scalar similarity. Each variant
of :class:`KernelType` is a pure, symmetric function parameterized by a few
constants that are fixed when the :class:`Kernel` is constructed:

    LINEAR              a·b + offset
    POLYNOMIAL          (gain·a·b + offset)^degree
    HYPER_TAN           tanh(gain·a·b + offset)
    RBF                 exp(-gamma·||a-b||²)
    EXPONENTIAL         amplitude·exp(-||a-b|| / (2·length_scale²))
    RATIONAL_QUADRATIC  (1 + ||a-b||² / (2·alpha·length_scale²))^(-alpha)

The hyperbolic tangent kernel is only conditionally positive definite; with
the default offset of 0 it behaves well on the saturated inputs it is
typically used for.
"""

from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Union

import numpy as np
from scipy.spatial.distance import cdist

from ..exceptions import DimensionMismatch
from ..linalg import Matrix, as_matrix, as_vector


class KernelType(Enum):
    """Types of kernel functions available."""

    LINEAR = "linear"                          # a·b + c
    POLYNOMIAL = "polynomial"                  # (g a·b + c)^d
    HYPER_TAN = "hyper_tan"                    # tanh(g a·b + c)
    RBF = "rbf"                                # exp(-γ||a-b||²)
    EXPONENTIAL = "exponential"                # σ exp(-||a-b|| / 2l²)
    RATIONAL_QUADRATIC = "rational_quadratic"  # (1 + ||a-b||² / 2αl²)^-α


# Default parameters
DEFAULT_GAIN = 1.0
DEFAULT_HYPERTAN_OFFSET = 0.0
DEFAULT_POLYNOMIAL_OFFSET = 1.0
DEFAULT_POLYNOMIAL_DEGREE = 3
DEFAULT_GAMMA = 1.0
DEFAULT_LENGTH_SCALE = 1.0
DEFAULT_AMPLITUDE = 1.0
DEFAULT_RQ_ALPHA = 1.0

KERNEL_DEFAULTS: Dict[KernelType, Dict[str, float]] = {
    KernelType.LINEAR: {"offset": 0.0},
    KernelType.POLYNOMIAL: {
        "gain": DEFAULT_GAIN,
        "offset": DEFAULT_POLYNOMIAL_OFFSET,
        "degree": DEFAULT_POLYNOMIAL_DEGREE,
    },
    KernelType.HYPER_TAN: {"gain": DEFAULT_GAIN, "offset": DEFAULT_HYPERTAN_OFFSET},
    KernelType.RBF: {"gamma": DEFAULT_GAMMA},
    KernelType.EXPONENTIAL: {
        "length_scale": DEFAULT_LENGTH_SCALE,
        "amplitude": DEFAULT_AMPLITUDE,
    },
    KernelType.RATIONAL_QUADRATIC: {
        "length_scale": DEFAULT_LENGTH_SCALE,
        "alpha": DEFAULT_RQ_ALPHA,
    },
}

_POSITIVE_PARAMS = ("gamma", "length_scale", "alpha")


class Kernel:
    """
    Immutable kernel function with fixed parameters.

    Parameters
    ----------
    kernel_type : KernelType or str
        Kernel variant (default: linear).
    **params
        Variant parameters; missing ones take the documented defaults.

    Raises
    ------
    ValueError
        If a parameter is not recognised for the variant or out of range.

    Examples
    --------
    >>> k = Kernel("hyper_tan", gain=0.5)
    >>> k.evaluate([1.0, 2.0], [2.0, 1.0]) == k.evaluate([2.0, 1.0], [1.0, 2.0])
    True
    """

    __slots__ = ("_kernel_type", "_params")

    def __init__(self, kernel_type: Union[KernelType, str] = KernelType.LINEAR, **params: float):
        kernel_type = KernelType(kernel_type)
        defaults = KERNEL_DEFAULTS[kernel_type]

        unknown = set(params) - set(defaults)
        if unknown:
            raise ValueError(
                f"Unknown parameter(s) {sorted(unknown)} for {kernel_type.value} kernel. "
                f"Available: {sorted(defaults)}"
            )

        merged = dict(defaults)
        merged.update({name: float(value) for name, value in params.items()})
        for name in _POSITIVE_PARAMS:
            if name in merged and merged[name] <= 0:
                raise ValueError(f"{name} must be positive, got {merged[name]}")
        if "degree" in merged:
            if merged["degree"] < 1 or merged["degree"] != int(merged["degree"]):
                raise ValueError(f"degree must be a positive integer, got {merged['degree']}")
            merged["degree"] = int(merged["degree"])

        object.__setattr__(self, "_kernel_type", kernel_type)
        object.__setattr__(self, "_params", MappingProxyType(merged))

    # Convenience constructors -------------------------------------------

    @classmethod
    def linear(cls, offset: float = 0.0) -> "Kernel":
        return cls(KernelType.LINEAR, offset=offset)

    @classmethod
    def polynomial(
        cls,
        gain: float = DEFAULT_GAIN,
        offset: float = DEFAULT_POLYNOMIAL_OFFSET,
        degree: int = DEFAULT_POLYNOMIAL_DEGREE,
    ) -> "Kernel":
        return cls(KernelType.POLYNOMIAL, gain=gain, offset=offset, degree=degree)

    @classmethod
    def hyper_tan(cls, gain: float = DEFAULT_GAIN, offset: float = DEFAULT_HYPERTAN_OFFSET) -> "Kernel":
        return cls(KernelType.HYPER_TAN, gain=gain, offset=offset)

    @classmethod
    def rbf(cls, gamma: float = DEFAULT_GAMMA) -> "Kernel":
        return cls(KernelType.RBF, gamma=gamma)

    @classmethod
    def exponential(
        cls, length_scale: float = DEFAULT_LENGTH_SCALE, amplitude: float = DEFAULT_AMPLITUDE
    ) -> "Kernel":
        return cls(KernelType.EXPONENTIAL, length_scale=length_scale, amplitude=amplitude)

    @classmethod
    def rational_quadratic(
        cls, length_scale: float = DEFAULT_LENGTH_SCALE, alpha: float = DEFAULT_RQ_ALPHA
    ) -> "Kernel":
        return cls(KernelType.RATIONAL_QUADRATIC, length_scale=length_scale, alpha=alpha)

    # Value semantics ----------------------------------------------------

    def __setattr__(self, name, value):
        raise AttributeError("Kernel is immutable")

    @property
    def kernel_type(self) -> KernelType:
        return self._kernel_type

    @property
    def params(self) -> Mapping[str, float]:
        """Read-only mapping of the kernel parameters."""
        return self._params

    def __eq__(self, other) -> bool:
        if not isinstance(other, Kernel):
            return NotImplemented
        return self._kernel_type is other._kernel_type and dict(self._params) == dict(other._params)

    def __hash__(self) -> int:
        return hash((self._kernel_type, tuple(sorted(self._params.items()))))

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in self._params.items())
        return f"Kernel({self._kernel_type.value!r}, {args})"

    # Evaluation ---------------------------------------------------------

    def evaluate(self, a, b) -> float:
        """
        Compute K(a, b).

        Parameters
        ----------
        a, b : Vector or sequence of float
            Feature vectors of equal length.

        Returns
        -------
        value : float
            Kernel similarity.

        Raises
        ------
        DimensionMismatch
            If ``a`` and ``b`` differ in length.
        """
        a = as_vector(a)
        b = as_vector(b)
        if len(a) != len(b):
            raise DimensionMismatch(
                f"Kernel arguments differ in length: {len(a)} vs {len(b)}",
                expected=len(a),
                actual=len(b),
            )
        return float(self._compute(a.data[np.newaxis, :], b.data[np.newaxis, :])[0, 0])

    __call__ = evaluate

    def gram(self, A, B=None) -> Matrix:
        """
        Kernel matrix between the rows of ``A`` and the rows of ``B``.

        Parameters
        ----------
        A : Matrix
            Matrix with shape [n_a, n_features].
        B : Matrix, optional
            Matrix with shape [n_b, n_features]. Defaults to ``A``.

        Returns
        -------
        K : Matrix
            Matrix with shape [n_a, n_b] where ``K[i, j] = evaluate(A[i], B[j])``.
        """
        A = as_matrix(A)
        B = A if B is None else as_matrix(B)
        if A.cols != B.cols:
            raise DimensionMismatch(
                f"Kernel arguments differ in feature count: {A.cols} vs {B.cols}",
                expected=A.cols,
                actual=B.cols,
            )
        K = self._compute(A.data, B.data)
        if B is A:
            # Remove round-off asymmetry from the distance computations.
            K = 0.5 * (K + K.T)
        return Matrix._adopt(K)

    def _compute(self, X: np.ndarray, Y: np.ndarray) -> np.ndarray:
        p = self._params
        kind = self._kernel_type

        if kind is KernelType.LINEAR:
            return X @ Y.T + p["offset"]
        if kind is KernelType.POLYNOMIAL:
            return (p["gain"] * (X @ Y.T) + p["offset"]) ** p["degree"]
        if kind is KernelType.HYPER_TAN:
            return np.tanh(p["gain"] * (X @ Y.T) + p["offset"])
        if kind is KernelType.RBF:
            return np.exp(-p["gamma"] * cdist(X, Y, "sqeuclidean"))
        if kind is KernelType.EXPONENTIAL:
            dist = cdist(X, Y, "euclidean")
            return p["amplitude"] * np.exp(-dist / (2.0 * p["length_scale"] ** 2))
        if kind is KernelType.RATIONAL_QUADRATIC:
            sq = cdist(X, Y, "sqeuclidean")
            base = 1.0 + sq / (2.0 * p["alpha"] * p["length_scale"] ** 2)
            return base ** (-p["alpha"])

        raise ValueError(f"Unknown kernel type: {kind}")


def get_kernel(name: Union[str, KernelType], **params: float) -> Kernel:
    """
    Create a kernel by name.

    Parameters
    ----------
    name : str or KernelType
        Kernel name (see :func:`list_kernels`).
    **params
        Kernel parameters.

    Returns
    -------
    kernel : Kernel
        Kernel instance.

    Examples
    --------
    >>> get_kernel("rbf", gamma=0.5)
    Kernel('rbf', gamma=0.5)
    """
    try:
        kernel_type = KernelType(name)
    except ValueError:
        available = ", ".join(list_kernels())
        raise ValueError(f"Unknown kernel '{name}'. Available: {available}") from None
    return Kernel(kernel_type, **params)


def list_kernels() -> List[str]:
    """List all available kernel names."""
    return [k.value for k in KernelType]
