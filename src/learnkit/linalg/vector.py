"""
Immutable dense vector.

A :class:`Vector` wraps a one-dimensional float64 numpy array whose
``writeable`` flag is cleared, so instances can be shared freely between
threads. Every operation returns a new value.
"""

import numbers
from typing import Callable, Iterator, List, Sequence, Union

import numpy as np

from ..exceptions import DimensionMismatch

Scalar = Union[int, float]


def freeze(array: np.ndarray) -> np.ndarray:
    """Mark ``array`` read-only in place and return it."""
    array.flags.writeable = False
    return array


class Vector:
    """
    Fixed-length vector of real numbers.

    Parameters
    ----------
    data : sequence of float or np.ndarray or Vector
        Values of the vector. The input is copied.

    Raises
    ------
    DimensionMismatch
        If ``data`` is not one-dimensional.

    Examples
    --------
    >>> a = Vector([1.0, 2.0, 3.0])
    >>> b = Vector([0.5, 0.5, 0.5])
    >>> a.dot(b)
    3.0
    >>> (a + b).to_list()
    [1.5, 2.5, 3.5]
    """

    __slots__ = ("_data",)

    def __init__(self, data: Union[Sequence[float], np.ndarray, "Vector"]):
        if isinstance(data, Vector):
            data = data._data
        array = np.array(data, dtype=np.float64)
        if array.ndim != 1:
            raise DimensionMismatch(
                f"Vector requires one-dimensional data, got shape {array.shape}",
                expected=1,
                actual=array.ndim,
            )
        object.__setattr__(self, "_data", freeze(array))

    @classmethod
    def _adopt(cls, array: np.ndarray) -> "Vector":
        """Take ownership of a freshly computed array without copying it."""
        vec = cls.__new__(cls)
        object.__setattr__(vec, "_data", freeze(np.asarray(array, dtype=np.float64)))
        return vec

    @classmethod
    def zeros(cls, size: int) -> "Vector":
        return cls._adopt(np.zeros(size))

    @classmethod
    def ones(cls, size: int) -> "Vector":
        return cls._adopt(np.ones(size))

    def __setattr__(self, name, value):
        raise AttributeError("Vector is immutable")

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    @property
    def data(self) -> np.ndarray:
        """Read-only view of the underlying array."""
        return self._data

    @property
    def size(self) -> int:
        return self._data.shape[0]

    def __len__(self) -> int:
        return self._data.shape[0]

    def __iter__(self) -> Iterator[float]:
        return (float(v) for v in self._data)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Vector._adopt(self._data[index].copy())
        return float(self._data[index])

    def __array__(self, dtype=None, copy=None):
        return np.array(self._data, dtype=dtype)

    def to_list(self) -> List[float]:
        return self._data.tolist()

    def __repr__(self) -> str:
        return f"Vector({self._data.tolist()!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return self._data.shape == other._data.shape and bool(
            np.array_equal(self._data, other._data)
        )

    __hash__ = None

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _check_same_length(self, other: "Vector", op: str) -> None:
        if len(self) != len(other):
            raise DimensionMismatch(
                f"Cannot {op} vectors of length {len(self)} and {len(other)}",
                expected=len(self),
                actual=len(other),
            )

    def __add__(self, other: "Vector") -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_same_length(other, "add")
        return Vector._adopt(self._data + other._data)

    def __sub__(self, other: "Vector") -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_same_length(other, "subtract")
        return Vector._adopt(self._data - other._data)

    def __neg__(self) -> "Vector":
        return Vector._adopt(-self._data)

    def __mul__(self, other: Union[Scalar, "Vector"]) -> "Vector":
        if isinstance(other, numbers.Real):
            return Vector._adopt(self._data * float(other))
        if isinstance(other, Vector):
            return self.hadamard(other)
        return NotImplemented

    def __rmul__(self, other: Scalar) -> "Vector":
        if isinstance(other, numbers.Real):
            return Vector._adopt(self._data * float(other))
        return NotImplemented

    def __truediv__(self, other: Scalar) -> "Vector":
        if isinstance(other, numbers.Real):
            return Vector._adopt(self._data / float(other))
        return NotImplemented

    def hadamard(self, other: "Vector") -> "Vector":
        """Elementwise product."""
        self._check_same_length(other, "multiply")
        return Vector._adopt(self._data * other._data)

    def dot(self, other: "Vector") -> float:
        self._check_same_length(other, "take the dot product of")
        return float(np.dot(self._data, other._data))

    def norm(self, ord: int = 2) -> float:
        return float(np.linalg.norm(self._data, ord=ord))

    def sum(self) -> float:
        return float(np.sum(self._data))

    def argmax(self) -> int:
        return int(np.argmax(self._data))

    def apply(self, func: Callable[[np.ndarray], np.ndarray]) -> "Vector":
        """Apply a vectorized elementwise function."""
        result = np.asarray(func(self._data), dtype=np.float64)
        if result.shape != self._data.shape:
            raise DimensionMismatch(
                "apply() must preserve the vector shape",
                expected=self._data.shape,
                actual=result.shape,
            )
        return Vector._adopt(result.copy() if result is self._data else result)

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self._data)))


def as_vector(value: Union[Sequence[float], np.ndarray, Vector]) -> Vector:
    """Return ``value`` as a :class:`Vector`, without copying if it already is one."""
    if isinstance(value, Vector):
        return value
    return Vector(value)
