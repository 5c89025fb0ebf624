"""
Immutable dense matrix.

Rows are samples or output units depending on context; all shape checks
raise :class:`~learnkit.exceptions.DimensionMismatch` instead of
broadcasting, truncating or padding.
"""

import numbers
from typing import Callable, Iterator, List, Sequence, Tuple, Union

import numpy as np

from ..exceptions import DimensionMismatch
from .vector import Scalar, Vector, freeze


def _rows_to_array(data) -> np.ndarray:
    if isinstance(data, Matrix):
        return np.array(data._data)
    if isinstance(data, np.ndarray):
        return np.array(data, dtype=np.float64)

    rows = [r.data if isinstance(r, Vector) else r for r in data]
    if not rows:
        return np.zeros((0, 0))
    lengths = {len(r) for r in rows}
    if len(lengths) > 1:
        raise DimensionMismatch(
            f"All matrix rows must have the same length, got lengths {sorted(lengths)}",
            expected=len(rows[0]),
            actual=sorted(lengths),
        )
    return np.array(rows, dtype=np.float64)


class Matrix:
    """
    Two-dimensional array of real numbers.

    Parameters
    ----------
    data : sequence of sequences, np.ndarray or Matrix
        Row-major values. The input is copied.

    Raises
    ------
    DimensionMismatch
        If rows are ragged or ``data`` is not two-dimensional.

    Examples
    --------
    >>> m = Matrix([[1.0, 2.0], [3.0, 4.0]])
    >>> (m @ Vector([1.0, 1.0])).to_list()
    [3.0, 7.0]
    >>> m.T.shape
    (2, 2)
    """

    __slots__ = ("_data",)

    def __init__(self, data: Union[Sequence[Sequence[float]], np.ndarray, "Matrix"]):
        array = _rows_to_array(data)
        if array.ndim != 2:
            raise DimensionMismatch(
                f"Matrix requires two-dimensional data, got shape {array.shape}",
                expected=2,
                actual=array.ndim,
            )
        object.__setattr__(self, "_data", freeze(array))

    @classmethod
    def _adopt(cls, array: np.ndarray) -> "Matrix":
        """Take ownership of a freshly computed 2-D array without copying it."""
        mat = cls.__new__(cls)
        object.__setattr__(mat, "_data", freeze(np.asarray(array, dtype=np.float64)))
        return mat

    @classmethod
    def zeros(cls, rows: int, cols: int) -> "Matrix":
        return cls._adopt(np.zeros((rows, cols)))

    @classmethod
    def identity(cls, size: int) -> "Matrix":
        return cls._adopt(np.eye(size))

    @classmethod
    def from_rows(cls, rows: Sequence[Vector]) -> "Matrix":
        """Stack vectors as the rows of a new matrix."""
        return cls(rows)

    @classmethod
    def from_column(cls, values: Union[Sequence[float], Vector]) -> "Matrix":
        """Build an ``n x 1`` matrix from a flat sequence."""
        flat = Vector(values).data
        return cls._adopt(flat.reshape(-1, 1).copy())

    def __setattr__(self, name, value):
        raise AttributeError("Matrix is immutable")

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    @property
    def data(self) -> np.ndarray:
        """Read-only view of the underlying array."""
        return self._data

    @property
    def shape(self) -> Tuple[int, int]:
        return self._data.shape

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    def __len__(self) -> int:
        return self._data.shape[0]

    def __getitem__(self, index):
        if isinstance(index, tuple):
            return float(self._data[index])
        return self.row(index)

    def row(self, i: int) -> Vector:
        return Vector._adopt(self._data[i].copy())

    def col(self, j: int) -> Vector:
        return Vector._adopt(self._data[:, j].copy())

    def iter_rows(self) -> Iterator[Vector]:
        for i in range(self.rows):
            yield self.row(i)

    def select_rows(self, indices: Sequence[int]) -> "Matrix":
        return Matrix._adopt(self._data[np.asarray(indices, dtype=int)].copy())

    def __array__(self, dtype=None, copy=None):
        return np.array(self._data, dtype=dtype)

    def to_list(self) -> List[List[float]]:
        return self._data.tolist()

    def __repr__(self) -> str:
        return f"Matrix({self._data.tolist()!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._data.shape == other._data.shape and bool(
            np.array_equal(self._data, other._data)
        )

    __hash__ = None

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _check_same_shape(self, other: "Matrix", op: str) -> None:
        if self.shape != other.shape:
            raise DimensionMismatch(
                f"Cannot {op} matrices of shape {self.shape} and {other.shape}",
                expected=self.shape,
                actual=other.shape,
            )

    def __add__(self, other: "Matrix") -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        self._check_same_shape(other, "add")
        return Matrix._adopt(self._data + other._data)

    def __sub__(self, other: "Matrix") -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        self._check_same_shape(other, "subtract")
        return Matrix._adopt(self._data - other._data)

    def __neg__(self) -> "Matrix":
        return Matrix._adopt(-self._data)

    def __mul__(self, other: Union[Scalar, "Matrix"]) -> "Matrix":
        if isinstance(other, numbers.Real):
            return Matrix._adopt(self._data * float(other))
        if isinstance(other, Matrix):
            return self.hadamard(other)
        return NotImplemented

    def __rmul__(self, other: Scalar) -> "Matrix":
        if isinstance(other, numbers.Real):
            return Matrix._adopt(self._data * float(other))
        return NotImplemented

    def __truediv__(self, other: Scalar) -> "Matrix":
        if isinstance(other, numbers.Real):
            return Matrix._adopt(self._data / float(other))
        return NotImplemented

    def __matmul__(self, other: Union[Vector, "Matrix"]):
        if isinstance(other, Vector):
            return self.matvec(other)
        if isinstance(other, Matrix):
            return self.matmul(other)
        return NotImplemented

    def hadamard(self, other: "Matrix") -> "Matrix":
        """Elementwise product."""
        self._check_same_shape(other, "multiply elementwise")
        return Matrix._adopt(self._data * other._data)

    def matvec(self, vector: Vector) -> Vector:
        if self.cols != len(vector):
            raise DimensionMismatch(
                f"Cannot multiply matrix of shape {self.shape} by vector of length {len(vector)}",
                expected=self.cols,
                actual=len(vector),
            )
        return Vector._adopt(self._data @ vector.data)

    def matmul(self, other: "Matrix") -> "Matrix":
        if self.cols != other.rows:
            raise DimensionMismatch(
                f"Cannot multiply matrices of shape {self.shape} and {other.shape}",
                expected=self.cols,
                actual=other.rows,
            )
        return Matrix._adopt(self._data @ other._data)

    def transpose(self) -> "Matrix":
        return Matrix._adopt(self._data.T.copy())

    @property
    def T(self) -> "Matrix":
        return self.transpose()

    def apply(self, func: Callable[[np.ndarray], np.ndarray]) -> "Matrix":
        """Apply a vectorized elementwise function."""
        result = np.asarray(func(self._data), dtype=np.float64)
        if result.shape != self._data.shape:
            raise DimensionMismatch(
                "apply() must preserve the matrix shape",
                expected=self._data.shape,
                actual=result.shape,
            )
        return Matrix._adopt(result.copy() if result is self._data else result)

    def with_bias_column(self, value: float = 1.0) -> "Matrix":
        """Return a copy with a constant column prepended."""
        bias = np.full((self.rows, 1), value)
        return Matrix._adopt(np.hstack([bias, self._data]))

    def sum(self) -> float:
        return float(np.sum(self._data))

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self._data)))


def as_matrix(value: Union[Sequence[Sequence[float]], np.ndarray, Matrix]) -> Matrix:
    """Return ``value`` as a :class:`Matrix`, without copying if it already is one."""
    if isinstance(value, Matrix):
        return value
    return Matrix(value)
