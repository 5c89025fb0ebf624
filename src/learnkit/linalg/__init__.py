"""
Dense linear algebra primitives.

This module provides the immutable :class:`Vector` and :class:`Matrix`
types used for datasets, kernel evaluation and model parameters.
"""

from .matrix import Matrix, as_matrix
from .vector import Vector, as_vector

__all__ = [
    "Vector",
    "Matrix",
    "as_vector",
    "as_matrix",
]
