"""
Dataset containers.
"""

from .dataset import Dataset

__all__ = [
    "Dataset",
]
