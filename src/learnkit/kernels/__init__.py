"""
Kernel functions.

This module provides the :class:`Kernel` tagged variant used by the margin
classifier, together with name-based lookup helpers.
"""

from .kernel import (
    KERNEL_DEFAULTS,
    Kernel,
    KernelType,
    get_kernel,
    list_kernels,
)

__all__ = [
    "Kernel",
    "KernelType",
    "KERNEL_DEFAULTS",
    "get_kernel",
    "list_kernels",
]
