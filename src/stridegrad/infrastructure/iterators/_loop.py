"""
Loop descriptors: the compact description of a traversal.

A traversal of a strided layout in a given order is an inner loop of ``size``
elements advancing by ``step``, repeated from a list of outer start pointers.
`LoopDescriptor` computes that description once per (layout, order) pair. The
fastest axis for the order becomes the inner loop; the remaining axes are
expanded into the outer offsets, with the next-fastest axis varying fastest.

Compaction (dropping unit axes and merging axes whose strides chain) is
applied before the split, so a dense layout traversed in its own order
collapses into a single inner loop.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ...domain._layout import StrideLayout
from ...domain._order import Order


@dataclass(frozen=True)
class LoopDescriptor:
    """
    Inner-loop/outer-offsets description of a traversal.

    Attributes
    ----------
    size : int
        Length of the inner loop (0 for empty layouts).
    step : int
        Pointer increment inside the inner loop.
    offsets : np.ndarray
        Start pointer of every inner loop, in traversal order.
    """

    size: int
    step: int
    offsets: np.ndarray

    @property
    def count(self) -> int:
        """Number of inner loops."""
        return int(self.offsets.shape[0])

    @property
    def total(self) -> int:
        return self.count * self.size

    @classmethod
    def of(cls, layout: StrideLayout, order: Order = Order.S) -> "LoopDescriptor":
        if layout.size == 0:
            return cls(0, 1, np.empty(0, dtype=np.int64))

        compact = layout.compute_fortran_layout(order, compact=True)
        if compact.rank == 0:
            # scalar, or every axis has extent 1
            return cls(1, 1, np.array([layout.offset], dtype=np.int64))

        size = compact.dims[0]
        step = compact.strides[0]
        outer_dims = compact.dims[1:]
        outer_strides = compact.strides[1:]

        offsets = np.array([layout.offset], dtype=np.int64)
        # slowest axis first, so the fastest outer axis ends up innermost
        for dim, stride in zip(reversed(outer_dims), reversed(outer_strides)):
            offsets = (offsets[:, None] + np.arange(dim, dtype=np.int64) * stride).ravel()
        return cls(int(size), int(step), offsets)

    def pointers(self) -> np.ndarray:
        """Every pointer of the traversal, in order, as an int64 array."""
        if self.size == 0:
            return np.empty(0, dtype=np.int64)
        inner = np.arange(self.size, dtype=np.int64) * self.step
        return (self.offsets[:, None] + inner[None, :]).ravel()
