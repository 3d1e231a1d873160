"""
Shared helpers for reduction kernels.

`axis_values` lays out the elements of an array as a 2-D NumPy buffer whose
rows are the reduction slices, so that every axis reduction becomes a row-wise
NumPy reduction. `result_dims` computes the output extents for both the
``keepdims`` and the dropping convention.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from .....domain._errors import ShapeMismatchError


def result_dims(dims: tuple[int, ...], axis: Optional[int], keepdims: bool) -> tuple[int, ...]:
    if axis is None:
        return (1,) * len(dims) if keepdims else ()
    if keepdims:
        return dims[:axis] + (1,) + dims[axis + 1 :]
    return dims[:axis] + dims[axis + 1 :]


def axis_values(self, axis: int) -> np.ndarray:
    """
    Gather `self` as a ``(outer, extent)`` buffer.

    Row ``r`` holds the slice reduced into output element ``r`` (output
    elements in logical C order); within a row, elements follow the reduced
    axis in increasing index order.
    """
    rank = self.rank
    perm = [d for d in range(rank) if d != axis] + [axis]
    extent = self.dims[axis]
    outer = int(np.prod([self.dims[d] for d in perm[:-1]], dtype=np.int64))
    return self.transpose(*perm)._values().reshape(outer, extent)


def check_nonempty(self, axis: Optional[int], op: str) -> None:
    n = self.size if axis is None else self.dims[axis]
    if n == 0:
        raise ShapeMismatchError(
            f"{op} of an empty extent has no identity (shape {list(self.dims)}, axis {axis})",
            shapes=[self.dims],
            op=op,
        )


def normalize(self, axis: Optional[int]) -> Optional[int]:
    return None if axis is None else self.shape.normalize_axis(axis)
