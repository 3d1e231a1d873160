"""
Matrix products for NArray.

Supported operand ranks for ``a @ b``:

- 1-D · 1-D  inner product, rank-0 result
- 2-D @ 1-D  matrix-vector, result ``(m,)``
- 1-D @ 2-D  vector-matrix, result ``(n,)``
- 2-D @ 2-D  matrix product, result ``(m, n)``
- N-D @ N-D  batched product for equal ranks N > 2 whose leading extents
  match exactly; the batch axes are not broadcast

Anything else (rank-0 operands, mismatched inner extents, mismatched batch
extents or ranks) raises `ShapeMismatchError`. The result element type is the
promotion of both operand types.
"""

from __future__ import annotations

import numpy as np

from .....domain._dtype import DType
from .....domain._errors import ShapeMismatchError
from ....storage import cast_array, numpy_dtype


def _mismatch(a, b, reason: str) -> ShapeMismatchError:
    return ShapeMismatchError(
        f"matmul: {reason} ({list(a.dims)} @ {list(b.dims)})",
        shapes=[a.dims, b.dims],
        op="matmul",
    )


def matmul_result_dims(a, b) -> tuple[int, ...]:
    """Validate operand shapes and return the result extents."""
    ra, rb = a.rank, b.rank
    if ra == 0 or rb == 0:
        raise _mismatch(a, b, "operands must have rank >= 1")
    if ra > 2 or rb > 2:
        if ra != rb:
            raise _mismatch(a, b, "batched operands must have equal rank")
        if a.dims[:-2] != b.dims[:-2]:
            raise _mismatch(a, b, "batch extents differ")
    inner_b = b.dims[0] if rb == 1 else b.dims[-2]
    if a.dims[-1] != inner_b:
        raise _mismatch(a, b, f"inner extents differ ({a.dims[-1]} vs {inner_b})")
    if ra == 1 and rb == 1:
        return ()
    if ra == 1:
        return (b.dims[-1],)
    if rb == 1:
        return (a.dims[-2],)
    return a.dims[:-1] + (b.dims[-1],)


class NArrayMixinLinalg:
    """Matrix and vector products."""

    def matmul(self, other):
        """
        Matrix product ``self @ other``.

        Raises
        ------
        ShapeMismatchError
            If the operand shapes are not compatible.
        TypeError
            If `other` is not an NArray.
        """
        if not isinstance(other, NArrayMixinLinalg):
            raise TypeError(f"matmul: unsupported operand type {type(other).__name__!r} for NArray")
        dims = matmul_result_dims(self, other)
        dtype = DType.promote(self.dtype, other.dtype)
        a = cast_array(dtype, self.to_numpy())
        b = cast_array(dtype, other.to_numpy())
        with np.errstate(over="ignore", invalid="ignore"):
            out = np.matmul(a, b).astype(numpy_dtype(dtype), copy=False)
        return type(self)._dense(out, dims, dtype)

    def dot(self, other):
        """Inner product of two vectors as a rank-0 array."""
        if self.rank != 1 or other.rank != 1:
            raise _mismatch(self, other, "dot requires two rank-1 operands")
        return self.matmul(other)

    def __matmul__(self, other):
        if not isinstance(other, NArrayMixinLinalg):
            return NotImplemented
        return self.matmul(other)
