"""
Differentiable matrix products.

For ``y = a @ b`` with matrix (or batched matrix) operands::

    da = g @ b^T
    db = a^T @ g

where ``^T`` swaps the last two axes. Vector operands are handled by
promoting them to a row or column for the gradient and dropping the extra
axis afterwards.
"""

from __future__ import annotations

from ._common import value_of


def _swap_last(x):
    r = x.rank
    return x.transpose(*range(r - 2), r - 1, r - 2)


def _matmul_grads(a, b, g):
    if a.rank == 1 and b.rank == 1:
        return b.mul(g), a.mul(g)
    if b.rank == 1:
        # (m, k) @ (k,) -> (m,)
        return g.stretch(1).matmul(b.stretch(0)), _swap_last(a).matmul(g)
    if a.rank == 1:
        # (k,) @ (k, n) -> (n,)
        return b.matmul(g), a.stretch(1).matmul(g.stretch(0))
    return g.matmul(_swap_last(b)), _swap_last(a).matmul(g)


class TensorMixinLinalg:
    """Matrix products on tensors."""

    def matmul(self, other):
        a, b = self.value, value_of(other)
        return self._make(
            a.matmul(b),
            "matmul",
            (self, lambda g: _matmul_grads(a, b, g)[0]),
            (other, lambda g: _matmul_grads(a, b, g)[1]),
        )

    def dot(self, other):
        a, b = self.value, value_of(other)
        return self._make(
            a.dot(b),
            "dot",
            (self, lambda g: b.mul(g)),
            (other, lambda g: a.mul(g)),
        )

    def __matmul__(self, other):
        return self.matmul(other)

    def __rmatmul__(self, other):
        from .._tensor import Tensor

        return Tensor(value_of(other)).matmul(self)
