"""
Differentiable layout transforms.

The forward value of each operation is a view of the operand's value (or a
copy, for `reshape` of a non C-ordered value); the backward pass applies the
inverse transform to the gradient. Operations that keep only part of the
operand (`select`, `slice`, indexing) scatter the gradient into zeros.
"""

from __future__ import annotations

from typing import Optional

from ...narray import zeros


class TensorMixinShape:
    """Layout transforms on tensors."""

    def transpose(self, *perm: int):
        x = self.value
        if not perm:
            perm = tuple(range(x.rank - 1, -1, -1))
        perm = tuple(x.shape.normalize_axis(p) for p in perm)
        inverse = tuple(sorted(range(len(perm)), key=lambda i: perm[i]))
        return self._make(x.transpose(*perm), "transpose", (self, lambda g: g.transpose(*inverse)))

    def t(self):
        if self.rank < 2:
            return self
        return self.transpose()

    @property
    def T(self):
        return self.t()

    def reshape(self, *shape):
        x = self.value
        return self._make(x.reshape(*shape), "reshape", (self, lambda g: g.reshape(x.shape)))

    def flatten(self):
        return self.reshape(self.size)

    def squeeze(self, axis: Optional[int] = None):
        x = self.value
        return self._make(x.squeeze(axis), "squeeze", (self, lambda g: g.reshape(x.shape)))

    def broadcast_to(self, shape):
        x = self.value
        return self._make(
            x.broadcast_to(shape), "broadcast_to", (self, lambda g: g.sum_to_shape(x.shape))
        )

    def stretch(self, axis: int):
        x = self.value
        y = x.stretch(axis)
        a = axis + y.rank if axis < 0 else axis
        return self._make(y, "stretch", (self, lambda g: g.squeeze(a)))

    def _scatter_back(self, g, select):
        out = zeros(self.shape, g.dtype)
        select(out).assign_(g)
        return out

    def select(self, axis: int, index: int):
        x = self.value
        return self._make(
            x.select(axis, index),
            "select",
            (self, lambda g: self._scatter_back(g, lambda o: o.select(axis, index))),
        )

    def slice(self, axis: int, start: int = 0, end: Optional[int] = None, step: int = 1):
        x = self.value
        return self._make(
            x.slice(axis, start, end, step),
            "slice",
            (self, lambda g: self._scatter_back(g, lambda o: o.slice(axis, start, end, step))),
        )

    def __getitem__(self, key):
        x = self.value
        return self._make(
            x[key], "getitem", (self, lambda g: self._scatter_back(g, lambda o: o[key]))
        )
