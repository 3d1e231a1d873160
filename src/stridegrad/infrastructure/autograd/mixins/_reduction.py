"""
Differentiable reductions.

``sum`` and ``mean`` spread the result gradient evenly over each reduced
slice. ``max`` and ``min`` route the whole gradient of a slice to a single
element: the one the forward pass selected (first occurrence in logical C
order on ties), recovered with ``argmax``/``argmin`` on the forward value.
``var`` and ``std`` are composed from differentiable primitives.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ....domain._errors import UnsupportedElementTypeError
from ._common import expand_reduced


def _route(x, positions, g, axis, keepdims):
    """Gradient of shape ``x.shape`` holding `g` at the selected positions, 0 elsewhere."""
    out = np.zeros(x.dims, dtype=g.to_numpy().dtype)
    if axis is None:
        out.reshape(-1)[int(positions.item())] = g.item()
    else:
        idx = np.expand_dims(positions.to_numpy().astype(np.int64), axis)
        gv = g.to_numpy()
        if not keepdims:
            gv = np.expand_dims(gv, axis)
        np.put_along_axis(out, idx, gv, axis)
    return type(x)._dense(out, x.shape, g.dtype)


class TensorMixinReduction:
    """Reductions on tensors."""

    def sum(self, axis: Optional[int] = None, keepdims: bool = False):
        x = self.value
        ax = None if axis is None else x.shape.normalize_axis(axis)
        return self._make(
            x.sum(ax, keepdims),
            "sum",
            (self, lambda g: expand_reduced(g, x.shape, ax, keepdims)),
        )

    def mean(self, axis: Optional[int] = None, keepdims: bool = False):
        x = self.value
        ax = None if axis is None else x.shape.normalize_axis(axis)
        n = x.size if ax is None else x.dim(ax)
        return self._make(
            x.mean(ax, keepdims),
            "mean",
            (self, lambda g: expand_reduced(g.div(n), x.shape, ax, keepdims)),
        )

    def var(self, axis: Optional[int] = None, ddof: int = 0, keepdims: bool = False):
        x = self.value
        if not x.dtype.is_float:
            raise UnsupportedElementTypeError("var", x.dtype)
        ax = None if axis is None else x.shape.normalize_axis(axis)
        n = x.size if ax is None else x.dim(ax)
        centered = self.sub(self.mean(ax, keepdims=True))
        return centered.sqr().sum(ax, keepdims).div(float(n - ddof))

    def std(self, axis: Optional[int] = None, ddof: int = 0, keepdims: bool = False):
        return self.var(axis, ddof, keepdims).sqrt()

    def max(self, axis: Optional[int] = None, keepdims: bool = False):
        x = self.value
        ax = None if axis is None else x.shape.normalize_axis(axis)
        positions = x.argmax(ax)
        return self._make(
            x.max(ax, keepdims),
            "max",
            (self, lambda g: _route(x, positions, g, ax, keepdims)),
        )

    def min(self, axis: Optional[int] = None, keepdims: bool = False):
        x = self.value
        ax = None if axis is None else x.shape.normalize_axis(axis)
        positions = x.argmin(ax)
        return self._make(
            x.min(ax, keepdims),
            "min",
            (self, lambda g: _route(x, positions, g, ax, keepdims)),
        )

    def log_softmax(self, axis: int = -1):
        """
        Numerically stable ``x - log(sum(exp(x)))`` along `axis`.

        Backward: ``g - softmax(x) * sum(g)`` along `axis`.
        """
        x = self.value
        if not x.dtype.is_float:
            raise UnsupportedElementTypeError("log_softmax", x.dtype)
        ax = x.shape.normalize_axis(axis)
        shifted = x.sub(x.max(ax, keepdims=True))
        y = shifted.sub(shifted.exp().sum(ax, keepdims=True).log())
        return self._make(
            y,
            "log_softmax",
            (self, lambda g: g.sub(y.exp().mul(g.sum(ax, keepdims=True)))),
        )
