"""
Helpers shared by the differentiable operation mixins.
"""

from __future__ import annotations

from typing import Any

from ...narray import NArray


def value_of(x: Any) -> Any:
    """Forward value of an operand: tensors unwrap, arrays and scalars pass through."""
    from .._tensor import Tensor

    return x.value if isinstance(x, Tensor) else x


def reduce_to(g: NArray, operand: Any) -> NArray:
    """Undo broadcasting of `operand` in a gradient (scalars need no gradient)."""
    return g.sum_to_shape(operand.shape)


def expand_reduced(g: NArray, shape, axis, keepdims: bool) -> NArray:
    """
    Broadcast the gradient of a reduction back to the reduced operand's shape.

    The result is a broadcast view: every element of a reduced slice receives
    the slice's gradient.
    """
    if axis is None:
        return g.reshape((1,) * len(shape)).broadcast_to(shape)
    if not keepdims:
        g = g.stretch(axis)
    return g.broadcast_to(shape)
