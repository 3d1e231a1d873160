"""
Views, copies, casts and assignment for NArray.

View methods return a new array over the *same* storage with a transformed
layout; they never copy elements, and writes through the view are visible in
the source array (and vice versa):

    select, slice, transpose, t, stretch, expand, broadcast_to, squeeze,
    reshape (when the layout is C-ordered), flatten (likewise)

Copy methods allocate fresh storage:

    copy, cast, sum_to_shape, reshape (when no view is possible)

These operations are independent of the element kind and are implemented
directly rather than through the control-path manager.
"""

from __future__ import annotations

from numbers import Number
from typing import Any, Optional, Sequence, Union

import numpy as np

from .....domain._dtype import DType
from .....domain._errors import ShapeMismatchError
from .....domain._layout import StrideLayout
from .....domain._order import Order
from .....domain._shape import Shape, ShapeLike
from ....iterators import LoopDescriptor
from ....storage import allocate, cast_array, cast_scalar


def _sum_to_shape_reduce_axes(
    src_shape: tuple[int, ...], target_shape: tuple[int, ...]
) -> tuple[tuple[int, ...], int]:
    """
    Compute the reduction axes that undo a broadcast from `target_shape`.

    Returns
    -------
    reduce_axes:
        Source axes to sum over with ``keepdims=True``: every axis where the
        left-padded target has extent 1 and the source does not.
    pad:
        Number of leading axes the broadcast added.

    Raises
    ------
    ShapeMismatchError
        If `target_shape` could not have been broadcast to `src_shape`.
    """
    src = tuple(int(d) for d in src_shape)
    tgt = tuple(int(d) for d in target_shape)
    if len(tgt) > len(src):
        raise ShapeMismatchError(
            f"sum_to_shape: target rank {len(tgt)} exceeds source rank {len(src)}",
            shapes=[src, tgt],
            op="sum_to_shape",
        )
    pad = len(src) - len(tgt)
    padded = (1,) * pad + tgt
    for i, (sd, td) in enumerate(zip(src, padded)):
        if td not in (1, sd):
            raise ShapeMismatchError(
                f"Cannot sum_to_shape from {list(src)} to {list(tgt)}: "
                f"axis {i} has source {sd}, target {td}",
                shapes=[src, tgt],
                op="sum_to_shape",
            )
    reduce_axes = tuple(
        i for i, (sd, td) in enumerate(zip(src, padded)) if td == 1 and sd != 1
    )
    return reduce_axes, pad


def _coerce_dims(shape: Sequence[Any]) -> tuple[int, ...]:
    if len(shape) == 1 and not isinstance(shape[0], (int, np.integer)):
        shape = tuple(shape[0])
    return tuple(int(d) for d in shape)


class NArrayMixinMemory:
    """Layout transforms, copies and bulk writes shared by every element type."""

    def _view(self, layout: StrideLayout):
        return type(self)(self._storage, layout)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    def select(self, axis: int, index: int):
        """View with `axis` fixed at `index` (negative indices count from the end)."""
        d = self.dim(axis)
        if -d <= index < 0:
            index += d
        return self._view(self._layout.select(axis, index))

    def slice(self, axis: int, start: int = 0, end: Optional[int] = None, step: int = 1):
        """View keeping ``start, start + step, ...`` below `end` along `axis`."""
        return self._view(self._layout.slice(axis, start, end, step))

    def transpose(self, *perm: int):
        """View with permuted axes (reversed when no permutation is given)."""
        return self._view(self._layout.transpose(*perm))

    def t(self):
        """Transpose of a matrix; identity for rank below 2."""
        if self.rank < 2:
            return self
        return self.transpose()

    @property
    def T(self):
        return self.t()

    def stretch(self, axis: int):
        """View with a new unit axis inserted at `axis`."""
        return self._view(self._layout.stretch(axis))

    def expand(self, axis: int, size: int):
        """View repeating a unit axis `size` times."""
        return self._view(self._layout.expand(axis, size))

    def broadcast_to(self, shape: ShapeLike):
        """Read-mostly view broadcast to `shape` (zero strides on expanded axes)."""
        return self._view(self._layout.broadcast_to(shape))

    def squeeze(self, axis: Optional[int] = None):
        return self._view(self._layout.squeeze(axis))

    def reshape(self, *shape: Union[int, Sequence[int]]):
        """
        Array with the same elements in C order and a new shape.

        One extent may be ``-1`` and is inferred. The result is a view when the
        layout is C-ordered and a copy otherwise.

        Raises
        ------
        ShapeMismatchError
            If the element counts differ or the ``-1`` cannot be inferred.
        """
        dims = list(_coerce_dims(shape))
        if dims.count(-1) > 1:
            raise ShapeMismatchError(
                f"reshape accepts at most one -1, got {dims}", shapes=[self.dims], op="reshape"
            )
        if -1 in dims:
            known = int(np.prod([d for d in dims if d != -1], dtype=np.int64))
            if known == 0 or self.size % known != 0:
                raise ShapeMismatchError(
                    f"Cannot reshape {list(self.dims)} into {dims}",
                    shapes=[self.dims],
                    op="reshape",
                )
            dims[dims.index(-1)] = self.size // known
        target = Shape(tuple(dims))
        layout = self._layout.reshape_view(target)
        if layout is not None:
            return self._view(layout)
        return self.copy(Order.C)._view(StrideLayout.of_dense(target))

    def flatten(self):
        return self.reshape(self.size)

    # ------------------------------------------------------------------
    # Copies
    # ------------------------------------------------------------------
    def copy(self, order: Order = Order.A):
        """
        Deep copy into fresh dense storage.

        Parameters
        ----------
        order : Order
            Physical order of the copy. ``A`` keeps F order for F-dense arrays
            and uses C otherwise; ``S`` is treated as C.
        """
        return self._copy_as(self.dtype, order)

    def cast(self, dtype: DType, order: Order = Order.A):
        """Copy converted to `dtype` using the storage cast rules."""
        return self._copy_as(DType.parse(dtype), order)

    def _copy_as(self, dtype: DType, order: Order):
        order = Order.auto_fc(self._layout.resolve_order(Order.parse(order)))
        layout = StrideLayout.of_dense(self.shape, 0, order)
        storage = allocate(dtype, self.size)
        if self.size:
            ptrs = LoopDescriptor.of(layout, Order.C).pointers()
            storage.scatter(ptrs, cast_array(dtype, self._values()))
        return type(self)(storage, layout)

    def sum_to_shape(self, shape: ShapeLike):
        """
        Sum-reduce to `shape`, undoing a broadcast from `shape` to ``self.shape``.

        Returns a new dense array of `shape`.
        """
        target = Shape.coerce(shape)
        reduce_axes, pad = _sum_to_shape_reduce_axes(self.dims, target.dims)
        out = self.to_numpy()
        if reduce_axes:
            out = out.sum(axis=reduce_axes, keepdims=True, dtype=out.dtype)
        return type(self)._dense(out.reshape(target.dims), target, self.dtype)

    # ------------------------------------------------------------------
    # Bulk writes
    # ------------------------------------------------------------------
    def fill_(self, value: Any):
        """Write `value` into every element (through the layout) and return self."""
        bounds = self._layout.pointer_bounds()
        if bounds is None:
            return self
        if self._layout.is_dense():
            self._storage.fill(value, bounds[0], self.size)
        else:
            v = cast_scalar(self.dtype, value)
            self._storage.scatter(self.pointers(Order.C), np.full(self.size, v))
        return self

    def assign_(self, other: Any):
        """
        Copy `other` into self elementwise (broadcasting `other` if needed).

        Raises
        ------
        ShapeMismatchError
            If `other` cannot be broadcast to ``self.shape``.
        """
        if isinstance(other, (Number, np.number)):
            return self.fill_(other)
        values = cast_array(self.dtype, other._values(self.shape))
        self._storage.scatter(self.pointers(Order.C), values)
        return self

    def zeros_like(self):
        return type(self)._dense(0, self.shape, self.dtype)

    def ones_like(self):
        return type(self)._dense(1, self.shape, self.dtype)
