"""
Stride layouts: mapping logical indices to physical storage offsets.

A `StrideLayout` is the pair ``(offset, strides)`` over a `Shape`. The
physical pointer of a logical index ``idx`` is::

    offset + sum(idx[d] * strides[d] for d in range(rank))

Strides are signed and may be zero; a zero stride repeats the same storage
slot along an axis, which is how broadcasting is represented without copying.

Every transform in this module (broadcast, transpose, select, slice, stretch,
expand, squeeze, reshape) is a pure metadata change computed in O(rank). None
of them reads or writes storage, which is what allows several arrays to alias
one buffer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ._errors import IndexOutOfRangeError, ShapeMismatchError
from ._order import Order
from ._shape import Shape, ShapeLike


@dataclass(frozen=True)
class StrideLayout:
    """
    Immutable strided layout.

    Attributes
    ----------
    shape : Shape
        Logical shape.
    offset : int
        Physical pointer of the all-zeros logical index.
    strides : tuple[int, ...]
        One signed stride per axis.
    """

    shape: Shape
    offset: int
    strides: tuple[int, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "shape", Shape.coerce(self.shape))
        object.__setattr__(self, "offset", int(self.offset))
        object.__setattr__(self, "strides", tuple(int(s) for s in self.strides))
        if len(self.strides) != self.shape.rank:
            raise ShapeMismatchError(
                f"Layout needs one stride per axis: shape {list(self.shape.dims)}, "
                f"strides {list(self.strides)}",
                shapes=[self.shape.dims],
                op="layout",
            )

    @classmethod
    def of(cls, shape: ShapeLike, offset: int, strides: Sequence[int]) -> "StrideLayout":
        return cls(Shape.coerce(shape), offset, tuple(strides))

    @classmethod
    def of_dense(
        cls, shape: ShapeLike, offset: int = 0, order: Order = Order.C
    ) -> "StrideLayout":
        """Dense layout in C or F order (any other order resolves to C)."""
        shape = Shape.coerce(shape)
        return cls(shape, offset, shape.strides(Order.auto_fc(order)))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def rank(self) -> int:
        return self.shape.rank

    @property
    def dims(self) -> tuple[int, ...]:
        return self.shape.dims

    @property
    def size(self) -> int:
        return self.shape.size

    def dim(self, axis: int) -> int:
        return self.shape.dim(axis)

    def stride(self, axis: int) -> int:
        return self.strides[self.shape.normalize_axis(axis)]

    def pointer(self, *idx: int) -> int:
        """
        Physical pointer of a logical index.

        Raises
        ------
        IndexOutOfRangeError
            If the index has the wrong rank or any component is out of range.
        """
        if len(idx) != self.rank:
            raise IndexOutOfRangeError(idx, self.rank)
        ptr = self.offset
        for axis, (i, d, s) in enumerate(zip(idx, self.dims, self.strides)):
            if i < 0 or i >= d:
                raise IndexOutOfRangeError(i, d, axis=axis)
            ptr += i * s
        return ptr

    def pointer_bounds(self) -> Optional[tuple[int, int]]:
        """
        Lowest and highest pointer addressed by the layout.

        Returns ``None`` for layouts with no elements.
        """
        if self.size == 0:
            return None
        lo = hi = self.offset
        for d, s in zip(self.dims, self.strides):
            span = (d - 1) * s
            if span < 0:
                lo += span
            else:
                hi += span
        return lo, hi

    def _is_ordered(self, axes: Sequence[int]) -> bool:
        expected = 1
        for axis in axes:
            d = self.dims[axis]
            if d == 1:
                continue
            if self.strides[axis] != expected:
                return False
            expected *= d
        return True

    def is_c_ordered(self) -> bool:
        """True when the layout is contiguous with C canonical strides."""
        return self._is_ordered(range(self.rank - 1, -1, -1))

    def is_f_ordered(self) -> bool:
        """True when the layout is contiguous with F canonical strides."""
        return self._is_ordered(range(self.rank))

    def is_dense(self) -> bool:
        return self.is_c_ordered() or self.is_f_ordered()

    def resolve_order(self, order: Order) -> Order:
        """Replace ``Order.A`` with the concrete order used for this layout."""
        if order is not Order.A:
            return order
        if self.is_c_ordered():
            return Order.C
        if self.is_f_ordered():
            return Order.F
        return Order.S

    # ------------------------------------------------------------------
    # Iteration support
    # ------------------------------------------------------------------
    def compute_fortran_layout(self, order: Order, compact: bool = False) -> "StrideLayout":
        """
        Reorder axes so that axis 0 is the fastest-varying one for `order`.

        Parameters
        ----------
        order : Order
            Requested traversal order.
        compact : bool, optional
            If True, drop unit axes and merge neighbouring axes whose strides
            chain (``strides[i + 1] == strides[i] * dims[i]``). Merging keeps
            the traversal sequence unchanged.

        Returns
        -------
        StrideLayout
            Layout with the same offset whose axes are listed fastest-first.
        """
        order = self.resolve_order(order)
        axes = list(range(self.rank))
        if order is Order.C:
            axes.reverse()
        elif order is Order.S:
            axes.sort(key=lambda a: (abs(self.strides[a]), -a))
        dims = [self.dims[a] for a in axes]
        strides = [self.strides[a] for a in axes]

        if compact:
            pairs = [(d, s) for d, s in zip(dims, strides) if d != 1]
            merged: list[list[int]] = []
            for d, s in pairs:
                if merged and s == merged[-1][1] * merged[-1][0]:
                    merged[-1][0] *= d
                else:
                    merged.append([d, s])
            dims = [d for d, _ in merged]
            strides = [s for _, s in merged]

        return StrideLayout(Shape(tuple(dims)), self.offset, tuple(strides))

    # ------------------------------------------------------------------
    # Metadata transforms (views)
    # ------------------------------------------------------------------
    def broadcast_to(self, shape: ShapeLike) -> "StrideLayout":
        """
        Broadcast to a larger shape, using stride 0 on every expanded axis.

        Raises
        ------
        ShapeMismatchError
            If this layout cannot be broadcast to `shape`.
        """
        target = Shape.coerce(shape)
        pad = target.rank - self.rank
        if pad < 0:
            raise ShapeMismatchError(
                f"Cannot broadcast {list(self.dims)} to lower rank {list(target.dims)}",
                shapes=[self.dims, target.dims],
                op="broadcast_to",
            )
        strides = [0] * pad
        for i, (d, s) in enumerate(zip(self.dims, self.strides)):
            t = target.dims[pad + i]
            if d == t:
                strides.append(s)
            elif d == 1:
                strides.append(0)
            else:
                raise ShapeMismatchError(
                    f"Cannot broadcast {list(self.dims)} to {list(target.dims)}",
                    shapes=[self.dims, target.dims],
                    op="broadcast_to",
                )
        return StrideLayout(target, self.offset, tuple(strides))

    def transpose(self, *perm: int) -> "StrideLayout":
        """
        Permute axes. Without arguments the axis order is reversed.

        Raises
        ------
        IndexOutOfRangeError
            If `perm` is not a permutation of ``range(rank)``.
        """
        if not perm:
            perm = tuple(range(self.rank - 1, -1, -1))
        perm = tuple(self.shape.normalize_axis(p) for p in perm)
        if sorted(perm) != list(range(self.rank)):
            raise IndexOutOfRangeError(perm, self.rank)
        return StrideLayout(
            Shape(tuple(self.dims[p] for p in perm)),
            self.offset,
            tuple(self.strides[p] for p in perm),
        )

    def select(self, axis: int, index: int) -> "StrideLayout":
        """Fix one axis at `index`, dropping it from the layout."""
        axis = self.shape.normalize_axis(axis)
        d = self.dims[axis]
        if index < 0 or index >= d:
            raise IndexOutOfRangeError(index, d, axis=axis)
        return StrideLayout(
            Shape(self.dims[:axis] + self.dims[axis + 1 :]),
            self.offset + index * self.strides[axis],
            self.strides[:axis] + self.strides[axis + 1 :],
        )

    def slice(self, axis: int, start: int, end: Optional[int] = None, step: int = 1) -> "StrideLayout":
        """
        Keep ``start, start + step, ...`` below `end` along one axis.

        Raises
        ------
        IndexOutOfRangeError
            If ``0 <= start <= end <= extent`` does not hold.
        ValueError
            If `step` is not positive.
        """
        axis = self.shape.normalize_axis(axis)
        d = self.dims[axis]
        end = d if end is None else end
        if step <= 0:
            raise ValueError(f"slice step must be positive, got {step}")
        if start < 0 or start > d:
            raise IndexOutOfRangeError(start, d, axis=axis)
        if end < start or end > d:
            raise IndexOutOfRangeError(end, d, axis=axis)
        extent = (end - start + step - 1) // step
        dims = list(self.dims)
        strides = list(self.strides)
        dims[axis] = extent
        strides[axis] = self.strides[axis] * step
        offset = self.offset + start * self.strides[axis] if extent > 0 else self.offset
        return StrideLayout(Shape(tuple(dims)), offset, tuple(strides))

    def stretch(self, axis: int) -> "StrideLayout":
        """Insert a new axis of extent 1 at position `axis`."""
        rank = self.rank
        a = axis + rank + 1 if axis < 0 else axis
        if a < 0 or a > rank:
            raise IndexOutOfRangeError(axis, rank + 1)
        return StrideLayout(
            Shape(self.dims[:a] + (1,) + self.dims[a:]),
            self.offset,
            self.strides[:a] + (0,) + self.strides[a:],
        )

    def expand(self, axis: int, size: int) -> "StrideLayout":
        """Repeat a unit axis `size` times through a zero stride."""
        axis = self.shape.normalize_axis(axis)
        if self.dims[axis] != 1:
            raise ShapeMismatchError(
                f"Only unit axes can be expanded; axis {axis} has extent {self.dims[axis]}",
                shapes=[self.dims],
                op="expand",
            )
        dims = list(self.dims)
        strides = list(self.strides)
        dims[axis] = int(size)
        strides[axis] = 0
        return StrideLayout(Shape(tuple(dims)), self.offset, tuple(strides))

    def squeeze(self, axis: Optional[int] = None) -> "StrideLayout":
        """Drop one unit axis, or every unit axis when `axis` is None."""
        if axis is None:
            keep = [i for i, d in enumerate(self.dims) if d != 1]
        else:
            a = self.shape.normalize_axis(axis)
            if self.dims[a] != 1:
                raise ShapeMismatchError(
                    f"Cannot squeeze axis {a} with extent {self.dims[a]}",
                    shapes=[self.dims],
                    op="squeeze",
                )
            keep = [i for i in range(self.rank) if i != a]
        return StrideLayout(
            Shape(tuple(self.dims[i] for i in keep)),
            self.offset,
            tuple(self.strides[i] for i in keep),
        )

    def reshape_view(self, shape: ShapeLike) -> Optional["StrideLayout"]:
        """
        Reinterpret the layout with a new shape of equal size, if possible.

        Only C-ordered layouts can be reshaped without moving data; for
        anything else ``None`` is returned and the caller must copy.
        """
        target = Shape.coerce(shape)
        if target.size != self.size:
            raise ShapeMismatchError(
                f"Cannot reshape {list(self.dims)} into {list(target.dims)}",
                shapes=[self.dims, target.dims],
                op="reshape",
            )
        if not self.is_c_ordered():
            return None
        return StrideLayout(target, self.offset, target.c_strides())
