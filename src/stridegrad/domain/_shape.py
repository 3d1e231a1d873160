"""
Immutable description of dimensionality and extents.

A `Shape` is an ordered sequence of non-negative extents. Rank 0 describes a
scalar. Shapes compare equal to other shapes with the same extents and, for
convenience, to plain tuples of ints.

Broadcasting follows the usual trailing-axis alignment: two shapes are
compatible if, aligned from the last axis, each pair of extents is equal or
one of them is 1. Missing leading axes behave like extent 1.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, Union

from ._errors import IndexOutOfRangeError, ShapeMismatchError
from ._order import Order

ShapeLike = Union["Shape", Sequence[int]]


@dataclass(frozen=True, eq=False)
class Shape:
    """
    Ordered tuple of axis extents.

    Attributes
    ----------
    dims : tuple[int, ...]
        Extent of each axis.

    Notes
    -----
    Instances are immutable and hashable. The hash matches the hash of the
    underlying tuple so shapes and tuples can be mixed as dictionary keys.
    """

    dims: tuple[int, ...]

    def __post_init__(self) -> None:
        dims = tuple(int(d) for d in self.dims)
        for d in dims:
            if d < 0:
                raise ValueError(f"Invalid shape dimensions: {list(dims)}")
        object.__setattr__(self, "dims", dims)

    @classmethod
    def of(cls, *dims: int) -> "Shape":
        return cls(tuple(dims))

    @classmethod
    def coerce(cls, value: ShapeLike) -> "Shape":
        """Return `value` as a `Shape`, accepting shapes, tuples, lists or ints."""
        if isinstance(value, Shape):
            return value
        if isinstance(value, int):
            return cls((value,))
        return cls(tuple(value))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def rank(self) -> int:
        return len(self.dims)

    @property
    def size(self) -> int:
        """Number of elements, the product of all extents (1 for rank 0)."""
        n = 1
        for d in self.dims:
            n *= d
        return n

    def dim(self, pos: int) -> int:
        """
        Return the extent of an axis.

        Negative positions count from the last axis.

        Raises
        ------
        IndexOutOfRangeError
            If `pos` does not name an axis.
        """
        return self.dims[self.normalize_axis(pos)]

    def normalize_axis(self, axis: int) -> int:
        rank = len(self.dims)
        a = axis + rank if axis < 0 else axis
        if a < 0 or a >= rank:
            raise IndexOutOfRangeError(axis, rank)
        return a

    def unit_dim_count(self) -> int:
        return sum(1 for d in self.dims if d == 1)

    # ------------------------------------------------------------------
    # Canonical strides and positions
    # ------------------------------------------------------------------
    def c_strides(self) -> tuple[int, ...]:
        """Dense row-major strides (last axis has stride 1)."""
        strides = [1] * len(self.dims)
        acc = 1
        for i in range(len(self.dims) - 1, -1, -1):
            strides[i] = acc
            acc *= self.dims[i]
        return tuple(strides)

    def f_strides(self) -> tuple[int, ...]:
        """Dense column-major strides (first axis has stride 1)."""
        strides = [1] * len(self.dims)
        acc = 1
        for i in range(len(self.dims)):
            strides[i] = acc
            acc *= self.dims[i]
        return tuple(strides)

    def strides(self, order: Order) -> tuple[int, ...]:
        if order is Order.C:
            return self.c_strides()
        if order is Order.F:
            return self.f_strides()
        raise ValueError(f"Indexing order not allowed: {order}")

    def index(self, order: Order, pos: int) -> tuple[int, ...]:
        """
        Return the logical index of the `pos`-th element in the given order.

        Only ``C`` and ``F`` are meaningful here; other orders resolve to ``C``.
        """
        order = Order.auto_fc(order)
        if pos < 0 or pos >= self.size:
            raise IndexOutOfRangeError(pos, self.size)
        strides = self.strides(order)
        index = [0] * len(self.dims)
        axes = range(len(self.dims)) if order is Order.C else range(len(self.dims) - 1, -1, -1)
        for i in axes:
            index[i] = pos // strides[i]
            pos = pos % strides[i]
        return tuple(index)

    def position(self, order: Order, *idx: int) -> int:
        """Inverse of `index`: the ordinal of a logical index in the given order."""
        order = Order.auto_fc(order)
        if len(idx) != len(self.dims):
            raise IndexOutOfRangeError(idx, len(self.dims))
        strides = self.strides(order)
        return sum(s * i for s, i in zip(strides, idx))

    # ------------------------------------------------------------------
    # Dunder protocol
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self.dims)

    def __iter__(self) -> Iterator[int]:
        return iter(self.dims)

    def __getitem__(self, item):
        return self.dims[item]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Shape):
            return self.dims == other.dims
        if isinstance(other, tuple):
            return self.dims == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.dims)

    def __repr__(self) -> str:
        return "Shape: [" + ",".join(str(d) for d in self.dims) + "]"


def broadcast_shapes(*shapes: ShapeLike) -> Shape:
    """
    Compute the broadcast result of one or more shapes.

    The operation is symmetric: the result does not depend on argument order.

    Raises
    ------
    ShapeMismatchError
        If any aligned pair of extents differs and neither is 1.
    """
    coerced = [Shape.coerce(s) for s in shapes]
    if not coerced:
        return Shape(())
    rank = max(s.rank for s in coerced)
    out = [1] * rank
    for s in coerced:
        pad = rank - s.rank
        for i, d in enumerate(s.dims):
            cur = out[pad + i]
            if cur == 1:
                out[pad + i] = d
            elif d != 1 and d != cur:
                raise ShapeMismatchError(
                    "Shapes are not broadcast-compatible: "
                    + " vs ".join(str(list(c.dims)) for c in coerced),
                    shapes=[c.dims for c in coerced],
                    op="broadcast",
                )
    return Shape(tuple(out))


def is_broadcast_compatible(*shapes: ShapeLike) -> bool:
    try:
        broadcast_shapes(*shapes)
    except ShapeMismatchError:
        return False
    return True


def normalize_axes(shape: Shape, axes: Iterable[int]) -> tuple[int, ...]:
    return tuple(shape.normalize_axis(a) for a in axes)
