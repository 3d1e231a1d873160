"""
Concrete N-dimensional array over typed, strided storage.

`NArray` is the composition of one `ArrayStorage` and one `StrideLayout`.
The layout maps logical indices to storage pointers; the storage holds the
element values. Several arrays may share one storage: every view (slice,
transpose, select, broadcast, reshape of a C-ordered array) is a new
`NArray` over the same storage with a different layout, so writes through
any alias are visible through all of them.

Operations are contributed by mixins:

- `NArrayMixinArithmetic`  elementwise binary operations (dispatched on kind)
- `NArrayMixinUnary`       elementwise unary operations (dispatched on kind)
- `NArrayMixinReduction`   sum/mean/var/max/min/arg-reductions (dispatched)
- `NArrayMixinMemory`      views, copies, casts, fill and assignment
- `NArrayMixinLinalg`      matrix products

Element-kind dispatch uses the `_kind` attribute (``"float"`` or ``"int"``),
read by the control-path wrappers installed on the mixin classes.
"""

from __future__ import annotations

from typing import Any, Iterator, Optional, Union

import numpy as np

from ...domain._dtype import DType
from ...domain._errors import IndexOutOfRangeError, ShapeMismatchError
from ...domain._layout import StrideLayout
from ...domain._order import Order
from ...domain._shape import Shape, ShapeLike
from ..iterators import LoopDescriptor, PointerIterator
from ..storage import ArrayStorage, allocate, cast_array
from .mixins.arithmetic import NArrayMixinArithmetic
from .mixins.linalg import NArrayMixinLinalg
from .mixins.memory import NArrayMixinMemory
from .mixins.reduction import NArrayMixinReduction
from .mixins.unary import NArrayMixinUnary

IndexKey = Union[int, slice, tuple]


class NArray(
    NArrayMixinArithmetic,
    NArrayMixinUnary,
    NArrayMixinReduction,
    NArrayMixinMemory,
    NArrayMixinLinalg,
):
    """
    Strided N-dimensional array.

    Parameters
    ----------
    storage : ArrayStorage
        Element buffer. It is shared, not copied.
    layout : StrideLayout
        Mapping from logical indices to pointers into `storage`.

    Raises
    ------
    IndexOutOfRangeError
        If the layout addresses a pointer outside the storage.

    Notes
    -----
    Instances should normally be built with the factory functions
    (`zeros`, `from_buffer`, `seq`, ...) or derived from other arrays.
    """

    def __init__(self, storage: ArrayStorage, layout: StrideLayout) -> None:
        bounds = layout.pointer_bounds()
        if bounds is not None and (bounds[0] < 0 or bounds[1] >= storage.size):
            raise IndexOutOfRangeError(bounds, storage.size)
        self._storage = storage
        self._layout = layout

    @classmethod
    def _dense(cls, values: Any, shape: ShapeLike, dtype: DType) -> "NArray":
        """
        Build a new dense C-order array from values listed in logical C order.

        `values` may be a scalar (repeated) or anything NumPy can flatten to
        ``shape.size`` elements. The result owns fresh storage.
        """
        dtype = DType.parse(dtype)
        shape = Shape.coerce(shape)
        storage = allocate(dtype, shape.size)
        if shape.size:
            storage.array[:] = cast_array(dtype, values).reshape(-1)
        return cls(storage, StrideLayout.of_dense(shape))

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def storage(self) -> ArrayStorage:
        return self._storage

    @property
    def layout(self) -> StrideLayout:
        return self._layout

    @property
    def shape(self) -> Shape:
        return self._layout.shape

    @property
    def dims(self) -> tuple[int, ...]:
        return self._layout.dims

    @property
    def dtype(self) -> DType:
        return self._storage.dtype

    @property
    def rank(self) -> int:
        return self._layout.rank

    @property
    def size(self) -> int:
        return self._layout.size

    @property
    def _kind(self) -> str:
        return self._storage.dtype.kind

    def dim(self, axis: int) -> int:
        return self._layout.dim(axis)

    def is_c_ordered(self) -> bool:
        return self._layout.is_c_ordered()

    def shares_storage(self, other: "NArray") -> bool:
        """True when both arrays read and write the same storage object."""
        return self._storage is other._storage

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------
    def get(self, *idx: int) -> Any:
        return self._storage.get(self._layout.pointer(*idx))

    def set(self, value: Any, *idx: int) -> None:
        self._storage.set(self._layout.pointer(*idx), value)

    def inc(self, value: Any, *idx: int) -> None:
        self._storage.inc(self._layout.pointer(*idx), value)

    def item(self) -> Any:
        """
        Return the single element of a one-element array as a Python scalar.

        Raises
        ------
        ShapeMismatchError
            If the array does not hold exactly one element.
        """
        if self.size != 1:
            raise ShapeMismatchError(
                f"item() requires exactly one element, shape is {list(self.dims)}",
                shapes=[self.dims],
                op="item",
            )
        return self._storage.get(int(self.pointers()[0]))

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------
    def ptr_iterator(self, order: Order = Order.S) -> PointerIterator:
        return PointerIterator(self._layout, order)

    def pointers(self, order: Order = Order.C) -> np.ndarray:
        """Every storage pointer of the array, in `order`, as an int64 array."""
        return LoopDescriptor.of(self._layout, order).pointers()

    def _values(self, shape: Optional[ShapeLike] = None) -> np.ndarray:
        """
        Gather the elements in logical C order into a flat native buffer.

        With `shape`, the array is broadcast to that shape first.
        """
        layout = self._layout if shape is None else self._layout.broadcast_to(shape)
        return self._storage.gather(LoopDescriptor.of(layout, Order.C).pointers())

    def to_numpy(self) -> np.ndarray:
        """Return a C-contiguous NumPy copy with the array's shape and native dtype."""
        return self._values().reshape(self.dims)

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        arr = self.to_numpy()
        return arr if dtype is None else arr.astype(dtype)

    def tolist(self) -> Any:
        return self.to_numpy().tolist()

    def __iter__(self) -> Iterator["NArray"]:
        if self.rank == 0:
            raise TypeError("iteration over a 0-d array")
        for i in range(self.dims[0]):
            yield self.select(0, i)

    def __len__(self) -> int:
        if self.rank == 0:
            raise TypeError("len() of a 0-d array")
        return self.dims[0]

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------
    def _index_layout(self, key: IndexKey) -> StrideLayout:
        keys = key if isinstance(key, tuple) else (key,)
        if len(keys) > self.rank:
            raise IndexOutOfRangeError(key, self.rank)
        layout = self._layout
        axis = 0
        for k in keys:
            d = layout.dims[axis]
            if isinstance(k, slice):
                if k.step is not None and k.step <= 0:
                    raise ValueError(f"slice step must be positive, got {k.step}")
                start, stop, step = k.indices(d)
                layout = layout.slice(axis, start, max(start, stop), step)
                axis += 1
            elif isinstance(k, (int, np.integer)):
                i = int(k)
                if i < -d or i >= d:
                    raise IndexOutOfRangeError(i, d, axis=axis)
                layout = layout.select(axis, i + d if i < 0 else i)
            else:
                raise TypeError(f"Unsupported index {k!r}; use ints and slices")
        return layout

    def __getitem__(self, key: IndexKey) -> "NArray":
        """Return a view selected by integers (drop an axis) and slices (keep it)."""
        return type(self)(self._storage, self._index_layout(key))

    def __setitem__(self, key: IndexKey, value: Any) -> None:
        self[key].assign_(value)

    def __repr__(self) -> str:
        return (
            f"NArray(shape={list(self.dims)}, dtype={self.dtype}, "
            f"offset={self._layout.offset}, strides={list(self._layout.strides)})\n"
            f"{np.array2string(self.to_numpy())}"
        )
