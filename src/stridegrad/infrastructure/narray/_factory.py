"""
Factory functions for NArray.

Every factory allocates fresh, exclusively owned storage. When `dtype` is not
given, the configured default element type (`EngineConfig.default_dtype`) is
used, except for `from_numpy`, which keeps the closest type to the source
buffer's dtype.

Random factories take an explicit `numpy.random.Generator`; there is no
global random state.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence, Union

import numpy as np

from ...domain._dtype import DType
from ...domain._errors import ShapeMismatchError
from ...domain._layout import StrideLayout
from ...domain._order import Order
from ...domain._shape import Shape, ShapeLike
from .._config import get_config
from ..storage import allocate, cast_array, dtype_of_numpy
from ._narray import NArray

RandomSource = Union[np.random.Generator, int]


def _resolve_dtype(dtype: Optional[DType]) -> DType:
    return get_config().default_dtype if dtype is None else DType.parse(dtype)


def _generator(source: RandomSource) -> np.random.Generator:
    if isinstance(source, np.random.Generator):
        return source
    return np.random.default_rng(source)


def full(shape: ShapeLike, value: Any, dtype: Optional[DType] = None, order: Order = Order.C) -> NArray:
    """Array of `shape` with every element equal to `value`."""
    dtype = _resolve_dtype(dtype)
    shape = Shape.coerce(shape)
    storage = allocate(dtype, shape.size)
    if shape.size:
        storage.fill(value)
    return NArray(storage, StrideLayout.of_dense(shape, 0, order))


def zeros(shape: ShapeLike, dtype: Optional[DType] = None, order: Order = Order.C) -> NArray:
    dtype = _resolve_dtype(dtype)
    shape = Shape.coerce(shape)
    return NArray(allocate(dtype, shape.size), StrideLayout.of_dense(shape, 0, order))


def ones(shape: ShapeLike, dtype: Optional[DType] = None, order: Order = Order.C) -> NArray:
    return full(shape, 1, dtype, order)


def scalar(value: Any, dtype: Optional[DType] = None) -> NArray:
    """Rank-0 array holding `value`."""
    return full((), value, dtype)


def from_buffer(
    values: Sequence[Any],
    shape: Optional[ShapeLike] = None,
    dtype: Optional[DType] = None,
    order: Order = Order.C,
) -> NArray:
    """
    Array built from a flat sequence of values.

    Parameters
    ----------
    values : Sequence
        Flat values, listed in `order` over `shape`. The values are copied.
    shape : Optional[ShapeLike]
        Target shape; defaults to ``(len(values),)``.
    dtype : Optional[DType]
        Element type. Defaults to the NumPy buffer's type when `values` is an
        ndarray and to the configured default otherwise.
    order : Order
        ``C`` or ``F``: the order in which `values` enumerate the elements.
        The storage is laid out in the same order.

    Raises
    ------
    ShapeMismatchError
        If the number of values differs from the size of `shape`.
    """
    arr = np.asarray(values).reshape(-1)
    if dtype is None and isinstance(values, np.ndarray):
        dtype = dtype_of_numpy(values.dtype)
    dtype = _resolve_dtype(dtype)
    shape = Shape.coerce((arr.shape[0],) if shape is None else shape)
    if shape.size != arr.shape[0]:
        raise ShapeMismatchError(
            f"{arr.shape[0]} values cannot fill shape {list(shape.dims)}",
            shapes=[(arr.shape[0],), shape.dims],
            op="from_buffer",
        )
    storage = allocate(dtype, shape.size)
    if shape.size:
        storage.array[:] = cast_array(dtype, arr)
    return NArray(storage, StrideLayout.of_dense(shape, 0, order))


def from_numpy(array: Any, dtype: Optional[DType] = None) -> NArray:
    """Copy a NumPy array (or nested sequence) into a C-ordered NArray of the same shape."""
    arr = np.asarray(array)
    if dtype is None:
        dtype = dtype_of_numpy(arr.dtype) if isinstance(array, np.ndarray) else None
    return NArray._dense(arr, arr.shape, _resolve_dtype(dtype))


def from_function(
    shape: ShapeLike,
    fn: Callable[..., Any],
    dtype: Optional[DType] = None,
    order: Order = Order.C,
) -> NArray:
    """
    Array whose element at logical index ``idx`` is ``fn(*idx)``.

    `fn` is called once per element, in logical C order.
    """
    shape = Shape.coerce(shape)
    values = [fn(*idx) for idx in np.ndindex(*shape.dims)]
    return from_numpy(np.asarray(values).reshape(shape.dims), _resolve_dtype(dtype)).copy(order)


def seq(shape: ShapeLike, dtype: Optional[DType] = None) -> NArray:
    """Array holding ``0, 1, 2, ...`` in logical C order."""
    shape = Shape.coerce(shape)
    return NArray._dense(np.arange(shape.size), shape, _resolve_dtype(dtype))


def eye(n: int, dtype: Optional[DType] = None) -> NArray:
    return NArray._dense(np.eye(int(n)), (int(n), int(n)), _resolve_dtype(dtype))


def random(shape: ShapeLike, generator: RandomSource, dtype: Optional[DType] = None) -> NArray:
    """Uniform samples from ``[0, 1)`` drawn from `generator`."""
    shape = Shape.coerce(shape)
    dtype = _resolve_dtype(dtype)
    return NArray._dense(_generator(generator).random(shape.size), shape, dtype)


def randn(shape: ShapeLike, generator: RandomSource, dtype: Optional[DType] = None) -> NArray:
    """Standard normal samples drawn from `generator`."""
    shape = Shape.coerce(shape)
    dtype = _resolve_dtype(dtype)
    return NArray._dense(_generator(generator).standard_normal(shape.size), shape, dtype)
