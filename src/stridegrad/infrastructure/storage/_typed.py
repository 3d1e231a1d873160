"""
Typed storage backends.

The set of backends is closed: one class per `DType`, registered in
`STORAGE_TYPES`. Factories go through `allocate` and `wrap` rather than
instantiating backends directly.
"""

from __future__ import annotations

from typing import Optional, Type

import numpy as np

from ...domain._dtype import DType
from .._logging import get_logger
from ._base import ArrayStorage
from ._casting import dtype_of_numpy

logger = get_logger(__name__)


class Float64Storage(ArrayStorage):
    DTYPE = DType.FLOAT64


class Float32Storage(ArrayStorage):
    DTYPE = DType.FLOAT32


class Int32Storage(ArrayStorage):
    DTYPE = DType.INT32


class Int8Storage(ArrayStorage):
    DTYPE = DType.INT8


STORAGE_TYPES: dict[DType, Type[ArrayStorage]] = {
    DType.FLOAT64: Float64Storage,
    DType.FLOAT32: Float32Storage,
    DType.INT32: Int32Storage,
    DType.INT8: Int8Storage,
}


def storage_type(dtype: DType) -> Type[ArrayStorage]:
    return STORAGE_TYPES[DType.parse(dtype)]


def allocate(dtype: DType, size: int) -> ArrayStorage:
    """Create a zero-filled, exclusively owned storage of `size` slots."""
    dtype = DType.parse(dtype)
    logger.debug("allocating %s storage with %d slots", dtype, size)
    return STORAGE_TYPES[dtype].zeros(size)


def wrap(array: np.ndarray, dtype: Optional[DType] = None) -> ArrayStorage:
    """
    Adopt a 1-D buffer as storage.

    When `dtype` is omitted it is derived from the buffer's NumPy dtype. The
    buffer is shared when it already has the native dtype, converted otherwise.
    """
    arr = np.asarray(array)
    dtype = dtype_of_numpy(arr.dtype) if dtype is None else DType.parse(dtype)
    return STORAGE_TYPES[dtype](arr.reshape(-1) if arr.ndim != 1 else arr)
