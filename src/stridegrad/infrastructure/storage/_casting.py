"""
Cross-type casting rules shared by every storage backend.

The rules are those of a narrowing/widening numeric cast, never a
reinterpretation of bits:

- float -> int32: truncate toward zero, saturate to the int32 range, NaN -> 0
- float -> int8 : as float -> int32, then wrap modulo 256
- int   -> int8 : wrap modulo 256
- int   -> float: exact widening (float64) or round-to-nearest (float32)
"""

from __future__ import annotations

from typing import Any

import numpy as np

from ...domain._dtype import DType

NUMPY_DTYPES: dict[DType, np.dtype] = {
    DType.FLOAT64: np.dtype(np.float64),
    DType.FLOAT32: np.dtype(np.float32),
    DType.INT32: np.dtype(np.int32),
    DType.INT8: np.dtype(np.int8),
}

_INT32_MIN = float(np.iinfo(np.int32).min)
_INT32_MAX = float(np.iinfo(np.int32).max)


def numpy_dtype(dtype: DType) -> np.dtype:
    return NUMPY_DTYPES[dtype]


def dtype_of_numpy(np_dtype: Any) -> DType:
    """
    Map a NumPy dtype onto the closest supported element type.

    float64 and float32 map to themselves, other floats to FLOAT32; int8,
    uint8 and bool map to INT8; every other integer maps to INT32.
    """
    dt = np.dtype(np_dtype)
    if dt == np.float64:
        return DType.FLOAT64
    if dt.kind == "f":
        return DType.FLOAT32
    if dt.kind == "b" or dt.itemsize == 1:
        return DType.INT8
    if dt.kind in "iu":
        return DType.INT32
    raise TypeError(f"Unsupported NumPy dtype: {dt}")


def cast_array(dtype: DType, values: Any) -> np.ndarray:
    """Convert `values` to the native NumPy type of `dtype` using the cast rules."""
    arr = np.asarray(values)
    target = NUMPY_DTYPES[dtype]
    if arr.dtype == target:
        return arr
    if dtype.is_float:
        return arr.astype(target)
    if arr.dtype.kind == "f":
        with np.errstate(invalid="ignore"):
            arr = np.nan_to_num(np.trunc(arr), nan=0.0, posinf=_INT32_MAX, neginf=_INT32_MIN)
            arr = np.clip(arr, _INT32_MIN, _INT32_MAX).astype(np.int64)
    elif arr.dtype.kind == "b":
        arr = arr.astype(np.int64)
    return arr.astype(target)


def cast_scalar(dtype: DType, value: Any) -> Any:
    """Cast one value to `dtype` and return it as a Python scalar."""
    return cast_array(dtype, np.asarray(value)).item()
