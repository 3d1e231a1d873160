"""
NumPy-backed storage base class.

`ArrayStorage` owns one flat NumPy buffer of its native element type and
implements the full `IStorage` contract on top of it: native and cross-type
scalar access, range fill, and the vector primitives (`gather`, `scatter`,
`scatter_inc`) that the array kernels use to read and write through pointer
sequences.

Concrete backends only declare their `DType`; the buffer length is fixed at
construction and never changes.
"""

from __future__ import annotations

from typing import Any, ClassVar, Optional

import numpy as np

from ...domain._dtype import DType
from ...domain._errors import IndexOutOfRangeError
from ._casting import cast_array, cast_scalar, numpy_dtype


class ArrayStorage:
    """
    Flat, fixed-length typed buffer.

    Parameters
    ----------
    array : np.ndarray
        One-dimensional buffer. It is adopted without copying when it already
        has the native dtype and is contiguous; otherwise it is converted with
        the storage cast rules.

    Notes
    -----
    Storage is shared, never copied, by every view built over it: mutating a
    slot is visible through every alias.
    """

    DTYPE: ClassVar[DType]

    def __init__(self, array: np.ndarray) -> None:
        arr = np.asarray(array)
        if arr.ndim != 1:
            raise ValueError(f"storage buffers must be 1-D, got ndim={arr.ndim}")
        arr = cast_array(self.DTYPE, arr)
        if not arr.flags.c_contiguous:
            arr = np.ascontiguousarray(arr)
        self._array = arr

    @classmethod
    def zeros(cls, size: int) -> "ArrayStorage":
        return cls(np.zeros(int(size), dtype=numpy_dtype(cls.DTYPE)))

    @property
    def dtype(self) -> DType:
        return self.DTYPE

    @property
    def size(self) -> int:
        return int(self._array.shape[0])

    @property
    def array(self) -> np.ndarray:
        """The underlying buffer (shared, not copied)."""
        return self._array

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={self.size})"

    def _check(self, ptr: int) -> int:
        if ptr < 0 or ptr >= self._array.shape[0]:
            raise IndexOutOfRangeError(ptr, self.size)
        return ptr

    # ------------------------------------------------------------------
    # Native element access
    # ------------------------------------------------------------------
    def get(self, ptr: int) -> Any:
        return self._array[self._check(ptr)].item()

    def set(self, ptr: int, value: Any) -> None:
        self._array[self._check(ptr)] = cast_scalar(self.DTYPE, value)

    def inc(self, ptr: int, value: Any) -> None:
        """Add `value` (cast to the native type first) to one slot."""
        ptr = self._check(ptr)
        v = cast_array(self.DTYPE, np.asarray([value]))
        self._array[ptr : ptr + 1] += v

    def fill(self, value: Any, start: int = 0, length: Optional[int] = None) -> None:
        """Write `value` into ``length`` consecutive slots starting at `start`."""
        length = self.size - start if length is None else int(length)
        if start < 0 or length < 0 or start + length > self.size:
            raise IndexOutOfRangeError((start, length), self.size)
        self._array[start : start + length] = cast_scalar(self.DTYPE, value)

    # ------------------------------------------------------------------
    # Cross-type access
    # ------------------------------------------------------------------
    def get_as(self, dtype: DType, ptr: int) -> Any:
        return cast_scalar(dtype, self._array[self._check(ptr)])

    def set_as(self, dtype: DType, ptr: int, value: Any) -> None:
        self.set(ptr, cast_scalar(dtype, value))

    def inc_as(self, dtype: DType, ptr: int, value: Any) -> None:
        self.inc(ptr, cast_scalar(dtype, value))

    def get_double(self, ptr: int) -> float:
        return self.get_as(DType.FLOAT64, ptr)

    def get_float(self, ptr: int) -> float:
        return self.get_as(DType.FLOAT32, ptr)

    def get_int(self, ptr: int) -> int:
        return self.get_as(DType.INT32, ptr)

    def get_byte(self, ptr: int) -> int:
        return self.get_as(DType.INT8, ptr)

    def set_double(self, ptr: int, value: float) -> None:
        self.set_as(DType.FLOAT64, ptr, value)

    def set_float(self, ptr: int, value: float) -> None:
        self.set_as(DType.FLOAT32, ptr, value)

    def set_int(self, ptr: int, value: int) -> None:
        self.set_as(DType.INT32, ptr, value)

    def set_byte(self, ptr: int, value: int) -> None:
        self.set_as(DType.INT8, ptr, value)

    def inc_double(self, ptr: int, value: float) -> None:
        self.inc_as(DType.FLOAT64, ptr, value)

    def inc_float(self, ptr: int, value: float) -> None:
        self.inc_as(DType.FLOAT32, ptr, value)

    def inc_int(self, ptr: int, value: int) -> None:
        self.inc_as(DType.INT32, ptr, value)

    def inc_byte(self, ptr: int, value: int) -> None:
        self.inc_as(DType.INT8, ptr, value)

    # ------------------------------------------------------------------
    # Vector primitives
    # ------------------------------------------------------------------
    def gather(self, ptrs: np.ndarray) -> np.ndarray:
        """Read the slots named by `ptrs`, in order, into a new array."""
        return self._array[ptrs]

    def scatter(self, ptrs: np.ndarray, values: Any) -> None:
        """
        Write `values` into the slots named by `ptrs`.

        With repeated pointers the last write wins.
        """
        self._array[ptrs] = cast_array(self.DTYPE, values)

    def scatter_inc(self, ptrs: np.ndarray, values: Any) -> None:
        """Add `values` into the slots named by `ptrs`; repeated pointers accumulate."""
        np.add.at(self._array, ptrs, cast_array(self.DTYPE, values))
