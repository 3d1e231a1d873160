"""
Elementwise binary kernels for NArray.

Every operation follows the same plan:

1. Resolve the result shape (broadcast of both operands) and element type
   (promotion of both operand types; Python scalars take the receiver's type).
2. Gather both operands in logical C order over the result shape.
3. Apply the NumPy ufunc chunk by chunk (`map_chunks`), writing disjoint
   ranges of one output buffer.
4. Out-of-place: wrap the buffer as a new dense array. In-place: scatter it
   through the receiver's own pointers.

Both operands are fully gathered before anything is written, so in-place
operations are safe when the operand aliases the receiver.
"""

from __future__ import annotations

from numbers import Number
from typing import Any, Callable

import numpy as np

from .....domain._dtype import DType
from .....domain._errors import ShapeMismatchError, UnsupportedElementTypeError
from .....domain._order import Order
from .....domain._shape import broadcast_shapes
from ...._parallel import map_chunks
from ....storage import cast_array, numpy_dtype
from ..._narray_builder import FLOAT, INT, narray_control_path_manager, unsupported_kind
from ._base import NArrayMixinArithmetic as NMA


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (Number, np.number, bool))


def _check_operand(other: Any, op: str) -> None:
    if not (_is_scalar(other) or isinstance(other, NMA)):
        raise TypeError(
            f"{op}: unsupported operand type {type(other).__name__!r} for NArray"
        )


def _apply(ufunc: Callable, a: np.ndarray, b: Any, out_dtype: np.dtype) -> np.ndarray:
    n = a.shape[0]
    out = np.empty(n, dtype=out_dtype)
    b_is_vec = isinstance(b, np.ndarray) and b.ndim == 1

    def work(start: int, stop: int) -> None:
        rhs = b[start:stop] if b_is_vec else b
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            out[start:stop] = ufunc(a[start:stop], rhs)

    map_chunks(work, n)
    return out


def _binary(self, other: Any, ufunc: Callable):
    _check_operand(other, ufunc.__name__)
    NArray = type(self)
    if _is_scalar(other):
        dtype = self.dtype
        shape = self.shape
        lhs = self._values()
        rhs = cast_array(dtype, other)
    else:
        dtype = DType.promote(self.dtype, other.dtype)
        shape = broadcast_shapes(self.shape, other.shape)
        lhs = cast_array(dtype, self._values(shape))
        rhs = cast_array(dtype, other._values(shape))
    out = _apply(ufunc, lhs, rhs, numpy_dtype(dtype))
    return NArray._dense(out, shape, dtype)


def _binary_(self, other: Any, ufunc: Callable, op: str):
    _check_operand(other, op)
    if _is_scalar(other):
        dtype = self.dtype
        rhs = cast_array(dtype, other)
    else:
        shape = broadcast_shapes(self.shape, other.shape)
        if shape != self.shape:
            raise ShapeMismatchError(
                f"{op}: result shape {list(shape.dims)} differs from receiver "
                f"shape {list(self.dims)}",
                shapes=[self.dims, other.dims],
                op=op,
            )
        dtype = DType.promote(self.dtype, other.dtype)
        rhs = cast_array(dtype, other._values(self.shape))
    lhs = cast_array(dtype, self._values())
    out = _apply(ufunc, lhs, rhs, numpy_dtype(dtype))
    self._storage.scatter(self.pointers(Order.C), out)
    return self


@narray_control_path_manager(NMA, NMA.add, FLOAT, unsupported_kind)
@narray_control_path_manager(NMA, NMA.add, INT, unsupported_kind)
def narray_add(self, other):
    return _binary(self, other, np.add)


@narray_control_path_manager(NMA, NMA.sub, FLOAT, unsupported_kind)
@narray_control_path_manager(NMA, NMA.sub, INT, unsupported_kind)
def narray_sub(self, other):
    return _binary(self, other, np.subtract)


@narray_control_path_manager(NMA, NMA.mul, FLOAT, unsupported_kind)
@narray_control_path_manager(NMA, NMA.mul, INT, unsupported_kind)
def narray_mul(self, other):
    return _binary(self, other, np.multiply)


@narray_control_path_manager(NMA, NMA.minimum, FLOAT, unsupported_kind)
@narray_control_path_manager(NMA, NMA.minimum, INT, unsupported_kind)
def narray_minimum(self, other):
    return _binary(self, other, np.minimum)


@narray_control_path_manager(NMA, NMA.maximum, FLOAT, unsupported_kind)
@narray_control_path_manager(NMA, NMA.maximum, INT, unsupported_kind)
def narray_maximum(self, other):
    return _binary(self, other, np.maximum)


@narray_control_path_manager(NMA, NMA.div, FLOAT, unsupported_kind)
def narray_div_float(self, other):
    return _binary(self, other, np.true_divide)


@narray_control_path_manager(NMA, NMA.div, INT, unsupported_kind)
def narray_div_int(self, other):
    """
    Integer receivers divide only by floating point arrays.

    The receiver is promoted to the operand's type; anything else raises
    `UnsupportedElementTypeError`.
    """
    _check_operand(other, "div")
    if _is_scalar(other) or not other.dtype.is_float:
        raise UnsupportedElementTypeError("div", self.dtype)
    return _binary(self.cast(other.dtype), other, np.true_divide)


@narray_control_path_manager(NMA, NMA.add_, FLOAT, unsupported_kind)
@narray_control_path_manager(NMA, NMA.add_, INT, unsupported_kind)
def narray_add_(self, other):
    return _binary_(self, other, np.add, "add_")


@narray_control_path_manager(NMA, NMA.sub_, FLOAT, unsupported_kind)
@narray_control_path_manager(NMA, NMA.sub_, INT, unsupported_kind)
def narray_sub_(self, other):
    return _binary_(self, other, np.subtract, "sub_")


@narray_control_path_manager(NMA, NMA.mul_, FLOAT, unsupported_kind)
@narray_control_path_manager(NMA, NMA.mul_, INT, unsupported_kind)
def narray_mul_(self, other):
    return _binary_(self, other, np.multiply, "mul_")


@narray_control_path_manager(NMA, NMA.div_, FLOAT, unsupported_kind)
def narray_div_(self, other):
    return _binary_(self, other, np.true_divide, "div_")
