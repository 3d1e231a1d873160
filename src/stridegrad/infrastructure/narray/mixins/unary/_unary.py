"""
Elementwise unary kernels for NArray.

Each kernel gathers the receiver in logical C order, applies a NumPy function
chunk by chunk and either wraps the result as a new dense array or scatters it
back through the receiver's pointers.
"""

from __future__ import annotations

from typing import Callable

import numpy as np

from .....domain._order import Compare, Order
from ...._parallel import map_chunks
from ....storage import cast_scalar, numpy_dtype
from ..._narray_builder import FLOAT, INT, narray_control_path_manager, unsupported_kind
from ._base import NArrayMixinUnary as NMU

_COMPARE: dict[Compare, Callable] = {
    Compare.GT: np.greater,
    Compare.GE: np.greater_equal,
    Compare.LT: np.less,
    Compare.LE: np.less_equal,
    Compare.EQ: np.equal,
    Compare.NE: np.not_equal,
}


def _map(self, fn: Callable[[np.ndarray], np.ndarray]) -> np.ndarray:
    values = self._values()
    out = np.empty(values.shape[0], dtype=numpy_dtype(self.dtype))

    def work(start: int, stop: int) -> None:
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            out[start:stop] = fn(values[start:stop])

    map_chunks(work, values.shape[0])
    return out


def _unary(self, fn: Callable[[np.ndarray], np.ndarray]):
    return type(self)._dense(_map(self, fn), self.shape, self.dtype)


def _unary_(self, fn: Callable[[np.ndarray], np.ndarray]):
    self._storage.scatter(self.pointers(Order.C), _map(self, fn))
    return self


def _sigmoid(x: np.ndarray) -> np.ndarray:
    """Logistic function written through tanh; finite for every input."""
    return 0.5 * (1.0 + np.tanh(0.5 * x))


def _clip(self, low, high) -> Callable[[np.ndarray], np.ndarray]:
    lo = None if low is None else cast_scalar(self.dtype, low)
    hi = None if high is None else cast_scalar(self.dtype, high)
    if lo is None and hi is None:
        return lambda x: x
    return lambda x: np.clip(x, lo, hi)


@narray_control_path_manager(NMU, NMU.neg, FLOAT, unsupported_kind)
@narray_control_path_manager(NMU, NMU.neg, INT, unsupported_kind)
def narray_neg(self):
    return _unary(self, np.negative)


@narray_control_path_manager(NMU, NMU.abs, FLOAT, unsupported_kind)
@narray_control_path_manager(NMU, NMU.abs, INT, unsupported_kind)
def narray_abs(self):
    return _unary(self, np.abs)


@narray_control_path_manager(NMU, NMU.sqr, FLOAT, unsupported_kind)
@narray_control_path_manager(NMU, NMU.sqr, INT, unsupported_kind)
def narray_sqr(self):
    return _unary(self, np.square)


@narray_control_path_manager(NMU, NMU.relu, FLOAT, unsupported_kind)
@narray_control_path_manager(NMU, NMU.relu, INT, unsupported_kind)
def narray_relu(self):
    zero = np.zeros((), dtype=numpy_dtype(self.dtype))
    return _unary(self, lambda x: np.maximum(x, zero))


@narray_control_path_manager(NMU, NMU.clamp, FLOAT, unsupported_kind)
@narray_control_path_manager(NMU, NMU.clamp, INT, unsupported_kind)
def narray_clamp(self, low=None, high=None):
    return _unary(self, _clip(self, low, high))


@narray_control_path_manager(NMU, NMU.compare_mask, FLOAT, unsupported_kind)
@narray_control_path_manager(NMU, NMU.compare_mask, INT, unsupported_kind)
def narray_compare_mask(self, cmp, threshold):
    fn = _COMPARE[Compare(cmp)]
    return _unary(self, lambda x: fn(x, threshold))


@narray_control_path_manager(NMU, NMU.pow, FLOAT, unsupported_kind)
def narray_pow(self, exponent):
    return _unary(self, lambda x: np.power(x, exponent))


@narray_control_path_manager(NMU, NMU.reciprocal, FLOAT, unsupported_kind)
def narray_reciprocal(self):
    return _unary(self, np.reciprocal)


@narray_control_path_manager(NMU, NMU.exp, FLOAT, unsupported_kind)
def narray_exp(self):
    return _unary(self, np.exp)


@narray_control_path_manager(NMU, NMU.log, FLOAT, unsupported_kind)
def narray_log(self):
    return _unary(self, np.log)


@narray_control_path_manager(NMU, NMU.sqrt, FLOAT, unsupported_kind)
def narray_sqrt(self):
    return _unary(self, np.sqrt)


@narray_control_path_manager(NMU, NMU.tanh, FLOAT, unsupported_kind)
def narray_tanh(self):
    return _unary(self, np.tanh)


@narray_control_path_manager(NMU, NMU.sigmoid, FLOAT, unsupported_kind)
def narray_sigmoid(self):
    return _unary(self, _sigmoid)


@narray_control_path_manager(NMU, NMU.neg_, FLOAT, unsupported_kind)
@narray_control_path_manager(NMU, NMU.neg_, INT, unsupported_kind)
def narray_neg_(self):
    return _unary_(self, np.negative)


@narray_control_path_manager(NMU, NMU.abs_, FLOAT, unsupported_kind)
@narray_control_path_manager(NMU, NMU.abs_, INT, unsupported_kind)
def narray_abs_(self):
    return _unary_(self, np.abs)


@narray_control_path_manager(NMU, NMU.sqr_, FLOAT, unsupported_kind)
@narray_control_path_manager(NMU, NMU.sqr_, INT, unsupported_kind)
def narray_sqr_(self):
    return _unary_(self, np.square)


@narray_control_path_manager(NMU, NMU.clamp_, FLOAT, unsupported_kind)
@narray_control_path_manager(NMU, NMU.clamp_, INT, unsupported_kind)
def narray_clamp_(self, low=None, high=None):
    return _unary_(self, _clip(self, low, high))


@narray_control_path_manager(NMU, NMU.exp_, FLOAT, unsupported_kind)
def narray_exp_(self):
    return _unary_(self, np.exp)


@narray_control_path_manager(NMU, NMU.log_, FLOAT, unsupported_kind)
def narray_log_(self):
    return _unary_(self, np.log)


@narray_control_path_manager(NMU, NMU.sqrt_, FLOAT, unsupported_kind)
def narray_sqrt_(self):
    return _unary_(self, np.sqrt)
