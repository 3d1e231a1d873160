"""
Sum, mean, variance and standard deviation kernels.

Global reductions split the C-order element sequence into chunks with
`map_chunks`, reduce each chunk to a partial in the receiver's element type,
and combine the partials serially in chunk order. Axis reductions are row-wise
NumPy reductions over `axis_values`.
"""

from __future__ import annotations

import numpy as np

from ...._parallel import map_chunks
from ....storage import numpy_dtype
from ..._narray_builder import FLOAT, INT, narray_control_path_manager, unsupported_kind
from ._base import NArrayMixinReduction as NMR
from ._common import axis_values, check_nonempty, normalize, result_dims


def _global_sum(values: np.ndarray, acc_dtype: np.dtype):
    partials = map_chunks(
        lambda start, stop: values[start:stop].sum(dtype=acc_dtype), values.shape[0]
    )
    return np.sum(np.asarray(partials, dtype=acc_dtype), dtype=acc_dtype)


def _sum_along(self, axis, acc_dtype: np.dtype):
    if axis is None:
        return _global_sum(self._values(), acc_dtype)
    return axis_values(self, axis).sum(axis=1, dtype=acc_dtype)


@narray_control_path_manager(NMR, NMR.sum, FLOAT, unsupported_kind)
@narray_control_path_manager(NMR, NMR.sum, INT, unsupported_kind)
def narray_sum(self, axis=None, keepdims=False):
    axis = normalize(self, axis)
    total = _sum_along(self, axis, numpy_dtype(self.dtype))
    return type(self)._dense(total, result_dims(self.dims, axis, keepdims), self.dtype)


@narray_control_path_manager(NMR, NMR.mean, FLOAT, unsupported_kind)
def narray_mean_float(self, axis=None, keepdims=False):
    axis = normalize(self, axis)
    check_nonempty(self, axis, "mean")
    n = self.size if axis is None else self.dims[axis]
    acc = numpy_dtype(self.dtype)
    total = _sum_along(self, axis, acc)
    return type(self)._dense(
        np.true_divide(total, acc.type(n)), result_dims(self.dims, axis, keepdims), self.dtype
    )


@narray_control_path_manager(NMR, NMR.mean, INT, unsupported_kind)
def narray_mean_int(self, axis=None, keepdims=False):
    axis = normalize(self, axis)
    check_nonempty(self, axis, "mean")
    n = self.size if axis is None else self.dims[axis]
    total = np.asarray(_sum_along(self, axis, np.dtype(np.int64)))
    # truncate toward zero, not floor
    quotient = np.sign(total) * (np.abs(total) // n)
    return type(self)._dense(quotient, result_dims(self.dims, axis, keepdims), self.dtype)


def _variance(self, axis, ddof):
    check_nonempty(self, axis, "var")
    acc = numpy_dtype(self.dtype)
    if axis is None:
        rows = self._values().reshape(1, -1)
    else:
        rows = axis_values(self, axis)
    n = rows.shape[1]
    centered = rows - rows.sum(axis=1, dtype=acc, keepdims=True) / acc.type(n)
    sq = np.square(centered).sum(axis=1, dtype=acc)
    with np.errstate(divide="ignore", invalid="ignore"):
        out = sq / acc.type(n - ddof)
    return out if axis is not None else out[0]


@narray_control_path_manager(NMR, NMR.var, FLOAT, unsupported_kind)
def narray_var(self, axis=None, ddof=0, keepdims=False):
    axis = normalize(self, axis)
    out = _variance(self, axis, int(ddof))
    return type(self)._dense(out, result_dims(self.dims, axis, keepdims), self.dtype)


@narray_control_path_manager(NMR, NMR.std, FLOAT, unsupported_kind)
def narray_std(self, axis=None, ddof=0, keepdims=False):
    axis = normalize(self, axis)
    with np.errstate(invalid="ignore"):
        out = np.sqrt(_variance(self, axis, int(ddof)))
    return type(self)._dense(out, result_dims(self.dims, axis, keepdims), self.dtype)
