"""
NaN-ignoring reductions.

NaN elements are skipped: ``nansum`` counts them as 0, ``nanmean`` averages
the remaining elements and ``nanmax``/``nanmin`` reduce over the remaining
elements. A slice holding only NaN reduces to ``-inf`` for ``nanmax``, to
``+inf`` for ``nanmin`` and to NaN for ``nanmean``.

Integer arrays cannot hold NaN, so their integer control paths are the plain
reductions.
"""

from __future__ import annotations

import numpy as np

from ...._parallel import map_chunks
from ....storage import numpy_dtype
from ..._narray_builder import FLOAT, INT, narray_control_path_manager, unsupported_kind
from ._base import NArrayMixinReduction as NMR
from ._common import axis_values, check_nonempty, normalize, result_dims


def _nan_total(self, axis, acc: np.dtype):
    if axis is None:
        values = self._values()
        partials = map_chunks(
            lambda start, stop: np.nansum(values[start:stop], dtype=acc), values.shape[0]
        )
        return np.sum(np.asarray(partials, dtype=acc), dtype=acc)
    return np.nansum(axis_values(self, axis), axis=1, dtype=acc)


def _fold(self, axis, ufunc: np.ufunc, initial: float):
    acc = numpy_dtype(self.dtype)
    start = acc.type(initial)
    if axis is None:
        values = self._values()
        partials = map_chunks(
            lambda lo, hi: ufunc.reduce(values[lo:hi], initial=start), values.shape[0]
        )
        return ufunc.reduce(np.asarray(partials, dtype=acc), initial=start)
    return ufunc.reduce(axis_values(self, axis), axis=1, initial=start)


@narray_control_path_manager(NMR, NMR.nansum, FLOAT, unsupported_kind)
def narray_nansum_float(self, axis=None, keepdims=False):
    axis = normalize(self, axis)
    total = _nan_total(self, axis, numpy_dtype(self.dtype))
    return type(self)._dense(total, result_dims(self.dims, axis, keepdims), self.dtype)


@narray_control_path_manager(NMR, NMR.nanmean, FLOAT, unsupported_kind)
def narray_nanmean_float(self, axis=None, keepdims=False):
    axis = normalize(self, axis)
    check_nonempty(self, axis, "nanmean")
    acc = numpy_dtype(self.dtype)
    total = _nan_total(self, axis, acc)
    if axis is None:
        count = np.count_nonzero(~np.isnan(self._values()))
    else:
        count = np.count_nonzero(~np.isnan(axis_values(self, axis)), axis=1)
    with np.errstate(divide="ignore", invalid="ignore"):
        out = np.true_divide(total, np.asarray(count, dtype=acc))
    return type(self)._dense(out, result_dims(self.dims, axis, keepdims), self.dtype)


@narray_control_path_manager(NMR, NMR.nanmax, FLOAT, unsupported_kind)
def narray_nanmax_float(self, axis=None, keepdims=False):
    axis = normalize(self, axis)
    check_nonempty(self, axis, "nanmax")
    out = _fold(self, axis, np.fmax, -np.inf)
    return type(self)._dense(out, result_dims(self.dims, axis, keepdims), self.dtype)


@narray_control_path_manager(NMR, NMR.nanmin, FLOAT, unsupported_kind)
def narray_nanmin_float(self, axis=None, keepdims=False):
    axis = normalize(self, axis)
    check_nonempty(self, axis, "nanmin")
    out = _fold(self, axis, np.fmin, np.inf)
    return type(self)._dense(out, result_dims(self.dims, axis, keepdims), self.dtype)


@narray_control_path_manager(NMR, NMR.nansum, INT, unsupported_kind)
def narray_nansum_int(self, axis=None, keepdims=False):
    return self.sum(axis, keepdims)


@narray_control_path_manager(NMR, NMR.nanmean, INT, unsupported_kind)
def narray_nanmean_int(self, axis=None, keepdims=False):
    return self.mean(axis, keepdims)


@narray_control_path_manager(NMR, NMR.nanmax, INT, unsupported_kind)
def narray_nanmax_int(self, axis=None, keepdims=False):
    return self.max(axis, keepdims)


@narray_control_path_manager(NMR, NMR.nanmin, INT, unsupported_kind)
def narray_nanmin_int(self, axis=None, keepdims=False):
    return self.min(axis, keepdims)
