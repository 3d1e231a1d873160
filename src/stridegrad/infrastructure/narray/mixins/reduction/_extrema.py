"""
Maximum, minimum and arg-extremum kernels.

Ties resolve to the first occurrence in logical C order. For global
reductions the C-order sequence is split into chunks; each chunk reports the
position and value of its own first extremum, and the partials are combined
serially in chunk order, replacing the running best only on a strict
improvement. The winner is therefore the same for every worker count.

NaN is treated as the extremum of its slice (NumPy semantics): the first NaN
wins and the reduced value is NaN.
"""

from __future__ import annotations

from typing import Callable

import numpy as np

from .....domain._dtype import DType
from ...._parallel import map_chunks
from ..._narray_builder import FLOAT, INT, narray_control_path_manager, unsupported_kind
from ._base import NArrayMixinReduction as NMR
from ._common import axis_values, check_nonempty, normalize, result_dims


def _is_nan(v) -> bool:
    return bool(np.isnan(v))


def _global_arg(values: np.ndarray, arg: Callable, better: Callable) -> int:
    def work(start: int, stop: int):
        chunk = values[start:stop]
        i = int(arg(chunk))
        return start + i, chunk[i]

    best_i, best_v = None, None
    for i, v in map_chunks(work, values.shape[0]):
        if best_i is None:
            best_i, best_v = i, v
        elif _is_nan(best_v):
            break
        elif _is_nan(v) or better(v, best_v):
            best_i, best_v = i, v
    return best_i


def _arg_extremum(self, axis, arg: Callable, better: Callable, op: str):
    axis = normalize(self, axis)
    check_nonempty(self, axis, op)
    if axis is None:
        pos = _global_arg(self._values(), arg, better)
    else:
        pos = arg(axis_values(self, axis), axis=1)
    return pos, axis


def _extremum(self, axis, keepdims, arg, better, op):
    pos, axis = _arg_extremum(self, axis, arg, better, op)
    if axis is None:
        value = self._values()[pos]
    else:
        rows = axis_values(self, axis)
        value = rows[np.arange(rows.shape[0]), pos]
    return type(self)._dense(value, result_dims(self.dims, axis, keepdims), self.dtype)


def _positions(self, axis, keepdims, arg, better, op):
    pos, axis = _arg_extremum(self, axis, arg, better, op)
    return type(self)._dense(pos, result_dims(self.dims, axis, keepdims), DType.INT32)


@narray_control_path_manager(NMR, NMR.max, FLOAT, unsupported_kind)
@narray_control_path_manager(NMR, NMR.max, INT, unsupported_kind)
def narray_max(self, axis=None, keepdims=False):
    return _extremum(self, axis, keepdims, np.argmax, np.greater, "max")


@narray_control_path_manager(NMR, NMR.min, FLOAT, unsupported_kind)
@narray_control_path_manager(NMR, NMR.min, INT, unsupported_kind)
def narray_min(self, axis=None, keepdims=False):
    return _extremum(self, axis, keepdims, np.argmin, np.less, "min")


@narray_control_path_manager(NMR, NMR.argmax, FLOAT, unsupported_kind)
@narray_control_path_manager(NMR, NMR.argmax, INT, unsupported_kind)
def narray_argmax(self, axis=None, keepdims=False):
    return _positions(self, axis, keepdims, np.argmax, np.greater, "argmax")


@narray_control_path_manager(NMR, NMR.argmin, FLOAT, unsupported_kind)
@narray_control_path_manager(NMR, NMR.argmin, INT, unsupported_kind)
def narray_argmin(self, axis=None, keepdims=False):
    return _positions(self, axis, keepdims, np.argmin, np.less, "argmin")
