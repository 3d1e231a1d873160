"""
NArray control-path manager for element-kind dispatch.

This module defines the shared control-path manager used to register and
resolve kind-specific implementations of NArray methods. Dispatch is keyed on
``self._kind``, which is ``"float"`` for FLOAT64/FLOAT32 arrays and ``"int"``
for INT32/INT8 arrays.

Typical usage
-------------
Kernels register themselves per element kind:

    @narray_control_path_manager(NMA, NMA.add, "float", unsupported_kind)
    @narray_control_path_manager(NMA, NMA.add, "int", unsupported_kind)
    def narray_add(self, other): ...

An operation with no integer path (e.g. ``exp``) fails on integer arrays with
`UnsupportedElementTypeError`, raised by the `unsupported_kind` trap.
"""

from typing import Any, Callable

from ...domain._errors import UnsupportedElementTypeError
from ...domain.utils._control_path import create_path_builder

FLOAT = "float"
INT = "int"
KINDS = (FLOAT, INT)

# Control-path manager that dispatches NArray methods based on `self._kind`
narray_control_path_manager = create_path_builder("_kind")


def unsupported_kind(method: Callable[..., Any], kind: Any) -> Exception:
    """Trap factory: build the error raised when no path exists for `kind`."""
    return UnsupportedElementTypeError(method.__name__, kind)
