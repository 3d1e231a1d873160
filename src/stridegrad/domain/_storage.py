"""
Storage capability contract.

`IStorage` is the structural interface every typed storage backend satisfies.
Generic algorithms (iteration, reductions, gradient accumulation) are written
against this contract and therefore run on any backend.

A storage is a single fixed-length buffer. It is owned by the site that
allocated it and referenced, never owned, by every array view built on it.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ._dtype import DType


@runtime_checkable
class IStorage(Protocol):
    """
    Storage interface.

    Notes
    -----
    - ``get/set/inc`` operate on the native element type.
    - The ``*_double``, ``*_float``, ``*_int`` and ``*_byte`` families access
      the same slots through the cross-type casting rules of `DType`: reads
      convert the native value, writes convert the argument to the native
      type before storing.
    - ``inc`` is a read-modify-write; it is not synchronised.
    """

    @property
    def dtype(self) -> DType: ...

    @property
    def size(self) -> int: ...

    def get(self, ptr: int) -> Any: ...

    def set(self, ptr: int, value: Any) -> None: ...

    def inc(self, ptr: int, value: Any) -> None: ...

    def fill(self, value: Any, start: int = 0, length: int | None = None) -> None: ...

    def get_double(self, ptr: int) -> float: ...

    def get_float(self, ptr: int) -> float: ...

    def get_int(self, ptr: int) -> int: ...

    def get_byte(self, ptr: int) -> int: ...

    def set_double(self, ptr: int, value: float) -> None: ...

    def set_float(self, ptr: int, value: float) -> None: ...

    def set_int(self, ptr: int, value: int) -> None: ...

    def set_byte(self, ptr: int, value: int) -> None: ...

    def inc_double(self, ptr: int, value: float) -> None: ...

    def inc_float(self, ptr: int, value: float) -> None: ...

    def inc_int(self, ptr: int, value: int) -> None: ...

    def inc_byte(self, ptr: int, value: int) -> None: ...
