"""
Single-pass pointer iterator over a strided layout.

`PointerIterator` yields the physical pointer of every logical element of a
layout exactly once, in the sequence defined by the requested `Order`. It is
stateful and not thread-safe; a traversal is restarted by building a new
iterator, never by resetting one.

Two iterators built with the same order over layouts of the same shape visit
corresponding logical elements in lock-step when the order is ``C`` or ``F``.
``S`` and ``A`` depend on the strides, so they only pair up across layouts
with matching stride patterns.
"""

from __future__ import annotations

from typing import Iterator

import numpy as np

from ...domain._errors import OutOfElementsError
from ...domain._layout import StrideLayout
from ...domain._order import Order
from ._loop import LoopDescriptor


class PointerIterator(Iterator[int]):
    """
    Iterator of physical pointers.

    Parameters
    ----------
    layout : StrideLayout
        Layout to traverse.
    order : Order, optional
        Traversal order. Defaults to ``Order.S`` (storage order).

    Notes
    -----
    A rank-0 layout yields exactly one pointer whatever the order.
    """

    def __init__(self, layout: StrideLayout, order: Order = Order.S) -> None:
        self._loop = LoopDescriptor.of(layout, order)
        self._outer = 0
        self._inner = 0
        self._visited = 0

    @property
    def loop(self) -> LoopDescriptor:
        return self._loop

    @property
    def remaining(self) -> int:
        return self._loop.total - self._visited

    def has_next(self) -> bool:
        return self._visited < self._loop.total

    def next(self) -> int:
        """
        Return the next pointer.

        Raises
        ------
        OutOfElementsError
            If every pointer has already been returned.
        """
        if not self.has_next():
            raise OutOfElementsError(self._visited)
        loop = self._loop
        ptr = int(loop.offsets[self._outer]) + self._inner * loop.step
        self._inner += 1
        if self._inner == loop.size:
            self._inner = 0
            self._outer += 1
        self._visited += 1
        return ptr

    def __iter__(self) -> "PointerIterator":
        return self

    def __next__(self) -> int:
        if not self.has_next():
            raise StopIteration
        return self.next()

    def rest(self) -> np.ndarray:
        """Consume and return every remaining pointer as an array."""
        ptrs = self._loop.pointers()[self._visited :]
        self._visited = self._loop.total
        self._outer = self._loop.count
        self._inner = 0
        return ptrs
