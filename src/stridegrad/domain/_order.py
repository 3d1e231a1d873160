"""
Traversal orders and comparison selectors.

`Order` names the sequence in which an iterator visits the logical elements
of a layout. The order changes only the visiting sequence, never the set of
pointers produced.
"""

from __future__ import annotations

from enum import Enum


class Order(Enum):
    """
    Traversal order over a layout.

    Members
    -------
    C
        Row-major: the last axis varies fastest.
    F
        Column-major: the first axis varies fastest.
    S
        Storage order: axes sorted by ascending absolute stride. On a dense
        layout this is the dense-sequential order over the buffer.
    A
        System default. Resolved per layout to ``C`` for C-dense layouts,
        ``F`` for layouts that are only F-dense, and ``S`` otherwise.
    """

    C = "C"
    F = "F"
    S = "S"
    A = "A"

    @staticmethod
    def auto_fc(order: "Order") -> "Order":
        """Collapse any non-canonical order to ``C``; keep ``F`` as is."""
        return Order.F if order is Order.F else Order.C

    @classmethod
    def parse(cls, value: "Order | str") -> "Order":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown order: {value!r}") from None


class Compare(Enum):
    """Comparison used to build 0/1 masks from an array and a threshold."""

    GT = "gt"
    GE = "ge"
    LT = "lt"
    LE = "le"
    EQ = "eq"
    NE = "ne"
