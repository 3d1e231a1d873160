"""
Error taxonomy for stridegrad.

Every condition raised by the engine is a local, non-recoverable contract
violation: a shape that cannot be broadcast, an index past an extent, an
iterator used after exhaustion, an operation the element type does not
define, or a gradient that was never produced. All of them derive from
`StrideGradError` so callers can catch the whole family at once, and each one
also derives from the closest builtin exception so code written against the
standard hierarchy (``ValueError``, ``IndexError``, ...) keeps working.

Operations either complete and return a consistent result or fail before any
mutation becomes observable. In-place operations are the exception: a failure
part-way through may leave the receiver partially written.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence


class StrideGradError(Exception):
    """Base exception for all stridegrad errors."""


class ShapeMismatchError(StrideGradError, ValueError):
    """
    Raised when operand shapes are incompatible for the requested operation.

    Attributes
    ----------
    shapes : tuple[tuple[int, ...], ...]
        The offending shapes, in operand order.
    op : Optional[str]
        Name of the operation that rejected the shapes, if known.
    """

    def __init__(
        self,
        message: str,
        *,
        shapes: Sequence[Sequence[int]] = (),
        op: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.shapes = tuple(tuple(int(d) for d in s) for s in shapes)
        self.op = op


class IndexOutOfRangeError(StrideGradError, IndexError):
    """
    Raised when a logical index or axis is outside the valid range.

    Attributes
    ----------
    index : Any
        The rejected index (an int or an index tuple).
    bound : Optional[int]
        Exclusive upper bound the index was checked against.
    axis : Optional[int]
        Axis the index refers to, when the check was per-axis.
    """

    def __init__(
        self,
        index: Any,
        bound: Optional[int] = None,
        *,
        axis: Optional[int] = None,
    ) -> None:
        where = f" on axis {axis}" if axis is not None else ""
        limit = f" (bound {bound})" if bound is not None else ""
        super().__init__(f"Index {index!r} out of range{where}{limit}.")
        self.index = index
        self.bound = bound
        self.axis = axis


class OutOfElementsError(StrideGradError, LookupError):
    """Raised when a pointer iterator is advanced after its last element."""

    def __init__(self, visited: int) -> None:
        super().__init__(f"Iterator exhausted after {visited} elements.")
        self.visited = visited


class UnsupportedElementTypeError(StrideGradError, TypeError):
    """
    Raised when an operation is not defined for an element type.

    Attributes
    ----------
    op : str
        Operation name (e.g. ``"div"``, ``"exp"``).
    dtype : str
        Element type (or element kind) the operation was attempted on.
    """

    def __init__(self, op: str, dtype: Any) -> None:
        super().__init__(f"{op} is not supported for element type '{dtype}'.")
        self.op = op
        self.dtype = str(dtype)


class UngradedTensorError(StrideGradError, RuntimeError):
    """
    Raised when a gradient is required but does not exist.

    This covers calling ``backward`` from a tensor that does not require
    gradients, calling it on a non-scalar root without a seed, and reading
    ``grad`` before any gradient has been accumulated.
    """
