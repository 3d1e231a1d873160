"""
Arithmetic mixin defining the public NArray elementwise binary API.

This module declares :class:`NArrayMixinArithmetic`, an abstract mixin that
specifies the interface and semantics of elementwise binary operations. The
mixin performs no computation for the dispatched methods; kind-specific
implementations are registered by `_binary.py` through the control-path
manager.

Semantics shared by every binary operation
------------------------------------------
- Array operands are broadcast against the receiver; incompatible shapes raise
  `ShapeMismatchError`.
- The result element type is the promotion of both operand types. Python
  scalars take the receiver's element type (integer receivers truncate).
- Out-of-place operations allocate a new dense C-order result.
- In-place operations (trailing underscore) write through the receiver's own
  layout and return the receiver. They require the broadcast result shape to
  equal the receiver's shape; otherwise `ShapeMismatchError` is raised before
  anything is written.
"""

from __future__ import annotations

import numbers
from abc import ABC
from typing import Union

Number = Union[int, float]


class NArrayMixinArithmetic(ABC):
    """
    Abstract mixin for elementwise binary operations.

    Notes
    -----
    Integer division has no control path: ``div`` and ``div_`` on integer
    receivers raise `UnsupportedElementTypeError`, except that ``div`` with a
    floating point array operand promotes the receiver first.
    """

    def add(self, other: Union["NArrayMixinArithmetic", Number]) -> "NArrayMixinArithmetic":
        """Elementwise ``self + other``."""

    def sub(self, other: Union["NArrayMixinArithmetic", Number]) -> "NArrayMixinArithmetic":
        """Elementwise ``self - other``."""

    def mul(self, other: Union["NArrayMixinArithmetic", Number]) -> "NArrayMixinArithmetic":
        """Elementwise ``self * other``."""

    def div(self, other: Union["NArrayMixinArithmetic", Number]) -> "NArrayMixinArithmetic":
        """Elementwise ``self / other`` (floating point only)."""

    def minimum(self, other: Union["NArrayMixinArithmetic", Number]) -> "NArrayMixinArithmetic":
        """Elementwise minimum."""

    def maximum(self, other: Union["NArrayMixinArithmetic", Number]) -> "NArrayMixinArithmetic":
        """Elementwise maximum."""

    def add_(self, other: Union["NArrayMixinArithmetic", Number]) -> "NArrayMixinArithmetic":
        """In-place ``self += other``."""

    def sub_(self, other: Union["NArrayMixinArithmetic", Number]) -> "NArrayMixinArithmetic":
        """In-place ``self -= other``."""

    def mul_(self, other: Union["NArrayMixinArithmetic", Number]) -> "NArrayMixinArithmetic":
        """In-place ``self *= other``."""

    def div_(self, other: Union["NArrayMixinArithmetic", Number]) -> "NArrayMixinArithmetic":
        """In-place ``self /= other`` (floating point only)."""

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------
    # Operands other than arrays and numbers get NotImplemented.
    def _accepts(self, other) -> bool:
        return isinstance(other, (NArrayMixinArithmetic, numbers.Number))

    def __add__(self, other):
        if not self._accepts(other):
            return NotImplemented
        return self.add(other)

    def __radd__(self, other):
        if not self._accepts(other):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not self._accepts(other):
            return NotImplemented
        return self.sub(other)

    def __rsub__(self, other):
        if not self._accepts(other):
            return NotImplemented
        return self.neg().add(other)

    def __mul__(self, other):
        if not self._accepts(other):
            return NotImplemented
        return self.mul(other)

    def __rmul__(self, other):
        if not self._accepts(other):
            return NotImplemented
        return self.mul(other)

    def __truediv__(self, other):
        if not self._accepts(other):
            return NotImplemented
        return self.div(other)

    def __rtruediv__(self, other):
        if not self._accepts(other):
            return NotImplemented
        return self.reciprocal().mul(other)

    def __neg__(self):
        return self.neg()
