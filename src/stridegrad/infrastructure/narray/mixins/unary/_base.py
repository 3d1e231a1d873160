"""
Unary mixin defining the public NArray elementwise unary API.

Implementations are registered per element kind in `_unary.py`. Operations
that are only meaningful for floating point data (``exp``, ``log``, ``sqrt``,
``tanh``, ``sigmoid``, ``pow``, ``reciprocal``) register no integer path, so
calling them on an integer array raises `UnsupportedElementTypeError`.

Out-of-place variants return a new dense C-order array of the receiver's
element type. In-place variants (trailing underscore) write through the
receiver's layout and return the receiver.
"""

from __future__ import annotations

from abc import ABC
from typing import Optional, Union

from .....domain._order import Compare

Number = Union[int, float]


class NArrayMixinUnary(ABC):
    """Abstract mixin for elementwise unary operations."""

    def neg(self) -> "NArrayMixinUnary":
        """Elementwise negation."""

    def abs(self) -> "NArrayMixinUnary":
        """Elementwise absolute value."""

    def sqr(self) -> "NArrayMixinUnary":
        """Elementwise square."""

    def pow(self, exponent: Number) -> "NArrayMixinUnary":
        """Elementwise power with a scalar exponent."""

    def reciprocal(self) -> "NArrayMixinUnary":
        """Elementwise ``1 / x``."""

    def exp(self) -> "NArrayMixinUnary":
        """Elementwise natural exponential."""

    def log(self) -> "NArrayMixinUnary":
        """
        Elementwise natural logarithm.

        Follows IEEE semantics: ``log(0) = -inf`` and negative inputs give NaN.
        """

    def sqrt(self) -> "NArrayMixinUnary":
        """Elementwise square root (NaN for negative inputs)."""

    def tanh(self) -> "NArrayMixinUnary":
        """Elementwise hyperbolic tangent."""

    def sigmoid(self) -> "NArrayMixinUnary":
        """Elementwise logistic function ``1 / (1 + exp(-x))``."""

    def relu(self) -> "NArrayMixinUnary":
        """Elementwise ``max(x, 0)``."""

    def clamp(self, low: Optional[Number] = None, high: Optional[Number] = None) -> "NArrayMixinUnary":
        """Clip every element into ``[low, high]``; a missing bound is open."""

    def compare_mask(self, cmp: Compare, threshold: Number) -> "NArrayMixinUnary":
        """
        Elementwise comparison against a scalar.

        Returns an array of the receiver's element type holding 1 where the
        comparison holds and 0 elsewhere.
        """

    def neg_(self) -> "NArrayMixinUnary":
        """In-place negation."""

    def abs_(self) -> "NArrayMixinUnary":
        """In-place absolute value."""

    def sqr_(self) -> "NArrayMixinUnary":
        """In-place square."""

    def exp_(self) -> "NArrayMixinUnary":
        """In-place natural exponential."""

    def log_(self) -> "NArrayMixinUnary":
        """In-place natural logarithm."""

    def sqrt_(self) -> "NArrayMixinUnary":
        """In-place square root."""

    def clamp_(self, low: Optional[Number] = None, high: Optional[Number] = None) -> "NArrayMixinUnary":
        """In-place clip into ``[low, high]``."""

    def __abs__(self):
        return self.abs()

    def __pow__(self, exponent):
        return self.pow(exponent)
