"""
Reduction mixin defining the public NArray reduction API.

All reductions accept ``axis=None`` (reduce every element) or one integer axis
(negative values count from the end), plus ``keepdims``: when True the reduced
axis is kept with extent 1, otherwise it is dropped. A global reduction
without ``keepdims`` yields a rank-0 array.

Element-type notes
------------------
- ``sum`` keeps the receiver's element type; integer sums wrap like the
  element type does.
- ``mean`` of an integer array truncates toward zero.
- ``var`` and ``std`` are floating point only.
- ``nansum``, ``nanmean``, ``nanmax`` and ``nanmin`` skip NaN elements; on
  integer arrays they equal the plain reductions.
- ``argmax``/``argmin`` return INT32 positions along the axis (or in the
  logical C-order sequence for a global reduction). Ties go to the first
  occurrence.

Reductions other than ``sum`` have no identity element: reducing an empty
extent raises `ShapeMismatchError`.
"""

from __future__ import annotations

from abc import ABC
from typing import Optional


class NArrayMixinReduction(ABC):
    """Abstract mixin for reductions."""

    def sum(self, axis: Optional[int] = None, keepdims: bool = False) -> "NArrayMixinReduction":
        """Sum of elements."""

    def mean(self, axis: Optional[int] = None, keepdims: bool = False) -> "NArrayMixinReduction":
        """Arithmetic mean of elements."""

    def var(
        self, axis: Optional[int] = None, ddof: int = 0, keepdims: bool = False
    ) -> "NArrayMixinReduction":
        """Variance, dividing by ``n - ddof``."""

    def std(
        self, axis: Optional[int] = None, ddof: int = 0, keepdims: bool = False
    ) -> "NArrayMixinReduction":
        """Standard deviation, the square root of `var`."""

    def max(self, axis: Optional[int] = None, keepdims: bool = False) -> "NArrayMixinReduction":
        """
        Maximum of elements.

        NaN propagates: a slice holding NaN reduces to NaN.
        """

    def min(self, axis: Optional[int] = None, keepdims: bool = False) -> "NArrayMixinReduction":
        """Minimum of elements."""

    def nansum(self, axis: Optional[int] = None, keepdims: bool = False) -> "NArrayMixinReduction":
        """Sum of the elements that are not NaN."""

    def nanmean(self, axis: Optional[int] = None, keepdims: bool = False) -> "NArrayMixinReduction":
        """Mean of the elements that are not NaN (NaN when every element is)."""

    def nanmax(self, axis: Optional[int] = None, keepdims: bool = False) -> "NArrayMixinReduction":
        """Maximum ignoring NaN; ``-inf`` for a slice made only of NaN."""

    def nanmin(self, axis: Optional[int] = None, keepdims: bool = False) -> "NArrayMixinReduction":
        """Minimum ignoring NaN; ``+inf`` for a slice made only of NaN."""

    def argmax(self, axis: Optional[int] = None, keepdims: bool = False) -> "NArrayMixinReduction":
        """Position of the first maximum."""

    def argmin(self, axis: Optional[int] = None, keepdims: bool = False) -> "NArrayMixinReduction":
        """Position of the first minimum."""
