"""
Reduction mixins and kind-specific implementations for NArray operations.
"""

from ._sum import *
from ._extrema import *
from ._nan import *
from ._base import NArrayMixinReduction

__all__ = [
    NArrayMixinReduction.__name__,
]
