"""
Arithmetic mixins and kind-specific implementations for NArray operations.

The concrete implementations in ``_binary`` are imported for their side
effects so that their control paths are registered; only the base mixin is
part of the public interface.
"""

from ._binary import *
from ._base import NArrayMixinArithmetic

__all__ = [
    NArrayMixinArithmetic.__name__,
]
