"""
Unary mixins and kind-specific implementations for NArray operations.

The concrete implementations are imported for their side effects so that
their control paths are registered.
"""

from ._unary import *
from ._base import NArrayMixinUnary

__all__ = [
    NArrayMixinUnary.__name__,
]
