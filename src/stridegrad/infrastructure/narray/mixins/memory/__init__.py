"""
Layout transforms, copies and bulk writes for NArray.
"""

from ._memory import NArrayMixinMemory

__all__ = [
    NArrayMixinMemory.__name__,
]
