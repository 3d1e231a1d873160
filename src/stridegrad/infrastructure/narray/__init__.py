"""
N-dimensional strided arrays.

`NArray` pairs a typed storage with a stride layout; views share storage.
Factories in this package allocate new arrays.
"""

from ._narray import NArray
from ._factory import (
    eye,
    from_buffer,
    from_function,
    from_numpy,
    full,
    ones,
    randn,
    random,
    scalar,
    seq,
    zeros,
)

__all__ = [
    "NArray",
    "eye",
    "from_buffer",
    "from_function",
    "from_numpy",
    "full",
    "ones",
    "randn",
    "random",
    "scalar",
    "seq",
    "zeros",
]
