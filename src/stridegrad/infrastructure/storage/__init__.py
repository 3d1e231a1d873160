from ._base import ArrayStorage
from ._casting import cast_array, cast_scalar, dtype_of_numpy, numpy_dtype
from ._typed import (
    Float32Storage,
    Float64Storage,
    Int32Storage,
    Int8Storage,
    STORAGE_TYPES,
    allocate,
    storage_type,
    wrap,
)

__all__ = [
    ArrayStorage.__name__,
    Float64Storage.__name__,
    Float32Storage.__name__,
    Int32Storage.__name__,
    Int8Storage.__name__,
    "STORAGE_TYPES",
    allocate.__name__,
    storage_type.__name__,
    wrap.__name__,
    cast_array.__name__,
    cast_scalar.__name__,
    dtype_of_numpy.__name__,
    numpy_dtype.__name__,
]
