from ._dtype import DType
from ._errors import (
    StrideGradError,
    ShapeMismatchError,
    IndexOutOfRangeError,
    OutOfElementsError,
    UnsupportedElementTypeError,
    UngradedTensorError,
)
from ._layout import StrideLayout
from ._optimizers import IOptimizer
from ._order import Compare, Order
from ._shape import Shape, broadcast_shapes, is_broadcast_compatible
from ._storage import IStorage
from ._tensor import ITensor

__all__ = [
    DType.__name__,
    StrideGradError.__name__,
    ShapeMismatchError.__name__,
    IndexOutOfRangeError.__name__,
    OutOfElementsError.__name__,
    UnsupportedElementTypeError.__name__,
    UngradedTensorError.__name__,
    StrideLayout.__name__,
    IOptimizer.__name__,
    Compare.__name__,
    Order.__name__,
    Shape.__name__,
    broadcast_shapes.__name__,
    is_broadcast_compatible.__name__,
    IStorage.__name__,
    ITensor.__name__,
]
