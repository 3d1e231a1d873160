"""
stridegrad: strided N-dimensional arrays with reverse-mode autograd.

The package is split into a backend-agnostic ``domain`` layer (shapes,
layouts, element types, errors and protocols) and an ``infrastructure``
layer (NumPy-backed storage, pointer iterators, `NArray`, autograd,
optimizers, configuration and logging). The names below are the public API.
"""

from .domain import (
    Compare,
    DType,
    IndexOutOfRangeError,
    Order,
    OutOfElementsError,
    Shape,
    ShapeMismatchError,
    StrideGradError,
    StrideLayout,
    UngradedTensorError,
    UnsupportedElementTypeError,
    broadcast_shapes,
    is_broadcast_compatible,
)
from .infrastructure._config import EngineConfig, config_context, get_config, set_config
from .infrastructure.autograd import Parameter, Tensor, backward, topological_order, zero_grad
from .infrastructure._losses import Reduce, nll_loss
from .infrastructure.iterators import LoopDescriptor, PointerIterator
from .infrastructure.narray import (
    NArray,
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
from .infrastructure.optimizers import SGD
from .infrastructure.storage import allocate, wrap

FLOAT64 = DType.FLOAT64
FLOAT32 = DType.FLOAT32
INT32 = DType.INT32
INT8 = DType.INT8

__version__ = "0.1.0"

__all__ = [
    "Compare",
    "DType",
    "EngineConfig",
    "FLOAT32",
    "FLOAT64",
    "INT32",
    "INT8",
    "IndexOutOfRangeError",
    "LoopDescriptor",
    "NArray",
    "Order",
    "OutOfElementsError",
    "Parameter",
    "PointerIterator",
    "Reduce",
    "SGD",
    "Shape",
    "ShapeMismatchError",
    "StrideGradError",
    "StrideLayout",
    "Tensor",
    "UngradedTensorError",
    "UnsupportedElementTypeError",
    "allocate",
    "backward",
    "broadcast_shapes",
    "config_context",
    "eye",
    "from_buffer",
    "from_function",
    "from_numpy",
    "full",
    "get_config",
    "is_broadcast_compatible",
    "nll_loss",
    "ones",
    "randn",
    "random",
    "scalar",
    "seq",
    "set_config",
    "topological_order",
    "wrap",
    "zero_grad",
    "zeros",
]
