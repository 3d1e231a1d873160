"""
Differentiable operation mixins for `Tensor`.
"""

from ._arithmetic import TensorMixinArithmetic
from ._linalg import TensorMixinLinalg
from ._reduction import TensorMixinReduction
from ._shape import TensorMixinShape
from ._unary import TensorMixinUnary

__all__ = [
    TensorMixinArithmetic.__name__,
    TensorMixinLinalg.__name__,
    TensorMixinReduction.__name__,
    TensorMixinShape.__name__,
    TensorMixinUnary.__name__,
]
