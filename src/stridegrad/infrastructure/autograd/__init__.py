"""
Reverse-mode automatic differentiation over NArray values.
"""

from ._context import BackEdge, Context
from ._engine import backward, topological_order, zero_grad
from ._parameter import Parameter
from ._tensor import Tensor

__all__ = [
    BackEdge.__name__,
    Context.__name__,
    Parameter.__name__,
    Tensor.__name__,
    backward.__name__,
    topological_order.__name__,
    zero_grad.__name__,
]
