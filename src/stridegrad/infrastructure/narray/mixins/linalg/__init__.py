"""
Matrix products for NArray.
"""

from ._linalg import NArrayMixinLinalg, matmul_result_dims

__all__ = [
    NArrayMixinLinalg.__name__,
    matmul_result_dims.__name__,
]
