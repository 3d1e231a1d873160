"""
Trainable parameter.

A `Parameter` is a leaf `Tensor` meant to be updated by an optimizer. It only
differs from `Tensor` in that gradients are tracked by default.
"""

from __future__ import annotations

from typing import Any, Optional

from ._tensor import Tensor


class Parameter(Tensor):
    """
    Trainable tensor.

    Parameters
    ----------
    value : NArray | array-like
        Initial value.
    requires_grad : bool, optional
        Whether this parameter accumulates gradients. Defaults to True.
    name : Optional[str], optional
        Label used in `repr`.
    """

    def __init__(self, value: Any, requires_grad: bool = True, name: Optional[str] = None) -> None:
        super().__init__(value, requires_grad=requires_grad, name=name)

    def __repr__(self) -> str:
        return "Parameter" + super().__repr__()[len("Tensor"):]
