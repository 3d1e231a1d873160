"""
Differentiable tensor.

A `Tensor` is a node of the autograd graph: it wraps a value `NArray`, an
optional backward `Context` (set when the tensor is the result of a
differentiable operation on operands that require gradients), and a lazily
allocated gradient `NArray` of the same shape as the value.

Gradient lifecycle
------------------
- Created: the value is set and no gradient exists; reading `grad` raises
  `UngradedTensorError` (use `has_grad` to test).
- Gradient allocated: the first backward contribution allocates a zero
  gradient and adds into it; later passes keep adding.
- `set_grad` installs an explicit gradient, which seeds the next backward pass
  rooted at the tensor.
- `zero_grad` resets the gradient to zero and keeps its storage. It also drops
  the seed role of a gradient installed with `set_grad`.

Only floating point values can require gradients.
"""

from __future__ import annotations

from typing import Any, Optional, Union

import numpy as np

from ...domain._dtype import DType
from ...domain._errors import ShapeMismatchError, UngradedTensorError, UnsupportedElementTypeError
from ...domain._shape import Shape
from ...domain._tensor import ITensor
from ..narray import NArray, from_numpy, zeros
from . import _engine
from ._context import Context, GradFn
from .mixins import (
    TensorMixinArithmetic,
    TensorMixinLinalg,
    TensorMixinReduction,
    TensorMixinShape,
    TensorMixinUnary,
)


class Tensor(
    TensorMixinArithmetic,
    TensorMixinUnary,
    TensorMixinReduction,
    TensorMixinShape,
    TensorMixinLinalg,
    ITensor,
):
    """
    Node of the autograd graph.

    Parameters
    ----------
    value : NArray | array-like
        Forward value. Anything that is not an `NArray` is converted with
        `from_numpy`.
    requires_grad : bool, optional
        Whether backward passes accumulate a gradient into this tensor.
    name : Optional[str], optional
        Label used in `repr` and debug output.

    Raises
    ------
    UnsupportedElementTypeError
        If `requires_grad` is True and the value has an integer element type.
    """

    def __init__(
        self,
        value: Union[NArray, Any],
        requires_grad: bool = False,
        name: Optional[str] = None,
    ) -> None:
        self._value: NArray = value if isinstance(value, NArray) else from_numpy(value)
        self._requires_grad = False
        self.requires_grad = requires_grad
        self._grad: Optional[NArray] = None
        self._seeded = False
        self._ctx: Optional[Context] = None
        self.name = name

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def value(self) -> NArray:
        return self._value

    @property
    def shape(self) -> Shape:
        return self._value.shape

    @property
    def dtype(self) -> DType:
        return self._value.dtype

    @property
    def rank(self) -> int:
        return self._value.rank

    @property
    def size(self) -> int:
        return self._value.size

    @property
    def requires_grad(self) -> bool:
        return self._requires_grad

    @requires_grad.setter
    def requires_grad(self, value: bool) -> None:
        if value and not self._value.dtype.is_float:
            raise UnsupportedElementTypeError("requires_grad", self._value.dtype)
        self._requires_grad = bool(value)

    @property
    def is_leaf(self) -> bool:
        return self._ctx is None

    @property
    def grad(self) -> NArray:
        """
        Accumulated gradient.

        Raises
        ------
        UngradedTensorError
            If no gradient has been accumulated or set yet.
        """
        if self._grad is None:
            label = f" {self.name!r}" if self.name else ""
            raise UngradedTensorError(f"tensor{label} has no gradient yet")
        return self._grad

    @property
    def has_grad(self) -> bool:
        return self._grad is not None

    def set_grad(self, grad: Union[NArray, "Tensor"]) -> None:
        """
        Replace the gradient with a copy of `grad` (which must match the shape).

        A gradient set this way is the seed of the next `backward` rooted at
        this tensor when no `grad_out` is given. `zero_grad` clears that role.
        """
        g = grad.value if isinstance(grad, Tensor) else grad
        if g.shape != self.shape:
            raise ShapeMismatchError(
                f"gradient shape {list(g.dims)} does not match tensor shape {list(self.shape.dims)}",
                shapes=[self.shape.dims, g.dims],
                op="set_grad",
            )
        self._grad = g.cast(self.dtype)
        self._seeded = True

    def zero_grad(self) -> None:
        """Reset the gradient to zero, keeping its storage."""
        self._seeded = False
        if self._grad is not None:
            self._grad.fill_(0)

    def _accumulate_grad_(self, g: NArray) -> None:
        if self._grad is None:
            self._grad = zeros(self.shape, self.dtype)
        self._grad.add_(g)

    # ------------------------------------------------------------------
    # Graph hooks
    # ------------------------------------------------------------------
    def _set_ctx(self, ctx: Optional[Context]) -> None:
        self._ctx = ctx

    def _get_ctx(self) -> Optional[Context]:
        return self._ctx

    def _is_seeded(self) -> bool:
        return self._seeded

    @staticmethod
    def _result_requires_grad(*parents: Any) -> bool:
        return any(isinstance(p, Tensor) and p.requires_grad for p in parents)

    def _make(self, value: NArray, op: str, *edges: tuple[Any, GradFn]) -> "Tensor":
        """
        Wrap an operation result and record its backward edges.

        Each edge is ``(operand, grad_fn)``; operands that are not tensors or
        do not require gradients are ignored.
        """
        parents = [p for p, _ in edges if isinstance(p, Tensor)]
        out = Tensor(value, requires_grad=self._result_requires_grad(*parents))
        if out.requires_grad:
            ctx = Context(op=op)
            for parent, fn in edges:
                if isinstance(parent, Tensor):
                    ctx.add_edge(parent, fn)
            out._set_ctx(ctx)
        return out

    # ------------------------------------------------------------------
    # Autograd entry points
    # ------------------------------------------------------------------
    def backward(self, grad_out: Optional[Union[NArray, "Tensor"]] = None) -> None:
        """Run a backward pass rooted at this tensor (see `engine.backward`)."""
        _engine.backward(self, grad_out)

    def detach(self) -> "Tensor":
        """Tensor sharing this value, with no history and no gradient."""
        return Tensor(self._value, requires_grad=False, name=self.name)

    def item(self) -> Any:
        return self._value.item()

    def to_numpy(self) -> np.ndarray:
        return self._value.to_numpy()

    def __repr__(self) -> str:
        label = f"name={self.name!r}, " if self.name else ""
        return (
            f"Tensor({label}shape={list(self.shape.dims)}, dtype={self.dtype}, "
            f"requires_grad={self.requires_grad})"
        )
