"""
Autograd tensor interface.

This module defines the domain-level contract for differentiable tensors using
structural typing. It captures the surface that graph traversal, optimizers
and external collaborators (models, data pipelines) rely on, without binding
them to the NumPy-backed implementation.

Notes
-----
- A tensor wraps a value array and, once a backward pass has reached it, a
  gradient array of the same shape.
- `grad` raises `UngradedTensorError` until the first accumulation; use
  `has_grad` to test for it.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class ITensor(Protocol):
    """
    Differentiable tensor interface.

    Notes
    -----
    The protocol intentionally stays small: it names the autograd-facing
    hooks only. Arithmetic is available on the concrete implementation.
    """

    @property
    def shape(self) -> Any:
        """Logical shape of the wrapped value."""
        ...

    @property
    def value(self) -> Any:
        """The wrapped value array."""
        ...

    @property
    def requires_grad(self) -> bool:
        """Whether backward passes accumulate a gradient into this tensor."""
        ...

    @property
    def grad(self) -> Any:
        """Accumulated gradient array."""
        ...

    @property
    def has_grad(self) -> bool:
        """True once a gradient has been allocated for this tensor."""
        ...

    def set_grad(self, grad: Any) -> None:
        """Replace the gradient with a copy of `grad`."""
        ...

    def zero_grad(self) -> None:
        """Reset the gradient to zero, keeping its storage."""
        ...

    def backward(self, grad_out: Optional[Any] = None) -> None:
        """Run a backward pass rooted at this tensor."""
        ...
