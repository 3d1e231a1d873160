"""
Backward bookkeeping attached to operation results.

A `Context` lists one `BackEdge` per operand that requires a gradient. Each
edge pairs the operand with a function mapping the result's gradient to the
operand's gradient contribution; the engine fires the edges in operand order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Optional

from ..narray import NArray

if TYPE_CHECKING:
    from ._tensor import Tensor

GradFn = Callable[[NArray], NArray]


@dataclass(frozen=True)
class BackEdge:
    """
    One backward edge from a result tensor to an operand.

    Attributes
    ----------
    parent : Tensor
        The operand whose gradient this edge produces.
    fn : Callable[[NArray], NArray]
        Maps the gradient of the result to the gradient contribution for
        `parent`. The returned array must have ``parent.shape``. The function
        captures only forward values (NArrays), never other tensors' grads.
    """

    parent: "Tensor"
    fn: GradFn


@dataclass
class Context:
    """
    Backward context attached to a Tensor produced by an operation.

    A `Context` records the information required to propagate gradients from
    an operation's result back to its operands.

    Attributes
    ----------
    op : Optional[str]
        Name of the producing operation (diagnostics only).
    edges : list[BackEdge]
        One edge per operand that requires a gradient, in operand order.
        Operands that do not require gradients get no edge.
    saved_meta : dict[str, Any]
        Non-array metadata about the forward call (shapes, axes, indices).
    """

    op: Optional[str] = None
    edges: list[BackEdge] = field(default_factory=list)
    saved_meta: dict[str, Any] = field(default_factory=dict)

    @property
    def parents(self) -> tuple["Tensor", ...]:
        return tuple(e.parent for e in self.edges)

    def add_edge(self, parent: "Tensor", fn: GradFn) -> None:
        """Register `fn` as the gradient rule for `parent` if it requires a gradient."""
        if parent.requires_grad:
            self.edges.append(BackEdge(parent, fn))
