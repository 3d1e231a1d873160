"""
Reverse-mode gradient propagation.

`backward` walks the graph reachable from a root tensor in reverse
topological order. Each pass keeps its own table of gradients, keyed by node:
every contribution arriving at a node is summed into the table before the
node's edges fire, so each edge runs exactly once per pass with the complete
gradient of its child. Only after the traversal are the per-pass gradients
added into the persistent ``grad`` of every node that requires one.

Consequences:

- Calling `backward` twice without `zero_grad` doubles every gradient.
- A node reached through several paths receives the sum of the path
  contributions, never a contribution computed from a partial sum.

The engine is single-threaded: a graph must not be built or traversed
concurrently from several threads.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Union

from ...domain._errors import ShapeMismatchError, UngradedTensorError
from .._logging import get_logger
from ..narray import NArray, ones

if TYPE_CHECKING:
    from ._tensor import Tensor

logger = get_logger(__name__)


def topological_order(root: "Tensor") -> list["Tensor"]:
    """
    Nodes reachable from `root`, each listed after all of its parents.

    `root` is the last element. Traversal is iterative, so deep graphs do not
    hit the recursion limit.
    """
    order: list["Tensor"] = []
    visited: set[int] = set()
    stack: list[tuple["Tensor", bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            order.append(node)
            continue
        if id(node) in visited:
            continue
        visited.add(id(node))
        stack.append((node, True))
        ctx = node._get_ctx()
        if ctx is not None:
            for parent in reversed(ctx.parents):
                if id(parent) not in visited:
                    stack.append((parent, False))
    return order


def _seed(root: "Tensor", grad_out: Optional[Union[NArray, "Tensor"]]) -> tuple[NArray, bool]:
    if grad_out is not None:
        seed = grad_out.value if hasattr(grad_out, "value") else grad_out
        if seed.shape != root.shape:
            raise ShapeMismatchError(
                f"grad_out shape {list(seed.dims)} does not match root shape {list(root.shape.dims)}",
                shapes=[root.shape.dims, seed.dims],
                op="backward",
            )
        return seed, False
    if root._is_seeded():
        return root.grad, True
    if root.size == 1:
        return ones(root.shape, root.dtype), False
    raise UngradedTensorError(
        f"backward on a non-scalar tensor of shape {list(root.shape.dims)} needs grad_out"
    )


def backward(root: "Tensor", grad_out: Optional[Union[NArray, "Tensor"]] = None) -> None:
    """
    Propagate gradients from `root` to every reachable tensor that requires one.

    Parameters
    ----------
    root : Tensor
        Tensor to differentiate. Must have ``requires_grad=True``.
    grad_out : Optional[NArray | Tensor]
        Seed gradient of the root. When omitted, a gradient installed with
        `Tensor.set_grad` (and not cleared by `zero_grad`) is used; otherwise
        the root must hold a single element and the seed is 1.

    Raises
    ------
    UngradedTensorError
        If `root` does not require a gradient, or no seed can be derived.
    ShapeMismatchError
        If `grad_out` or a gradient contribution has the wrong shape.
    """
    if not root.requires_grad:
        raise UngradedTensorError("backward called on a tensor that does not require grad")

    seed, seed_is_root_grad = _seed(root, grad_out)
    order = topological_order(root)
    grads: dict[int, NArray] = {id(root): seed}
    fired = 0

    for node in reversed(order):
        g = grads.get(id(node))
        if g is None:
            continue
        ctx = node._get_ctx()
        if ctx is None:
            continue
        for edge in ctx.edges:
            contribution = edge.fn(g)
            if contribution.shape != edge.parent.shape:
                raise ShapeMismatchError(
                    f"{ctx.op}: gradient of shape {list(contribution.dims)} for operand "
                    f"of shape {list(edge.parent.shape.dims)}",
                    shapes=[edge.parent.shape.dims, contribution.dims],
                    op=ctx.op,
                )
            pid = id(edge.parent)
            grads[pid] = contribution if pid not in grads else grads[pid].add(contribution)
            fired += 1

    for node in order:
        g = grads.get(id(node))
        if g is None or not node.requires_grad:
            continue
        if node is root and seed_is_root_grad:
            continue
        node._accumulate_grad_(g)

    logger.debug("backward: %d nodes, %d edges fired", len(order), fired)


def zero_grad(*roots: "Tensor") -> None:
    """Reset the gradient of every tensor reachable from `roots`."""
    seen: set[int] = set()
    for root in roots:
        for node in topological_order(root):
            if id(node) not in seen:
                seen.add(id(node))
                node.zero_grad()
