"""
Loss functions built from differentiable tensor operations.

Losses are composites: their gradients come from the backward edges of the
operations they are made of, so no loss defines a backward rule of its own.
Every loss returns a rank-0 tensor, which `backward()` seeds with 1.

Currently implemented losses:
- nll_loss : negative log-likelihood of predicted probabilities
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Union

from ..domain._errors import ShapeMismatchError
from ..domain._shape import broadcast_shapes
from .autograd import Tensor
from .narray import NArray, from_numpy


class Reduce(Enum):
    """How per-element loss terms are combined into one scalar."""

    MEAN = "mean"
    SUM = "sum"

    @classmethod
    def parse(cls, value: Union["Reduce", str]) -> "Reduce":
        if isinstance(value, Reduce):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown loss reduction: {value!r}") from None


def nll_loss(
    pred: Union[Tensor, NArray],
    target: Union[Tensor, NArray, Any],
    reduce: Union[Reduce, str] = Reduce.MEAN,
) -> Tensor:
    """
    Negative log-likelihood of predicted probabilities.

    Computes ``-sum(target * log(pred))``; with ``Reduce.MEAN`` the sum is
    divided by the number of elements of `pred`.

    Parameters
    ----------
    pred : Tensor | NArray
        Predicted probabilities, usually of shape ``(batch, classes)``.
    target : Tensor | NArray | array-like
        One-hot (or weighting) targets broadcastable to ``pred.shape``. A
        rank-1 target against a rank-2 `pred` is read as a column
        ``(batch, 1)`` that weights whole rows.
    reduce : Reduce | str, optional
        ``"mean"`` (default) or ``"sum"``.

    Returns
    -------
    Tensor
        Rank-0 loss.

    Raises
    ------
    ShapeMismatchError
        If `target` does not broadcast to the shape of `pred`.
    UnsupportedElementTypeError
        If `pred` holds integers.
    """
    reduce = Reduce.parse(reduce)
    if not isinstance(pred, Tensor):
        pred = Tensor(pred)
    if not isinstance(target, (Tensor, NArray)):
        target = from_numpy(target, pred.dtype)
    if pred.rank == 2 and target.rank == 1:
        target = target.stretch(1)

    if broadcast_shapes(pred.shape, target.shape) != pred.shape:
        raise ShapeMismatchError(
            f"nll_loss: target shape {list(target.shape.dims)} does not broadcast "
            f"to prediction shape {list(pred.shape.dims)}",
            shapes=[pred.shape.dims, target.shape.dims],
            op="nll_loss",
        )

    loss = pred.log().neg().mul(target).sum()
    if reduce is Reduce.MEAN:
        loss = loss.div(float(pred.size))
    return loss
