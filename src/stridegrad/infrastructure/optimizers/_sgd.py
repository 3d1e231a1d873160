"""
Stochastic Gradient Descent (SGD) optimizer implementation.

The optimizer updates `Parameter` values in place from their accumulated
gradients, optionally applying coupled L2 weight decay, momentum (with
dampening and the Nesterov variant) and gradient ascent (`maximize`).

Design notes
------------
- Parameters without a gradient are skipped, so partially used parameter
  sets and frozen weights are fine.
- Updates write through each parameter's value storage; views of the value
  observe the new numbers.
- Momentum buffers are owned by the optimizer, one per parameter, and are
  created from a copy of the first gradient.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from ...domain._optimizers import IOptimizer
from .._logging import get_logger
from ..autograd import Parameter
from ..narray import NArray

logger = get_logger(__name__)


class SGD(IOptimizer):
    """
    Stochastic Gradient Descent optimizer.

    Update rule
    -----------
    For each parameter ``p`` with gradient ``g``:

    - If ``weight_decay != 0``: ``g <- g + weight_decay * p``
    - If ``momentum != 0``:
        ``mu <- g`` on the first step, otherwise
        ``mu <- momentum * mu + (1 - dampening) * g``;
        then ``g <- g + momentum * mu`` (Nesterov) or ``g <- mu``
    - ``p <- p - lr * g`` (or ``p <- p + lr * g`` when `maximize` is set)

    Parameters
    ----------
    params : Iterable[Parameter]
        Parameters to optimize. The iterable is consumed.
    lr : float, optional
        Learning rate. Must be > 0. Defaults to 1e-3.
    weight_decay : float, optional
        Coupled L2 coefficient. Must be >= 0.
    momentum : float, optional
        Momentum factor. Must be >= 0.
    dampening : float, optional
        Dampening applied to new gradients in the momentum buffer.
    nesterov : bool, optional
        Use Nesterov momentum. Requires ``momentum > 0`` and zero dampening.
    maximize : bool, optional
        Ascend instead of descend.

    Raises
    ------
    ValueError
        On invalid hyperparameters.
    """

    def __init__(
        self,
        params: Iterable[Parameter],
        *,
        lr: float = 1e-3,
        weight_decay: float = 0.0,
        momentum: float = 0.0,
        dampening: float = 0.0,
        nesterov: bool = False,
        maximize: bool = False,
    ) -> None:
        self._params: list[Parameter] = list(params)
        self.lr = float(lr)
        self.weight_decay = float(weight_decay)
        self.momentum = float(momentum)
        self.dampening = float(dampening)
        self.nesterov = bool(nesterov)
        self.maximize = bool(maximize)
        self._momentum_buffers: dict[int, NArray] = {}

        if self.lr <= 0.0:
            raise ValueError(f"lr must be > 0, got {self.lr}")
        if self.weight_decay < 0.0:
            raise ValueError(f"weight_decay must be >= 0, got {self.weight_decay}")
        if self.momentum < 0.0:
            raise ValueError(f"momentum must be >= 0, got {self.momentum}")
        if self.nesterov and (self.momentum <= 0.0 or self.dampening != 0.0):
            raise ValueError("nesterov momentum requires momentum > 0 and dampening == 0")

    @property
    def params(self) -> Sequence[Parameter]:
        return self._params

    def zero_grad(self) -> None:
        """Reset gradients of all managed parameters, keeping their storage."""
        for p in self._params:
            p.zero_grad()

    def step(self) -> None:
        """Apply one update to every parameter that has a gradient."""
        updated = 0
        for p in self._params:
            if not p.has_grad:
                continue
            self._step_param(p)
            updated += 1
        logger.debug("SGD step updated %d of %d parameters", updated, len(self._params))

    def _step_param(self, p: Parameter) -> None:
        g = p.grad
        if self.weight_decay != 0.0:
            g = g.add(p.value.mul(self.weight_decay))

        if self.momentum != 0.0:
            mu = self._momentum_buffers.get(id(p))
            if mu is None:
                mu = g.copy()
            else:
                mu = mu.mul(self.momentum).add(g.mul(1.0 - self.dampening))
            self._momentum_buffers[id(p)] = mu
            g = g.add(mu.mul(self.momentum)) if self.nesterov else mu

        if self.maximize:
            p.value.add_(g.mul(self.lr))
        else:
            p.value.sub_(g.mul(self.lr))
