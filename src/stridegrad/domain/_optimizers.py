"""
Domain-level optimizer contract.

This module defines the `IOptimizer` protocol, which specifies the minimal
interface required for optimizer implementations.

Notes
-----
- Domain contracts are backend-agnostic and must not depend on NumPy or
  infrastructure implementations.
- Optimizers update trainable tensors in place from their accumulated
  gradients. How those gradients are produced (the autograd engine) is outside
  the scope of this protocol.
"""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable


@runtime_checkable
class IOptimizer(Protocol):
    """
    Optimizer interface contract.

    Required methods
    ----------------
    - `step()` applies one optimization update to managed parameters.
    - `zero_grad()` resets gradients of managed parameters to zero.
    """

    def step(self) -> None:
        """
        Apply one optimization step.

        Implementations should skip parameters that do not have a gradient yet.
        """
        ...

    def zero_grad(self) -> None:
        """Reset gradients for all managed parameters."""
        ...

    @property
    def params(self) -> Iterable[object]:
        """Return the parameters managed by this optimizer."""
        ...
