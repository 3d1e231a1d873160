"""
Differentiable elementwise binary operations and their operators.

Gradient rules (``g`` is the gradient of the result; broadcast operands get
``g`` summed back to their own shape):

- add: ``da = g``, ``db = g``
- sub: ``da = g``, ``db = -g``
- mul: ``da = g * b``, ``db = g * a``
- div: ``da = g / b``, ``db = -g * a / b**2``

Python scalars and bare NArrays are constants: they get no gradient.
"""

from __future__ import annotations

from ._common import reduce_to, value_of


class TensorMixinArithmetic:
    """Elementwise binary operations on tensors."""

    def add(self, other):
        a, b = self.value, value_of(other)
        return self._make(
            a.add(b),
            "add",
            (self, lambda g: reduce_to(g, a)),
            (other, lambda g: reduce_to(g, b)),
        )

    def sub(self, other):
        a, b = self.value, value_of(other)
        return self._make(
            a.sub(b),
            "sub",
            (self, lambda g: reduce_to(g, a)),
            (other, lambda g: reduce_to(g.neg(), b)),
        )

    def mul(self, other):
        a, b = self.value, value_of(other)
        return self._make(
            a.mul(b),
            "mul",
            (self, lambda g: reduce_to(g.mul(b), a)),
            (other, lambda g: reduce_to(g.mul(a), b)),
        )

    def div(self, other):
        a, b = self.value, value_of(other)
        return self._make(
            a.div(b),
            "div",
            (self, lambda g: reduce_to(g.div(b), a)),
            (other, lambda g: reduce_to(g.mul(a).div(b.sqr()).neg(), b)),
        )

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------
    def __add__(self, other):
        return self.add(other)

    def __radd__(self, other):
        return self.add(other)

    def __sub__(self, other):
        return self.sub(other)

    def __rsub__(self, other):
        return self.neg().add(other)

    def __mul__(self, other):
        return self.mul(other)

    def __rmul__(self, other):
        return self.mul(other)

    def __truediv__(self, other):
        return self.div(other)

    def __rtruediv__(self, other):
        return self.pow(-1).mul(other)

    def __neg__(self):
        return self.neg()

    def __pow__(self, exponent):
        return self.pow(exponent)
