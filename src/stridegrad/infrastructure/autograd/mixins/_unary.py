"""
Differentiable elementwise unary operations.

Rules use the forward input ``x`` or, where cheaper, the forward output ``y``:

- neg: ``-g``;  sqr: ``2 x g``;  pow(p): ``p x**(p-1) g``
- exp: ``y g``;  log: ``g / x``;  sqrt: ``g / (2 y)``
- tanh: ``(1 - y**2) g``;  sigmoid: ``y (1 - y) g``
- relu: ``g`` where ``x > 0``, else 0
"""

from __future__ import annotations

from ....domain._order import Compare


class TensorMixinUnary:
    """Elementwise unary operations on tensors."""

    def neg(self):
        return self._make(self.value.neg(), "neg", (self, lambda g: g.neg()))

    def sqr(self):
        x = self.value
        return self._make(x.sqr(), "sqr", (self, lambda g: g.mul(x).mul(2)))

    def pow(self, exponent):
        x = self.value
        p = float(exponent)
        return self._make(
            x.pow(p), "pow", (self, lambda g: g.mul(x.pow(p - 1.0).mul(p)))
        )

    def exp(self):
        y = self.value.exp()
        return self._make(y, "exp", (self, lambda g: g.mul(y)))

    def log(self):
        x = self.value
        return self._make(x.log(), "log", (self, lambda g: g.div(x)))

    def sqrt(self):
        y = self.value.sqrt()
        return self._make(y, "sqrt", (self, lambda g: g.div(y.mul(2))))

    def tanh(self):
        y = self.value.tanh()
        return self._make(y, "tanh", (self, lambda g: g.mul(y.sqr().neg().add(1))))

    def sigmoid(self):
        y = self.value.sigmoid()
        return self._make(y, "sigmoid", (self, lambda g: g.mul(y.mul(y.neg().add(1)))))

    def relu(self):
        x = self.value
        return self._make(
            x.relu(), "relu", (self, lambda g: g.mul(x.compare_mask(Compare.GT, 0)))
        )
