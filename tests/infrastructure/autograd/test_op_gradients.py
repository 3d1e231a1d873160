import unittest

import numpy as np

from stridegrad import Tensor, UnsupportedElementTypeError, from_numpy


def _t(values, requires_grad=True):
    return Tensor(np.asarray(values, dtype=np.float64), requires_grad=requires_grad)


def _numeric_grad(fn, x, eps=1e-6):
    """Central differences of a scalar numpy function."""
    x = np.asarray(x, dtype=np.float64)
    grad = np.zeros_like(x)
    for idx in np.ndindex(*x.shape):
        plus = x.copy()
        minus = x.copy()
        plus[idx] += eps
        minus[idx] -= eps
        grad[idx] = (fn(plus) - fn(minus)) / (2 * eps)
    return grad


class TestUnaryGradients(unittest.TestCase):
    def setUp(self):
        self.x0 = np.array([[0.3, 1.2, 2.0], [0.7, 1.5, 0.9]])
        self.w = np.array([[1.0, -2.0, 0.5], [3.0, 0.25, -1.0]])

    def _check(self, op, np_fn):
        x = _t(self.x0)
        (op(x) * from_numpy(self.w)).sum().backward()
        expected = _numeric_grad(lambda v: np.sum(np_fn(v) * self.w), self.x0)
        np.testing.assert_allclose(x.grad.to_numpy(), expected, rtol=1e-5, atol=1e-7)

    def test_exp_log_sqrt(self):
        self._check(lambda t: t.exp(), np.exp)
        self._check(lambda t: t.log(), np.log)
        self._check(lambda t: t.sqrt(), np.sqrt)

    def test_tanh_sigmoid(self):
        self._check(lambda t: t.tanh(), np.tanh)
        self._check(lambda t: t.sigmoid(), lambda v: 1.0 / (1.0 + np.exp(-v)))

    def test_polynomials(self):
        self._check(lambda t: t.sqr(), np.square)
        self._check(lambda t: t.pow(3), lambda v: v ** 3)
        self._check(lambda t: -t, np.negative)
        self._check(lambda t: 1.0 / t, lambda v: 1.0 / v)
        self._check(lambda t: 10.0 - t, lambda v: 10.0 - v)

    def test_relu(self):
        x = _t([-1.0, 0.5, 2.0, 0.0])
        x.relu().sum().backward()
        np.testing.assert_allclose(x.grad.to_numpy(), [0.0, 1.0, 1.0, 0.0])


class TestBinaryGradients(unittest.TestCase):
    def setUp(self):
        self.a0 = np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
        self.b0 = np.array([0.5, -1.0, 2.0])

    def test_add_sub_broadcast(self):
        a, b = _t(self.a0), _t(self.b0)
        (a - b).sum().backward()
        np.testing.assert_allclose(a.grad.to_numpy(), np.ones((2, 3)))
        np.testing.assert_allclose(b.grad.to_numpy(), [-2.0, -2.0, -2.0])

    def test_mul_broadcast(self):
        a, b = _t(self.a0), _t(self.b0)
        (a * b).sum().backward()
        np.testing.assert_allclose(a.grad.to_numpy(), np.broadcast_to(self.b0, (2, 3)))
        np.testing.assert_allclose(b.grad.to_numpy(), self.a0.sum(axis=0))

    def test_div_broadcast(self):
        a, b = _t(self.a0), _t(self.b0)
        (a / b).sum().backward()
        np.testing.assert_allclose(a.grad.to_numpy(), np.broadcast_to(1.0 / self.b0, (2, 3)))
        np.testing.assert_allclose(b.grad.to_numpy(), -self.a0.sum(axis=0) / self.b0 ** 2)

    def test_scalar_operands(self):
        a = _t([1.0, 2.0])
        (3.0 * a + 1.0).sum().backward()
        np.testing.assert_allclose(a.grad.to_numpy(), [3.0, 3.0])

    def test_array_on_the_left_defers_to_tensor(self):
        c = from_numpy(np.array([1.0, 1.0]))
        cases = [
            (lambda t: c + t, [1.0, 1.0]),
            (lambda t: c - t, [-1.0, -1.0]),
            (lambda t: c * t, [1.0, 1.0]),
            (lambda t: c / t, [-1.0, -0.25]),
        ]
        for op, expected in cases:
            t = _t([1.0, 2.0])
            y = op(t)
            self.assertIsInstance(y, Tensor)
            y.sum().backward()
            np.testing.assert_allclose(t.grad.to_numpy(), expected)

    def test_array_matmul_tensor(self):
        m = from_numpy(np.array([[1.0, 2.0], [3.0, 4.0]]))
        t = _t([1.0, 2.0])
        y = m @ t
        self.assertIsInstance(y, Tensor)
        np.testing.assert_allclose(y.to_numpy(), [5.0, 11.0])
        y.sum().backward()
        np.testing.assert_allclose(t.grad.to_numpy(), [4.0, 6.0])


class TestReductionGradients(unittest.TestCase):
    def test_mean_and_sum_axes(self):
        x = _t(np.arange(6.0).reshape(2, 3))
        x.mean(axis=1).sum().backward()
        np.testing.assert_allclose(x.grad.to_numpy(), np.full((2, 3), 1.0 / 3.0))
        y = _t(np.arange(6.0).reshape(2, 3))
        (y.sum(axis=0, keepdims=True) * from_numpy(np.array([[1.0, 2.0, 3.0]]))).sum().backward()
        np.testing.assert_allclose(y.grad.to_numpy(), [[1, 2, 3], [1, 2, 3]])

    def test_max_routes_to_first_occurrence(self):
        x = _t([3.0, 3.0, 1.0])
        x.max().backward()
        np.testing.assert_allclose(x.grad.to_numpy(), [1.0, 0.0, 0.0])

    def test_max_min_along_axis(self):
        x0 = np.array([[1.0, 7.0, 7.0], [4.0, 0.0, 4.0]])
        x = _t(x0)
        (x.max(axis=1) * from_numpy(np.array([2.0, 5.0]))).sum().backward()
        np.testing.assert_allclose(x.grad.to_numpy(), [[0, 2, 0], [5, 0, 0]])
        y = _t(x0)
        y.min(axis=0, keepdims=True).sum().backward()
        np.testing.assert_allclose(y.grad.to_numpy(), [[1, 0, 0], [0, 1, 1]])

    def test_var_and_std(self):
        x0 = np.array([[1.0, 4.0, 2.0], [8.0, -1.0, 3.0]])
        x = _t(x0)
        x.var(axis=1, ddof=1).sum().backward()
        expected = 2.0 * (x0 - x0.mean(axis=1, keepdims=True)) / 2.0
        np.testing.assert_allclose(x.grad.to_numpy(), expected, atol=1e-12)

        y = _t(x0)
        y.std().backward()
        expected = _numeric_grad(lambda v: np.std(v), x0)
        np.testing.assert_allclose(y.grad.to_numpy(), expected, rtol=1e-5, atol=1e-7)

    def test_log_softmax(self):
        x0 = np.array([[0.1, 2.0, -1.0], [3.0, 3.0, 0.5]])
        w = np.array([[1.0, 0.0, 2.0], [0.5, -1.0, 1.0]])
        x = _t(x0)
        y = x.log_softmax()
        shifted = x0 - x0.max(axis=1, keepdims=True)
        log_sm = shifted - np.log(np.exp(shifted).sum(axis=1, keepdims=True))
        np.testing.assert_allclose(y.to_numpy(), log_sm)
        (y * from_numpy(w)).sum().backward()
        expected = w - np.exp(log_sm) * w.sum(axis=1, keepdims=True)
        np.testing.assert_allclose(x.grad.to_numpy(), expected, atol=1e-12)

    def test_log_softmax_rejects_integers(self):
        with self.assertRaises(UnsupportedElementTypeError):
            Tensor(np.array([1, 2], dtype=np.int32)).log_softmax()


class TestLinalgGradients(unittest.TestCase):
    def setUp(self):
        rng = np.random.default_rng(11)
        self.rng = rng

    def test_matrix_matrix(self):
        a0 = self.rng.standard_normal((2, 3))
        b0 = self.rng.standard_normal((3, 4))
        w = self.rng.standard_normal((2, 4))
        a, b = _t(a0), _t(b0)
        ((a @ b) * from_numpy(w)).sum().backward()
        np.testing.assert_allclose(a.grad.to_numpy(), w @ b0.T)
        np.testing.assert_allclose(b.grad.to_numpy(), a0.T @ w)

    def test_vector_mixes(self):
        v0 = self.rng.standard_normal(3)
        m0 = self.rng.standard_normal((3, 4))
        w = self.rng.standard_normal(4)
        v, m = _t(v0), _t(m0)
        ((v @ m) * from_numpy(w)).sum().backward()
        np.testing.assert_allclose(v.grad.to_numpy(), m0 @ w)
        np.testing.assert_allclose(m.grad.to_numpy(), np.outer(v0, w))

        n0 = self.rng.standard_normal((2, 3))
        u = self.rng.standard_normal(2)
        n, v2 = _t(n0), _t(v0)
        ((n @ v2) * from_numpy(u)).sum().backward()
        np.testing.assert_allclose(n.grad.to_numpy(), np.outer(u, v0))
        np.testing.assert_allclose(v2.grad.to_numpy(), n0.T @ u)

    def test_dot(self):
        a0 = np.array([1.0, 2.0, 3.0])
        b0 = np.array([-1.0, 0.5, 4.0])
        a, b = _t(a0), _t(b0)
        a.dot(b).backward()
        np.testing.assert_allclose(a.grad.to_numpy(), b0)
        np.testing.assert_allclose(b.grad.to_numpy(), a0)

    def test_batched(self):
        a0 = self.rng.standard_normal((2, 2, 3))
        b0 = self.rng.standard_normal((2, 3, 2))
        a, b = _t(a0), _t(b0)
        (a @ b).sum().backward()
        g = np.ones((2, 2, 2))
        np.testing.assert_allclose(a.grad.to_numpy(), g @ np.swapaxes(b0, -1, -2))
        np.testing.assert_allclose(b.grad.to_numpy(), np.swapaxes(a0, -1, -2) @ g)


class TestShapeGradients(unittest.TestCase):
    def setUp(self):
        self.x0 = np.arange(6.0).reshape(2, 3)

    def test_transpose_and_reshape(self):
        x = _t(self.x0)
        w = np.arange(6.0).reshape(3, 2)
        (x.t() * from_numpy(w)).sum().backward()
        np.testing.assert_allclose(x.grad.to_numpy(), w.T)

        y = _t(self.x0)
        (y.t().reshape(6) * from_numpy(np.arange(6.0))).sum().backward()
        np.testing.assert_allclose(y.grad.to_numpy(), [[0, 2, 4], [1, 3, 5]])

    def test_select_slice_and_indexing(self):
        x = _t(self.x0)
        x.select(0, 1).sum().backward()
        np.testing.assert_allclose(x.grad.to_numpy(), [[0, 0, 0], [1, 1, 1]])

        y = _t(self.x0)
        y.slice(1, 0, 3, 2).sum().backward()
        np.testing.assert_allclose(y.grad.to_numpy(), [[1, 0, 1], [1, 0, 1]])

        z = _t(self.x0)
        (z[:, 1] * 2.0).sum().backward()
        np.testing.assert_allclose(z.grad.to_numpy(), [[0, 2, 0], [0, 2, 0]])

    def test_broadcast_stretch_squeeze(self):
        x = _t([1.0, 2.0, 3.0])
        x.broadcast_to((4, 3)).sum().backward()
        np.testing.assert_allclose(x.grad.to_numpy(), [4.0, 4.0, 4.0])

        y = _t([1.0, 2.0])
        s = y.stretch(-1)
        self.assertEqual(s.shape, (2, 1))
        (s.squeeze() * from_numpy(np.array([3.0, 4.0]))).sum().backward()
        np.testing.assert_allclose(y.grad.to_numpy(), [3.0, 4.0])

    def test_view_forward_values_alias(self):
        x = _t(self.x0)
        self.assertTrue(x.t().value.shares_storage(x.value))


if __name__ == "__main__":
    unittest.main()
