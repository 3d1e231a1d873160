import unittest

import numpy as np

from stridegrad import (
    Parameter,
    ShapeMismatchError,
    Tensor,
    UngradedTensorError,
    UnsupportedElementTypeError,
    from_numpy,
    ones,
    topological_order,
    zero_grad,
)


def _t(values, requires_grad=True, name=None):
    return Tensor(np.asarray(values, dtype=np.float64), requires_grad=requires_grad, name=name)


class TestBackwardBasics(unittest.TestCase):
    def test_sum_of_squares(self):
        x = _t([1.0, 2.0, 3.0])
        (x * x).sum().backward()
        np.testing.assert_allclose(x.grad.to_numpy(), [2.0, 4.0, 6.0])

    def test_second_pass_accumulates(self):
        x = _t([1.0, 2.0, 3.0])
        y = (x * x).sum()
        y.backward()
        y.backward()
        np.testing.assert_allclose(x.grad.to_numpy(), [4.0, 8.0, 12.0])

    def test_zero_grad_keeps_storage(self):
        x = _t([1.0, 2.0])
        x.sum().backward()
        g = x.grad
        x.zero_grad()
        self.assertIs(x.grad, g)
        np.testing.assert_allclose(g.to_numpy(), [0.0, 0.0])

    def test_shared_node_gets_summed_contributions(self):
        x = _t([1.0, -2.0])
        y = x * x + x
        y.sum().backward()
        np.testing.assert_allclose(x.grad.to_numpy(), [3.0, -3.0])

    def test_intermediate_nodes_receive_grads(self):
        x = _t([2.0])
        h = x * 3.0
        (h * h).sum().backward()
        np.testing.assert_allclose(h.grad.to_numpy(), [12.0])
        np.testing.assert_allclose(x.grad.to_numpy(), [36.0])

    def test_deep_chain_does_not_recurse(self):
        x = _t([0.0])
        y = x
        for _ in range(3000):
            y = y + 1.0
        y.sum().backward()
        np.testing.assert_allclose(x.grad.to_numpy(), [1.0])


class TestSeeds(unittest.TestCase):
    def test_explicit_grad_out(self):
        x = _t([1.0, 2.0, 3.0])
        y = x * 2.0
        y.backward(from_numpy(np.array([1.0, 0.0, 1.0])))
        np.testing.assert_allclose(x.grad.to_numpy(), [2.0, 0.0, 2.0])

    def test_grad_out_shape_must_match(self):
        y = _t([1.0, 2.0]) * 2.0
        with self.assertRaises(ShapeMismatchError):
            y.backward(ones((3,)))

    def test_existing_root_grad_is_the_seed(self):
        x = _t([1.0, 2.0])
        y = x * 3.0
        y.set_grad(from_numpy(np.array([1.0, 2.0])))
        y.backward()
        np.testing.assert_allclose(x.grad.to_numpy(), [3.0, 6.0])
        np.testing.assert_allclose(y.grad.to_numpy(), [1.0, 2.0])

    def test_scalar_root_reused_after_zero_grad(self):
        x = _t([1.0, 2.0, 3.0])
        y = (x * x).sum()
        y.backward()
        zero_grad(y)
        y.backward()
        np.testing.assert_allclose(x.grad.to_numpy(), [2.0, 4.0, 6.0])
        np.testing.assert_allclose(y.grad.to_numpy(), 1.0)

    def test_zero_grad_drops_explicit_seed(self):
        x = _t([1.0, 2.0])
        y = (x * x).sum()
        y.set_grad(from_numpy(np.array(5.0)))
        y.zero_grad()
        y.backward()
        np.testing.assert_allclose(x.grad.to_numpy(), [2.0, 4.0])

        z = x * 3.0
        z.set_grad(from_numpy(np.array([1.0, 1.0])))
        z.zero_grad()
        with self.assertRaises(UngradedTensorError):
            z.backward()

    def test_non_scalar_root_needs_seed(self):
        y = _t([1.0, 2.0]) * 2.0
        with self.assertRaises(UngradedTensorError):
            y.backward()

    def test_root_must_require_grad(self):
        with self.assertRaises(UngradedTensorError):
            _t([1.0], requires_grad=False).backward()


class TestGradLifecycle(unittest.TestCase):
    def test_grad_before_backward_raises(self):
        x = _t([1.0], name="w")
        self.assertFalse(x.has_grad)
        with self.assertRaises(UngradedTensorError) as ctx:
            _ = x.grad
        self.assertIn("'w'", str(ctx.exception))

    def test_constants_get_no_grad(self):
        x = _t([1.0, 2.0])
        c = _t([5.0, 5.0], requires_grad=False)
        (x * c).sum().backward()
        self.assertFalse(c.has_grad)
        np.testing.assert_allclose(x.grad.to_numpy(), [5.0, 5.0])

    def test_result_without_grad_inputs_has_no_history(self):
        y = _t([1.0], requires_grad=False) * 2.0
        self.assertFalse(y.requires_grad)
        self.assertTrue(y.is_leaf)

    def test_integer_tensors_cannot_require_grad(self):
        with self.assertRaises(UnsupportedElementTypeError):
            Tensor(np.array([1, 2], dtype=np.int32), requires_grad=True)
        t = Tensor(np.array([1, 2], dtype=np.int32))
        with self.assertRaises(UnsupportedElementTypeError):
            t.requires_grad = True

    def test_set_grad_checks_shape(self):
        x = _t([1.0, 2.0])
        with self.assertRaises(ShapeMismatchError):
            x.set_grad(ones((3,)))

    def test_detach(self):
        x = _t([1.0, 2.0])
        y = (x * 2.0).detach()
        self.assertFalse(y.requires_grad)
        self.assertTrue(y.is_leaf)

    def test_engine_zero_grad_reaches_whole_graph(self):
        a = _t([1.0])
        b = _t([2.0])
        y = (a * b).sum()
        y.backward()
        zero_grad(y)
        np.testing.assert_allclose(a.grad.to_numpy(), [0.0])
        np.testing.assert_allclose(b.grad.to_numpy(), [0.0])


class TestGraph(unittest.TestCase):
    def test_topological_order(self):
        a = _t([1.0], name="a")
        b = _t([2.0], name="b")
        c = a * b
        d = c + a
        order = topological_order(d)
        self.assertIs(order[-1], d)
        pos = {id(n): i for i, n in enumerate(order)}
        self.assertLess(pos[id(a)], pos[id(c)])
        self.assertLess(pos[id(b)], pos[id(c)])
        self.assertLess(pos[id(c)], pos[id(d)])
        self.assertEqual(len(order), 4)

    def test_context_records_op_and_parents(self):
        a = _t([1.0])
        b = _t([2.0], requires_grad=False)
        c = a.mul(b)
        ctx = c._get_ctx()
        self.assertEqual(ctx.op, "mul")
        self.assertEqual(ctx.parents, (a,))


class TestParameter(unittest.TestCase):
    def test_defaults_to_requires_grad(self):
        p = Parameter(np.zeros((2, 2)))
        self.assertTrue(p.requires_grad)
        self.assertTrue(p.is_leaf)
        self.assertIsInstance(p, Tensor)
        self.assertTrue(repr(p).startswith("Parameter("))

    def test_requires_grad_can_toggle(self):
        p = Parameter(np.zeros(2), requires_grad=False)
        self.assertFalse(p.requires_grad)
        p.requires_grad = True
        self.assertTrue(p.requires_grad)


if __name__ == "__main__":
    unittest.main()
