import unittest

import numpy as np

from stridegrad import (
    DType,
    IndexOutOfRangeError,
    Order,
    ShapeMismatchError,
    from_numpy,
    seq,
    zeros,
)


class TestViews(unittest.TestCase):
    def test_views_share_storage(self):
        a = seq((2, 3))
        for view in (a.select(0, 1), a.slice(1, 0, 2), a.t(), a.stretch(0), a.squeeze()):
            self.assertTrue(view.shares_storage(a))
        a.t().set(-1.0, 2, 1)
        self.assertEqual(a.get(1, 2), -1.0)

    def test_select_and_slice(self):
        a = seq((3, 4))
        self.assertEqual(a.select(1, -1).to_numpy().tolist(), [3, 7, 11])
        self.assertEqual(a.slice(1, 1, 4, 2).to_numpy().tolist(), [[1, 3], [5, 7], [9, 11]])
        self.assertEqual(a.slice(0, 2, 2).shape, (0, 4))
        with self.assertRaises(IndexOutOfRangeError):
            a.select(0, 3)

    def test_transpose_permutation(self):
        a = seq((2, 3, 4))
        p = a.transpose(2, 0, 1)
        self.assertEqual(p.shape, (4, 2, 3))
        self.assertTrue(np.array_equal(p.to_numpy(), np.transpose(a.to_numpy(), (2, 0, 1))))
        self.assertEqual(seq((3,)).t().shape, (3,))
        self.assertEqual(a.T.shape, (4, 3, 2))

    def test_stretch_expand_squeeze(self):
        a = seq((3,))
        s = a.stretch(0)
        self.assertEqual(s.shape, (1, 3))
        e = s.expand(0, 4)
        self.assertEqual(e.shape, (4, 3))
        self.assertEqual(e.layout.strides, (0, 1))
        self.assertEqual(e.squeeze().shape, (4, 3))
        self.assertEqual(a.stretch(-1).shape, (3, 1))
        with self.assertRaises(ShapeMismatchError):
            a.expand(0, 2)

    def test_broadcast_to(self):
        b = seq((3,)).broadcast_to((2, 3))
        self.assertEqual(b.to_numpy().tolist(), [[0, 1, 2], [0, 1, 2]])
        with self.assertRaises(ShapeMismatchError):
            seq((3,)).broadcast_to((2, 2))

    def test_reshape_view_or_copy(self):
        a = seq((2, 3))
        r = a.reshape(3, -1)
        self.assertEqual(r.shape, (3, 2))
        self.assertTrue(r.shares_storage(a))
        c = a.t().reshape((6,))
        self.assertFalse(c.shares_storage(a))
        self.assertEqual(c.to_numpy().tolist(), [0, 3, 1, 4, 2, 5])
        self.assertEqual(a.flatten().shape, (6,))
        with self.assertRaises(ShapeMismatchError):
            a.reshape(4, -1)
        with self.assertRaises(ShapeMismatchError):
            a.reshape(-1, -1)


class TestCopies(unittest.TestCase):
    def test_copy_is_independent(self):
        a = seq((2, 2))
        c = a.copy()
        c.set(9.0, 0, 0)
        self.assertEqual(a.get(0, 0), 0.0)
        self.assertFalse(c.shares_storage(a))

    def test_copy_order(self):
        a = seq((2, 3))
        f = a.copy(Order.F)
        self.assertTrue(f.layout.is_f_ordered())
        self.assertTrue(np.array_equal(f.to_numpy(), a.to_numpy()))
        self.assertTrue(a.t().copy().layout.is_f_ordered())
        self.assertTrue(a.broadcast_to((2, 2, 3)).copy().is_c_ordered())

    def test_cast(self):
        a = from_numpy(np.array([1.9, -1.9, np.nan]))
        out = a.cast(DType.INT32)
        self.assertIs(out.dtype, DType.INT32)
        self.assertEqual(out.to_numpy().tolist(), [1, -1, 0])
        self.assertIs(out.cast("float32").dtype, DType.FLOAT32)

    def test_sum_to_shape(self):
        g = from_numpy(np.ones((2, 3, 4)))
        self.assertTrue(np.allclose(g.sum_to_shape((3, 1)).to_numpy(), np.full((3, 1), 8.0)))
        self.assertTrue(np.allclose(g.sum_to_shape((4,)).to_numpy(), np.full((4,), 6.0)))
        self.assertEqual(g.sum_to_shape(()).item(), 24.0)
        with self.assertRaises(ShapeMismatchError):
            g.sum_to_shape((2, 4))


class TestBulkWrites(unittest.TestCase):
    def test_fill_dense_and_strided(self):
        a = zeros((3, 3))
        a[1:, ::2].fill_(5.0)
        self.assertTrue(np.allclose(a.to_numpy(), [[0, 0, 0], [5, 0, 5], [5, 0, 5]]))
        a.fill_(1.0)
        self.assertTrue(np.allclose(a.to_numpy(), np.ones((3, 3))))

    def test_assign_broadcasts(self):
        a = zeros((2, 3), DType.INT32)
        a.assign_(from_numpy(np.array([1.7, 2.2, 3.9])))
        self.assertEqual(a.to_numpy().tolist(), [[1, 2, 3], [1, 2, 3]])
        with self.assertRaises(ShapeMismatchError):
            a.assign_(zeros((4,)))

    def test_like_factories(self):
        a = seq((2,), DType.INT8)
        self.assertEqual(a.zeros_like().to_numpy().tolist(), [0, 0])
        self.assertIs(a.ones_like().dtype, DType.INT8)


if __name__ == "__main__":
    unittest.main()
