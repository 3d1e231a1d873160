import unittest

import numpy as np

from stridegrad import (
    DType,
    IndexOutOfRangeError,
    NArray,
    Order,
    ShapeMismatchError,
    StrideLayout,
    allocate,
    config_context,
    eye,
    from_buffer,
    from_function,
    from_numpy,
    full,
    ones,
    randn,
    random,
    scalar,
    seq,
    zeros,
)


class TestFactories(unittest.TestCase):
    def test_zeros_and_ones(self):
        z = zeros((2, 3))
        self.assertEqual(z.shape, (2, 3))
        self.assertIs(z.dtype, DType.FLOAT64)
        self.assertTrue(np.array_equal(z.to_numpy(), np.zeros((2, 3))))
        o = ones((2,), DType.INT32)
        self.assertEqual(o.to_numpy().tolist(), [1, 1])

    def test_default_dtype_follows_config(self):
        with config_context(default_dtype=DType.FLOAT32):
            self.assertIs(zeros((2,)).dtype, DType.FLOAT32)
            self.assertIs(from_numpy([[1, 2]]).dtype, DType.FLOAT32)
        self.assertIs(zeros((2,)).dtype, DType.FLOAT64)

    def test_full_and_scalar(self):
        f = full((2, 2), 7, DType.INT8)
        self.assertEqual(f.to_numpy().tolist(), [[7, 7], [7, 7]])
        s = scalar(3.5)
        self.assertEqual(s.rank, 0)
        self.assertEqual(s.size, 1)
        self.assertEqual(s.item(), 3.5)

    def test_from_buffer_c_order(self):
        a = from_buffer([1, 2, 3, 4, 5, 6], (2, 3))
        self.assertEqual(a.get(1, 0), 4.0)
        self.assertTrue(a.is_c_ordered())

    def test_from_buffer_f_order(self):
        a = from_buffer([1, 2, 3, 4, 5, 6], (2, 3), order=Order.F)
        self.assertEqual(a.to_numpy().tolist(), [[1, 3, 5], [2, 4, 6]])
        self.assertTrue(a.layout.is_f_ordered())

    def test_from_buffer_keeps_numpy_dtype(self):
        a = from_buffer(np.array([1, 2, 3], dtype=np.int8))
        self.assertIs(a.dtype, DType.INT8)

    def test_from_buffer_size_mismatch(self):
        with self.assertRaises(ShapeMismatchError):
            from_buffer([1, 2, 3], (2, 2))

    def test_from_numpy_copies(self):
        src = np.arange(6, dtype=np.int32).reshape(2, 3)
        a = from_numpy(src)
        self.assertIs(a.dtype, DType.INT32)
        src[0, 0] = 100
        self.assertEqual(a.get(0, 0), 0)

    def test_from_function(self):
        a = from_function((2, 3), lambda i, j: 10 * i + j, DType.INT32)
        self.assertEqual(a.to_numpy().tolist(), [[0, 1, 2], [10, 11, 12]])

    def test_seq_and_eye(self):
        self.assertEqual(seq((2, 2), DType.INT32).to_numpy().tolist(), [[0, 1], [2, 3]])
        self.assertTrue(np.array_equal(eye(3).to_numpy(), np.eye(3)))

    def test_random_is_reproducible_with_explicit_generator(self):
        a = random((4,), np.random.default_rng(7))
        b = random((4,), np.random.default_rng(7))
        self.assertTrue(np.array_equal(a.to_numpy(), b.to_numpy()))
        self.assertTrue(np.all((a.to_numpy() >= 0.0) & (a.to_numpy() < 1.0)))
        n = randn((2, 3), np.random.default_rng(0), DType.FLOAT32)
        self.assertEqual(n.shape, (2, 3))
        self.assertIs(n.dtype, DType.FLOAT32)


class TestNArrayAccess(unittest.TestCase):
    def test_layout_must_fit_storage(self):
        with self.assertRaises(IndexOutOfRangeError):
            NArray(allocate(DType.FLOAT64, 4), StrideLayout.of_dense((2, 3)))

    def test_get_set_inc(self):
        a = zeros((2, 2))
        a.set(5.0, 1, 0)
        a.inc(1.5, 1, 0)
        self.assertEqual(a.get(1, 0), 6.5)
        with self.assertRaises(IndexOutOfRangeError):
            a.get(2, 0)

    def test_item_requires_one_element(self):
        self.assertEqual(full((1, 1), 2.0).item(), 2.0)
        with self.assertRaises(ShapeMismatchError):
            zeros((2,)).item()

    def test_to_numpy_is_a_copy(self):
        a = zeros((2,))
        arr = a.to_numpy()
        arr[0] = 1.0
        self.assertEqual(a.get(0), 0.0)
        self.assertTrue(np.array_equal(np.asarray(a), [0.0, 0.0]))

    def test_pointers_and_iterator(self):
        a = seq((2, 3)).t()
        self.assertEqual(a.pointers(Order.C).tolist(), [0, 3, 1, 4, 2, 5])
        self.assertEqual(list(a.ptr_iterator(Order.S)), [0, 1, 2, 3, 4, 5])

    def test_len_and_iteration(self):
        a = seq((3, 2))
        self.assertEqual(len(a), 3)
        rows = [r.to_numpy().tolist() for r in a]
        self.assertEqual(rows, [[0, 1], [2, 3], [4, 5]])


class TestIndexing(unittest.TestCase):
    def setUp(self):
        self.a = seq((3, 4), DType.INT32)

    def test_integer_index_returns_view(self):
        row = self.a[1]
        self.assertTrue(row.shares_storage(self.a))
        self.assertEqual(row.to_numpy().tolist(), [4, 5, 6, 7])
        self.assertEqual(self.a[1, 2].item(), 6)
        self.assertEqual(self.a[-1].to_numpy().tolist(), [8, 9, 10, 11])

    def test_slices(self):
        self.assertEqual(self.a[:, 1].to_numpy().tolist(), [1, 5, 9])
        self.assertEqual(self.a[::2, 1:3].to_numpy().tolist(), [[1, 2], [9, 10]])

    def test_setitem_writes_through(self):
        self.a[0] = 0
        self.a[1:, 0] = from_numpy(np.array([-1, -2], dtype=np.int32))
        self.assertEqual(
            self.a.to_numpy().tolist(), [[0, 0, 0, 0], [-1, 5, 6, 7], [-2, 9, 10, 11]]
        )

    def test_bad_indices(self):
        with self.assertRaises(IndexOutOfRangeError):
            self.a[3]
        with self.assertRaises(IndexOutOfRangeError):
            self.a[0, 0, 0]
        with self.assertRaises(ValueError):
            self.a[0, ::-1]


if __name__ == "__main__":
    unittest.main()
