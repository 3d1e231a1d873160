import unittest

from stridegrad.domain import (
    IndexOutOfRangeError,
    Order,
    Shape,
    ShapeMismatchError,
    broadcast_shapes,
    is_broadcast_compatible,
)


class TestShapeQueries(unittest.TestCase):
    def test_size_rank_and_dims(self):
        s = Shape.of(2, 3, 4)
        self.assertEqual(s.rank, 3)
        self.assertEqual(s.size, 24)
        self.assertEqual(s.dims, (2, 3, 4))
        self.assertEqual(len(s), 3)
        self.assertEqual(list(s), [2, 3, 4])

    def test_scalar_shape_has_one_element(self):
        s = Shape.of()
        self.assertEqual(s.rank, 0)
        self.assertEqual(s.size, 1)

    def test_zero_extent_gives_empty_shape(self):
        self.assertEqual(Shape.of(2, 0, 3).size, 0)

    def test_negative_extent_rejected(self):
        with self.assertRaises(ValueError):
            Shape.of(2, -1)

    def test_dim_accepts_negative_positions(self):
        s = Shape.of(2, 3, 4)
        self.assertEqual(s.dim(-1), 4)
        self.assertEqual(s.dim(0), 2)
        with self.assertRaises(IndexOutOfRangeError):
            s.dim(3)
        with self.assertRaises(IndexError):
            s.dim(-4)

    def test_unit_dim_count(self):
        self.assertEqual(Shape.of(1, 3, 1).unit_dim_count(), 2)

    def test_equality_with_tuples_and_hash(self):
        s = Shape.of(2, 3)
        self.assertEqual(s, (2, 3))
        self.assertEqual(s, Shape((2, 3)))
        self.assertNotEqual(s, (3, 2))
        self.assertEqual(hash(s), hash((2, 3)))

    def test_coerce(self):
        self.assertEqual(Shape.coerce(5), (5,))
        self.assertEqual(Shape.coerce([2, 3]), (2, 3))


class TestShapeStridesAndPositions(unittest.TestCase):
    def test_canonical_strides(self):
        s = Shape.of(2, 3, 4)
        self.assertEqual(s.c_strides(), (12, 4, 1))
        self.assertEqual(s.f_strides(), (1, 2, 6))

    def test_index_in_c_and_f_order(self):
        s = Shape.of(2, 3)
        self.assertEqual(s.index(Order.C, 1), (0, 1))
        self.assertEqual(s.index(Order.F, 1), (1, 0))
        self.assertEqual(s.index(Order.C, 5), (1, 2))

    def test_position_inverts_index(self):
        s = Shape.of(3, 4, 2)
        for order in (Order.C, Order.F):
            for pos in range(s.size):
                self.assertEqual(s.position(order, *s.index(order, pos)), pos)

    def test_index_out_of_range(self):
        with self.assertRaises(IndexOutOfRangeError):
            Shape.of(2, 3).index(Order.C, 6)


class TestBroadcastShapes(unittest.TestCase):
    def test_broadcast_unit_axes(self):
        self.assertEqual(broadcast_shapes((3, 1), (1, 4)), (3, 4))

    def test_broadcast_pads_leading_axes(self):
        self.assertEqual(broadcast_shapes((2, 3), (3,)), (2, 3))
        self.assertEqual(broadcast_shapes((), (2, 2)), (2, 2))

    def test_broadcast_is_symmetric(self):
        a, b = (5, 1, 3), (4, 1)
        self.assertEqual(broadcast_shapes(a, b), broadcast_shapes(b, a))
        self.assertEqual(broadcast_shapes(a, b), (5, 4, 3))

    def test_incompatible_shapes_raise(self):
        with self.assertRaises(ShapeMismatchError) as cm:
            broadcast_shapes((2, 3), (4,))
        self.assertEqual(cm.exception.shapes, ((2, 3), (4,)))
        self.assertIsInstance(cm.exception, ValueError)

    def test_is_broadcast_compatible(self):
        self.assertTrue(is_broadcast_compatible((2, 1), (1, 5)))
        self.assertFalse(is_broadcast_compatible((2, 3), (3, 2)))


if __name__ == "__main__":
    unittest.main()
