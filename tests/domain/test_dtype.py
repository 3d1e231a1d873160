import unittest

from stridegrad.domain import DType, Compare, Order


class TestDType(unittest.TestCase):
    def test_kinds(self):
        self.assertTrue(DType.FLOAT64.is_float)
        self.assertTrue(DType.FLOAT32.is_float)
        self.assertTrue(DType.INT32.is_integer)
        self.assertEqual(DType.INT8.kind, "int")
        self.assertEqual(DType.FLOAT32.itemsize, 4)

    def test_promotion_order(self):
        self.assertIs(DType.promote(DType.INT8, DType.INT32), DType.INT32)
        self.assertIs(DType.promote(DType.INT32, DType.FLOAT32), DType.FLOAT32)
        self.assertIs(DType.promote(DType.FLOAT32, DType.FLOAT64, DType.INT8), DType.FLOAT64)
        with self.assertRaises(ValueError):
            DType.promote()

    def test_parse_names(self):
        self.assertIs(DType.parse("double"), DType.FLOAT64)
        self.assertIs(DType.parse("float64"), DType.FLOAT64)
        self.assertIs(DType.parse("float"), DType.FLOAT32)
        self.assertIs(DType.parse("INT32"), DType.INT32)
        self.assertIs(DType.parse("byte"), DType.INT8)
        self.assertIs(DType.parse("i1"), DType.INT8)
        self.assertIs(DType.parse(DType.INT32), DType.INT32)
        with self.assertRaises(ValueError):
            DType.parse("complex")

    def test_str(self):
        self.assertEqual(str(DType.FLOAT32), "float32")


class TestOrderAndCompare(unittest.TestCase):
    def test_auto_fc(self):
        self.assertIs(Order.auto_fc(Order.F), Order.F)
        self.assertIs(Order.auto_fc(Order.S), Order.C)
        self.assertIs(Order.auto_fc(Order.A), Order.C)

    def test_parse(self):
        self.assertIs(Order.parse("f"), Order.F)
        with self.assertRaises(ValueError):
            Order.parse("z")

    def test_compare_values(self):
        self.assertIs(Compare("ge"), Compare.GE)


if __name__ == "__main__":
    unittest.main()
