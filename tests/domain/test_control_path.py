import unittest

from stridegrad.domain import UnsupportedElementTypeError
from stridegrad.domain.utils import create_path_builder


class TestCreatePathBuilder(unittest.TestCase):
    def setUp(self) -> None:
        # Fresh builder per test to avoid map-sharing across tests.
        self.decorator = create_path_builder()

    def test_state_must_be_hashable(self) -> None:
        class C:
            _state = "A"

            def foo(self, x: int) -> int:
                return x

        with self.assertRaises(TypeError) as ctx:
            self.decorator(C, C.foo, ["not-hashable"])(lambda self, x: x)

        self.assertIn("must be hashable", str(ctx.exception))

    def test_dispatch_selects_registered_control_path(self) -> None:
        class C:
            def __init__(self, st):
                self._state = st

            def foo(self, x: int) -> int:
                return -999

        @self.decorator(C, C.foo, "A")
        def foo_A(self, x: int) -> int:
            return x + 10

        @self.decorator(C, C.foo, "B")
        def foo_B(self, x: int) -> int:
            return x + 20

        self.assertEqual(C("A").foo(1), 11)
        self.assertEqual(C("B").foo(1), 21)

    def test_implementation_receives_receiver(self) -> None:
        class C:
            def __init__(self, st, base):
                self._state = st
                self.base = base

            def foo(self, x: int) -> int:
                return -999

        @self.decorator(C, C.foo, "A")
        def foo_A(self, x: int, *, scale: int = 1) -> int:
            return (self.base + x) * scale

        self.assertEqual(C("A", 5).foo(1, scale=3), 18)

    def test_custom_state_attribute(self) -> None:
        builder = create_path_builder("_kind")

        class C:
            def __init__(self, kind):
                self._kind = kind

            def foo(self) -> str:
                return "base"

        @builder(C, C.foo, "float")
        @builder(C, C.foo, "int")
        def foo_any(self) -> str:
            return "shared:" + self._kind

        self.assertEqual(C("float").foo(), "shared:float")
        self.assertEqual(C("int").foo(), "shared:int")

    def test_missing_state_attribute_raises_not_implemented(self) -> None:
        class C:
            def foo(self, x: int) -> int:
                return x

        @self.decorator(C, C.foo, "A")
        def foo_A(self, x: int) -> int:
            return x + 1

        with self.assertRaises(NotImplementedError) as ctx:
            C().foo(1)

        self.assertIn("missing attribute", str(ctx.exception))
        self.assertIn("'_state'", str(ctx.exception))

    def test_missing_control_path_without_trap_raises_not_implemented(self) -> None:
        class C:
            def __init__(self, st):
                self._state = st

            def foo(self, x: int) -> int:
                return x

        @self.decorator(C, C.foo, "A")
        def foo_A(self, x: int) -> int:
            return x + 1

        with self.assertRaises(NotImplementedError) as ctx:
            C("B").foo(1)

        self.assertIn("Missing control path", str(ctx.exception))
        self.assertIn("state='B'", str(ctx.exception))

    def test_trap_factory_builds_raised_exception(self) -> None:
        calls = []

        def trap(method, state):
            calls.append((method.__name__, state))
            return UnsupportedElementTypeError(method.__name__, state)

        class C:
            def __init__(self, st):
                self._state = st

            def exp(self) -> float:
                return 0.0

        @self.decorator(C, C.exp, "float", trap)
        def exp_float(self) -> float:
            return 1.0

        self.assertEqual(C("float").exp(), 1.0)
        with self.assertRaises(UnsupportedElementTypeError) as ctx:
            C("int").exp()

        self.assertEqual(calls, [("exp", "int")])
        self.assertEqual(ctx.exception.op, "exp")
        self.assertEqual(ctx.exception.dtype, "int")

    def test_wrapper_preserves_original_method_metadata(self) -> None:
        class C:
            _state = "A"

            def foo(self, x: int) -> int:
                """Original foo docstring."""
                return x

        @self.decorator(C, C.foo, "A")
        def foo_A(self, x: int) -> int:
            return x + 1

        self.assertEqual(C.foo.__name__, "foo")
        self.assertEqual(C.foo.__doc__, "Original foo docstring.")

    def test_two_builders_do_not_share_control_paths(self) -> None:
        deco1 = create_path_builder()
        deco2 = create_path_builder()

        class C:
            def __init__(self, st):
                self._state = st

            def foo(self, x: int) -> int:
                return -999

        @deco1(C, C.foo, "A")
        def foo_A_1(self, x: int) -> int:
            return 111

        @deco2(C, C.foo, "B")
        def foo_B_2(self, x: int) -> int:
            return 222

        # The wrapper installed last consults deco2's map only.
        with self.assertRaises(NotImplementedError):
            C("A").foo(0)

        self.assertEqual(C("B").foo(0), 222)


if __name__ == "__main__":
    unittest.main()
