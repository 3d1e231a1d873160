"""
State-based method dispatch (a.k.a. "control-path" templating) via decorators.

This module provides a small mechanism for routing a single method call to one
of several registered implementations based on a runtime attribute of the
receiver.

Core idea
---------
- You define a *base* method on a class (its signature becomes the canonical one).
- You then register multiple "control paths" for that method, each keyed by:
    (ClassName, MethodName, StateVal)
- At runtime, the wrapper reads the configured state attribute from the
  receiver and dispatches to the implementation registered for that value.

In stridegrad the state attribute is the element kind of an array
(``"float"`` or ``"int"``): operations that are only defined for floating
point data simply have no integer control path, and the trap factory turns
the missing path into an `UnsupportedElementTypeError`.

Important notes
---------------
- This design mutates the class: decorating a control path replaces the base
  method with a wrapper that performs dispatch.
- Registered implementations are stored in a closure-local mapping owned by
  `create_path_builder()`. Different builders do not share mappings.
- Implementations are called like bound methods: ``impl(self, *args, **kwargs)``.
"""

from typing import (
    Callable,
    Hashable,
    Optional,
    Dict,
    Type,
    Any,
)
from typing_extensions import ParamSpec, TypeVar
from collections import namedtuple
from functools import wraps

P = ParamSpec("P")
R = TypeVar("R")

TrapFactory = Callable[[Callable[..., Any], Any], Exception]


def create_path_builder(state_attr: str = "_state") -> Callable[
    [Type, Callable[P, R], Hashable, Optional[TrapFactory]],
    Callable[[Callable[P, R]], Callable[P, R]],
]:
    """
    Create a "path builder" used to register stateful control paths.

    Parameters
    ----------
    state_attr : str, optional
        Name of the receiver attribute whose value selects the control path.
        Defaults to ``"_state"``.

    Returns
    -------
    Callable
        A function with signature::

            (cls, method, state, trap_exception=None) -> decorator

        where ``decorator(sub_method)`` registers ``sub_method`` for that
        control path and installs a dispatcher on ``cls``.

    Examples
    --------
    ::

        dispatch = create_path_builder("_kind")

        class Ops:
            def scale(self, x): ...

        @dispatch(Ops, Ops.scale, "float")
        def scale_float(self, x): ...
    """

    MethodKey = namedtuple(
        "MethodKey",
        [
            "ClassName",
            "MethodName",
            "StateVal",
        ],
    )

    methods_map: Dict[MethodKey, Callable] = {}
    """Mapping from (class, method, state) keys to registered implementations."""

    def templator(
        cls: Type,
        method: Callable[P, R],
        state: Hashable,
        trap_exception: Optional[TrapFactory] = None,
    ) -> Callable[[Callable[P, R]], Callable[P, R]]:
        """
        Build a decorator that registers a control path implementation.

        Parameters
        ----------
        cls : Type
            Class whose method is wrapped for state-based dispatch.
        method : Callable
            The base method being templated. Its name and metadata are copied
            onto the installed wrapper.
        state : Hashable
            State value that selects the decorated implementation.
        trap_exception : Optional[TrapFactory]
            Called as ``trap_exception(method, state)`` when no path matches the
            receiver's state; the returned exception is raised. Without a trap,
            ``NotImplementedError`` is raised.

        Raises
        ------
        TypeError
            If `state` is not hashable.
        """
        try:
            hash(state)
        except TypeError:
            raise TypeError(f"The control-path state must be hashable. Got {state!r}")

        smk = MethodKey(cls.__name__, method.__name__, state)

        def decorator(sub_method: Callable[P, R]) -> Callable[P, R]:
            methods_map[smk] = sub_method

            @wraps(method)
            def wrapper(self: Any, *args: P.args, **kwargs: P.kwargs) -> Any:
                if not hasattr(self, state_attr):
                    raise NotImplementedError(
                        "{} is missing attribute {}".format(type(self), repr(state_attr))
                    )
                cur = getattr(self, state_attr)
                sm = methods_map.get(MethodKey(cls.__name__, method.__name__, cur))
                if sm is not None:
                    return sm(self, *args, **kwargs)
                if trap_exception is None:
                    raise NotImplementedError(
                        "Missing control path (state={}) for {}".format(
                            repr(cur), method.__name__
                        )
                    )
                raise trap_exception(method, cur)

            setattr(cls, method.__name__, wrapper)
            return sub_method

        return decorator

    return templator
