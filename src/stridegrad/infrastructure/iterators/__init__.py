from ._loop import LoopDescriptor
from ._pointer_iterator import PointerIterator

__all__ = [LoopDescriptor.__name__, PointerIterator.__name__]
