"""
Element types supported by the engine.

`DType` is a closed set: every storage backend, cast rule and kernel in the
infrastructure layer is keyed on one of its four members. The domain layer
stays free of NumPy; the mapping to concrete NumPy dtypes lives next to the
storage implementations.
"""

from __future__ import annotations

from enum import Enum


class DType(Enum):
    """
    Element type of a storage buffer.

    Each member carries a short identifier, its element kind (``"float"`` or
    ``"int"``), the width in bytes and a promotion rank. Binary operations on
    two arrays produce the operand dtype with the highest rank.
    """

    FLOAT64 = ("double", "float", 8, 3)
    FLOAT32 = ("float", "float", 4, 2)
    INT32 = ("int", "int", 4, 1)
    INT8 = ("byte", "int", 1, 0)

    def __init__(self, short_name: str, kind: str, itemsize: int, rank: int) -> None:
        self.short_name = short_name
        self.kind = kind
        self.itemsize = itemsize
        self.rank = rank

    @property
    def is_float(self) -> bool:
        return self.kind == "float"

    @property
    def is_integer(self) -> bool:
        return self.kind == "int"

    @staticmethod
    def promote(*dtypes: "DType") -> "DType":
        """
        Return the widest of the given dtypes.

        Raises
        ------
        ValueError
            If no dtype is given.
        """
        if not dtypes:
            raise ValueError("promote() requires at least one dtype")
        return max(dtypes, key=lambda d: d.rank)

    @classmethod
    def parse(cls, value: "DType | str") -> "DType":
        """
        Resolve a dtype from a member or one of its accepted names.

        Accepted names are the member names (case-insensitive), the short
        identifiers (``double``, ``float``, ``int``, ``byte``) and the common
        NumPy spellings (``float64``, ``float32``, ``int32``, ``int8``).
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for member in cls:
            if key in (member.name.lower(), member.short_name):
                return member
        aliases = {"f8": cls.FLOAT64, "f4": cls.FLOAT32, "i4": cls.INT32, "i1": cls.INT8}
        if key in aliases:
            return aliases[key]
        raise ValueError(f"Unknown dtype: {value!r}")

    def __str__(self) -> str:
        return self.name.lower()
