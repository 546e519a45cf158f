"""Constant pool for immediate values and enum literal tables."""

from __future__ import annotations

import enum
from collections.abc import Sequence
from typing import TypeVar, Union

_T = TypeVar("_T")

LiteralValue = Union[int, float, str]


class LiteralKind(enum.Enum):
    """Type tag of an enum literal."""

    INT = "i"
    FLOAT = "f"
    STRING = "s"


def _get(seq: Sequence[_T], index: int, what: str) -> _T:
    if not 0 <= index < len(seq):
        raise IndexError(f"{what} index out of range: {index}")
    return seq[index]


class ConstantPool:
    """Deduplicated int, float and string constants plus a literal table.

    Constants are shared: pushing an equal value again returns the first index.
    Literals are appended every time and remember their kind.
    """

    def __init__(self) -> None:
        self._ints: list[int] = []
        self._int_index: dict[int, int] = {}
        self._floats: list[float] = []
        self._strings: list[str] = []
        self._string_index: dict[str, int] = {}
        self._literals: list[tuple[LiteralKind, LiteralValue]] = []

    # constants
    def push_int(self, value: int) -> int:
        """Add an integer constant unless present; return its index."""
        index = self._int_index.get(value)
        if index is None:
            index = len(self._ints)
            self._ints.append(value)
            self._int_index[value] = index
        return index

    def push_float(self, value: float) -> int:
        """Add a float constant unless an equal one is present; return its index."""
        for index, existing in enumerate(self._floats):
            if existing == value:
                return index
        self._floats.append(value)
        return len(self._floats) - 1

    def push_string(self, value: str) -> int:
        """Add a string constant unless present; return its index."""
        index = self._string_index.get(value)
        if index is None:
            index = len(self._strings)
            self._strings.append(value)
            self._string_index[value] = index
        return index

    def get_int(self, index: int) -> int:
        return _get(self._ints, index, "int constant")

    def get_float(self, index: int) -> float:
        return _get(self._floats, index, "float constant")

    def get_string(self, index: int) -> str:
        return _get(self._strings, index, "string constant")

    def int_count(self) -> int:
        return len(self._ints)

    def float_count(self) -> int:
        return len(self._floats)

    def string_count(self) -> int:
        return len(self._strings)

    # literals
    def _push_literal(self, kind: LiteralKind, value: LiteralValue) -> int:
        self._literals.append((kind, value))
        return len(self._literals) - 1

    def push_literal_int(self, value: int) -> int:
        """Append an integer literal and return its index."""
        return self._push_literal(LiteralKind.INT, value)

    def push_literal_float(self, value: float) -> int:
        """Append a float literal and return its index."""
        return self._push_literal(LiteralKind.FLOAT, value)

    def push_literal_string(self, value: str) -> int:
        """Append a string literal and return its index."""
        return self._push_literal(LiteralKind.STRING, value)

    def get_literal(self, index: int) -> LiteralValue:
        return _get(self._literals, index, "literal")[1]

    def literal_kind(self, index: int) -> LiteralKind:
        return _get(self._literals, index, "literal")[0]

    def is_literal_int(self, index: int) -> bool:
        return self.literal_kind(index) is LiteralKind.INT

    def is_literal_float(self, index: int) -> bool:
        return self.literal_kind(index) is LiteralKind.FLOAT

    def is_literal_string(self, index: int) -> bool:
        return self.literal_kind(index) is LiteralKind.STRING

    def literal_count(self) -> int:
        return len(self._literals)