"""Function records of a compiled program."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any


@dataclass
class Function:
    """A function known to the bytecode: its id, arity, address and native hook."""

    id: int
    argc: int
    fullname: str
    reg_count: int = 0
    addr: int = -1
    native_func: Callable[..., Any] | None = None
    is_variadic: bool = False


class FunctionTable:
    """Functions indexed by the id handed out when they were added."""

    def __init__(self) -> None:
        self._funcs: list[Function] = []

    def add(self, fullname: str, argc: int) -> int:
        """Register a function and return its new id."""
        func_id = len(self._funcs)
        self._funcs.append(Function(id=func_id, argc=argc, fullname=fullname))
        return func_id

    def lookup(self, func_id: int) -> Function | None:
        """Return the function with this id, or None if there is none."""
        if 0 <= func_id < len(self._funcs):
            return self._funcs[func_id]
        return None

    def __getitem__(self, func_id: int) -> Function:
        func = self.lookup(func_id)
        if func is None:
            raise IndexError(f"no function with id {func_id}")
        return func

    def __len__(self) -> int:
        return len(self._funcs)

    def __iter__(self) -> Iterator[Function]:
        return iter(self._funcs)