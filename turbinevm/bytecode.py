"""Bytecode buffer: registers, immediate values, back patches and tables."""

from __future__ import annotations

import enum
from collections import deque
from dataclasses import dataclass, field
from typing import Union

from .constant_pool import ConstantPool
from .function import FunctionTable
from .instruction import encode_a, encode_ab, encode_abb, encode_abc, encode_op

IMMEDIATE_QUEUE_SIZE = 16

ImmediateValue = Union[int, float, str]


class ImmediateRegister(enum.IntEnum):
    """Register ids reserved for immediate operands."""

    INT32 = 255
    INT64 = 254
    FLOAT = 253
    STRING = 252
    SMALLINT_END = 251
    SMALLINT_BEGIN = 192


_SMALLINT_SIZE = ImmediateRegister.SMALLINT_END - ImmediateRegister.SMALLINT_BEGIN + 1
_INT32_MIN = -(1 << 31)
_INT32_MAX = (1 << 31) - 1


class RegisterOverflowError(RuntimeError):
    """Raised when no temporary register is left below the immediate range."""


@dataclass
class StructInfo:
    """A struct known to the bytecode and the value types of its fields."""

    id: int
    fullname: str
    field_count: int
    field_types: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class RefMark:
    """Records whether a register slot holds a reference after an address."""

    addr: int
    slot: int
    is_ref: bool


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def is_smallint_register(reg: int) -> bool:
    """True if the register id encodes a small non-negative integer."""
    return ImmediateRegister.SMALLINT_BEGIN <= reg <= ImmediateRegister.SMALLINT_END


def is_immediate_value(reg: int) -> bool:
    """True if the register id stands for an immediate value."""
    return reg >= ImmediateRegister.SMALLINT_BEGIN


def _is_constpool_register(reg: int) -> bool:
    return ImmediateRegister.SMALLINT_END < reg <= 0xFF


def _register_to_smallint(reg: int) -> int:
    return reg - ImmediateRegister.SMALLINT_BEGIN


class Bytecode:
    """Instruction words together with the tables a compiled program needs."""

    def __init__(self) -> None:
        self._insts: list[int] = []

        self._base_reg = 0
        self._curr_reg = 0
        self._max_reg = 0

        self._global_count = 0

        self.const_pool = ConstantPool()
        self._immediates: deque[int] = deque()

        self.functions = FunctionTable()
        self.structs: list[StructInfo] = []

        self._ors: list[int] = []
        self._breaks: list[int] = []
        self._continues: list[int] = []
        self._casecloses: list[int] = []

        self.stack_marks: list[RefMark] = []
        self.global_refs: dict[int, bool] = {}

    # instruction buffer
    @property
    def size(self) -> int:
        return len(self._insts)

    @property
    def next_addr(self) -> int:
        return len(self._insts)

    @property
    def instructions(self) -> tuple[int, ...]:
        return tuple(self._insts)

    def read(self, addr: int) -> int:
        """Return the word stored at an address."""
        if not 0 <= addr < len(self._insts):
            raise IndexError(f"address out of range: {addr}")
        return self._insts[addr]

    def write(self, addr: int, word: int) -> None:
        """Overwrite the word stored at an address."""
        if not 0 <= addr < len(self._insts):
            raise IndexError(f"address out of range: {addr}")
        self._insts[addr] = _to_int32(word)

    # reference maps
    def _mark_ref(self, slot: int, *is_refs: bool) -> None:
        addr = self.next_addr
        self.stack_marks.extend(
            RefMark(addr, slot + offset, is_ref) for offset, is_ref in enumerate(is_refs)
        )

    def _mark_global_ref(self, slot: int, is_ref: bool) -> None:
        self.global_refs[_register_to_smallint(slot)] = is_ref

    # immediate queue
    def _queue_immediate(self, value: int) -> None:
        if len(self._immediates) >= IMMEDIATE_QUEUE_SIZE:
            raise OverflowError("immediate value queue is full")
        self._immediates.append(value)

    def _pop_immediate_for(self, operand: int) -> None:
        if _is_constpool_register(operand):
            if not self._immediates:
                raise IndexError("immediate value queue is empty")
            self._insts.append(_to_int32(self._immediates.popleft()))

    # instruction pushers
    def _push_op(self, op: int) -> None:
        self._insts.append(encode_op(op))

    def _push_a(self, op: int, a: int) -> None:
        self._insts.append(encode_a(op, a))
        self._pop_immediate_for(a)

    def _push_ab(self, op: int, a: int, b: int) -> None:
        self._insts.append(encode_ab(op, a, b))
        self._pop_immediate_for(b)

    def _push_abc(self, op: int, a: int, b: int, c: int) -> None:
        self._insts.append(encode_abc(op, a, b, c))
        self._pop_immediate_for(b)
        self._pop_immediate_for(c)

    def _push_abb(self, op: int, a: int, bb: int) -> None:
        self._insts.append(encode_abb(op, a, bb))

    # registers
    @property
    def register_pointer(self) -> int:
        return self._curr_reg

    def init_registers(self, lvar_count: int) -> None:
        """Start a function whose locals occupy the first lvar_count registers."""
        self._base_reg = lvar_count - 1
        self._curr_reg = self._base_reg
        self._max_reg = self._base_reg

    def clear_temporary_registers(self) -> None:
        self._curr_reg = self._base_reg

    def allocate_temporary_register(self) -> int:
        """Take the next free temporary register."""
        if self._curr_reg == ImmediateRegister.SMALLINT_BEGIN - 1:
            raise RegisterOverflowError(
                "temp register overflow: keep the temp register under "
                f"{int(ImmediateRegister.SMALLINT_BEGIN)}"
            )
        return self.set_register_pointer(self._curr_reg + 1)

    def set_register_pointer(self, dst: int) -> int:
        """Move the register pointer to dst, the base or a temporary register."""
        if dst != self._base_reg and not self.is_temporary_register(dst):
            raise ValueError(f"register {dst} is not the base or a temporary register")
        self._curr_reg = dst
        self._max_reg = max(self._max_reg, dst)
        return dst

    def is_temporary_register(self, reg: int) -> bool:
        return reg > self._base_reg and not is_immediate_value(reg)

    # globals
    @property
    def global_count(self) -> int:
        return self._global_count

    @global_count.setter
    def global_count(self, count: int) -> None:
        if count < 0:
            raise ValueError("global count must not be negative")
        self._global_count = count

    # immediate values
    def read_immediate_value(self, addr: int, reg: int) -> tuple[ImmediateValue, int]:
        """Return the value of an immediate operand and how many words it uses."""
        if is_smallint_register(reg):
            return _register_to_smallint(reg), 0
        if reg == ImmediateRegister.INT32:
            return self.read(addr), 1
        if reg == ImmediateRegister.INT64:
            return self.const_pool.get_int(self.read(addr)), 1
        if reg == ImmediateRegister.FLOAT:
            return self.const_pool.get_float(self.read(addr)), 1
        if reg == ImmediateRegister.STRING:
            return self.const_pool.get_string(self.read(addr)), 1
        raise ValueError(f"register {reg} is not an immediate value")

    def load_int(self, value: int) -> int:
        """Return the operand register for an integer constant."""
        if 0 <= value < _SMALLINT_SIZE:
            return value + ImmediateRegister.SMALLINT_BEGIN
        if _INT32_MIN <= value <= _INT32_MAX:
            self._queue_immediate(value)
            return int(ImmediateRegister.INT32)
        self._queue_immediate(self.const_pool.push_int(value))
        return int(ImmediateRegister.INT64)

    def load_float(self, value: float) -> int:
        self._queue_immediate(self.const_pool.push_float(value))
        return int(ImmediateRegister.FLOAT)

    def load_string(self, value: str) -> int:
        self._queue_immediate(self.const_pool.push_string(value))
        return int(ImmediateRegister.STRING)

    # branches
    def begin_if(self) -> None:
        self._ors.append(-1)

    def begin_for(self) -> None:
        self._breaks.append(-1)
        self._continues.append(-1)

    def begin_while(self) -> None:
        self._breaks.append(-1)

    def begin_switch(self) -> None:
        self._casecloses.append(-1)

    def push_else_end(self, addr: int) -> None:
        self._ors.append(addr)

    def push_break(self, addr: int) -> None:
        self._breaks.append(addr)

    def push_continue(self, addr: int) -> None:
        self._continues.append(addr)

    def push_case_end(self, addr: int) -> None:
        self._casecloses.append(addr)

    # back patches
    def back_patch(self, operand_addr: int) -> None:
        """Point the 16-bit operand at operand_addr to the next address."""
        word = self.read(operand_addr)
        self.write(operand_addr, (word & 0xFFFF0000) | (self.next_addr & 0xFFFF))

    def _patch_until_marker(self, pending: list[int]) -> None:
        while pending:
            addr = pending.pop()
            if addr == -1:
                break
            self.back_patch(addr)

    def back_patch_breaks(self) -> None:
        self._patch_until_marker(self._breaks)

    def back_patch_continues(self) -> None:
        self._patch_until_marker(self._continues)

    def back_patch_else_ends(self) -> None:
        self._patch_until_marker(self._ors)

    def back_patch_case_ends(self) -> None:
        self._patch_until_marker(self._casecloses)

    # functions
    def register_function(self, fullname: str, argc: int) -> int:
        return self.functions.add(fullname, argc)

    def find_builtin_function(self, name: str) -> int | None:
        """Return the id of the builtin function with this name, or None."""
        prefix = "_builtin:"
        for func in self.functions:
            if func.fullname.startswith(prefix) and func.fullname[len(prefix):] == name:
                return func.id
        return None

    def record_register_count(self, func_id: int) -> None:
        """Store the registers used so far as the function's register count."""
        self.functions[func_id].reg_count = self._max_reg + 1

    # structs
    def register_struct(self, fullname: str, field_count: int) -> int:
        struct_id = len(self.structs)
        self.structs.append(StructInfo(struct_id, fullname, field_count))
        return struct_id

    def _struct(self, struct_id: int) -> StructInfo:
        if not 0 <= struct_id < len(self.structs):
            raise IndexError(f"no struct with id {struct_id}")
        return self.structs[struct_id]

    def push_struct_field_type(self, struct_id: int, value_type: int) -> None:
        self._struct(struct_id).field_types.append(value_type)

    def struct_field_type(self, struct_id: int, field_index: int) -> int:
        types = self._struct(struct_id).field_types
        if not 0 <= field_index < len(types):
            raise IndexError(f"field index out of range: {field_index}")
        return types[field_index]

    def struct_field_count(self, struct_id: int) -> int:
        return self._struct(struct_id).field_count

    # enum fields
    def push_enum_field_int(self, value: int) -> int:
        return self.const_pool.push_literal_int(value)

    def push_enum_field_float(self, value: float) -> int:
        return self.const_pool.push_literal_float(value)

    def push_enum_field_string(self, value: str) -> int:
        return self.const_pool.push_literal_string(value)

    def enum_field(self, field_id: int) -> ImmediateValue:
        return self.const_pool.get_literal(field_id)

    def is_enum_field_int(self, field_id: int) -> bool:
        return self.const_pool.is_literal_int(field_id)

    def is_enum_field_float(self, field_id: int) -> bool:
        return self.const_pool.is_literal_float(field_id)

    def is_enum_field_string(self, field_id: int) -> bool:
        return self.const_pool.is_literal_string(field_id)

    def enum_field_count(self) -> int:
        return self.const_pool.literal_count()